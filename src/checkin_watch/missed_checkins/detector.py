"""Missed check-in detection pass.

Triggered on a fixed interval by an external scheduler. For each active company:

1. Resolve "now" and "today" in the company timezone; skip the company on a holiday.
2. Load active teams (with leaders) and their active workers.
3. Keep workers assigned before today whose effective schedule makes today a work day
   and whose check-in window closed at least ``window_buffer_minutes`` ago.
4. Drop workers who checked in today or already have a record for today.
5. Compute state snapshots in one batch, insert-or-ignore the records, notify and
   emit one MISSED_CHECK_IN_DETECTED event per new record.

A window whose buffered end falls after midnight is settled by the first pass of the
next day.

Companies are processed one after another; a failure in one is logged and the pass
moves on to the next.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Callable, Optional, Sequence

from ..checkins.repository import CheckInRepository
from ..common.datetime_utils import day_of_week, local_date, now_utc, to_local
from ..core.constants import WINDOW_BUFFER_MINUTES
from ..events.emitter import EventEmitter
from ..holidays.service import HolidayOracle
from ..notifications.batcher import NotificationBatcher
from ..organization.model import Company, Team, Worker
from ..organization.repository import OrganizationRepository
from ..schedules.model import EffectiveSchedule
from ..schedules.resolver import effective_schedule, is_work_day
from .locking import InProcessRunLock, RunLock
from .model import NewMissedCheckIn
from .repository import MissedCheckInRepository
from .snapshot import SnapshotCalculator, WorkerContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DetectionSummary:
    skipped: bool = False
    companies_processed: int = 0
    companies_failed: int = 0
    detected: int = 0


@dataclass(frozen=True)
class _Candidate:
    worker: Worker
    team: Team
    schedule: EffectiveSchedule
    assigned_on: date


class MissedCheckInDetector:
    def __init__(
        self,
        organization: OrganizationRepository,
        check_ins: CheckInRepository,
        missed: MissedCheckInRepository,
        holidays: HolidayOracle,
        notifications: NotificationBatcher,
        *,
        snapshots: Optional[SnapshotCalculator] = None,
        run_lock: Optional[RunLock] = None,
        events: Optional[EventEmitter] = None,
        clock: Callable[[], datetime] = now_utc,
        window_buffer_minutes: int = WINDOW_BUFFER_MINUTES,
    ):
        self._organization = organization
        self._check_ins = check_ins
        self._missed = missed
        self._holidays = holidays
        self._notifications = notifications
        self._snapshots = snapshots or SnapshotCalculator()
        self._lock = run_lock or InProcessRunLock()
        self._events = events
        self._clock = clock
        self._buffer = timedelta(minutes=int(window_buffer_minutes))

    def run_detection_pass(self) -> DetectionSummary:
        if not self._lock.acquire():
            logger.info("Skipping missed check-in detection: previous run still in progress")
            return DetectionSummary(skipped=True)

        logger.info("Running missed check-in detection")
        processed = failed = detected = 0
        try:
            for company in self._organization.list_active_companies():
                try:
                    detected += self.process_company(company)
                    processed += 1
                except Exception:
                    failed += 1
                    logger.exception(
                        "Failed to process company %s for missed check-ins",
                        company.company_id,
                        extra={"company_id": company.company_id},
                    )
        finally:
            self._lock.release()

        logger.info(
            "Missed check-in detection completed",
            extra={"detected": detected, "processed": processed, "failed": failed},
        )
        return DetectionSummary(companies_processed=processed, companies_failed=failed, detected=detected)

    def process_company(self, company: Company) -> int:
        """Detect and record misses for one company. Returns the number of new records.

        Today is checked for windows already closed. Yesterday is checked only for windows
        whose buffered end fell after midnight, so late windows are not lost.
        """

        company_id = company.company_id
        now_local = to_local(self._clock(), company.timezone)
        today = now_local.date()

        if self._holidays.is_holiday(company_id=company_id, day=today):
            logger.info(
                "Skipping missed check-in detection for %s: today is a holiday",
                today.isoformat(),
                extra={"company_id": company_id},
            )
            return 0

        teams = self._organization.list_active_teams(company_id=company_id)
        if not teams:
            return 0
        team_by_id = {t.team_id: t for t in teams}
        workers = self._organization.list_active_workers(company_id=company_id, team_ids=list(team_by_id))

        yesterday = today - timedelta(days=1)
        detected = 0
        if not self._holidays.is_holiday(company_id=company_id, day=yesterday):
            detected += self._detect_for_day(company, team_by_id, workers, yesterday, now_local, spilled_only=True)
        detected += self._detect_for_day(company, team_by_id, workers, today, now_local)

        if detected:
            logger.info(
                "Detected %d missed check-ins across %d teams",
                detected,
                len(teams),
                extra={"company_id": company_id, "detected": detected},
            )
        return detected

    def _detect_for_day(
        self,
        company: Company,
        team_by_id: dict[int, Team],
        workers: Sequence[Worker],
        day: date,
        now_local: datetime,
        *,
        spilled_only: bool = False,
    ) -> int:
        company_id = company.company_id
        candidates = []
        for worker in workers:
            c = self._candidate(worker, team_by_id.get(worker.team_id), company.timezone, day)
            if c is None:
                continue
            deadline = self._deadline(c.schedule, day, now_local)
            if now_local < deadline or (spilled_only and deadline.date() == day):
                continue
            candidates.append(c)
        if not candidates:
            return 0

        person_ids = [c.worker.person_id for c in candidates]
        checked_in = self._check_ins.list_person_ids_for_date(company_id=company_id, day=day, person_ids=person_ids)
        missing = [c for c in candidates if c.worker.person_id not in checked_in]
        if not missing:
            return 0

        existing = self._missed.find_existing_person_ids(
            company_id=company_id, day=day, person_ids=[c.worker.person_id for c in missing]
        )
        new_missing = [c for c in missing if c.worker.person_id not in existing]
        if not new_missing:
            return 0

        records = self._build_records(company_id, new_missing, day)
        inserted = self._missed.create_many(company_id=company_id, records=records)

        fresh = [r for r in records if r.person_id in inserted]
        self._notifications.dispatch(company_id=company_id, records=fresh, day=day)
        if self._events is not None:
            self._events.emit_missed_check_ins(company_id=company_id, tz_name=company.timezone, records=fresh)
        return len(inserted)

    def _candidate(self, worker: Worker, team: Optional[Team], tz_name: str, day: date) -> Optional[_Candidate]:
        if team is None or worker.team_assigned_at is None:
            return None

        # Assigned on the day itself means not yet required; the first required day is the next one.
        assigned_on = local_date(worker.team_assigned_at, tz_name)
        if assigned_on >= day:
            return None

        if not is_work_day(day_of_week(day), worker.override, team.schedule):
            return None

        schedule = effective_schedule(worker.override, team.schedule)
        return _Candidate(worker=worker, team=team, schedule=schedule, assigned_on=assigned_on)

    def _deadline(self, schedule: EffectiveSchedule, day: date, now_local: datetime) -> datetime:
        window_end = datetime.combine(day, schedule.check_in_end, tzinfo=now_local.tzinfo)
        return window_end + self._buffer

    def _build_records(self, company_id: int, candidates: Sequence[_Candidate], today: date) -> list[NewMissedCheckIn]:
        person_ids = [c.worker.person_id for c in candidates]
        history_start = self._snapshots.history_start(today)

        # One query per data set for the whole batch.
        holiday_dates = self._holidays.holiday_set(company_id=company_id, start=history_start, end=today)
        check_ins = self._check_ins.list_between(
            company_id=company_id, person_ids=person_ids, start=history_start, end=today
        )
        prior_misses = self._missed.list_prior_misses(
            company_id=company_id, person_ids=person_ids, start=history_start, end=today
        )

        snapshots = self._snapshots.calculate_batch(
            [
                WorkerContext(
                    person_id=c.worker.person_id,
                    team_id=c.team.team_id,
                    schedule=c.schedule,
                    assigned_on=c.assigned_on,
                    role=c.worker.role,
                )
                for c in candidates
            ],
            today,
            holiday_dates,
            check_ins=check_ins,
            prior_misses=prior_misses,
        )

        return [
            NewMissedCheckIn(
                person_id=c.worker.person_id,
                team_id=c.team.team_id,
                missed_date=today,
                schedule_window=c.schedule.window_label(),
                team_leader_id_at_miss=c.team.leader.person_id if c.team.leader else None,
                team_leader_name_at_miss=c.team.leader.full_name if c.team.leader else None,
                snapshot=snapshots.get(c.worker.person_id),
            )
            for c in candidates
        ]
