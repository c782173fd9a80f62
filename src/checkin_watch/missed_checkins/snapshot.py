"""State snapshot calculation for newly detected misses.

Pure computation: the detector fetches check-ins, prior misses and the holiday set for all
workers in one go and hands them in here. Nothing in this module touches storage.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional, Sequence

from ..checkins.model import CheckIn
from ..common.datetime_utils import day_of_week, iter_days, week_of_month
from ..core.constants import LOOKBACK_DAYS, MISS_WINDOWS, READINESS_LOOKBACK_DAYS
from ..core.enums import Role
from ..schedules.model import EffectiveSchedule
from .model import PriorMiss, StateSnapshot


@dataclass(frozen=True)
class WorkerContext:
    person_id: int
    team_id: int
    schedule: EffectiveSchedule
    assigned_on: Optional[date]
    role: Optional[Role] = Role.WORKER


class SnapshotCalculator:
    def __init__(
        self,
        *,
        lookback_days: int = LOOKBACK_DAYS,
        readiness_days: int = READINESS_LOOKBACK_DAYS,
    ):
        self._lookback_days = int(lookback_days)
        self._readiness_days = int(readiness_days)

    def history_start(self, as_of: date) -> date:
        return as_of - timedelta(days=self._lookback_days)

    def calculate_batch(
        self,
        workers: Sequence[WorkerContext],
        as_of: date,
        holiday_dates: set[date],
        *,
        check_ins: Sequence[CheckIn],
        prior_misses: Sequence[PriorMiss],
    ) -> dict[int, StateSnapshot]:
        """Snapshot per worker, using only history in [as_of - lookback, as_of)."""

        if not workers:
            return {}

        start = self.history_start(as_of)
        # Oldest to newest, shared by every worker in the batch.
        days = list(iter_days(start, as_of))

        check_ins_by_person: dict[int, list[CheckIn]] = defaultdict(list)
        for ci in check_ins:
            if start <= ci.check_in_date < as_of:
                check_ins_by_person[ci.person_id].append(ci)

        misses_by_person: dict[int, list[date]] = defaultdict(list)
        for miss in prior_misses:
            if start <= miss.missed_date < as_of:
                misses_by_person[miss.person_id].append(miss.missed_date)

        return {
            w.person_id: self._calculate_for_worker(
                w,
                check_ins_by_person.get(w.person_id, []),
                misses_by_person.get(w.person_id, []),
                as_of,
                holiday_dates,
                days,
            )
            for w in workers
        }

    def _calculate_for_worker(
        self,
        worker: WorkerContext,
        check_ins: list[CheckIn],
        misses: list[date],
        as_of: date,
        holiday_dates: set[date],
        days: list[date],
    ) -> StateSnapshot:
        checked_in_on = {ci.check_in_date for ci in check_ins}
        work_days = worker.schedule.work_days

        days_since_last_check_in = (as_of - max(checked_in_on)).days if checked_in_on else None
        days_since_last_miss = (as_of - max(misses)).days if misses else None

        readiness_from = as_of - timedelta(days=self._readiness_days)
        recent_scores = [ci.readiness_score for ci in check_ins if ci.check_in_date >= readiness_from]
        recent_readiness_avg = round(sum(recent_scores) / len(recent_scores), 1) if recent_scores else None

        window_counts = {n: sum(1 for d in misses if d >= as_of - timedelta(days=n)) for n in MISS_WINDOWS}
        misses_30, misses_60, misses_90 = (window_counts[n] for n in MISS_WINDOWS)

        return StateSnapshot(
            worker_role_at_miss=worker.role,
            day_of_week=day_of_week(as_of),
            week_of_month=week_of_month(as_of),
            days_since_last_check_in=days_since_last_check_in,
            days_since_last_miss=days_since_last_miss,
            check_in_streak_before=self._streak(checked_in_on, work_days, holiday_dates, days),
            recent_readiness_avg=recent_readiness_avg,
            misses_in_last_30d=misses_30,
            misses_in_last_60d=misses_60,
            misses_in_last_90d=misses_90,
            baseline_completion_rate=self._completion_rate(
                worker.assigned_on, checked_in_on, work_days, holiday_dates, days
            ),
            is_first_miss_in_30d=misses_30 == 0,
            is_increasing_frequency=misses_30 / 30 > misses_60 / 60 and misses_30 >= 2,
        )

    @staticmethod
    def _streak(
        checked_in_on: set[date],
        work_days: frozenset[int],
        holiday_dates: set[date],
        days: list[date],
    ) -> int:
        """Consecutive required days with a check-in, walking back from yesterday.

        Holidays and non-work days neither extend nor break the streak.
        """

        streak = 0
        for day in reversed(days):
            if day in holiday_dates or day_of_week(day) not in work_days:
                continue
            if day not in checked_in_on:
                break
            streak += 1
        return streak

    @staticmethod
    def _completion_rate(
        assigned_on: Optional[date],
        checked_in_on: set[date],
        work_days: frozenset[int],
        holiday_dates: set[date],
        days: list[date],
    ) -> float:
        """Check-ins / required days (percent) since assignment, within the lookback."""

        if assigned_on is None:
            return 0.0

        required = sum(
            1
            for day in days
            if day >= assigned_on and day not in holiday_dates and day_of_week(day) in work_days
        )
        if required == 0:
            return 100.0

        submitted = sum(1 for day in checked_in_on if day >= assigned_on)
        return round(submitted / required * 100, 1)
