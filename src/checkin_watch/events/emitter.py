from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Sequence

from ..common.datetime_utils import now_utc
from ..core.enums import EventType
from ..missed_checkins.model import NewMissedCheckIn
from .model import DomainEvent
from .repository import EventRepository

logger = logging.getLogger(__name__)


class EventEmitter:
    """Writes one MISSED_CHECK_IN_DETECTED event per new record, in one batch."""

    def __init__(self, events: EventRepository, *, clock: Callable[[], datetime] = now_utc):
        self._events = events
        self._clock = clock

    def emit_missed_check_ins(self, *, company_id: int, tz_name: str, records: Sequence[NewMissedCheckIn]) -> int:
        """Never raises: the detection records are already committed."""

        if not records:
            return 0
        try:
            now = self._clock()
            events = [
                DomainEvent(
                    event_type=EventType.MISSED_CHECK_IN_DETECTED,
                    entity_type="missed_check_in",
                    event_time=now,
                    event_timezone=tz_name,
                    person_id=rec.person_id,
                    payload={
                        "missed_date": rec.missed_date.isoformat(),
                        "schedule_window": rec.schedule_window,
                        "team_id": rec.team_id,
                    },
                )
                for rec in records
            ]
            return self._events.create_many(company_id=company_id, events=events)
        except Exception:
            logger.exception(
                "Failed to batch create missed check-in events",
                extra={"company_id": company_id},
            )
            return 0
