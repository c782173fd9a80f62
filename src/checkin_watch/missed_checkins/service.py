from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_utc
from ..common.validators import clean_notes
from ..core.constants import MAX_PAGE_LIMIT
from ..core.enums import MissedCheckInStatus
from ..core.exceptions import InvalidTransitionError, NotFoundError, ValidationError
from .model import MissedCheckIn, MissedCheckInFilters, MissedCheckInPage
from .repository import MissedCheckInRepository
from .workflow import ensure_transition, is_terminal

logger = logging.getLogger(__name__)


def parse_status(value) -> MissedCheckInStatus:
    if isinstance(value, MissedCheckInStatus):
        return value
    try:
        return MissedCheckInStatus(str(value).strip().upper())
    except ValueError:
        raise ValidationError(f"Unknown status: {value!r}")


class MissedCheckInService:
    """Review-side operations: status transitions and the read/query surface."""

    def __init__(
        self,
        missed: MissedCheckInRepository,
        *,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._missed = missed
        self._clock = clock

    def get_record(self, *, company_id: int, record_id: int) -> MissedCheckIn:
        record = self._missed.get_by_id(company_id=int(company_id), record_id=int(record_id))
        if not record:
            raise NotFoundError("Missed check-in record not found")
        return record

    def transition_status(
        self,
        *,
        company_id: int,
        record_id: int,
        new_status,
        acting_user_id: int,
        notes: Optional[str] = None,
    ) -> MissedCheckIn:
        status = parse_status(new_status)
        notes = clean_notes(notes)

        record = self.get_record(company_id=company_id, record_id=record_id)
        ensure_transition(record.status, status)

        terminal = is_terminal(status)
        updated = self._missed.update_status(
            company_id=int(company_id),
            record_id=int(record_id),
            expected_status=record.status,
            status=status,
            notes=notes,
            resolved_by=int(acting_user_id) if terminal else None,
            resolved_at=self._clock() if terminal else None,
        )
        if not updated:
            # Another reviewer moved the record between our read and write.
            current = self.get_record(company_id=company_id, record_id=record_id)
            raise InvalidTransitionError(current.status, status)

        logger.info(
            "Missed check-in %s moved %s -> %s by %s",
            record_id,
            record.status.value,
            status.value,
            acting_user_id,
            extra={"company_id": company_id},
        )
        return self.get_record(company_id=company_id, record_id=record_id)

    def list_records(self, *, company_id: int, filters: MissedCheckInFilters) -> MissedCheckInPage:
        if filters.page < 1:
            raise ValidationError("page must be >= 1")
        if not 1 <= filters.limit <= MAX_PAGE_LIMIT:
            raise ValidationError(f"limit must be between 1 and {MAX_PAGE_LIMIT}")
        if filters.date_from and filters.date_to and filters.date_to < filters.date_from:
            raise ValidationError("date_to must be on or after date_from")

        items, total = self._missed.list_by_filters(company_id=int(company_id), filters=filters)
        return MissedCheckInPage(items=items, total=total, page=filters.page, limit=filters.limit)

    def count_by_status(
        self, *, company_id: int, team_ids: Optional[Sequence[int]] = None
    ) -> dict[MissedCheckInStatus, int]:
        counts = {status: 0 for status in MissedCheckInStatus}
        counts.update(self._missed.count_by_status(company_id=int(company_id), team_ids=team_ids))
        return counts
