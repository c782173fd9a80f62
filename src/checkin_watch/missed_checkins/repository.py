from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import MissedCheckInStatus
from .model import MissedCheckIn, MissedCheckInFilters, NewMissedCheckIn, PriorMiss


class MissedCheckInRepository(Protocol):
    def find_existing_person_ids(self, *, company_id: int, day: date, person_ids: Sequence[int]) -> set[int]:
        raise NotImplementedError

    def list_prior_misses(
        self,
        *,
        company_id: int,
        person_ids: Sequence[int],
        start: date,
        end: date,
    ) -> Sequence[PriorMiss]:
        """Misses with start <= date < end for all given people, newest first."""

        raise NotImplementedError

    def create_many(self, *, company_id: int, records: Sequence[NewMissedCheckIn]) -> set[int]:
        """Insert-or-ignore keyed on (company, person, date).

        Returns the person ids whose row was actually inserted; duplicates are skipped silently.
        """

        raise NotImplementedError

    def get_by_id(self, *, company_id: int, record_id: int) -> Optional[MissedCheckIn]:
        raise NotImplementedError

    def update_status(
        self,
        *,
        company_id: int,
        record_id: int,
        expected_status: MissedCheckInStatus,
        status: MissedCheckInStatus,
        notes: Optional[str] = None,
        resolved_by: Optional[int] = None,
        resolved_at: Optional[datetime] = None,
    ) -> bool:
        """Compare-and-set on status, scoped by tenant. Notes are left untouched when None."""

        raise NotImplementedError

    def list_by_filters(self, *, company_id: int, filters: MissedCheckInFilters) -> tuple[Sequence[MissedCheckIn], int]:
        """Return (page of items, total matching count), newest date first."""

        raise NotImplementedError

    def count_by_status(
        self, *, company_id: int, team_ids: Optional[Sequence[int]] = None
    ) -> dict[MissedCheckInStatus, int]:
        raise NotImplementedError
