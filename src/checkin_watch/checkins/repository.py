from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import CheckIn


class CheckInRepository(Protocol):
    def list_person_ids_for_date(self, *, company_id: int, day: date, person_ids: Sequence[int]) -> set[int]:
        """Which of the given people submitted a check-in on ``day``."""

        raise NotImplementedError

    def list_between(
        self,
        *,
        company_id: int,
        person_ids: Sequence[int],
        start: date,
        end: date,
    ) -> Sequence[CheckIn]:
        """Check-ins with start <= date < end for all given people, newest first."""

        raise NotImplementedError
