from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import Holiday


class HolidayRepository(Protocol):
    def list_exact_between(self, *, company_id: int, start: date, end: date) -> Sequence[Holiday]:
        """Non-recurring holidays with start <= date <= end."""

        raise NotImplementedError

    def list_recurring(self, *, company_id: int) -> Sequence[Holiday]:
        raise NotImplementedError
