from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class Holiday:
    """Company holiday on a tenant-local calendar date.

    Recurring holidays match the same month/day every year.
    """

    holiday_id: int
    company_id: int
    name: str
    holiday_date: date
    is_recurring: bool = False

    def falls_on(self, day: date) -> bool:
        if self.is_recurring:
            return (self.holiday_date.month, self.holiday_date.day) == (day.month, day.day)
        return self.holiday_date == day
