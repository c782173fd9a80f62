from __future__ import annotations

from datetime import date, timedelta
from typing import Optional

from ..common.datetime_utils import iter_days
from .model import Holiday
from .repository import HolidayRepository


class HolidayOracle:
    """Answers "is this a company holiday" for one date or a date range.

    Lookup failures propagate to the caller; they are never read as "not a holiday".
    """

    def __init__(self, holidays: HolidayRepository):
        self._holidays = holidays

    def find_holiday(self, *, company_id: int, day: date) -> Optional[Holiday]:
        exact = self._holidays.list_exact_between(company_id=company_id, start=day, end=day)
        if exact:
            return exact[0]
        for holiday in self._holidays.list_recurring(company_id=company_id):
            if holiday.falls_on(day):
                return holiday
        return None

    def is_holiday(self, *, company_id: int, day: date) -> bool:
        return self.find_holiday(company_id=company_id, day=day) is not None

    def holiday_set(self, *, company_id: int, start: date, end: date) -> set[date]:
        """All holiday dates with start <= date <= end, in two queries."""

        if end < start:
            return set()

        found = {
            h.holiday_date
            for h in self._holidays.list_exact_between(company_id=company_id, start=start, end=end)
        }
        recurring = self._holidays.list_recurring(company_id=company_id)
        if recurring:
            for day in iter_days(start, end + timedelta(days=1)):
                if any(h.falls_on(day) for h in recurring):
                    found.add(day)
        return found
