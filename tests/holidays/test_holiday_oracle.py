from datetime import date

import pytest

from checkin_watch.holidays.model import Holiday
from checkin_watch.holidays.service import HolidayOracle


class InMemoryHolidayRepo:
    def __init__(self, holidays=None, fail=False):
        self.holidays = list(holidays or [])
        self.fail = fail
        self.calls = 0

    def list_exact_between(self, *, company_id, start, end):
        self.calls += 1
        if self.fail:
            raise ConnectionError("db down")
        return [
            h
            for h in self.holidays
            if h.company_id == company_id and not h.is_recurring and start <= h.holiday_date <= end
        ]

    def list_recurring(self, *, company_id):
        self.calls += 1
        if self.fail:
            raise ConnectionError("db down")
        return [h for h in self.holidays if h.company_id == company_id and h.is_recurring]


def test_exact_holiday_matches_only_its_date():
    oracle = HolidayOracle(InMemoryHolidayRepo([Holiday(1, 10, "Founders Day", date(2026, 2, 4))]))

    assert oracle.is_holiday(company_id=10, day=date(2026, 2, 4))
    assert not oracle.is_holiday(company_id=10, day=date(2027, 2, 4))
    assert not oracle.is_holiday(company_id=11, day=date(2026, 2, 4))


def test_recurring_holiday_matches_every_year():
    oracle = HolidayOracle(InMemoryHolidayRepo([Holiday(1, 10, "New Year", date(2020, 1, 1), is_recurring=True)]))

    found = oracle.find_holiday(company_id=10, day=date(2026, 1, 1))

    assert found is not None
    assert found.name == "New Year"
    assert not oracle.is_holiday(company_id=10, day=date(2026, 1, 2))


def test_holiday_set_is_inclusive_and_uses_two_queries():
    repo = InMemoryHolidayRepo(
        [
            Holiday(1, 10, "New Year", date(2020, 1, 1), is_recurring=True),
            Holiday(2, 10, "Company Outing", date(2026, 1, 15)),
            Holiday(3, 10, "Old Outing", date(2025, 1, 15)),
        ]
    )
    oracle = HolidayOracle(repo)

    found = oracle.holiday_set(company_id=10, start=date(2025, 12, 30), end=date(2026, 1, 15))

    assert found == {date(2026, 1, 1), date(2026, 1, 15)}
    assert repo.calls == 2


def test_holiday_set_empty_range():
    oracle = HolidayOracle(InMemoryHolidayRepo())

    assert oracle.holiday_set(company_id=10, start=date(2026, 2, 4), end=date(2026, 2, 3)) == set()


def test_lookup_failure_propagates():
    oracle = HolidayOracle(InMemoryHolidayRepo(fail=True))

    with pytest.raises(ConnectionError):
        oracle.is_holiday(company_id=10, day=date(2026, 2, 4))
