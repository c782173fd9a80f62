from __future__ import annotations

from datetime import date
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Holiday
from .repository import HolidayRepository


def _to_holiday(r: dict) -> Holiday:
    return Holiday(
        holiday_id=int(r["holiday_id"]),
        company_id=int(r["company_id"]),
        name=r["name"],
        holiday_date=r["holiday_date"],
        is_recurring=bool(r["is_recurring"]),
    )


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_exact_between(self, *, company_id: int, start: date, end: date) -> Sequence[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT holiday_id, company_id, name, holiday_date, is_recurring
                FROM holidays
                WHERE company_id=%s AND is_recurring=0 AND holiday_date BETWEEN %s AND %s
                """,
                (int(company_id), start, end),
            )
            return [_to_holiday(r) for r in fetchall(cur)]

    def list_recurring(self, *, company_id: int) -> Sequence[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT holiday_id, company_id, name, holiday_date, is_recurring
                FROM holidays
                WHERE company_id=%s AND is_recurring=1
                """,
                (int(company_id),),
            )
            return [_to_holiday(r) for r in fetchall(cur)]
