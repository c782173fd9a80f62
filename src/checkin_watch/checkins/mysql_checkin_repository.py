from __future__ import annotations

from datetime import date
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause
from .model import CheckIn
from .repository import CheckInRepository


class MySQLCheckInRepository(CheckInRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_person_ids_for_date(self, *, company_id: int, day: date, person_ids: Sequence[int]) -> set[int]:
        if not person_ids:
            return set()

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT person_id
                FROM check_ins
                WHERE company_id=%s AND check_in_date=%s AND person_id IN ({in_clause(person_ids)})
                """,
                (int(company_id), day, *[int(p) for p in person_ids]),
            )
            return {int(r["person_id"]) for r in fetchall(cur)}

    def list_between(
        self,
        *,
        company_id: int,
        person_ids: Sequence[int],
        start: date,
        end: date,
    ) -> Sequence[CheckIn]:
        if not person_ids:
            return []

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT person_id, check_in_date, readiness_score
                FROM check_ins
                WHERE company_id=%s
                  AND check_in_date >= %s AND check_in_date < %s
                  AND person_id IN ({in_clause(person_ids)})
                ORDER BY check_in_date DESC
                """,
                (int(company_id), start, end, *[int(p) for p in person_ids]),
            )
            return [
                CheckIn(
                    person_id=int(r["person_id"]),
                    check_in_date=r["check_in_date"],
                    readiness_score=float(r["readiness_score"]),
                )
                for r in fetchall(cur)
            ]
