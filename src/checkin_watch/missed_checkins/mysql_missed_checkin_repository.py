from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import MissedCheckInStatus, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_utc, db_cursor, fetchall, fetchone, in_clause
from .model import MissedCheckIn, MissedCheckInFilters, NewMissedCheckIn, PriorMiss, StateSnapshot
from .repository import MissedCheckInRepository

_SNAPSHOT_COLUMNS = (
    "worker_role_at_miss",
    "day_of_week",
    "week_of_month",
    "days_since_last_check_in",
    "days_since_last_miss",
    "check_in_streak_before",
    "recent_readiness_avg",
    "misses_in_last_30d",
    "misses_in_last_60d",
    "misses_in_last_90d",
    "baseline_completion_rate",
    "is_first_miss_in_30d",
    "is_increasing_frequency",
)

_SELECT = """
    SELECT m.missed_check_in_id, m.company_id, m.person_id, m.team_id, m.missed_date,
           m.schedule_window, m.status, m.notes, m.resolved_by, m.resolved_at, m.created_at,
           m.team_leader_id_at_miss, m.team_leader_name_at_miss,
           m.worker_role_at_miss, m.day_of_week, m.week_of_month,
           m.days_since_last_check_in, m.days_since_last_miss, m.check_in_streak_before,
           m.recent_readiness_avg, m.misses_in_last_30d, m.misses_in_last_60d,
           m.misses_in_last_90d, m.baseline_completion_rate,
           m.is_first_miss_in_30d, m.is_increasing_frequency,
           CONCAT(p.first_name, ' ', p.last_name) AS worker_name,
           t.name AS team_name
    FROM missed_check_ins m
    JOIN persons p ON p.person_id = m.person_id
    LEFT JOIN teams t ON t.team_id = m.team_id
"""


def _snapshot_values(snapshot: Optional[StateSnapshot]) -> tuple:
    if snapshot is None:
        return (None,) * len(_SNAPSHOT_COLUMNS)
    return (
        snapshot.worker_role_at_miss.value if snapshot.worker_role_at_miss else None,
        snapshot.day_of_week,
        snapshot.week_of_month,
        snapshot.days_since_last_check_in,
        snapshot.days_since_last_miss,
        snapshot.check_in_streak_before,
        snapshot.recent_readiness_avg,
        snapshot.misses_in_last_30d,
        snapshot.misses_in_last_60d,
        snapshot.misses_in_last_90d,
        snapshot.baseline_completion_rate,
        int(snapshot.is_first_miss_in_30d),
        int(snapshot.is_increasing_frequency),
    )


def _to_snapshot(r: dict) -> Optional[StateSnapshot]:
    # Rows written before snapshots existed carry NULLs.
    if r.get("day_of_week") is None:
        return None
    readiness = r.get("recent_readiness_avg")
    return StateSnapshot(
        worker_role_at_miss=Role(r["worker_role_at_miss"]) if r.get("worker_role_at_miss") else None,
        day_of_week=int(r["day_of_week"]),
        week_of_month=int(r["week_of_month"]),
        days_since_last_check_in=r.get("days_since_last_check_in"),
        days_since_last_miss=r.get("days_since_last_miss"),
        check_in_streak_before=int(r["check_in_streak_before"] or 0),
        recent_readiness_avg=float(readiness) if readiness is not None else None,
        misses_in_last_30d=int(r["misses_in_last_30d"] or 0),
        misses_in_last_60d=int(r["misses_in_last_60d"] or 0),
        misses_in_last_90d=int(r["misses_in_last_90d"] or 0),
        baseline_completion_rate=float(r["baseline_completion_rate"] or 0),
        is_first_miss_in_30d=bool(r["is_first_miss_in_30d"]),
        is_increasing_frequency=bool(r["is_increasing_frequency"]),
    )


def _to_record(r: dict) -> MissedCheckIn:
    return MissedCheckIn(
        missed_check_in_id=int(r["missed_check_in_id"]),
        company_id=int(r["company_id"]),
        person_id=int(r["person_id"]),
        team_id=int(r["team_id"]),
        missed_date=r["missed_date"],
        schedule_window=r["schedule_window"],
        status=MissedCheckInStatus(r["status"]),
        team_leader_id_at_miss=r.get("team_leader_id_at_miss"),
        team_leader_name_at_miss=r.get("team_leader_name_at_miss"),
        snapshot=_to_snapshot(r),
        notes=r.get("notes"),
        resolved_by=r.get("resolved_by"),
        resolved_at=as_utc(r.get("resolved_at")),
        created_at=as_utc(r.get("created_at")),
        worker_name=r.get("worker_name"),
        team_name=r.get("team_name"),
    )


class MySQLMissedCheckInRepository(MissedCheckInRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_existing_person_ids(self, *, company_id: int, day: date, person_ids: Sequence[int]) -> set[int]:
        if not person_ids:
            return set()

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT person_id
                FROM missed_check_ins
                WHERE company_id=%s AND missed_date=%s AND person_id IN ({in_clause(person_ids)})
                """,
                (int(company_id), day, *[int(p) for p in person_ids]),
            )
            return {int(r["person_id"]) for r in fetchall(cur)}

    def list_prior_misses(
        self,
        *,
        company_id: int,
        person_ids: Sequence[int],
        start: date,
        end: date,
    ) -> Sequence[PriorMiss]:
        if not person_ids:
            return []

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT person_id, missed_date
                FROM missed_check_ins
                WHERE company_id=%s
                  AND missed_date >= %s AND missed_date < %s
                  AND person_id IN ({in_clause(person_ids)})
                ORDER BY missed_date DESC
                """,
                (int(company_id), start, end, *[int(p) for p in person_ids]),
            )
            return [PriorMiss(person_id=int(r["person_id"]), missed_date=r["missed_date"]) for r in fetchall(cur)]

    def create_many(self, *, company_id: int, records: Sequence[NewMissedCheckIn]) -> set[int]:
        if not records:
            return set()

        columns = (
            "company_id, person_id, team_id, missed_date, schedule_window, status, "
            "team_leader_id_at_miss, team_leader_name_at_miss, " + ", ".join(_SNAPSHOT_COLUMNS)
        )
        placeholders = ", ".join(["%s"] * (8 + len(_SNAPSHOT_COLUMNS)))
        # No-op update on the unique key (company_id, person_id, missed_date): rowcount is 1 for a
        # new row and 0 for an existing one. Any other error still raises.
        sql = (
            f"INSERT INTO missed_check_ins ({columns}) VALUES ({placeholders}) "
            "ON DUPLICATE KEY UPDATE missed_check_in_id = missed_check_in_id"
        )

        inserted: set[int] = set()
        with db_cursor(self._conn_factory) as (_, cur):
            for rec in records:
                cur.execute(
                    sql,
                    (
                        int(company_id),
                        int(rec.person_id),
                        int(rec.team_id),
                        rec.missed_date,
                        rec.schedule_window,
                        MissedCheckInStatus.OPEN.value,
                        rec.team_leader_id_at_miss,
                        rec.team_leader_name_at_miss,
                        *_snapshot_values(rec.snapshot),
                    ),
                )
                if cur.rowcount == 1:
                    inserted.add(int(rec.person_id))
        return inserted

    def get_by_id(self, *, company_id: int, record_id: int) -> Optional[MissedCheckIn]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE m.company_id=%s AND m.missed_check_in_id=%s",
                (int(company_id), int(record_id)),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

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
        sets = ["status=%s"]
        params: list[object] = [status.value]
        if notes is not None:
            sets.append("notes=%s")
            params.append(notes)
        if resolved_by is not None:
            sets.append("resolved_by=%s")
            params.append(int(resolved_by))
        if resolved_at is not None:
            sets.append("resolved_at=%s")
            params.append(resolved_at.replace(tzinfo=None))

        params.extend([int(company_id), int(record_id), expected_status.value])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE missed_check_ins
                SET {", ".join(sets)}
                WHERE company_id=%s AND missed_check_in_id=%s AND status=%s
                """,
                tuple(params),
            )
            return cur.rowcount > 0

    def list_by_filters(self, *, company_id: int, filters: MissedCheckInFilters) -> tuple[Sequence[MissedCheckIn], int]:
        clauses = ["m.company_id=%s"]
        params: list[object] = [int(company_id)]

        if filters.status is not None:
            clauses.append("m.status=%s")
            params.append(filters.status.value)
        if filters.team_ids:
            clauses.append(f"m.team_id IN ({in_clause(filters.team_ids)})")
            params.extend(int(t) for t in filters.team_ids)
        if filters.person_id is not None:
            clauses.append("m.person_id=%s")
            params.append(int(filters.person_id))
        if filters.date_from is not None:
            clauses.append("m.missed_date >= %s")
            params.append(filters.date_from)
        if filters.date_to is not None:
            clauses.append("m.missed_date <= %s")
            params.append(filters.date_to)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM missed_check_ins m WHERE {where}", tuple(params))
            total = int(fetchone(cur)["total"])

            cur.execute(
                _SELECT + f" WHERE {where} ORDER BY m.missed_date DESC, m.missed_check_in_id DESC LIMIT %s OFFSET %s",
                tuple(params + [int(filters.limit), int(filters.offset)]),
            )
            return [_to_record(r) for r in fetchall(cur)], total

    def count_by_status(
        self, *, company_id: int, team_ids: Optional[Sequence[int]] = None
    ) -> dict[MissedCheckInStatus, int]:
        clauses = ["company_id=%s"]
        params: list[object] = [int(company_id)]
        if team_ids:
            clauses.append(f"team_id IN ({in_clause(team_ids)})")
            params.extend(int(t) for t in team_ids)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT status, COUNT(*) AS total
                FROM missed_check_ins
                WHERE {" AND ".join(clauses)}
                GROUP BY status
                """,
                tuple(params),
            )
            counts = {status: 0 for status in MissedCheckInStatus}
            for r in fetchall(cur):
                counts[MissedCheckInStatus(r["status"])] = int(r["total"])
            return counts
