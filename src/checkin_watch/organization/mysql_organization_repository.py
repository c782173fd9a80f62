from __future__ import annotations

import logging
from typing import Sequence

from ..common.validators import parse_hhmm, parse_work_days
from ..core.constants import DEFAULT_WORK_DAYS
from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_utc, db_cursor, fetchall, in_clause
from ..schedules.model import ScheduleOverride, TeamSchedule
from .model import Company, Team, TeamLeader, Worker
from .repository import OrganizationRepository

logger = logging.getLogger(__name__)


class MySQLOrganizationRepository(OrganizationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active_companies(self) -> Sequence[Company]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT company_id, name, timezone, is_active
                FROM companies
                WHERE is_active=1
                ORDER BY company_id ASC
                """
            )
            return [
                Company(
                    company_id=int(r["company_id"]),
                    name=r["name"],
                    timezone=r["timezone"],
                    is_active=bool(r["is_active"]),
                )
                for r in fetchall(cur)
            ]

    def list_active_teams(self, *, company_id: int) -> Sequence[Team]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT t.team_id, t.company_id, t.name, t.work_days,
                       t.check_in_start, t.check_in_end, t.is_active,
                       l.person_id AS leader_id, l.first_name AS leader_first_name,
                       l.last_name AS leader_last_name
                FROM teams t
                LEFT JOIN persons l ON l.person_id = t.leader_id
                WHERE t.company_id=%s AND t.is_active=1
                ORDER BY t.team_id ASC
                """,
                (int(company_id),),
            )
            out: list[Team] = []
            for r in fetchall(cur):
                start = parse_hhmm(r["check_in_start"])
                end = parse_hhmm(r["check_in_end"])
                if start is None or end is None or start >= end:
                    logger.warning(
                        "Skipping team %s: invalid check-in window %r - %r",
                        r["team_id"],
                        r["check_in_start"],
                        r["check_in_end"],
                        extra={"company_id": int(company_id)},
                    )
                    continue

                leader = None
                if r.get("leader_id") is not None:
                    leader = TeamLeader(
                        person_id=int(r["leader_id"]),
                        full_name=f"{r['leader_first_name']} {r['leader_last_name']}",
                    )
                out.append(
                    Team(
                        team_id=int(r["team_id"]),
                        company_id=int(r["company_id"]),
                        name=r["name"],
                        schedule=TeamSchedule(
                            work_days=parse_work_days(r["work_days"]) or DEFAULT_WORK_DAYS,
                            check_in_start=start,
                            check_in_end=end,
                        ),
                        leader=leader,
                        is_active=bool(r["is_active"]),
                    )
                )
            return out

    def list_active_workers(self, *, company_id: int, team_ids: Sequence[int]) -> Sequence[Worker]:
        if not team_ids:
            return []

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT person_id, company_id, team_id, first_name, last_name, role,
                       team_assigned_at, work_days, check_in_start, check_in_end, is_active
                FROM persons
                WHERE company_id=%s
                  AND role=%s
                  AND is_active=1
                  AND team_assigned_at IS NOT NULL
                  AND team_id IN ({in_clause(team_ids)})
                ORDER BY person_id ASC
                """,
                (int(company_id), Role.WORKER.value, *[int(t) for t in team_ids]),
            )
            return [
                Worker(
                    person_id=int(r["person_id"]),
                    company_id=int(r["company_id"]),
                    team_id=int(r["team_id"]),
                    full_name=f"{r['first_name']} {r['last_name']}",
                    team_assigned_at=as_utc(r["team_assigned_at"]),
                    override=ScheduleOverride(
                        work_days=parse_work_days(r.get("work_days")),
                        check_in_start=parse_hhmm(r.get("check_in_start")),
                        check_in_end=parse_hhmm(r.get("check_in_end")),
                    ),
                    role=Role(r["role"]),
                    is_active=bool(r["is_active"]),
                )
                for r in fetchall(cur)
            ]
