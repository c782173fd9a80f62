from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role
from ..schedules.model import ScheduleOverride, TeamSchedule


@dataclass(frozen=True)
class Company:
    """Tenant. Every other record is partitioned by company_id."""

    company_id: int
    name: str
    timezone: str
    is_active: bool = True


@dataclass(frozen=True)
class TeamLeader:
    person_id: int
    full_name: str


@dataclass(frozen=True)
class Team:
    team_id: int
    company_id: int
    name: str
    schedule: TeamSchedule
    leader: Optional[TeamLeader] = None
    is_active: bool = True


@dataclass(frozen=True)
class Worker:
    """Person with role WORKER, with the schedule fields the engine needs."""

    person_id: int
    company_id: int
    team_id: int
    full_name: str
    team_assigned_at: Optional[datetime]
    override: ScheduleOverride = ScheduleOverride()
    role: Role = Role.WORKER
    is_active: bool = True
