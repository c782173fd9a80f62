from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date, datetime
from typing import Optional, Sequence

from ..core.constants import DEFAULT_PAGE, DEFAULT_PAGE_LIMIT
from ..core.enums import MissedCheckInStatus, Role


@dataclass(frozen=True)
class StateSnapshot:
    """Behavioural indicators frozen at the moment a miss is detected.

    Computed once from history strictly before the missed date, never recomputed.
    """

    worker_role_at_miss: Optional[Role]
    day_of_week: int
    week_of_month: int
    days_since_last_check_in: Optional[int]
    days_since_last_miss: Optional[int]
    check_in_streak_before: int
    recent_readiness_avg: Optional[float]
    misses_in_last_30d: int
    misses_in_last_60d: int
    misses_in_last_90d: int
    baseline_completion_rate: float
    is_first_miss_in_30d: bool
    is_increasing_frequency: bool

    def to_dict(self) -> dict:
        data = asdict(self)
        data["worker_role_at_miss"] = self.worker_role_at_miss.value if self.worker_role_at_miss else None
        return data


@dataclass(frozen=True)
class NewMissedCheckIn:
    """Row handed to the insert-or-ignore write."""

    person_id: int
    team_id: int
    missed_date: date
    schedule_window: str
    team_leader_id_at_miss: Optional[int] = None
    team_leader_name_at_miss: Optional[str] = None
    snapshot: Optional[StateSnapshot] = None


@dataclass(frozen=True)
class MissedCheckIn:
    missed_check_in_id: int
    company_id: int
    person_id: int
    team_id: int
    missed_date: date
    schedule_window: str
    status: MissedCheckInStatus
    team_leader_id_at_miss: Optional[int] = None
    team_leader_name_at_miss: Optional[str] = None
    snapshot: Optional[StateSnapshot] = None
    notes: Optional[str] = None
    resolved_by: Optional[int] = None
    resolved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    worker_name: Optional[str] = None
    team_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.missed_check_in_id,
            "worker_id": self.person_id,
            "worker_name": self.worker_name,
            "team_id": self.team_id,
            "team_name": self.team_name,
            "team_leader_id": self.team_leader_id_at_miss,
            "team_leader_name": self.team_leader_name_at_miss,
            "date": self.missed_date.isoformat(),
            "schedule_window": self.schedule_window,
            "status": self.status.value,
            "notes": self.notes,
            "resolved_by": self.resolved_by,
            "resolved_at": self.resolved_at.isoformat() if self.resolved_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "state_snapshot": self.snapshot.to_dict() if self.snapshot else None,
        }


@dataclass(frozen=True)
class PriorMiss:
    person_id: int
    missed_date: date


@dataclass(frozen=True)
class MissedCheckInFilters:
    status: Optional[MissedCheckInStatus] = None
    team_ids: Optional[Sequence[int]] = None
    person_id: Optional[int] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_PAGE_LIMIT

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class MissedCheckInPage:
    items: Sequence[MissedCheckIn]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return (self.total + self.limit - 1) // self.limit if self.limit else 0
