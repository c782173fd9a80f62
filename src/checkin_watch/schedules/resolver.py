"""Worker override / team default schedule resolution.

Pure functions, no storage access. Work days are numbered 0 = Sunday ... 6 = Saturday.
"""

from __future__ import annotations

from typing import Optional

from ..core.constants import DEFAULT_WORK_DAYS
from .model import EffectiveSchedule, ScheduleOverride, TeamSchedule


def _resolve_work_days(override: Optional[ScheduleOverride], team: TeamSchedule) -> frozenset[int]:
    if override is not None and override.work_days:
        return override.work_days
    if team.work_days:
        return team.work_days
    return DEFAULT_WORK_DAYS


def effective_schedule(override: Optional[ScheduleOverride], team: TeamSchedule) -> EffectiveSchedule:
    """Merge a worker override with the team default, one field at a time.

    A partial override whose window ends up inverted (start >= end) falls back to the
    team's window for both ends.
    """

    work_days = _resolve_work_days(override, team)
    start = team.check_in_start
    end = team.check_in_end
    if override is not None:
        if override.check_in_start is not None:
            start = override.check_in_start
        if override.check_in_end is not None:
            end = override.check_in_end

    if start >= end:
        start, end = team.check_in_start, team.check_in_end

    return EffectiveSchedule(work_days=work_days, check_in_start=start, check_in_end=end)


def is_work_day(day_of_week: int, override: Optional[ScheduleOverride], team: TeamSchedule) -> bool:
    return day_of_week in _resolve_work_days(override, team)
