from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional

from ..common.datetime_utils import format_time_12h


@dataclass(frozen=True)
class TeamSchedule:
    """Team default schedule. Every field is required."""

    work_days: frozenset[int]
    check_in_start: time
    check_in_end: time


@dataclass(frozen=True)
class ScheduleOverride:
    """Per-worker override. Each field is optional and overrides only itself."""

    work_days: Optional[frozenset[int]] = None
    check_in_start: Optional[time] = None
    check_in_end: Optional[time] = None


@dataclass(frozen=True)
class EffectiveSchedule:
    """Schedule after applying worker-over-team precedence field by field."""

    work_days: frozenset[int]
    check_in_start: time
    check_in_end: time

    def window_label(self) -> str:
        return f"{format_time_12h(self.check_in_start)} - {format_time_12h(self.check_in_end)}"
