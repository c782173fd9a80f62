from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles stored on a person record."""

    ADMIN = "ADMIN"
    WHS = "WHS"
    SUPERVISOR = "SUPERVISOR"
    TEAM_LEAD = "TEAM_LEAD"
    WORKER = "WORKER"


class MissedCheckInStatus(str, Enum):
    """Follow-up status of a missed check-in record."""

    OPEN = "OPEN"
    INVESTIGATING = "INVESTIGATING"
    EXCUSED = "EXCUSED"
    RESOLVED = "RESOLVED"


class NotificationType(str, Enum):
    MISSED_CHECK_IN = "MISSED_CHECK_IN"


class EventType(str, Enum):
    MISSED_CHECK_IN_DETECTED = "MISSED_CHECK_IN_DETECTED"
