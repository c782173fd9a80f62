"""Status lifecycle of a missed check-in record.

OPEN -> INVESTIGATING | EXCUSED | RESOLVED
INVESTIGATING -> EXCUSED | RESOLVED
EXCUSED, RESOLVED: terminal
"""

from __future__ import annotations

from ..core.enums import MissedCheckInStatus
from ..core.exceptions import InvalidTransitionError

VALID_TRANSITIONS: dict[MissedCheckInStatus, frozenset[MissedCheckInStatus]] = {
    MissedCheckInStatus.OPEN: frozenset(
        {MissedCheckInStatus.INVESTIGATING, MissedCheckInStatus.EXCUSED, MissedCheckInStatus.RESOLVED}
    ),
    MissedCheckInStatus.INVESTIGATING: frozenset({MissedCheckInStatus.EXCUSED, MissedCheckInStatus.RESOLVED}),
    MissedCheckInStatus.EXCUSED: frozenset(),
    MissedCheckInStatus.RESOLVED: frozenset(),
}

TERMINAL_STATUSES = frozenset(s for s, nxt in VALID_TRANSITIONS.items() if not nxt)


def can_transition(current: MissedCheckInStatus, requested: MissedCheckInStatus) -> bool:
    return requested in VALID_TRANSITIONS.get(current, frozenset())


def ensure_transition(current: MissedCheckInStatus, requested: MissedCheckInStatus) -> None:
    if not can_transition(current, requested):
        raise InvalidTransitionError(current, requested)


def is_terminal(status: MissedCheckInStatus) -> bool:
    return status in TERMINAL_STATUSES
