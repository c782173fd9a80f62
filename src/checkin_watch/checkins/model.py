from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class CheckIn:
    """Submitted daily check-in (read-only to the detection engine)."""

    person_id: int
    check_in_date: date
    readiness_score: float
