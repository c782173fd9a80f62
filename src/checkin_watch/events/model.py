from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.enums import EventType


@dataclass(frozen=True)
class DomainEvent:
    """Append-only audit event. ``event_time`` is aware UTC; ``event_timezone`` is the tenant's zone."""

    event_type: EventType
    entity_type: str
    event_time: datetime
    event_timezone: str
    person_id: Optional[int] = None
    entity_id: Optional[int] = None
    payload: dict = field(default_factory=dict)
