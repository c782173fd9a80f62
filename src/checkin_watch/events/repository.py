from __future__ import annotations

from typing import Protocol, Sequence

from .model import DomainEvent


class EventRepository(Protocol):
    def create_many(self, *, company_id: int, events: Sequence[DomainEvent]) -> int:
        raise NotImplementedError
