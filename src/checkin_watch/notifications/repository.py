from __future__ import annotations

from typing import Protocol, Sequence

from .model import NotificationIntent


class NotificationRepository(Protocol):
    def create_many(self, *, company_id: int, intents: Sequence[NotificationIntent]) -> int:
        raise NotImplementedError
