from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import NotificationType


@dataclass(frozen=True)
class NotificationIntent:
    """What to tell whom. Delivery and retries belong to the notification collaborator."""

    recipient_id: int
    type: NotificationType
    title: str
    message: str
