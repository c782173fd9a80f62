from __future__ import annotations

import logging
from datetime import date
from typing import Sequence

from ..core.enums import NotificationType
from ..missed_checkins.model import NewMissedCheckIn
from .model import NotificationIntent
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


def build_missed_check_in_notifications(
    records: Sequence[NewMissedCheckIn], day: date
) -> list[NotificationIntent]:
    """One notification per worker plus one aggregated notification per team leader.

    Leaders are taken from the leader snapshot on each record, so a leader responsible for
    several teams still gets a single alert.
    """

    day_str = day.isoformat()
    intents = [
        NotificationIntent(
            recipient_id=rec.person_id,
            type=NotificationType.MISSED_CHECK_IN,
            title="Missed Check-in",
            message=f"You missed your check-in for {day_str}. Please contact your team lead if needed.",
        )
        for rec in records
    ]

    count_by_leader: dict[int, int] = {}
    for rec in records:
        if rec.team_leader_id_at_miss is None:
            continue
        count_by_leader[rec.team_leader_id_at_miss] = count_by_leader.get(rec.team_leader_id_at_miss, 0) + 1

    for leader_id, count in count_by_leader.items():
        noun = "worker" if count == 1 else "workers"
        intents.append(
            NotificationIntent(
                recipient_id=leader_id,
                type=NotificationType.MISSED_CHECK_IN,
                title="Team Missed Check-ins",
                message=f"{count} {noun} missed their check-in for {day_str}.",
            )
        )
    return intents


class NotificationBatcher:
    def __init__(self, notifications: NotificationRepository):
        self._notifications = notifications

    def dispatch(self, *, company_id: int, records: Sequence[NewMissedCheckIn], day: date) -> int:
        """Build and hand off notifications. Never raises: detection records are already committed."""

        if not records:
            return 0
        try:
            intents = build_missed_check_in_notifications(records, day)
            return self._notifications.create_many(company_id=company_id, intents=intents)
        except Exception:
            logger.exception(
                "Failed to send missed check-in notifications",
                extra={"company_id": company_id},
            )
            return 0
