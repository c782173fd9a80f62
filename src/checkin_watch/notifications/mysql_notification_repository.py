from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor
from .model import NotificationIntent
from .repository import NotificationRepository


class MySQLNotificationRepository(NotificationRepository):
    """Writes intents to the notifications inbox table read by the delivery service."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_many(self, *, company_id: int, intents: Sequence[NotificationIntent]) -> int:
        if not intents:
            return 0

        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO notifications(company_id, person_id, type, title, message)
                VALUES(%s,%s,%s,%s,%s)
                """,
                [(int(company_id), int(n.recipient_id), n.type.value, n.title, n.message) for n in intents],
            )
            return len(intents)
