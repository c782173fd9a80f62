from __future__ import annotations

import json
from datetime import timezone
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor
from .model import DomainEvent
from .repository import EventRepository


class MySQLEventRepository(EventRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_many(self, *, company_id: int, events: Sequence[DomainEvent]) -> int:
        if not events:
            return 0

        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO events(company_id, person_id, event_type, entity_type, entity_id,
                                   payload, event_time, event_timezone)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                [
                    (
                        int(company_id),
                        e.person_id,
                        e.event_type.value,
                        e.entity_type,
                        e.entity_id,
                        json.dumps(e.payload, default=str),
                        e.event_time.astimezone(timezone.utc).replace(tzinfo=None),
                        e.event_timezone,
                    )
                    for e in events
                ],
            )
            return len(events)
