from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Optional, Sequence

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield ``(conn, cursor)``; commit on success, roll back and re-raise on error."""

    conn = conn_factory.connect()
    cur = conn.cursor(dictionary=dictionary)
    try:
        yield conn, cur
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        cur.close()
        conn.close()


def fetchone(cur) -> Optional[dict]:
    return cur.fetchone() or None


def fetchall(cur) -> list[dict]:
    return list(cur.fetchall() or [])


def in_clause(values: Sequence[Any]) -> str:
    """Placeholder list for ``IN (...)``; callers must not pass an empty sequence."""

    return ", ".join(["%s"] * len(values))


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # DATETIME columns come back naive; the session time zone is UTC.
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
