from __future__ import annotations

import json
from datetime import date, datetime, timezone

from checkin_watch.core.enums import EventType
from checkin_watch.events.emitter import EventEmitter
from checkin_watch.events.model import DomainEvent
from checkin_watch.events.mysql_event_repository import MySQLEventRepository
from checkin_watch.missed_checkins.model import NewMissedCheckIn

NOW = datetime(2026, 2, 4, 2, 2, tzinfo=timezone.utc)


class FakeEventRepo:
    def __init__(self):
        self.calls = 0

    def create_many(self, *, company_id, events):
        self.calls += 1
        return len(events)


class FakeCursor:
    def __init__(self):
        self.batches = []

    def executemany(self, sql, rows):
        self.batches.append((sql, rows))

    def close(self):
        pass


class FakeConnection:
    def __init__(self, cur):
        self.cur = cur

    def cursor(self, dictionary=False):
        return self.cur

    def commit(self):
        pass

    def rollback(self):
        pass

    def close(self):
        pass


class FakeConnFactory:
    def __init__(self):
        self.cur = FakeCursor()

    def connect(self):
        return FakeConnection(self.cur)


def test_no_records_means_no_write():
    repo = FakeEventRepo()

    assert EventEmitter(repo, clock=lambda: NOW).emit_missed_check_ins(company_id=1, tz_name="UTC", records=[]) == 0
    assert repo.calls == 0


def test_emit_returns_written_count():
    rec = NewMissedCheckIn(person_id=5, team_id=10, missed_date=date(2026, 2, 4), schedule_window="6:00 AM - 10:00 AM")

    written = EventEmitter(FakeEventRepo(), clock=lambda: NOW).emit_missed_check_ins(
        company_id=1, tz_name="Asia/Manila", records=[rec]
    )

    assert written == 1


def test_mysql_writer_stores_payload_as_json_and_utc_time():
    factory = FakeConnFactory()
    event = DomainEvent(
        event_type=EventType.MISSED_CHECK_IN_DETECTED,
        entity_type="missed_check_in",
        event_time=NOW,
        event_timezone="Asia/Manila",
        person_id=5,
        payload={"missed_date": "2026-02-04", "team_id": 10},
    )

    assert MySQLEventRepository(factory).create_many(company_id=1, events=[event]) == 1

    _, rows = factory.cur.batches[0]
    row = rows[0]
    assert row[2] == "MISSED_CHECK_IN_DETECTED"
    assert json.loads(row[5]) == {"missed_date": "2026-02-04", "team_id": 10}
    assert row[6] == datetime(2026, 2, 4, 2, 2)
