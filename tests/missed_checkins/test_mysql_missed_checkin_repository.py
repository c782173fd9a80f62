from __future__ import annotations

from datetime import date

import mysql.connector
import pytest
from mysql.connector.constants import ClientFlag

from checkin_watch.database.connection import DatabaseConnection, DBConfig
from checkin_watch.missed_checkins.model import NewMissedCheckIn
from checkin_watch.missed_checkins.mysql_missed_checkin_repository import MySQLMissedCheckInRepository


class FakeCursor:
    def __init__(self, rowcounts, fail_on=None):
        self.rowcounts = list(rowcounts)
        self.fail_on = fail_on
        self.executed = []
        self.rowcount = -1

    def execute(self, sql, params=None):
        self.executed.append((sql, params))
        if self.fail_on is not None and len(self.executed) == self.fail_on:
            raise mysql.connector.IntegrityError("Cannot add or update a child row: a foreign key constraint fails")
        self.rowcount = self.rowcounts.pop(0)

    def close(self):
        pass


class FakeConnection:
    def __init__(self, cur):
        self.cur = cur
        self.committed = False
        self.rolled_back = False

    def cursor(self, dictionary=False):
        return self.cur

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        pass


class FakeConnFactory:
    def __init__(self, cur):
        self.conn = FakeConnection(cur)

    def connect(self):
        return self.conn


def _rec(person_id):
    return NewMissedCheckIn(
        person_id=person_id,
        team_id=10,
        missed_date=date(2026, 2, 4),
        schedule_window="6:00 AM - 10:00 AM",
        team_leader_id_at_miss=100,
        team_leader_name_at_miss="Lara Lead",
    )


def test_create_many_reports_only_new_rows():
    cur = FakeCursor(rowcounts=[1, 0, 1])
    factory = FakeConnFactory(cur)

    inserted = MySQLMissedCheckInRepository(factory).create_many(company_id=1, records=[_rec(1), _rec(2), _rec(3)])

    assert inserted == {1, 3}
    assert factory.conn.committed
    sql = cur.executed[0][0]
    assert "ON DUPLICATE KEY UPDATE" in sql
    assert "IGNORE" not in sql


def test_create_many_surfaces_non_duplicate_errors():
    cur = FakeCursor(rowcounts=[1, 1], fail_on=2)
    factory = FakeConnFactory(cur)

    with pytest.raises(mysql.connector.IntegrityError):
        MySQLMissedCheckInRepository(factory).create_many(company_id=1, records=[_rec(1), _rec(2)])
    assert factory.conn.rolled_back
    assert not factory.conn.committed


def test_connections_count_changed_rows(monkeypatch):
    captured = {}
    monkeypatch.setattr(mysql.connector, "connect", lambda **kwargs: captured.update(kwargs))

    DatabaseConnection(DBConfig.from_dict({"database": "checkin_watch_test"})).connect()

    assert captured["client_flags"] == [-ClientFlag.FOUND_ROWS]
    assert captured["time_zone"] == "+00:00"
