from __future__ import annotations

from datetime import time

from checkin_watch.organization.mysql_organization_repository import MySQLOrganizationRepository


class FakeCursor:
    def __init__(self, rows):
        self.rows = rows
        self.executed = []

    def execute(self, sql, params=None):
        self.executed.append((sql, params))

    def fetchall(self):
        return self.rows

    def close(self):
        pass


class FakeConnection:
    def __init__(self, rows):
        self.cur = FakeCursor(rows)
        self.committed = False

    def cursor(self, dictionary=False):
        return self.cur

    def commit(self):
        self.committed = True

    def rollback(self):
        pass

    def close(self):
        pass


class FakeConnFactory:
    def __init__(self, rows):
        self.conn = FakeConnection(rows)

    def connect(self):
        return self.conn


def _team_row(team_id, start, end, **extra):
    row = {
        "team_id": team_id,
        "company_id": 1,
        "name": f"Team {team_id}",
        "work_days": "1,2,3,4,5",
        "check_in_start": start,
        "check_in_end": end,
        "is_active": 1,
        "leader_id": 100,
        "leader_first_name": "Lara",
        "leader_last_name": "Lead",
    }
    row.update(extra)
    return row


def test_teams_are_mapped_with_leader_and_schedule():
    repo = MySQLOrganizationRepository(FakeConnFactory([_team_row(10, "06:00", "10:00", work_days="bad")]))

    (team,) = repo.list_active_teams(company_id=1)

    assert team.leader.full_name == "Lara Lead"
    assert team.schedule.check_in_start == time(6, 0)
    assert team.schedule.work_days == frozenset({1, 2, 3, 4, 5})


def test_team_with_malformed_window_is_skipped(caplog):
    rows = [
        _team_row(10, "6:00", "10:00"),
        _team_row(11, "10:00", "06:00"),
        _team_row(12, "07:00", "09:30"),
    ]
    repo = MySQLOrganizationRepository(FakeConnFactory(rows))

    teams = repo.list_active_teams(company_id=1)

    assert [t.team_id for t in teams] == [12]
    assert "Skipping team 10" in caplog.text
    assert "Skipping team 11" in caplog.text
