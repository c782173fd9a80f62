from __future__ import annotations

from dataclasses import replace
from datetime import date
from types import SimpleNamespace

import pytest

from checkin_watch.core.enums import MissedCheckInStatus
from checkin_watch.main import create_app
from checkin_watch.missed_checkins.detector import DetectionSummary
from checkin_watch.missed_checkins.model import MissedCheckIn
from checkin_watch.missed_checkins.service import MissedCheckInService

HEADERS = {"X-Company-Id": "1", "X-User-Id": "42"}


class FakeMissedRepo:
    def __init__(self, records):
        self.records = {r.missed_check_in_id: r for r in records}
        self.last_filters = None

    def get_by_id(self, *, company_id, record_id):
        r = self.records.get(record_id)
        return r if r is not None and r.company_id == company_id else None

    def update_status(self, *, company_id, record_id, expected_status, status, notes=None, resolved_by=None, resolved_at=None):
        r = self.records[record_id]
        if r.status is not expected_status:
            return False
        self.records[record_id] = replace(r, status=status, notes=notes, resolved_by=resolved_by, resolved_at=resolved_at)
        return True

    def list_by_filters(self, *, company_id, filters):
        self.last_filters = filters
        items = [r for r in self.records.values() if r.company_id == company_id]
        return items, len(items)

    def count_by_status(self, *, company_id, team_ids=None):
        return {MissedCheckInStatus.OPEN: 1}


class FakeDetector:
    def __init__(self, summary):
        self.summary = summary
        self.calls = 0

    def run_detection_pass(self):
        self.calls += 1
        return self.summary


def _record(record_id=1, status=MissedCheckInStatus.OPEN):
    return MissedCheckIn(
        missed_check_in_id=record_id,
        company_id=1,
        person_id=5,
        team_id=10,
        missed_date=date(2026, 2, 4),
        schedule_window="6:00 AM - 10:00 AM",
        status=status,
        worker_name="Worker 5",
        team_name="Line A",
    )


@pytest.fixture
def repo():
    return FakeMissedRepo([_record(1), _record(2, status=MissedCheckInStatus.RESOLVED)])


@pytest.fixture
def detector():
    return FakeDetector(DetectionSummary(companies_processed=2, companies_failed=0, detected=3))


@pytest.fixture
def app(monkeypatch, repo, detector):
    monkeypatch.setenv("APP_ENV", "testing")
    container = SimpleNamespace(missed_checkin_service=MissedCheckInService(repo), detector=detector)
    return create_app(container=container)


@pytest.fixture
def client(app):
    return app.test_client()


def test_list_returns_items_and_pagination(client, repo):
    resp = client.get("/api/v1/missed-check-ins?status=open&team_id=10&team_id=11&from=2026-02-01", headers=HEADERS)

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert body["data"]["pagination"] == {"page": 1, "limit": 20, "total": 2, "total_pages": 1}
    assert body["data"]["items"][0]["worker_name"] == "Worker 5"
    assert repo.last_filters.status is MissedCheckInStatus.OPEN
    assert list(repo.last_filters.team_ids) == [10, 11]
    assert repo.last_filters.date_from == date(2026, 2, 1)


def test_list_requires_company_header(client):
    resp = client.get("/api/v1/missed-check-ins")

    assert resp.status_code == 400
    assert resp.get_json()["error"]["code"] == "VALIDATION_ERROR"


def test_list_rejects_bad_date(client):
    resp = client.get("/api/v1/missed-check-ins?from=04-02-2026", headers=HEADERS)

    assert resp.status_code == 400


def test_counts_include_all_statuses(client):
    resp = client.get("/api/v1/missed-check-ins/counts", headers=HEADERS)

    assert resp.status_code == 200
    assert resp.get_json()["data"] == {"OPEN": 1, "INVESTIGATING": 0, "EXCUSED": 0, "RESOLVED": 0}


def test_get_missing_record_is_404(client):
    resp = client.get("/api/v1/missed-check-ins/99", headers=HEADERS)

    assert resp.status_code == 404
    assert resp.get_json()["error"]["code"] == "NOT_FOUND"


def test_patch_resolves_record(client):
    resp = client.patch("/api/v1/missed-check-ins/1", json={"status": "RESOLVED", "notes": "Phoned in"}, headers=HEADERS)

    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["status"] == "RESOLVED"
    assert data["resolved_by"] == 42
    assert data["resolved_at"] is not None
    assert data["notes"] == "Phoned in"


def test_patch_invalid_transition_is_400(client, repo):
    resp = client.patch("/api/v1/missed-check-ins/2", json={"status": "OPEN"}, headers=HEADERS)

    assert resp.status_code == 400
    error = resp.get_json()["error"]
    assert error["code"] == "INVALID_TRANSITION"
    assert error["message"] == "Cannot transition from RESOLVED to OPEN"
    assert repo.records[2].status is MissedCheckInStatus.RESOLVED


def test_patch_requires_status_and_user(client):
    assert client.patch("/api/v1/missed-check-ins/1", json={}, headers=HEADERS).status_code == 400
    assert (
        client.patch("/api/v1/missed-check-ins/1", json={"status": "RESOLVED"}, headers={"X-Company-Id": "1"}).status_code
        == 400
    )


def test_cli_runs_one_detection_pass(app, detector):
    result = app.test_cli_runner().invoke(args=["detect-missed-check-ins"])

    assert result.exit_code == 0
    assert detector.calls == 1
    assert "Detected 3 missed check-ins" in result.output


def test_cli_reports_skipped_run(app, detector):
    detector.summary = DetectionSummary(skipped=True)

    result = app.test_cli_runner().invoke(args=["detect-missed-check-ins"])

    assert "Skipped" in result.output
