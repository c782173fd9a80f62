from datetime import date, time

from checkin_watch.checkins.model import CheckIn
from checkin_watch.core.enums import Role
from checkin_watch.missed_checkins.model import PriorMiss
from checkin_watch.missed_checkins.snapshot import SnapshotCalculator, WorkerContext
from checkin_watch.schedules.model import EffectiveSchedule

WEEKDAYS = EffectiveSchedule(work_days=frozenset({1, 2, 3, 4, 5}), check_in_start=time(6, 0), check_in_end=time(10, 0))
# Wednesday
AS_OF = date(2026, 2, 4)


def _worker(person_id=1, assigned_on=date(2026, 1, 26), role=Role.WORKER):
    return WorkerContext(person_id=person_id, team_id=7, schedule=WEEKDAYS, assigned_on=assigned_on, role=role)


def _snapshot(worker, *, check_ins=(), misses=(), holidays=None, as_of=AS_OF):
    result = SnapshotCalculator().calculate_batch(
        [worker],
        as_of,
        holidays or set(),
        check_ins=list(check_ins),
        prior_misses=list(misses),
    )
    return result[worker.person_id]


def test_calendar_fields_and_role():
    snap = _snapshot(_worker(role=Role.TEAM_LEAD))

    assert snap.day_of_week == 3
    assert snap.week_of_month == 1
    assert snap.worker_role_at_miss is Role.TEAM_LEAD


def test_streak_skips_weekend():
    check_ins = [
        CheckIn(1, date(2026, 2, 3), 80),
        CheckIn(1, date(2026, 2, 2), 70),
        CheckIn(1, date(2026, 1, 30), 60),
        CheckIn(1, date(2026, 1, 20), 10),
    ]

    snap = _snapshot(_worker(), check_ins=check_ins)

    # Thu Jan 29 has no check-in, Sat/Sun are skipped.
    assert snap.check_in_streak_before == 3
    assert snap.days_since_last_check_in == 1


def test_streak_skips_holidays():
    check_ins = [
        CheckIn(1, date(2026, 2, 3), 80),
        CheckIn(1, date(2026, 2, 2), 80),
        CheckIn(1, date(2026, 1, 29), 80),
    ]

    snap = _snapshot(_worker(), check_ins=check_ins, holidays={date(2026, 1, 30)})

    assert snap.check_in_streak_before == 3


def test_readiness_average_uses_recent_week_only():
    check_ins = [
        CheckIn(1, date(2026, 2, 3), 80),
        CheckIn(1, date(2026, 2, 2), 70),
        CheckIn(1, date(2026, 1, 30), 60),
        CheckIn(1, date(2026, 1, 20), 10),
    ]

    snap = _snapshot(_worker(), check_ins=check_ins)

    assert snap.recent_readiness_avg == 70.0


def test_completion_rate_counts_required_days_since_assignment():
    check_ins = [
        CheckIn(1, date(2026, 2, 3), 80),
        CheckIn(1, date(2026, 2, 2), 70),
        CheckIn(1, date(2026, 1, 30), 60),
        CheckIn(1, date(2026, 1, 20), 10),
    ]

    snap = _snapshot(_worker(assigned_on=date(2026, 1, 26)), check_ins=check_ins)

    # 7 required weekdays Jan 26 - Feb 3, 3 submitted after assignment.
    assert snap.baseline_completion_rate == 42.9


def test_completion_rate_edge_cases():
    # Assigned on a Sunday, next day is the first work day: nothing required yet.
    no_required = _snapshot(_worker(assigned_on=date(2026, 2, 1)), as_of=date(2026, 2, 2))
    unassigned = _snapshot(_worker(assigned_on=None))

    assert no_required.baseline_completion_rate == 100.0
    assert unassigned.baseline_completion_rate == 0.0


def test_miss_counts_and_flags():
    misses = [
        PriorMiss(1, date(2026, 1, 29)),
        PriorMiss(1, date(2026, 1, 28)),
        PriorMiss(1, date(2025, 12, 20)),
        PriorMiss(1, date(2025, 11, 20)),
        PriorMiss(1, date(2025, 10, 1)),
        PriorMiss(2, date(2026, 2, 3)),
    ]

    snap = _snapshot(_worker(), misses=misses)

    assert (snap.misses_in_last_30d, snap.misses_in_last_60d, snap.misses_in_last_90d) == (2, 3, 4)
    assert snap.days_since_last_miss == 6
    assert snap.is_first_miss_in_30d is False
    assert snap.is_increasing_frequency is True


def test_increasing_frequency_requires_two_recent_misses():
    one_recent = _snapshot(_worker(), misses=[PriorMiss(1, date(2026, 2, 2))])
    steady = _snapshot(
        _worker(),
        misses=[PriorMiss(1, d) for d in (date(2026, 2, 2), date(2026, 1, 28), date(2025, 12, 20), date(2025, 12, 15))],
    )

    assert one_recent.is_increasing_frequency is False
    assert steady.is_increasing_frequency is False


def test_no_history():
    snap = _snapshot(_worker())

    assert snap.check_in_streak_before == 0
    assert snap.days_since_last_check_in is None
    assert snap.days_since_last_miss is None
    assert snap.recent_readiness_avg is None
    assert snap.misses_in_last_90d == 0
    assert snap.is_first_miss_in_30d is True
    assert snap.is_increasing_frequency is False
    assert snap.baseline_completion_rate == 0.0


def test_history_on_or_after_as_of_is_ignored():
    snap = _snapshot(
        _worker(),
        check_ins=[CheckIn(1, AS_OF, 90)],
        misses=[PriorMiss(1, AS_OF)],
    )

    assert snap.days_since_last_check_in is None
    assert snap.misses_in_last_30d == 0
