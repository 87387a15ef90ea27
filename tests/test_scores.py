from datetime import datetime

import pytest
from conftest import create_user

from jobtrack.core.security import Role
from jobtrack.models.activity_log import CallerActivityLog
from jobtrack.services.caller_activity_service import (
    calculate_performance_score,
    log_caller_activity,
    update_caller_performance,
)
from jobtrack.services.caller_service import record_call_outcome
from jobtrack.services.top_users_service import calculate_activity_score, caller_stats_from_logs


def test_activity_score_for_regular_user():
    assert calculate_activity_score(applications=3, activities=5, role=Role.USER) == 29


def test_activity_score_ignores_call_figures_for_non_callers():
    assert calculate_activity_score(2, 1, Role.USER, completed_calls=10, success_rate=90.0) == 17


def test_activity_score_for_caller_adds_calls_and_success_rate():
    # 0*8 + 4*1 + 3*15 + 75.5*2 = 200
    assert calculate_activity_score(0, 4, Role.CALLER, completed_calls=3, success_rate=75.5) == 200


def test_caller_stats_from_logs():
    logs = [
        CallerActivityLog(caller_id=1, activity_type="call_completed", call_duration=20),
        CallerActivityLog(caller_id=1, activity_type="call_completed", call_duration=25),
        CallerActivityLog(caller_id=1, activity_type="call_failed"),
        CallerActivityLog(caller_id=1, activity_type="call_scheduled"),
    ]

    stats = caller_stats_from_logs(logs)

    assert stats == {
        "total_calls": 4,
        "completed_calls": 2,
        "avg_call_duration": 22.5,
        "success_rate": "50.0",
    }


@pytest.mark.parametrize(
    "success_rate, avg_duration, total_calls, expected",
    [
        (100, 20, 10, 100.0),
        (50, 22.5, 5, 20 + 15 + 30),
        (0, 0, 0, 0.0),
        (100, 45, 10, 40 + 30 + 0),
        (80, 10, 20, 32 + 30 + 30 - 12.5 / 22.5 * 30),
    ],
)
def test_performance_score(success_rate, avg_duration, total_calls, expected):
    assert calculate_performance_score(success_rate, avg_duration, total_calls) == pytest.approx(expected, abs=0.01)


async def test_record_call_outcome_updates_todays_row(db):
    caller = await create_user(db, "rita", Role.CALLER)
    now = datetime(2026, 4, 1, 12, 0)

    await record_call_outcome(db, caller.id, "completed", 20, now)
    await record_call_outcome(db, caller.id, "completed", 30, now)
    performance = await record_call_outcome(db, caller.id, "failed", None, now)

    assert performance.calls_completed == 2
    assert performance.calls_failed == 1
    assert performance.total_call_duration == 50
    assert performance.average_call_duration == 25
    assert performance.success_rate == pytest.approx(66.67)
    # 2/3 * 70 + min(2, 10) * 3
    assert performance.performance_score == pytest.approx(52.67)


async def test_update_caller_performance_rebuilds_from_logs(db):
    caller = await create_user(db, "rolf", Role.CALLER)
    await log_caller_activity(db, caller.id, "call_scheduled", contact_name="A")
    await log_caller_activity(db, caller.id, "call_completed", contact_name="A", call_duration=20)
    await log_caller_activity(db, caller.id, "call_failed", contact_name="B")
    await db.flush()

    performance = await update_caller_performance(db, caller.id)

    assert performance.calls_scheduled == 1
    assert performance.calls_completed == 1
    assert performance.calls_failed == 1
    assert performance.success_rate == 50
    assert performance.performance_score == calculate_performance_score(50, 20, 2)
