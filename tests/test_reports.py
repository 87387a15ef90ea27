from datetime import datetime, timedelta

import pytest
from conftest import create_user

from jobtrack.core.exceptions import ValidationFailedError
from jobtrack.models.call import CallerPerformance
from jobtrack.models.interview import Interview
from jobtrack.models.job_application import JobApplication
from jobtrack.services.admin_stats_service import export_report, get_system_stats, system_health_row
from jobtrack.services.alert_service import get_system_alerts

NOW = datetime(2026, 10, 19, 12, 0)


def test_system_health_row_bounds():
    assert system_health_row(0) == ["99.80", "120", "0.05"]
    assert system_health_row(20) == ["98.50", "45", "2.00"]


async def test_export_rejects_unknown_report(db):
    with pytest.raises(ValidationFailedError, match="Invalid report type"):
        await export_report(db, "sales")


async def test_export_content_activity(db, user):
    db.add(JobApplication(user_id=user.id, company_name="Acme", position_title="Engineer", created_at=NOW))
    await db.commit()

    report = await export_report(db, "content-activity", now=NOW)
    lines = report["content"].splitlines()

    assert report["filename"] == "content-activity-report-2026-10-19.csv"
    assert lines[0] == "Date,Applications,Interviews"
    assert len(lines) == 31
    assert lines[-1] == "2026-10-19,1,0"
    assert lines[1].startswith("2026-09-20,")


async def test_system_stats_counts_roles_and_content(db, admin, user, caller):
    db.add(JobApplication(user_id=user.id, company_name="Acme", position_title="Engineer", created_at=NOW))
    db.add(
        JobApplication(
            user_id=user.id,
            company_name="Globex",
            position_title="Analyst",
            created_at=NOW - timedelta(days=40),
        )
    )
    await db.commit()

    stats = await get_system_stats(db, date_filter="month", now=NOW)

    assert stats["users"]["total"] == 3
    assert stats["users"]["adminCount"] == 1
    assert stats["users"]["callerCount"] == 1
    assert stats["content"]["totalApplications"] == 1
    assert stats["content"]["totalResumes"] == 0


async def test_alerts_report_smooth_running_when_quiet(db):
    result = await get_system_alerts(db, now=NOW)

    assert result["total"] == 1
    assert result["alerts"][0]["title"] == "System Running Smoothly"
    assert (await get_system_alerts(db, resolved="true", now=NOW))["alerts"] == []


async def test_alerts_flag_unprepared_interviews_and_weak_callers(db, user):
    caller = await create_user(db, "caleb", role=2)
    db.add(
        Interview(
            user_id=user.id,
            company_name="Acme",
            position_title="Engineer",
            interview_type="video",
            scheduled_date=NOW + timedelta(hours=3),
            duration=60,
            status="scheduled",
        )
    )
    db.add(
        CallerPerformance(
            caller_id=caller.id,
            date=(NOW - timedelta(days=1)).date(),
            calls_scheduled=4,
            calls_completed=1,
            calls_failed=3,
        )
    )
    await db.commit()

    alerts = (await get_system_alerts(db, resolved="all", now=NOW))["alerts"]
    titles = {a["title"]: a for a in alerts}

    assert "Upcoming Interviews Need Preparation" in titles
    assert titles["Caller Performance Issues"]["priority"] == "high"
    assert "System Running Smoothly" not in titles
