from datetime import datetime, timedelta

from sqlalchemy import select

from conftest import auth_headers

from jobtrack.models.activity_log import ActivityLog
from jobtrack.models.interview import Interview
from jobtrack.models.job_application import JobApplication
from jobtrack.services.dashboard_service import build_monthly_trends, get_dashboard_stats

NOW = datetime(2026, 10, 19, 12, 0)


async def seed(db, user):
    db.add_all(
        [
            JobApplication(user_id=user.id, company_name="Acme", position_title="Engineer", status="applied", created_at=NOW),
            JobApplication(
                user_id=user.id,
                company_name="Globex",
                position_title="Analyst",
                status="offered",
                created_at=NOW - timedelta(days=45),
            ),
            Interview(
                user_id=user.id,
                company_name="Acme",
                position_title="Engineer",
                interview_type="phone",
                scheduled_date=NOW + timedelta(days=2),
                status="scheduled",
                created_at=NOW,
            ),
        ]
    )
    await db.commit()


async def test_dashboard_counts_for_user(db, user, other_user):
    await seed(db, user)
    await seed(db, other_user)

    stats = await get_dashboard_stats(db, user, period="month", now=NOW)

    assert stats["applications"]["total"] == 2
    assert stats["applications"]["offered"] == 1
    assert stats["applications"]["thisMonth"] == 1
    assert stats["interviewTypes"]["phone"] == 1
    assert stats["success"] == {
        "totalApplications": 2,
        "totalInterviews": 1,
        "interviewRate": "50.0",
        "offerRate": "50.0",
    }
    assert stats["users"]["total"] == 0
    assert len(stats["upcomingInterviews"]) == 1
    assert stats["recentActivity"][0]["created_at"] == NOW.isoformat()


async def test_dashboard_for_admin_covers_everyone(db, admin, user, other_user):
    await seed(db, user)
    await seed(db, other_user)

    stats = await get_dashboard_stats(db, admin, period="day", now=NOW)

    assert stats["applications"]["total"] == 4
    assert stats["applications"]["thisMonth"] == 2
    assert stats["users"]["total"] == 3
    assert stats["timePeriod"] == "day"


def test_monthly_trends_window():
    applications = [
        JobApplication(created_at=datetime(2026, 10, 2)),
        JobApplication(created_at=datetime(2026, 5, 31)),
        JobApplication(created_at=datetime(2026, 4, 30)),
    ]

    trends = build_monthly_trends(applications, [], NOW)

    assert [t["label"] for t in trends] == ["May 2026", "Jun 2026", "Jul 2026", "Aug 2026", "Sep 2026", "Oct 2026"]
    assert [t["applications"] for t in trends] == [1, 0, 0, 0, 0, 1]


async def test_dashboard_endpoint(client, user):
    response = await client.get("/api/v1/dashboard/stats", params={"period": "week"}, headers=auth_headers(user))

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert response.json()["data"]["timePeriod"] == "week"

    bad = await client.get("/api/v1/dashboard/stats", params={"period": "year"}, headers=auth_headers(user))
    assert bad.status_code == 422


async def test_workshop_activity_is_logged(client, user, db):
    response = await client.post(
        "/api/v1/workshop/log-activity",
        json={"action": "resume_optimized", "details": {"score": 80}},
        headers=auth_headers(user),
    )
    assert response.status_code == 200

    log = (await db.execute(select(ActivityLog))).scalar_one()
    assert log.entity_type == "workshop"
    assert log.entity_name == "Resume Optimization"
    assert log.details == {"score": 80}

    missing = await client.post("/api/v1/workshop/log-activity", json={}, headers=auth_headers(user))
    assert missing.status_code == 400
