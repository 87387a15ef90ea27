from datetime import datetime, timedelta

from sqlalchemy import select

from conftest import auth_headers

from jobtrack.models.activity_log import CallerActivityLog
from jobtrack.models.call import CallNotification, CallerPerformance
from jobtrack.models.interview import Interview
from jobtrack.models.schedule_permission import SchedulePermission
from jobtrack.services.caller_service import dispatch_due_notifications, get_caller_stats

URL = "/api/v1/caller"


async def create_schedule(client, caller, **fields):
    payload = {
        "contact_name": "Jane Doe",
        "company": "Acme",
        "scheduled_time": "2026-11-02T10:00:00Z",
        **fields,
    }
    response = await client.post(f"{URL}/call-schedules", json=payload, headers=auth_headers(caller))
    assert response.status_code == 201, response.text
    return response.json()["call"]


async def test_caller_routes_require_caller_role(client, user):
    response = await client.get(f"{URL}/calls", headers=auth_headers(user))

    assert response.status_code == 403
    assert response.json()["detail"] == "Access denied. Caller role required."


async def test_calls_without_permissions(client, caller):
    body = (await client.get(f"{URL}/calls", headers=auth_headers(caller))).json()

    assert body["calls"] == []
    assert body["message"].startswith("No schedule permissions granted")


async def test_calls_from_permitted_interviews(client, db, admin, user, other_user, caller):
    db.add_all(
        [
            SchedulePermission(user_id=caller.id, target_user_id=user.id, granted_by=admin.id),
            Interview(
                user_id=user.id,
                company_name="Acme",
                position_title="Engineer",
                scheduled_date=datetime(2026, 11, 2, 10),
                status="scheduled",
                resume_link="interviews/resumes/user_2_Acme_1.pdf",
            ),
            Interview(
                user_id=other_user.id,
                company_name="Globex",
                position_title="Analyst",
                scheduled_date=datetime(2026, 11, 3, 10),
                status="scheduled",
            ),
        ]
    )
    await db.commit()

    body = (await client.get(f"{URL}/calls", headers=auth_headers(caller))).json()

    assert body["total_calls"] == 1
    call = body["calls"][0]
    assert call["contact_name"] == "Jane Doe"
    assert call["company"] == "Acme"
    assert call["resume_url"] == "/api/v1/uploads/resumes/user_2_Acme_1.pdf"

    moved = await client.put(
        f"{URL}/calls/{call['id']}/reschedule",
        json={"scheduled_time": "2026-11-04T09:00:00"},
        headers=auth_headers(caller),
    )
    assert moved.status_code == 200
    assert moved.json()["new_scheduled_time"] == "2026-11-04T09:00:00"

    logged = (await db.execute(select(CallerActivityLog))).scalar_one()
    assert logged.activity_type == "call_rescheduled"
    assert logged.contact_name == "Jane Doe"
    assert logged.details["previous_time"] == "2026-11-02T10:00:00"


async def test_schedule_creates_assignment_notification(client, db, caller):
    call = await create_schedule(client, caller)

    assert call["status"] == "scheduled"
    assert call["reminder_minutes"] == [15, 5]
    assert call["scheduled_time"] == "2026-11-02T10:00:00"

    notification = (await db.execute(select(CallNotification))).scalar_one()
    assert notification.notification_type == "assignment"
    assert notification.scheduled_for == datetime(2026, 11, 2, 9, 45)

    activity = (await db.execute(select(CallerActivityLog))).scalar_one()
    assert activity.activity_type == "call_scheduled"


async def test_schedule_requires_contact_and_time(client, caller):
    response = await client.post(f"{URL}/call-schedules", json={"company": "Acme"}, headers=auth_headers(caller))

    assert response.status_code == 400


async def test_call_lifecycle_updates_performance(client, db, caller):
    call = await create_schedule(client, caller)

    started = await client.post(f"{URL}/call-schedules/{call['id']}/start", headers=auth_headers(caller))
    assert started.status_code == 200
    assert started.json()["call"]["status"] == "in_progress"

    again = await client.post(f"{URL}/call-schedules/{call['id']}/start", headers=auth_headers(caller))
    assert again.status_code == 400

    done = await client.put(
        f"{URL}/call-schedules/{call['id']}/status",
        json={"status": "completed", "actual_duration": 20, "outcome_notes": "Went well"},
        headers=auth_headers(caller),
    )
    assert done.status_code == 200
    assert done.json()["call"]["completed_at"] is not None

    performance = (await db.execute(select(CallerPerformance))).scalar_one()
    assert performance.calls_completed == 1
    assert performance.success_rate == 100
    assert performance.performance_score == 73

    rows = (await client.get(f"{URL}/performance", headers=auth_headers(caller))).json()["performance"]
    assert rows[0]["calls_completed"] == 1

    stats = (await client.get(f"{URL}/activity-stats", headers=auth_headers(caller))).json()["stats"]
    by_type = {s["activity_type"]: s for s in stats}
    assert by_type["call_completed"]["count"] == 1
    assert by_type["call_completed"]["avg_duration"] == 20
    assert set(by_type) == {"call_scheduled", "call_started", "call_completed"}


async def test_other_callers_cannot_touch_schedule(client, db, caller):
    from conftest import create_user

    call = await create_schedule(client, caller)
    someone_else = await create_user(db, "cody", role=2)

    response = await client.post(f"{URL}/call-schedules/{call['id']}/start", headers=auth_headers(someone_else))

    assert response.status_code == 404


async def test_notifications(client, caller):
    created = await client.post(
        f"{URL}/notifications",
        json={"title": "Prep", "message": "Read the CV", "scheduled_for": "2026-11-02T09:00:00"},
        headers=auth_headers(caller),
    )
    assert created.status_code == 201
    notification_id = created.json()["notification"]["id"]

    listed = (await client.get(f"{URL}/notifications", headers=auth_headers(caller))).json()["notifications"]
    assert [n["title"] for n in listed] == ["Prep"]
    assert listed[0]["call_details"] is None

    read = await client.put(f"{URL}/notifications/{notification_id}/read", headers=auth_headers(caller))
    assert read.json()["notification"]["status"] == "read"

    missing = await client.put(f"{URL}/notifications/9999/read", headers=auth_headers(caller))
    assert missing.status_code == 404


async def test_dispatch_due_notifications(db, caller):
    now = datetime(2026, 11, 2, 9, 50)
    db.add_all(
        [
            CallNotification(caller_id=caller.id, title="due", message="m", scheduled_for=now - timedelta(minutes=5)),
            CallNotification(caller_id=caller.id, title="later", message="m", scheduled_for=now + timedelta(hours=1)),
        ]
    )
    await db.commit()

    assert await dispatch_due_notifications(db, now=now) == 1
    await db.commit()

    statuses = dict((await db.execute(select(CallNotification.title, CallNotification.status))).all())
    assert statuses == {"due": "sent", "later": "pending"}


async def test_templates_are_empty(client, caller):
    assert (await client.get(f"{URL}/templates", headers=auth_headers(caller))).json() == {"templates": []}


async def test_status_update_rejects_unknown_status(client, db, caller):
    call = await create_schedule(client, caller)

    response = await client.put(
        f"{URL}/call-schedules/{call['id']}/status",
        json={"status": "banana"},
        headers=auth_headers(caller),
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid call status"
    schedules = (await client.get(f"{URL}/call-schedules", headers=auth_headers(caller))).json()
    assert schedules["calls"][0]["status"] == "scheduled"


async def test_caller_stats_summarize_permitted_interviews(db, admin, user, other_user, caller):
    now = datetime(2026, 11, 4, 12)  # Wednesday
    db.add_all(
        [
            SchedulePermission(user_id=caller.id, target_user_id=user.id, granted_by=admin.id),
            Interview(
                user_id=user.id,
                company_name="Acme",
                position_title="Engineer",
                scheduled_date=datetime(2026, 11, 4, 9),
                status="completed",
                duration=40,
                feedback="Strong",
            ),
            Interview(
                user_id=user.id,
                company_name="Globex",
                position_title="Analyst",
                scheduled_date=datetime(2026, 11, 4, 15),
                status="scheduled",
            ),
            Interview(
                user_id=user.id,
                company_name="Initech",
                position_title="Tester",
                scheduled_date=datetime(2026, 11, 2, 10),
                status="cancelled",
            ),
            Interview(
                user_id=other_user.id,
                company_name="Hooli",
                position_title="Engineer",
                scheduled_date=datetime(2026, 11, 4, 10),
                status="completed",
            ),
        ]
    )
    await db.commit()

    result = await get_caller_stats(db, caller, now=now)
    stats = result["stats"]

    assert result["data_period"] == "Last 7 days"
    assert stats["todayCalls"] == 2
    assert stats["pendingCalls"] == 1
    assert stats["completedToday"] == 1
    assert stats["totalCallsThisWeek"] == 3
    assert stats["totalCallsThisMonth"] == 3
    assert stats["successRate"] == 33
    assert stats["averageCallDuration"] == 40
    assert stats["followUpsGenerated"] == 1
    assert stats["upcomingCalls"] == 1
    # round(33 * 0.7 + 1 * 5 + 15)
    assert stats["performanceScore"] == 43
    assert stats["callsByStatus"] == {"completed": 1, "scheduled": 1, "cancelled": 1}

    trend = {day["day"]: day for day in stats["weeklyTrend"]}
    assert trend["Wed"] == {"day": "Wed", "calls": 2, "success": 1}
    assert trend["Mon"] == {"day": "Mon", "calls": 1, "success": 0}
    assert trend["Fri"]["calls"] == 0


async def test_stats_endpoint_without_permissions(client, caller):
    response = await client.get(f"{URL}/stats", headers=auth_headers(caller))

    assert response.status_code == 200
    stats = response.json()["stats"]
    assert stats["todayCalls"] == 0
    assert stats["successRate"] == 0
    assert len(stats["weeklyTrend"]) == 7
