from sqlalchemy import select

from conftest import auth_headers

from jobtrack.models.activity_log import ActivityLog

URL = "/api/v1/job-applications"


async def create_application(client, user, **fields):
    payload = {"company_name": "Acme", "position_title": "Engineer", **fields}
    response = await client.post(URL, json=payload, headers=auth_headers(user))
    assert response.status_code == 201, response.text
    return response.json()


async def test_create_defaults_and_logs(client, user, db):
    application = await create_application(client, user)

    assert application["status"] == "applied"
    assert application["application_date"] is not None
    assert application["has_resume"] is False

    log = (await db.execute(select(ActivityLog))).scalar_one()
    assert log.action == "applied"
    assert log.entity_name == "Engineer at Acme"


async def test_create_requires_company_and_position(client, user):
    response = await client.post(URL, json={"company_name": "Acme"}, headers=auth_headers(user))

    assert response.status_code == 400
    assert response.json()["detail"] == "Company name and position title are required"


async def test_create_rejects_unknown_status(client, user):
    response = await client.post(
        URL,
        json={"company_name": "Acme", "position_title": "Engineer", "status": "ghosted"},
        headers=auth_headers(user),
    )

    assert response.status_code == 400


async def test_resume_path_sets_has_resume(client, user):
    application = await create_application(client, user, resume_file_path="interviews/resumes/user_1_Acme_1.pdf")

    assert application["has_resume"] is True


async def test_list_is_scoped_to_owner(client, admin, user, other_user):
    await create_application(client, user)
    await create_application(client, other_user, company_name="Globex", status="rejected")

    mine = (await client.get(URL, headers=auth_headers(user))).json()
    assert [a["company_name"] for a in mine] == ["Acme"]
    assert mine[0]["username"] == "jane"
    assert mine[0]["interview_count"] == 0

    everyone = (await client.get(URL, headers=auth_headers(admin))).json()
    assert len(everyone) == 2

    rejected = (await client.get(URL, params={"status": "rejected"}, headers=auth_headers(admin))).json()
    assert [a["company_name"] for a in rejected] == ["Globex"]

    by_owner = (await client.get(URL, params={"user_id": user.id}, headers=auth_headers(admin))).json()
    assert [a["company_name"] for a in by_owner] == ["Acme"]


async def test_detail_includes_interviews(client, user):
    application = await create_application(client, user)
    await client.post(
        "/api/v1/interviews",
        json={"job_application_id": application["id"], "scheduled_date": "2026-11-02T10:00:00Z"},
        headers=auth_headers(user),
    )

    detail = (await client.get(f"{URL}/{application['id']}", headers=auth_headers(user))).json()

    assert len(detail["interviews"]) == 1
    assert detail["interviews"][0]["company_name"] == "Acme"

    listed = (await client.get(URL, headers=auth_headers(user))).json()
    assert listed[0]["interview_count"] == 1


async def test_other_users_cannot_read_or_change(client, admin, user, other_user):
    application = await create_application(client, user)
    url = f"{URL}/{application['id']}"

    assert (await client.get(url, headers=auth_headers(other_user))).status_code == 403
    assert (await client.put(url, json={"notes": "x"}, headers=auth_headers(other_user))).status_code == 403
    assert (await client.get(url, headers=auth_headers(admin))).status_code == 200
    assert (await client.get(f"{URL}/9999", headers=auth_headers(user))).status_code == 404


async def test_status_update_is_logged_as_status_change(client, user, db):
    application = await create_application(client, user)

    response = await client.put(
        f"{URL}/{application['id']}",
        json={"status": "interviewing"},
        headers=auth_headers(user),
    )
    assert response.status_code == 200
    assert response.json()["status"] == "interviewing"

    await client.put(f"{URL}/{application['id']}", json={"notes": "call back"}, headers=auth_headers(user))

    actions = (await db.execute(select(ActivityLog.action).order_by(ActivityLog.id))).scalars().all()
    assert actions == ["applied", "status_changed", "updated"]


async def test_delete(client, user):
    application = await create_application(client, user)

    response = await client.delete(f"{URL}/{application['id']}", headers=auth_headers(user))

    assert response.status_code == 200
    assert (await client.get(f"{URL}/{application['id']}", headers=auth_headers(user))).status_code == 404
