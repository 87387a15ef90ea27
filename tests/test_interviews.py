from conftest import auth_headers

from jobtrack.models.schedule_permission import SchedulePermission

URL = "/api/v1/interviews"


async def schedule(client, user, **fields):
    payload = {
        "company_name": "Acme",
        "position_title": "Engineer",
        "scheduled_date": "2026-11-02T10:00:00",
        **fields,
    }
    response = await client.post(URL, json=payload, headers=auth_headers(user))
    assert response.status_code == 201, response.text
    return response.json()


async def test_standalone_interview_defaults(client, user):
    interview = await schedule(client, user)

    assert interview["interview_type"] == "video"
    assert interview["duration"] == 60
    assert interview["status"] == "scheduled"


async def test_requires_application_or_company_and_position(client, user):
    response = await client.post(
        URL,
        json={"company_name": "Acme", "scheduled_date": "2026-11-02T10:00:00"},
        headers=auth_headers(user),
    )

    assert response.status_code == 400


async def test_linked_application_must_belong_to_user(client, user, other_user):
    application = (
        await client.post(
            "/api/v1/job-applications",
            json={"company_name": "Acme", "position_title": "Engineer"},
            headers=auth_headers(other_user),
        )
    ).json()

    response = await client.post(
        URL,
        json={"job_application_id": application["id"], "scheduled_date": "2026-11-02T10:00:00"},
        headers=auth_headers(user),
    )

    assert response.status_code == 404


async def test_rejects_unknown_type(client, user):
    response = await client.post(
        URL,
        json={
            "company_name": "Acme",
            "position_title": "Engineer",
            "scheduled_date": "2026-11-02T10:00:00",
            "interview_type": "carrier_pigeon",
        },
        headers=auth_headers(user),
    )

    assert response.status_code == 400


async def test_aware_dates_are_stored_as_utc(client, user):
    interview = await schedule(client, user, scheduled_date="2026-11-02T12:00:00+02:00")

    assert interview["scheduled_date"] == "2026-11-02T10:00:00"


async def test_visibility_follows_schedule_permissions(client, db, admin, user, other_user):
    await schedule(client, user)
    await schedule(client, other_user, company_name="Globex")

    mine = (await client.get(URL, headers=auth_headers(user))).json()
    assert [i["company_name"] for i in mine] == ["Acme"]

    db.add(SchedulePermission(user_id=user.id, target_user_id=other_user.id, granted_by=admin.id))
    await db.commit()

    shared = (await client.get(URL, headers=auth_headers(user))).json()
    assert {i["company_name"] for i in shared} == {"Acme", "Globex"}

    everyone = (await client.get(URL, headers=auth_headers(admin))).json()
    assert len(everyone) == 2


async def test_status_filter(client, user):
    await schedule(client, user)
    await schedule(client, user, company_name="Globex", status="completed")

    completed = (await client.get(URL, params={"status": "completed"}, headers=auth_headers(user))).json()

    assert [i["company_name"] for i in completed] == ["Globex"]


async def test_only_owner_can_read_update_delete(client, user, other_user):
    interview = await schedule(client, user)
    url = f"{URL}/{interview['id']}"

    assert (await client.get(url, headers=auth_headers(other_user))).status_code == 404
    assert (await client.delete(url, headers=auth_headers(other_user))).status_code == 404

    updated = await client.put(url, json={"status": "completed", "rating": 4}, headers=auth_headers(user))
    assert updated.status_code == 200
    assert updated.json()["rating"] == 4

    assert (await client.delete(url, headers=auth_headers(user))).status_code == 200
    assert (await client.get(url, headers=auth_headers(user))).status_code == 404


async def test_update_cannot_clear_company_without_application(client, user):
    interview = await schedule(client, user)

    response = await client.put(
        f"{URL}/{interview['id']}",
        json={"company_name": None},
        headers=auth_headers(user),
    )

    assert response.status_code == 400
