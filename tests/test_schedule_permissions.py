from sqlalchemy import select

from conftest import auth_headers

from jobtrack.models.schedule_permission import SchedulePermission

URL = "/api/v1/admin/schedule-permissions"


async def test_grant_and_list(client, admin, user, other_user, caller):
    response = await client.post(
        URL,
        json={"user_id": caller.id, "target_user_ids": [user.id, other_user.id]},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Successfully granted 2 permission(s)"
    assert sorted(body["results"]["successful"]) == sorted([user.id, other_user.id])

    listed = (await client.get(URL, headers=auth_headers(admin))).json()
    assert listed["total"] == 2
    assert listed["permissions"][0]["user"]["username"] == "carla"
    assert listed["permissions"][0]["granted_by_user"]["username"] == "admin"


async def test_grant_alias_reports_existing(client, admin, user, caller):
    payload = {"user_id": caller.id, "target_user_id": user.id}
    await client.post(f"{URL}/grant", json=payload, headers=auth_headers(admin))

    again = (await client.post(f"{URL}/grant", json=payload, headers=auth_headers(admin))).json()

    assert again["message"] == "All 1 permission(s) already exist for this user"
    assert again["results"]["alreadyExists"] == [user.id]


async def test_grant_validation(client, admin, user):
    own = await client.post(URL, json={"user_id": user.id, "target_user_id": user.id}, headers=auth_headers(admin))
    assert own.status_code == 400

    empty = await client.post(URL, json={"user_id": user.id}, headers=auth_headers(admin))
    assert empty.status_code == 400
    assert empty.json()["detail"] == "User ID and at least one Target User ID are required"

    missing = await client.post(URL, json={"user_id": user.id, "target_user_id": 999}, headers=auth_headers(admin))
    assert missing.status_code == 404


async def test_revoke_then_regrant_reactivates(client, db, admin, user, caller):
    await client.post(URL, json={"user_id": caller.id, "target_user_id": user.id}, headers=auth_headers(admin))
    permission = (await db.execute(select(SchedulePermission))).scalar_one()

    revoked = await client.post(f"{URL}/revoke", json={"permission_id": permission.id}, headers=auth_headers(admin))
    assert revoked.status_code == 200

    twice = await client.post(f"{URL}/revoke", json={"permission_id": permission.id}, headers=auth_headers(admin))
    assert twice.status_code == 404

    regrant = await client.post(URL, json={"user_id": caller.id, "target_user_id": user.id}, headers=auth_headers(admin))
    assert regrant.json()["results"]["successful"] == [user.id]

    db.expire_all()
    rows = (await db.execute(select(SchedulePermission))).scalars().all()
    assert len(rows) == 1
    assert rows[0].is_active is True


async def test_permission_users_lists_active_users(client, db, admin, user):
    from conftest import create_user

    await create_user(db, "inactive", is_active=False)

    body = (await client.get(f"{URL}/users", headers=auth_headers(admin))).json()

    assert [u["username"] for u in body["users"]] == ["admin", "jane"]


async def test_requires_admin(client, user):
    assert (await client.get(URL, headers=auth_headers(user))).status_code == 403
