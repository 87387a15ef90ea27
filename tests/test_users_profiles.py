from conftest import PASSWORD, auth_headers


async def test_list_users_requires_admin(client, admin, user):
    forbidden = await client.get("/api/v1/users", headers=auth_headers(user))
    assert forbidden.status_code == 403
    assert forbidden.json()["detail"] == "Admin access required"

    response = await client.get("/api/v1/users", headers=auth_headers(admin))
    assert response.status_code == 200
    usernames = {u["username"] for u in response.json()}
    assert usernames == {"admin", "jane"}
    assert response.json()[0]["status"] == "active"


async def test_user_stats(client, admin, user, caller):
    response = await client.get("/api/v1/users/stats", headers=auth_headers(admin))

    assert response.json() == {
        "totalUsers": 3,
        "activeUsers": 3,
        "inactiveUsers": 0,
        "adminUsers": 1,
        "regularUsers": 1,
        "callerUsers": 1,
    }


async def test_get_user_is_admin_or_self(client, admin, user, other_user):
    assert (await client.get(f"/api/v1/users/{user.id}", headers=auth_headers(user))).status_code == 200
    assert (await client.get(f"/api/v1/users/{user.id}", headers=auth_headers(admin))).status_code == 200

    response = await client.get(f"/api/v1/users/{user.id}", headers=auth_headers(other_user))
    assert response.status_code == 403


async def test_update_user_rejects_taken_email(client, admin, user, other_user):
    response = await client.put(
        f"/api/v1/users/{user.id}",
        json={"email": other_user.email},
        headers=auth_headers(admin),
    )

    assert response.status_code == 400


async def test_admin_cannot_delete_self(client, admin):
    response = await client.delete(f"/api/v1/users/{admin.id}", headers=auth_headers(admin))

    assert response.status_code == 400
    assert response.json()["detail"] == "Cannot delete your own account"


async def test_change_own_password(client, user):
    wrong = await client.put(
        f"/api/v1/users/{user.id}/password",
        json={"currentPassword": "wrong", "newPassword": "brandnew"},
        headers=auth_headers(user),
    )
    assert wrong.status_code == 400
    assert wrong.json()["detail"] == "Current password is incorrect"

    ok = await client.put(
        f"/api/v1/users/{user.id}/password",
        json={"currentPassword": PASSWORD, "newPassword": "brandnew"},
        headers=auth_headers(user),
    )
    assert ok.status_code == 200

    login = await client.post("/api/v1/auth/login", json={"email": user.email, "password": "brandnew"})
    assert login.status_code == 200


async def test_admin_resets_password_without_current(client, admin, user):
    response = await client.put(
        f"/api/v1/users/{user.id}/password",
        json={"newPassword": "brandnew"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200


async def test_password_change_validations(client, user, other_user):
    short = await client.put(
        f"/api/v1/users/{user.id}/password",
        json={"currentPassword": PASSWORD, "newPassword": "abc"},
        headers=auth_headers(user),
    )
    assert short.status_code == 400

    other = await client.put(
        f"/api/v1/users/{other_user.id}/password",
        json={"currentPassword": PASSWORD, "newPassword": "brandnew"},
        headers=auth_headers(user),
    )
    assert other.status_code == 403


async def test_update_and_read_own_profile(client, user):
    response = await client.put(
        "/api/v1/profiles",
        json={"phone": "555-0100", "department": "Engineering"},
        headers=auth_headers(user),
    )
    assert response.status_code == 200

    profile = (await client.get("/api/v1/profiles", headers=auth_headers(user))).json()
    assert profile["phone"] == "555-0100"
    assert profile["department"] == "Engineering"
    assert profile["full_name"] == "Jane Doe"


async def test_profile_access_rules(client, admin, user, other_user):
    denied = await client.get(f"/api/v1/profiles/{user.id}", headers=auth_headers(other_user))
    assert denied.status_code == 403

    missing = await client.get("/api/v1/profiles/9999", headers=auth_headers(admin))
    assert missing.status_code == 404

    cleared = await client.delete(f"/api/v1/profiles/{user.id}", headers=auth_headers(admin))
    assert cleared.status_code == 200
    profile = (await client.get(f"/api/v1/profiles/{user.id}", headers=auth_headers(user))).json()
    assert profile["full_name"] is None
