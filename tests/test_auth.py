from sqlalchemy import select

from conftest import PASSWORD, auth_headers, create_user

from jobtrack.models.activity_log import ActivityLog
from jobtrack.models.session import UserSession


async def login(client, email, password=PASSWORD):
    return await client.post("/api/v1/auth/login", json={"email": email, "password": password})


async def test_register_creates_inactive_account(client):
    response = await client.post(
        "/api/v1/auth/register",
        json={"email": "new@example.com", "username": "newbie", "password": "secret123"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["requiresApproval"] is True
    assert body["user"]["is_active"] is False

    # Pending accounts cannot log in yet
    assert (await login(client, "new@example.com")).status_code == 401


async def test_register_rejects_short_password_and_duplicates(client, user):
    short = await client.post(
        "/api/v1/auth/register",
        json={"email": "x@example.com", "username": "x", "password": "123"},
    )
    assert short.status_code == 400

    duplicate = await client.post(
        "/api/v1/auth/register",
        json={"email": "other@example.com", "username": user.username, "password": "secret123"},
    )
    assert duplicate.status_code == 400
    assert duplicate.json()["detail"] == "User with this email or username already exists"


async def test_login_records_session_and_activity(client, user, db):
    response = await login(client, user.email)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["user"]["username"] == "jane"
    assert body["token"] and body["refreshToken"]

    sessions = (await db.execute(select(UserSession).where(UserSession.user_id == user.id))).scalars().all()
    assert len(sessions) == 1
    assert sessions[0].is_active

    actions = (await db.execute(select(ActivityLog.action))).scalars().all()
    assert actions == ["login"]


async def test_login_with_wrong_password(client, user):
    response = await login(client, user.email, "nope")

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid credentials"


async def test_refresh_rotates_tokens(client, user):
    tokens = (await login(client, user.email)).json()

    refreshed = await client.post("/api/v1/auth/refresh", json={"refreshToken": tokens["refreshToken"]})
    assert refreshed.status_code == 200
    assert refreshed.json()["refreshToken"] != tokens["refreshToken"]

    # The old refresh token is no longer attached to a session
    replay = await client.post("/api/v1/auth/refresh", json={"refreshToken": tokens["refreshToken"]})
    assert replay.status_code == 401


async def test_refresh_requires_token(client):
    response = await client.post("/api/v1/auth/refresh", json={})

    assert response.status_code == 401
    assert response.json()["detail"] == "Refresh token required"


async def test_refresh_rejects_access_token(client, user):
    tokens = (await login(client, user.email)).json()

    response = await client.post("/api/v1/auth/refresh", json={"refreshToken": tokens["token"]})

    assert response.status_code == 401


async def test_logout_deactivates_session(client, user, db):
    tokens = (await login(client, user.email)).json()

    response = await client.post(
        "/api/v1/auth/logout",
        json={"refreshToken": tokens["refreshToken"]},
        headers={"Authorization": f"Bearer {tokens['token']}"},
    )
    assert response.status_code == 200
    assert response.json()["message"] == "Logged out successfully"

    db.expire_all()
    session = (await db.execute(select(UserSession))).scalar_one()
    assert session.is_active is False

    refreshed = await client.post("/api/v1/auth/refresh", json={"refreshToken": tokens["refreshToken"]})
    assert refreshed.status_code == 401


async def test_me(client, user):
    response = await client.get("/api/v1/auth/me", headers=auth_headers(user))

    assert response.status_code == 200
    assert response.json()["email"] == "jane@example.com"


async def test_missing_and_invalid_tokens(client):
    assert (await client.get("/api/v1/auth/me")).status_code == 401

    invalid = await client.get("/api/v1/auth/me", headers={"Authorization": "Bearer garbage"})
    assert invalid.status_code == 403
    assert invalid.json()["detail"] == "Invalid or expired token"


async def test_disabled_user_token_is_rejected(client, db):
    disabled = await create_user(db, "ghost", is_active=False)

    response = await client.get("/api/v1/auth/me", headers=auth_headers(disabled))

    assert response.status_code == 401


async def test_register_requires_email_username_and_password(client):
    for payload in (
        {"email": "a@example.com", "password": "secret123"},
        {"username": "a", "password": "secret123"},
        {"email": "a@example.com", "username": "a", "password": ""},
    ):
        response = await client.post("/api/v1/auth/register", json=payload)

        assert response.status_code == 400
        assert response.json()["detail"] == "Email, username, and password are required"
