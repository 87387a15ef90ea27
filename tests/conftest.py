"""Shared fixtures: in-memory SQLite database, HTTP client and seeded users."""

import os
import tempfile

# Settings are read at import time, so configure them before importing jobtrack
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["DEBUG"] = "false"
os.environ["LOG_FORMAT"] = "console"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="jobtrack-uploads-")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import jobtrack.models  # noqa: E402,F401
from jobtrack.core.security import Role, create_token_pair, get_password_hash  # noqa: E402
from jobtrack.db.base import Base  # noqa: E402
from jobtrack.db.session import get_db  # noqa: E402
from jobtrack.main import app  # noqa: E402
from jobtrack.models.user import User  # noqa: E402
from jobtrack.services.resume_storage_service import (  # noqa: E402
    ResumeStorageService,
    get_resume_storage,
)

PASSWORD = "secret123"


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def storage(tmp_path):
    return ResumeStorageService(str(tmp_path))


@pytest.fixture
async def client(session_factory, storage):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_resume_storage] = lambda: storage

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def create_user(db, username, role=Role.USER, is_active=True, **fields) -> User:
    user = User(
        username=username,
        email=f"{username}@example.com",
        password_hash=get_password_hash(PASSWORD),
        role=int(role),
        is_active=is_active,
        **fields,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


def auth_headers(user: User) -> dict:
    access_token, _ = create_token_pair(user)
    return {"Authorization": f"Bearer {access_token}"}


@pytest.fixture
async def admin(db):
    return await create_user(db, "admin", Role.ADMIN, full_name="Ada Admin")


@pytest.fixture
async def user(db):
    return await create_user(db, "jane", Role.USER, full_name="Jane Doe")


@pytest.fixture
async def other_user(db):
    return await create_user(db, "omar", Role.USER, full_name="Omar Other")


@pytest.fixture
async def caller(db):
    return await create_user(db, "carla", Role.CALLER, full_name="Carla Caller")
