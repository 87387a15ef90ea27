"""Admin user management endpoints."""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from jobtrack.api.deps import get_db, require_admin
from jobtrack.core.security import Role, get_password_hash
from jobtrack.models.interview import Interview
from jobtrack.models.job_application import JobApplication
from jobtrack.models.session import UserSession
from jobtrack.models.user import User
from jobtrack.schemas.admin import AdminUserCreate, AdminUserUpdate, ToggleStatusRequest
from jobtrack.schemas.auth import UserResponse
from jobtrack.services.admin_stats_service import one_month_before
from jobtrack.utils.helpers import generate_temporary_password, isoformat

logger = logging.getLogger(__name__)

router = APIRouter()


async def _get_user_or_404(db: AsyncSession, user_id: int) -> User:
    user = (await db.execute(select(User).where(User.id == user_id))).scalar_one_or_none()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


async def _ensure_unique(db: AsyncSession, username: str, email: str, exclude_id: int = None):
    query = select(User.id).where(or_(User.username == username, User.email == email))
    if exclude_id is not None:
        query = query.where(User.id != exclude_id)
    if (await db.execute(query)).first() is not None:
        raise HTTPException(status_code=400, detail="User with this username or email already exists")


@router.get("/users")
async def list_users(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Users with application/interview totals and last activity, newest first."""
    users = (await db.execute(select(User).order_by(User.created_at.desc()))).scalars().all()
    app_owners = (await db.execute(select(JobApplication.user_id))).scalars().all()
    interview_owners = (await db.execute(select(Interview.user_id))).scalars().all()

    entries = []
    for user in users:
        entry = UserResponse.model_validate(user).model_dump(mode="json")
        entry.update(
            {
                "updated_at": isoformat(user.updated_at),
                "total_applications": sum(1 for owner in app_owners if owner == user.id),
                "total_interviews": sum(1 for owner in interview_owners if owner == user.id),
                "last_activity": isoformat(user.last_login or user.updated_at),
            }
        )
        entries.append(entry)

    return {"success": True, "users": entries, "timestamp": datetime.utcnow().isoformat()}


@router.get("/user-stats")
async def user_stats(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    users = (await db.execute(select(User))).scalars().all()
    sessions = (await db.execute(select(UserSession))).scalars().all()
    month_ago = one_month_before(datetime.utcnow())

    # Session length is not tracked, so the average is reported as 0
    stats = {
        "totalUsers": len(users),
        "activeUsers": sum(1 for u in users if u.is_active),
        "adminUsers": sum(1 for u in users if u.role == Role.ADMIN),
        "newUsersThisMonth": sum(1 for u in users if u.created_at > month_ago),
        "totalSessions": len(sessions),
        "averageSessionDuration": 0,
    }
    return {"success": True, "stats": stats, "timestamp": datetime.utcnow().isoformat()}


@router.post("/users")
async def create_user(
    payload: AdminUserCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Create an account directly; no approval step."""
    if not payload.username or not payload.email or not payload.password:
        raise HTTPException(status_code=400, detail="Username, email, and password are required")

    await _ensure_unique(db, payload.username, payload.email)

    user = User(
        username=payload.username,
        email=payload.email,
        password_hash=get_password_hash(payload.password),
        full_name=payload.full_name,
        role=payload.role,
        is_active=payload.is_active,
        phone=payload.phone,
        department=payload.department,
        position=payload.position,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)

    logger.info(f"Admin {current_user.id} created user {user.id} with role {user.role}")
    return {"success": True, "message": "User created successfully", "user_id": user.id}


@router.put("/users/{user_id}")
async def update_user(
    user_id: int,
    payload: AdminUserUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    if not payload.username or not payload.email:
        raise HTTPException(status_code=400, detail="Username and email are required")

    user = await _get_user_or_404(db, user_id)
    await _ensure_unique(db, payload.username, payload.email, exclude_id=user_id)

    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(user, field, value)
    await db.commit()

    return {"success": True, "message": "User updated successfully"}


@router.put("/users/{user_id}/toggle-status")
async def toggle_user_status(
    user_id: int,
    payload: ToggleStatusRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Activate or deactivate an account; activating approves a pending registration."""
    user = await _get_user_or_404(db, user_id)
    user.is_active = payload.is_active
    await db.commit()
    await db.refresh(user)

    logger.info(f"Admin {current_user.id} set user {user_id} active={payload.is_active}")
    return {
        "success": True,
        "message": "User status updated successfully",
        "user": UserResponse.model_validate(user).model_dump(mode="json"),
    }


@router.delete("/users/{user_id}")
async def delete_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    if user_id == current_user.id:
        raise HTTPException(status_code=400, detail="Cannot delete your own account")

    user = await _get_user_or_404(db, user_id)
    await db.delete(user)
    await db.commit()

    logger.info(f"Admin {current_user.id} deleted user {user_id}")
    return {"success": True, "message": "User deleted successfully"}


@router.post("/users/{user_id}/reset-password")
async def reset_password(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    user = await _get_user_or_404(db, user_id)

    temporary_password = generate_temporary_password(8)
    user.password_hash = get_password_hash(temporary_password)
    await db.commit()

    return {
        "success": True,
        "message": "Password reset successfully",
        "temporaryPassword": temporary_password,
    }
