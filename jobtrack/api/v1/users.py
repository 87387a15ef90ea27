"""User management endpoints."""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from jobtrack.api.deps import get_current_user, get_db, require_admin
from jobtrack.config import settings
from jobtrack.core.security import Role, get_password_hash, is_admin, verify_password
from jobtrack.models.user import User
from jobtrack.schemas.auth import UserResponse
from jobtrack.schemas.user import PasswordChange, UserUpdate
from jobtrack.utils.helpers import isoformat

logger = logging.getLogger(__name__)

router = APIRouter()


def _user_summary(user: User) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "username": user.username,
        "role": user.role,
        "status": "active" if user.is_active else "inactive",
        "createdAt": isoformat(user.created_at),
        "lastLogin": isoformat(user.last_login),
        "profile": {
            "full_name": user.full_name,
            "phone": user.phone,
            "department": user.department,
            "position": user.position,
            "profile_picture": user.profile_picture,
        },
    }


async def _get_user_or_404(db: AsyncSession, user_id: int) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("")
async def list_users(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> List[dict]:
    """All users, newest first."""
    result = await db.execute(select(User).order_by(User.created_at.desc()))
    return [_user_summary(user) for user in result.scalars().all()]


@router.get("/stats")
async def get_user_stats(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    users = (await db.execute(select(User))).scalars().all()
    active = sum(1 for u in users if u.is_active)
    return {
        "totalUsers": len(users),
        "activeUsers": active,
        "inactiveUsers": len(users) - active,
        "adminUsers": sum(1 for u in users if u.role == Role.ADMIN),
        "regularUsers": sum(1 for u in users if u.role == Role.USER),
        "callerUsers": sum(1 for u in users if u.role == Role.CALLER),
    }


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not is_admin(current_user) and current_user.id != user_id:
        raise HTTPException(status_code=403, detail="Access denied")
    return await _get_user_or_404(db, user_id)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    payload: UserUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    user = await _get_user_or_404(db, user_id)
    update_data = payload.model_dump(exclude_unset=True)

    if "email" in update_data or "username" in update_data:
        clash = await db.execute(
            select(User.id).where(
                User.id != user_id,
                or_(
                    User.email == update_data.get("email", user.email),
                    User.username == update_data.get("username", user.username),
                ),
            )
        )
        if clash.first() is not None:
            raise HTTPException(status_code=400, detail="Email or username already in use")

    for field, value in update_data.items():
        setattr(user, field, value)

    await db.commit()
    await db.refresh(user)
    logger.info(f"Admin {current_user.id} updated user {user_id}")
    return user


@router.delete("/{user_id}")
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


@router.put("/{user_id}/password")
async def change_password(
    user_id: int,
    payload: PasswordChange,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    admin = is_admin(current_user)
    if not admin and current_user.id != user_id:
        raise HTTPException(status_code=403, detail="Access denied")

    if not payload.new_password or len(payload.new_password) < settings.MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"New password must be at least {settings.MIN_PASSWORD_LENGTH} characters long",
        )

    user = await _get_user_or_404(db, user_id)

    # Admins may reset without knowing the current password
    if not admin:
        if not payload.current_password:
            raise HTTPException(status_code=400, detail="Current password is required")
        if not verify_password(payload.current_password, user.password_hash):
            raise HTTPException(status_code=400, detail="Current password is incorrect")

    user.password_hash = get_password_hash(payload.new_password)
    await db.commit()

    return {"success": True, "message": "Password updated successfully"}
