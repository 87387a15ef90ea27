"""Profile endpoints. Profile fields live on the users table."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jobtrack.api.deps import get_current_user, get_db
from jobtrack.core.security import is_admin
from jobtrack.models.user import User
from jobtrack.schemas.user import ProfileResponse, ProfileUpdate

router = APIRouter()

PROFILE_FIELDS = ("full_name", "phone", "department", "position", "profile_picture")


def _profile(user: User) -> ProfileResponse:
    return ProfileResponse(
        user_id=user.id,
        email=user.email,
        username=user.username,
        **{field: getattr(user, field) for field in PROFILE_FIELDS},
    )


async def _profile_owner(db: AsyncSession, user_id: int, current_user: User) -> User:
    if not is_admin(current_user) and current_user.id != user_id:
        raise HTTPException(status_code=403, detail="Access denied")
    if current_user.id == user_id:
        return current_user

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise HTTPException(status_code=404, detail="Profile not found")
    return user


@router.get("", response_model=ProfileResponse)
async def get_my_profile(current_user: User = Depends(get_current_user)):
    return _profile(current_user)


@router.put("", response_model=ProfileResponse)
async def update_my_profile(
    payload: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(current_user, field, value)
    await db.commit()
    await db.refresh(current_user)
    return _profile(current_user)


@router.get("/{user_id}", response_model=ProfileResponse)
async def get_profile(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return _profile(await _profile_owner(db, user_id, current_user))


@router.put("/{user_id}", response_model=ProfileResponse)
async def update_profile(
    user_id: int,
    payload: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user = await _profile_owner(db, user_id, current_user)
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(user, field, value)
    await db.commit()
    await db.refresh(user)
    return _profile(user)


@router.delete("/{user_id}")
async def delete_profile(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Clear the profile fields; the account itself is kept."""
    user = await _profile_owner(db, user_id, current_user)
    for field in PROFILE_FIELDS:
        setattr(user, field, None)
    await db.commit()
    return {"success": True, "message": "Profile deleted successfully"}
