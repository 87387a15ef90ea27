"""Admin endpoints for granting users access to other users' interview schedules."""

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jobtrack.api.deps import get_db, require_admin
from jobtrack.models.user import User
from jobtrack.schemas.admin import PermissionGrantRequest, PermissionRevokeRequest
from jobtrack.schemas.auth import UserResponse
from jobtrack.services import permission_service

router = APIRouter()


@router.get("/users")
async def permission_users(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Active users, by username, for the grant pickers."""
    result = await db.execute(
        select(User).where(User.is_active.is_(True)).order_by(User.username.asc())
    )
    users = [UserResponse.model_validate(u).model_dump(mode="json") for u in result.scalars().all()]
    return {"success": True, "users": users, "total": len(users)}


@router.get("")
async def list_permissions(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    permissions = await permission_service.list_permissions(db)
    return {"success": True, "permissions": permissions, "total": len(permissions)}


@router.post("")
@router.post("/grant")
async def grant_permissions(
    payload: PermissionGrantRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    result = await permission_service.grant_permissions(
        db, payload.user_id, payload.targets(), granted_by=current_user.id
    )
    await db.commit()
    return result


@router.post("/revoke")
async def revoke_permission(
    payload: PermissionRevokeRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    result = await permission_service.revoke_permission(db, payload.permission_id)
    await db.commit()
    return result
