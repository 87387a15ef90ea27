"""
Schedule Permission Service

Admins grant a user read access to other users' interview schedules.
Revoking only deactivates the grant, and granting again reactivates it.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from jobtrack.core.exceptions import NotFoundError, ValidationFailedError
from jobtrack.models.schedule_permission import SchedulePermission
from jobtrack.models.user import User

logger = logging.getLogger(__name__)


async def permitted_user_ids(db: AsyncSession, user_id: int) -> List[int]:
    """Users whose schedules `user_id` may view."""
    result = await db.execute(
        select(SchedulePermission.target_user_id).where(
            SchedulePermission.user_id == user_id,
            SchedulePermission.is_active.is_(True),
        )
    )
    return [row[0] for row in result.all()]


async def list_permissions(db: AsyncSession) -> List[Dict[str, Any]]:
    grantee = aliased(User)
    target = aliased(User)
    granter = aliased(User)
    result = await db.execute(
        select(SchedulePermission, grantee, target, granter)
        .join(grantee, SchedulePermission.user_id == grantee.id)
        .join(target, SchedulePermission.target_user_id == target.id)
        .outerjoin(granter, SchedulePermission.granted_by == granter.id)
        .order_by(SchedulePermission.granted_at.desc())
    )

    permissions = []
    for permission, user, target_user, granted_by in result.all():
        permissions.append(
            {
                "id": permission.id,
                "user_id": permission.user_id,
                "target_user_id": permission.target_user_id,
                "granted_by": permission.granted_by,
                "granted_at": permission.granted_at.isoformat() if permission.granted_at else None,
                "is_active": permission.is_active,
                "user": {
                    "username": user.username,
                    "email": user.email,
                    "full_name": user.full_name,
                    "role": user.role,
                },
                "target_user": {
                    "username": target_user.username,
                    "email": target_user.email,
                    "full_name": target_user.full_name,
                },
                "granted_by_user": {
                    "username": granted_by.username,
                    "email": granted_by.email,
                } if granted_by else None,
            }
        )
    return permissions


def _grant_message(successful: int, failed: int, already: int) -> str:
    if successful and not failed and not already:
        return f"Successfully granted {successful} permission(s)"
    if successful:
        return f"Granted {successful} permission(s), {failed} failed, {already} already existed"
    return f"All {already} permission(s) already exist for this user"


async def grant_permissions(
    db: AsyncSession,
    user_id: Optional[int],
    target_user_ids: List[int],
    granted_by: int,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Grant `user_id` access to each target, reactivating revoked grants."""
    now = now or datetime.utcnow()

    if not user_id or not target_user_ids:
        raise ValidationFailedError("User ID and at least one Target User ID are required")
    if user_id in target_user_ids:
        raise ValidationFailedError(
            "User cannot be granted permission to view their own schedule (they already can)"
        )

    wanted = {user_id, *target_user_ids}
    found = await db.execute(select(User.id).where(User.id.in_(list(wanted))))
    if len({row[0] for row in found.all()}) != len(wanted):
        raise NotFoundError("One or more users not found")

    results = {"successful": [], "failed": [], "alreadyExists": []}
    for target_id in target_user_ids:
        existing = (
            await db.execute(
                select(SchedulePermission).where(
                    SchedulePermission.user_id == user_id,
                    SchedulePermission.target_user_id == target_id,
                )
            )
        ).scalar_one_or_none()

        if existing is not None and existing.is_active:
            results["alreadyExists"].append(target_id)
            continue

        if existing is not None:
            existing.is_active = True
            existing.granted_by = granted_by
            existing.granted_at = now
        else:
            db.add(
                SchedulePermission(
                    user_id=user_id,
                    target_user_id=target_id,
                    granted_by=granted_by,
                    granted_at=now,
                    is_active=True,
                )
            )
        results["successful"].append(target_id)

    successful = len(results["successful"])
    failed = len(results["failed"])
    already = len(results["alreadyExists"])

    logger.info(f"Schedule permissions for user {user_id}: {successful} granted, {failed} failed, {already} existing")
    return {
        "success": True,
        "message": _grant_message(successful, failed, already),
        "results": results,
    }


async def revoke_permission(db: AsyncSession, permission_id: Optional[int]) -> Dict[str, Any]:
    if not permission_id:
        raise ValidationFailedError("Permission ID is required")

    permission = (
        await db.execute(
            select(SchedulePermission).where(
                SchedulePermission.id == permission_id,
                SchedulePermission.is_active.is_(True),
            )
        )
    ).scalar_one_or_none()
    if permission is None:
        raise NotFoundError("Permission not found")

    permission.is_active = False
    return {"success": True, "message": "Permission revoked successfully"}
