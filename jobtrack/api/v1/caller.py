"""Caller workspace endpoints (caller role only)."""

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from jobtrack.api.deps import get_db, require_caller
from jobtrack.models.user import User
from jobtrack.schemas.caller import (
    CallScheduleCreate,
    CallScheduleResponse,
    CallStatusUpdate,
    NotificationCreate,
    NotificationResponse,
    RescheduleRequest,
)
from jobtrack.services import caller_service
from jobtrack.services.caller_activity_service import get_caller_activity_stats

logger = logging.getLogger(__name__)

router = APIRouter()


def _schedule_json(schedule) -> dict:
    return CallScheduleResponse.model_validate(schedule).model_dump(mode="json")


# ==================== Interview-derived calls ====================

@router.get("/calls")
async def get_calls(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_caller),
):
    """Interviews of the users this caller may see, presented as calls."""
    return await caller_service.list_calls(db, current_user)


@router.put("/calls/{call_id}/reschedule")
async def reschedule_call(
    call_id: int,
    payload: RescheduleRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_caller),
):
    result = await caller_service.reschedule_call(db, current_user, call_id, payload.scheduled_time)
    await db.commit()
    return result


@router.get("/stats")
async def get_stats(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_caller),
):
    return await caller_service.get_caller_stats(db, current_user)


# ==================== Call schedules ====================

@router.get("/call-schedules")
async def get_call_schedules(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_caller),
):
    return {"calls": await caller_service.list_call_schedules(db, current_user)}


@router.post("/call-schedules", status_code=status.HTTP_201_CREATED)
async def create_call_schedule(
    payload: CallScheduleCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_caller),
):
    schedule = await caller_service.create_call_schedule(db, current_user, payload)
    await db.commit()
    await db.refresh(schedule)
    return {"message": "Call scheduled successfully", "call": _schedule_json(schedule)}


@router.post("/call-schedules/{schedule_id}/start")
async def start_call(
    schedule_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_caller),
):
    schedule = await caller_service.start_call(db, current_user, schedule_id)
    await db.commit()
    await db.refresh(schedule)
    return {"message": "Call started successfully", "call": _schedule_json(schedule)}


@router.put("/call-schedules/{schedule_id}/status")
async def update_call_status(
    schedule_id: int,
    payload: CallStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_caller),
):
    schedule = await caller_service.update_call_status(db, current_user, schedule_id, payload)
    await db.commit()
    await db.refresh(schedule)
    return {"message": "Call status updated successfully", "call": _schedule_json(schedule)}


# ==================== Notifications ====================

@router.get("/notifications")
async def get_notifications(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_caller),
):
    return {"notifications": await caller_service.list_notifications(db, current_user)}


@router.post("/notifications", status_code=status.HTTP_201_CREATED)
async def create_notification(
    payload: NotificationCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_caller),
):
    notification = await caller_service.create_notification(db, current_user, payload)
    await db.commit()
    await db.refresh(notification)
    return {
        "message": "Notification created successfully",
        "notification": NotificationResponse.model_validate(notification).model_dump(mode="json"),
    }


@router.put("/notifications/{notification_id}/read")
async def mark_notification_read(
    notification_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_caller),
):
    notification = await caller_service.mark_notification_read(db, current_user, notification_id)
    await db.commit()
    await db.refresh(notification)
    return {
        "message": "Notification marked as read",
        "notification": NotificationResponse.model_validate(notification).model_dump(mode="json"),
    }


# ==================== Performance ====================

@router.get("/performance")
async def get_performance(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_caller),
):
    """Daily performance rows for the last 30 days."""
    return {"performance": await caller_service.list_performance(db, current_user)}


@router.get("/activity-stats")
async def get_activity_stats(
    days: int = Query(30, ge=1, le=365),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_caller),
):
    return {"stats": await get_caller_activity_stats(db, current_user.id, days=days)}


@router.get("/templates")
async def get_templates(current_user: User = Depends(require_caller)):
    # Call script templates are not stored yet
    return {"templates": []}
