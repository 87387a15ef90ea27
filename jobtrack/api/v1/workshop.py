"""Resume workshop activity tracking."""

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from jobtrack.api.deps import client_ip, get_current_user, get_db, user_agent
from jobtrack.models.user import User
from jobtrack.schemas.activity import WorkshopActivityRequest
from jobtrack.services.activity_service import log_activity, workshop_entity_name

router = APIRouter()


@router.post("/log-activity")
async def log_workshop_activity(
    payload: WorkshopActivityRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not payload.action:
        raise HTTPException(status_code=400, detail="Action is required")

    await log_activity(
        db,
        current_user.id,
        payload.action,
        entity_type="workshop",
        entity_name=workshop_entity_name(payload.action),
        details=payload.details or {},
        ip_address=client_ip(request),
        user_agent=user_agent(request),
    )
    await db.commit()

    return {"success": True, "message": "Activity logged successfully"}
