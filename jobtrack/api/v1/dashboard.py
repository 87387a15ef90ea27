"""Dashboard endpoints."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from jobtrack.api.deps import get_current_user, get_db
from jobtrack.models.user import User
from jobtrack.services.dashboard_service import get_dashboard_stats

router = APIRouter()


@router.get("/stats")
async def dashboard_stats(
    period: str = Query("month", pattern="^(day|week|month)$"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Application and interview statistics for the current user (everything for admins)."""
    data = await get_dashboard_stats(db, current_user, period=period)
    return {"success": True, "data": data}
