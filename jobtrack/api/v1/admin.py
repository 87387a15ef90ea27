"""Admin console endpoints: statistics, analytics, reports and activity feeds."""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jobtrack.api.deps import get_db, require_admin
from jobtrack.models.interview import Interview
from jobtrack.models.job_application import JobApplication
from jobtrack.models.user import User
from jobtrack.schemas.admin import ExportReportRequest
from jobtrack.schemas.interview import InterviewResponse
from jobtrack.schemas.job_application import JobApplicationResponse
from jobtrack.services.activity_service import get_recent_activities, get_user_activities
from jobtrack.services.admin_stats_service import export_report, get_analytics, get_system_stats
from jobtrack.services.alert_service import get_system_alerts
from jobtrack.services.calendar_service import build_calendar, event_from_interview
from jobtrack.services.top_users_service import SORT_KEYS, get_top_users

logger = logging.getLogger(__name__)

router = APIRouter()

DATE_FILTER_PATTERN = "^(today|week|month|custom)$"


def _timestamp() -> str:
    return datetime.utcnow().isoformat()


# ==================== Statistics ====================

@router.get("/system-stats")
async def system_stats(
    date_filter: Optional[str] = Query(None, pattern=DATE_FILTER_PATTERN),
    start_date: Optional[str] = Query(None),
    end_date: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    stats = await get_system_stats(db, date_filter, start_date, end_date)
    return {"success": True, "stats": stats, "timestamp": _timestamp()}


@router.get("/analytics")
async def analytics(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    return {"analytics": await get_analytics(db)}


@router.post("/export-report")
async def export_csv_report(
    payload: ExportReportRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Download a 30-day CSV report."""
    report = await export_report(db, payload.report_type)
    logger.info(f"Admin {current_user.id} exported {payload.report_type} report")
    return Response(
        content=report["content"],
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{report["filename"]}"'},
    )


# ==================== Activity ====================

@router.get("/recent-activity")
async def recent_activity(
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    entity_type: Optional[str] = Query(None),
    user_role: Optional[int] = Query(None, ge=0, le=2),
    days: int = Query(7, ge=1, le=365),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    return await get_recent_activities(
        db,
        limit=limit,
        offset=offset,
        entity_type=entity_type,
        user_role=user_role,
        days=days,
    )


@router.get("/user-activities")
async def user_activities(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    activities = await get_user_activities(db, limit=100)
    return {"success": True, "activities": activities, "timestamp": _timestamp()}


@router.get("/system-alerts")
async def system_alerts(
    resolved: str = Query("false", pattern="^(true|false|all)$"),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    return await get_system_alerts(db, resolved=resolved, limit=limit)


@router.get("/top-users")
async def top_users(
    limit: int = Query(10, ge=1, le=100),
    sort_by: str = Query("activity", pattern=f"^({'|'.join(SORT_KEYS)})$"),
    date_filter: Optional[str] = Query(None, pattern=DATE_FILTER_PATTERN),
    start_date: Optional[str] = Query(None),
    end_date: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    users = await get_top_users(
        db,
        limit=limit,
        sort_by=sort_by,
        date_filter=date_filter,
        start_date=start_date,
        end_date=end_date,
    )
    return {"success": True, "users": users, "timestamp": _timestamp()}


# ==================== Schedules ====================

@router.get("/calendar")
async def calendar(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Every interview as a calendar event, with overlapping slots reported as conflicts."""
    result = await db.execute(
        select(Interview, User.username, JobApplication)
        .outerjoin(User, Interview.user_id == User.id)
        .outerjoin(JobApplication, Interview.job_application_id == JobApplication.id)
        .order_by(Interview.scheduled_date.asc())
    )
    events = [
        event_from_interview(interview, username, application)
        for interview, username, application in result.all()
    ]
    return {"success": True, **build_calendar(events)}


@router.get("/interviews")
async def all_interviews(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    result = await db.execute(
        select(Interview, User.username, User.email, User.full_name)
        .outerjoin(User, Interview.user_id == User.id)
        .order_by(Interview.scheduled_date.asc())
    )
    interviews = [
        {
            **InterviewResponse.model_validate(interview).model_dump(mode="json"),
            "username": username,
            "email": email,
            "full_name": full_name,
        }
        for interview, username, email, full_name in result.all()
    ]
    return {"success": True, "interviews": interviews, "total": len(interviews)}


@router.get("/job-applications")
async def all_job_applications(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    result = await db.execute(
        select(JobApplication, User.username, User.email, User.full_name)
        .outerjoin(User, JobApplication.user_id == User.id)
        .order_by(JobApplication.created_at.desc(), JobApplication.id.desc())
    )
    applications = [
        {
            **JobApplicationResponse.model_validate(application).model_dump(mode="json"),
            "username": username or "Unknown User",
            "email": email or "No Email",
            "full_name": full_name or username or "Unknown User",
        }
        for application, username, email, full_name in result.all()
    ]
    return {"success": True, "applications": applications, "total": len(applications)}
