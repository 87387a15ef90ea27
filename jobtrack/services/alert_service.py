"""
System Alerts

Health checks over recent data, surfaced to admins as alerts:

- rejection spike in the last 24 hours
- interviews in the next 24 hours with no preparation notes
- users who have not logged in for over 30 days
- callers with a 7-day success rate below 50%
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from jobtrack.models.call import CallerPerformance
from jobtrack.models.interview import Interview
from jobtrack.models.job_application import JobApplication
from jobtrack.models.user import User

logger = logging.getLogger(__name__)

REJECTION_ALERT_THRESHOLD = 5
INACTIVE_USERS_ALERT_THRESHOLD = 10
CALLER_SUCCESS_RATE_FLOOR = 50


def _alert(alert_id: int, alert_type: str, title: str, message: str, priority: str, now: datetime) -> Dict[str, Any]:
    return {
        "id": alert_id,
        "type": alert_type,
        "title": title,
        "message": message,
        "priority": priority,
        "resolved": False,
        "created_at": now.isoformat(),
    }


async def _count(db: AsyncSession, model, *conditions) -> int:
    result = await db.execute(select(func.count()).select_from(model).where(*conditions))
    return result.scalar() or 0


async def _underperforming_callers(db: AsyncSession, since) -> int:
    result = await db.execute(
        select(
            CallerPerformance.caller_id,
            func.sum(CallerPerformance.calls_completed),
            func.sum(CallerPerformance.calls_failed),
        )
        .where(CallerPerformance.date >= since)
        .group_by(CallerPerformance.caller_id)
    )
    low = 0
    for _, completed, failed in result.all():
        attempted = (completed or 0) + (failed or 0)
        if attempted and (completed or 0) / attempted * 100 < CALLER_SUCCESS_RATE_FLOOR:
            low += 1
    return low


async def build_alerts(db: AsyncSession, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    now = now or datetime.utcnow()
    alerts = []

    rejected = await _count(
        db,
        JobApplication,
        JobApplication.status == "rejected",
        JobApplication.updated_at >= now - timedelta(hours=24),
    )
    if rejected > REJECTION_ALERT_THRESHOLD:
        alerts.append(
            _alert(
                2,
                "warning",
                "High Job Application Rejection Rate",
                f"{rejected} job applications were rejected in the last 24 hours. "
                "Consider reviewing application strategies.",
                "medium",
                now,
            )
        )

    unprepared = await _count(
        db,
        Interview,
        Interview.status == "scheduled",
        Interview.scheduled_date > now,
        Interview.scheduled_date <= now + timedelta(hours=24),
        or_(Interview.notes.is_(None), Interview.notes == ""),
    )
    if unprepared > 0:
        alerts.append(
            _alert(
                3,
                "info",
                "Upcoming Interviews Need Preparation",
                f"{unprepared} interviews scheduled for the next 24 hours don't have preparation notes.",
                "medium",
                now,
            )
        )

    inactive = await _count(
        db,
        User,
        User.is_active.is_(True),
        or_(User.last_login.is_(None), User.last_login < now - timedelta(days=30)),
    )
    if inactive > INACTIVE_USERS_ALERT_THRESHOLD:
        alerts.append(
            _alert(
                4,
                "info",
                "Many Inactive Users Detected",
                f"{inactive} users haven't logged in for over 30 days. Consider sending engagement emails.",
                "low",
                now,
            )
        )

    low_callers = await _underperforming_callers(db, (now - timedelta(days=7)).date())
    if low_callers > 0:
        alerts.append(
            _alert(
                5,
                "warning",
                "Caller Performance Issues",
                f"{low_callers} callers have a success rate below {CALLER_SUCCESS_RATE_FLOOR}% in the last 7 days.",
                "high",
                now,
            )
        )

    if not alerts:
        alerts.append(
            _alert(
                100,
                "success",
                "System Running Smoothly",
                "All system checks passed. No issues detected.",
                "low",
                now,
            )
        )

    logger.info(f"Built {len(alerts)} system alerts")
    return alerts


async def get_system_alerts(
    db: AsyncSession,
    resolved: str = "false",
    limit: int = 20,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Alerts filtered by resolved state ("true", "false" or "all")."""
    alerts = await build_alerts(db, now)
    if resolved != "all":
        wanted = resolved == "true"
        alerts = [a for a in alerts if a["resolved"] == wanted]

    return {
        "success": True,
        "alerts": alerts[:limit],
        "total": len(alerts),
    }
