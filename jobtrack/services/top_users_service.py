"""
Top Users Service

Ranks active users by activity for the admin dashboard.

activity_score = applications * 8 + activities * 1, and callers also get
completed_calls * 15 + success_rate * 2.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jobtrack.core.security import Role, role_name
from jobtrack.models.activity_log import ActivityLog, CallerActivityLog
from jobtrack.models.interview import Interview
from jobtrack.models.job_application import JobApplication
from jobtrack.models.user import User
from jobtrack.utils.date_ranges import calendar_range, in_range
from jobtrack.utils.helpers import isoformat

logger = logging.getLogger(__name__)

SORT_KEYS = ("activity", "applications", "interviews", "recent")


def calculate_activity_score(
    applications: int,
    activities: int,
    role: Optional[int] = None,
    completed_calls: int = 0,
    success_rate: float = 0.0,
) -> int:
    score = applications * 8 + activities * 1
    if role == Role.CALLER:
        score += completed_calls * 15 + success_rate * 2
    return round(score)


def caller_stats_from_logs(logs: List[CallerActivityLog]) -> Dict[str, Any]:
    """Call figures over every caller activity log in the window, not only finished calls."""
    completed = sum(1 for log in logs if log.activity_type == "call_completed")
    total = len(logs)
    durations = [log.call_duration for log in logs if log.call_duration is not None]
    return {
        "total_calls": total,
        "completed_calls": completed,
        "avg_call_duration": round(sum(durations) / len(durations), 1) if durations else 0,
        "success_rate": f"{completed / total * 100:.1f}" if total else "0.0",
    }


async def get_top_users(
    db: AsyncSession,
    limit: int = 10,
    sort_by: str = "activity",
    date_filter: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    now: Optional[datetime] = None,
) -> List[Dict[str, Any]]:
    now = now or datetime.utcnow()
    start, end = calendar_range(date_filter, now, start_date, end_date)
    activity_since = now - timedelta(days=30)

    users = (await db.execute(select(User).where(User.is_active.is_(True)))).scalars().all()
    applications = (await db.execute(select(JobApplication))).scalars().all()
    interviews = (await db.execute(select(Interview))).scalars().all()
    activity_logs = (
        await db.execute(select(ActivityLog).where(ActivityLog.created_at >= activity_since))
    ).scalars().all()
    caller_logs = (
        await db.execute(select(CallerActivityLog).where(CallerActivityLog.created_at >= activity_since))
    ).scalars().all()

    ranked = []
    for user in users:
        total_applications = sum(
            1 for a in applications if a.user_id == user.id and in_range(a.created_at, start, end)
        )
        total_interviews = sum(
            1 for i in interviews if i.user_id == user.id and in_range(i.created_at, start, end)
        )
        logged = sum(1 for log in activity_logs if log.user_id == user.id)
        total_activities = logged or total_applications + total_interviews

        caller_stats = None
        if user.role == Role.CALLER:
            caller_stats = caller_stats_from_logs([log for log in caller_logs if log.caller_id == user.id])

        score = calculate_activity_score(
            total_applications,
            total_activities,
            user.role,
            caller_stats["completed_calls"] if caller_stats else 0,
            float(caller_stats["success_rate"]) if caller_stats else 0.0,
        )

        ranked.append(
            {
                "id": user.id,
                "username": user.username,
                "email": user.email,
                "full_name": user.full_name,
                "role": user.role,
                "role_name": role_name(user.role),
                "last_login": user.last_login,
                "created_at": user.created_at,
                "total_applications": total_applications,
                "total_interviews": total_interviews,
                "total_activities": total_activities,
                "activity_score": score,
                "caller_stats": caller_stats,
            }
        )

    if sort_by == "applications":
        ranked.sort(key=lambda u: u["total_applications"], reverse=True)
    elif sort_by == "interviews":
        ranked.sort(key=lambda u: u["total_interviews"], reverse=True)
    elif sort_by == "recent":
        ranked.sort(key=lambda u: u["last_login"] or datetime.min, reverse=True)
    else:
        ranked.sort(key=lambda u: u["activity_score"], reverse=True)

    top = ranked[:limit]
    for entry in top:
        entry["last_login"] = isoformat(entry["last_login"])
        entry["created_at"] = isoformat(entry["created_at"])
    return top
