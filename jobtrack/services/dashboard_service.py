"""
Dashboard Service

Builds the per-user (or, for admins, system wide) dashboard statistics.
Rows are fetched once and counted in Python so the same code runs on
Postgres and on sqlite.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jobtrack.core.security import Role
from jobtrack.models.interview import Interview
from jobtrack.models.job_application import JobApplication
from jobtrack.models.user import User
from jobtrack.schemas.interview import InterviewResponse
from jobtrack.utils.constants import INTERVIEW_TYPES
from jobtrack.utils.date_ranges import (
    add_months,
    period_start,
    start_of_day,
    start_of_month,
    start_of_week,
)
from jobtrack.utils.helpers import isoformat, percent

logger = logging.getLogger(__name__)


def _count(rows, predicate) -> int:
    return sum(1 for row in rows if predicate(row))


def _since(rows, start: datetime) -> int:
    return _count(rows, lambda row: row.created_at is not None and row.created_at >= start)


def _recent_applications(applications: List[JobApplication]) -> List[Dict[str, Any]]:
    newest = sorted(applications, key=lambda a: a.created_at, reverse=True)[:5]
    return [
        {
            "id": a.id,
            "company_name": a.company_name,
            "position_title": a.position_title,
            "status": a.status,
            "created_at": isoformat(a.created_at),
            "type": "application",
        }
        for a in newest
    ]


def _recent_interviews(interviews: List[Interview]) -> List[Dict[str, Any]]:
    newest = sorted(interviews, key=lambda i: i.created_at, reverse=True)[:5]
    return [
        {
            "id": i.id,
            "company_name": i.company_name,
            "position_title": i.position_title,
            "interview_type": i.interview_type,
            "status": i.status,
            "scheduled_date": isoformat(i.scheduled_date),
            "created_at": isoformat(i.created_at),
            "type": "interview",
        }
        for i in newest
    ]


def build_monthly_trends(
    applications: List[JobApplication],
    interviews: List[Interview],
    now: datetime,
    months: int = 6,
) -> List[Dict[str, Any]]:
    """Applications/interviews created per calendar month, oldest month first."""
    trends = []
    current_month = start_of_month(now)
    for offset in range(months - 1, -1, -1):
        month_start = add_months(current_month, -offset)
        month_end = add_months(month_start, 1)

        def in_month(row):
            return row.created_at is not None and month_start <= row.created_at < month_end

        trends.append(
            {
                "label": month_start.strftime("%b %Y"),
                "applications": _count(applications, in_month),
                "interviews": _count(interviews, in_month),
            }
        )
    return trends


async def get_dashboard_stats(
    db: AsyncSession,
    user: User,
    period: str = "month",
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Dashboard payload for `user`; admins see every row."""
    now = now or datetime.utcnow()
    is_admin = user.role == Role.ADMIN

    app_query = select(JobApplication)
    interview_query = select(Interview)
    if not is_admin:
        app_query = app_query.where(JobApplication.user_id == user.id)
        interview_query = interview_query.where(Interview.user_id == user.id)

    applications = list((await db.execute(app_query)).scalars().all())
    interviews = list((await db.execute(interview_query)).scalars().all())
    users = list((await db.execute(select(User))).scalars().all()) if is_admin else []

    logger.info(
        f"Dashboard for user {user.id}: {len(applications)} applications, "
        f"{len(interviews)} interviews, period={period}"
    )

    today = start_of_day(now)
    week_start = start_of_week(now)
    since = period_start(period, now)

    application_stats = {
        "total": len(applications),
        "applied": _count(applications, lambda a: a.status == "applied"),
        "interviewing": _count(applications, lambda a: a.status == "interviewing"),
        "offered": _count(applications, lambda a: a.status == "offered"),
        "rejected": _count(applications, lambda a: a.status == "rejected"),
        "thisMonth": _since(applications, since),
    }

    interview_stats = {
        "total": len(interviews),
        "scheduled": _count(interviews, lambda i: i.status == "scheduled"),
        "completed": _count(interviews, lambda i: i.status == "completed"),
        "cancelled": _count(interviews, lambda i: i.status == "cancelled"),
        "rescheduled": _count(interviews, lambda i: i.status == "rescheduled"),
        "thisMonth": _since(interviews, since),
    }

    interview_types = {
        kind: _count(interviews, lambda i, kind=kind: i.interview_type == kind)
        for kind in INTERVIEW_TYPES
    }

    if is_admin:
        user_stats = {
            "total": len(users),
            "active": _count(users, lambda u: u.is_active),
            "inactive": _count(users, lambda u: not u.is_active),
            "admins": _count(users, lambda u: u.role == Role.ADMIN),
            "users": _count(users, lambda u: u.role == Role.USER),
            "callers": _count(users, lambda u: u.role == Role.CALLER),
            "thisMonth": _since(users, since),
        }
    else:
        user_stats = dict.fromkeys(
            ["total", "active", "inactive", "admins", "users", "callers", "thisMonth"], 0
        )

    recent_applications = _recent_applications(applications)
    recent_activity = sorted(
        recent_applications + _recent_interviews(interviews),
        key=lambda item: item["created_at"],
        reverse=True,
    )[:10]

    success_stats = {
        "totalApplications": application_stats["total"],
        "totalInterviews": interview_stats["total"],
        "interviewRate": percent(interview_stats["total"], application_stats["total"]),
        "offerRate": percent(application_stats["offered"], application_stats["total"]),
    }

    today_stats = {
        "applicationsToday": _since(applications, today),
        "interviewsToday": _since(interviews, today),
    }

    upcoming = sorted(
        (i for i in interviews if i.scheduled_date and i.scheduled_date > now),
        key=lambda i: i.scheduled_date,
    )[:5]

    return {
        "applications": application_stats,
        "interviews": interview_stats,
        "interviewTypes": interview_types,
        "users": user_stats,
        "success": success_stats,
        "today": today_stats,
        "recentActivity": recent_activity,
        "timePeriod": period,
        "generatedAt": now.isoformat(),
        "monthlyTrends": build_monthly_trends(applications, interviews, now),
        "totalApplications": application_stats["total"],
        "totalInterviews": interview_stats["total"],
        "applicationsToday": today_stats["applicationsToday"],
        "interviewsToday": today_stats["interviewsToday"],
        "applicationsThisMonth": application_stats["thisMonth"],
        "interviewsThisMonth": interview_stats["thisMonth"],
        "applicationsThisWeek": _since(applications, week_start),
        "interviewsThisWeek": _since(interviews, week_start),
        "applicationTrend": 0,
        "interviewTrend": 0,
        "recentApplications": recent_applications,
        "upcomingInterviews": [
            InterviewResponse.model_validate(i).model_dump(mode="json") for i in upcoming
        ],
        "applicationsByStatus": {
            "applied": application_stats["applied"],
            "interviewing": application_stats["interviewing"],
            "offered": application_stats["offered"],
            "rejected": application_stats["rejected"],
            "cancelled": 0,
        },
        "interviewsByProgress": {
            "scheduled": interview_stats["scheduled"],
            "completed": interview_stats["completed"],
            "cancelled": interview_stats["cancelled"],
        },
        "hasRealData": True,
    }
