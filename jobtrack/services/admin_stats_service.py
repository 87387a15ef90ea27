"""
Admin Statistics Service

System stats, analytics and CSV report exports for the admin console.

Most figures are counted directly from users, job_applications,
interviews, activity_logs and sessions. The system block and a few
analytics figures are estimates derived from those counts.
"""

import calendar
import csv
import io
import logging
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jobtrack.core.exceptions import ValidationFailedError
from jobtrack.core.security import Role
from jobtrack.models.activity_log import ActivityLog
from jobtrack.models.interview import Interview
from jobtrack.models.job_application import JobApplication
from jobtrack.models.session import UserSession
from jobtrack.models.user import User
from jobtrack.utils.constants import ENGAGEMENT_ACTIONS, REPORT_TYPES, SYSTEM_START_DATE
from jobtrack.utils.date_ranges import add_months, content_filter_range, in_range, start_of_month
from jobtrack.utils.helpers import isoformat

logger = logging.getLogger(__name__)

# Uptime reported for each day of the system health report
REPORTED_DAILY_UPTIME = 99.6


def one_month_before(moment: datetime) -> datetime:
    """Same day and time one calendar month earlier, clamped to the month's length."""
    year, month = (moment.year, moment.month - 1) if moment.month > 1 else (moment.year - 1, 12)
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def _on_day(value: Optional[datetime], day: date) -> bool:
    return value is not None and value.date() == day


def _last_days(now: datetime, count: int = 30) -> List[date]:
    """The last `count` days ending today, oldest first."""
    today = now.date()
    return [today - timedelta(days=offset) for offset in range(count - 1, -1, -1)]


async def _load(db: AsyncSession, model) -> list:
    return list((await db.execute(select(model))).scalars().all())


async def get_system_stats(
    db: AsyncSession,
    date_filter: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    now = now or datetime.utcnow()

    users = await _load(db, User)
    applications = await _load(db, JobApplication)
    interviews = await _load(db, Interview)
    activity_logs = await _load(db, ActivityLog)
    sessions = await _load(db, UserSession)

    month_ago = one_month_before(now)
    start, end = content_filter_range(date_filter, now, start_date, end_date)

    today = now.date()
    todays_actions = [
        log for log in activity_logs
        if _on_day(log.created_at, today) and log.action in ENGAGEMENT_ACTIONS
    ]
    page_views = len(todays_actions)

    return {
        "users": {
            "total": len(users),
            "active": sum(1 for u in users if u.is_active),
            "newThisMonth": sum(1 for u in users if u.created_at > month_ago),
            "adminCount": sum(1 for u in users if u.role == Role.ADMIN),
            "userCount": sum(1 for u in users if u.role == Role.USER),
            "callerCount": sum(1 for u in users if u.role == Role.CALLER),
        },
        "content": {
            "totalApplications": sum(
                1 for a in applications if in_range(a.created_at, start, end, inclusive_end=True)
            ),
            "totalInterviews": sum(
                1 for i in interviews if in_range(i.created_at, start, end, inclusive_end=True)
            ),
            "totalResumes": 0,
            "totalProposals": 0,
        },
        "activity": {
            "dailyActiveUsers": len({log.user_id for log in todays_actions}),
            "totalSessions": sum(1 for s in sessions if s.is_active),
            "averageSessionDuration": 0,
            "totalPageViews": page_views,
        },
        "system": {
            "serverUptime": 24,
            "databaseSize": 1024,
            "storageUsed": 2048,
            "storageLimit": 10240,
            "apiRequestsToday": page_views,
            "errorRate": 0.5,
        },
    }


def _daily_user_activity(users: List[User], days: List[date]) -> List[Dict[str, Any]]:
    rows = []
    for day in days:
        active = sum(1 for u in users if _on_day(u.last_login, day))
        rows.append(
            {
                "date": day.isoformat(),
                "active_users": active,
                "new_users": sum(1 for u in users if _on_day(u.created_at, day)),
                "sessions": active,
            }
        )
    return rows


def _daily_content_activity(
    applications: List[JobApplication],
    interviews: List[Interview],
    days: List[date],
) -> List[Dict[str, Any]]:
    return [
        {
            "date": day.isoformat(),
            "applications": sum(1 for a in applications if _on_day(a.created_at, day)),
            "interviews": sum(1 for i in interviews if _on_day(i.created_at, day)),
        }
        for day in days
    ]


def _growth_rate(current: int, previous: int) -> float:
    if previous <= 0:
        return 0
    return round((current - previous) / previous * 100, 2)


async def get_analytics(db: AsyncSession, now: Optional[datetime] = None) -> Dict[str, Any]:
    now = now or datetime.utcnow()

    users = await _load(db, User)
    applications = await _load(db, JobApplication)
    interviews = await _load(db, Interview)

    total_users = len(users)
    active_users = sum(1 for u in users if u.is_active)
    total_applications = len(applications)
    total_interviews = len(interviews)
    total_content = total_applications + total_interviews

    month_start = start_of_month(now)
    prev_month_start = add_months(month_start, -1)

    def this_month(row):
        return row.created_at >= month_start

    def prev_month(row):
        return prev_month_start <= row.created_at < month_start

    new_users_this_month = sum(1 for u in users if this_month(u))
    prev_month_users = sum(1 for u in users if prev_month(u))

    actions_by_user: Dict[int, int] = {}
    for row in applications + interviews:
        actions_by_user[row.user_id] = actions_by_user.get(row.user_id, 0) + 1

    top_active_users = sorted(
        (
            {
                "id": u.id,
                "name": u.username,
                "email": u.email,
                "total_actions": actions_by_user.get(u.id, 0),
                "last_active": isoformat(u.last_login or u.updated_at),
            }
            for u in users
        ),
        key=lambda entry: entry["total_actions"],
        reverse=True,
    )[:5]

    this_month_content = sum(1 for row in applications + interviews if this_month(row))
    prev_month_content = sum(1 for row in applications + interviews if prev_month(row))

    days = _last_days(now)
    user_activity = _daily_user_activity(users, days)
    content_activity = _daily_content_activity(applications, interviews, days)

    any_activity = sum(day["active_users"] for day in user_activity) > 0
    logged_in_this_month = sum(1 for u in users if u.last_login and u.last_login >= month_start)

    system_start = datetime.fromisoformat(SYSTEM_START_DATE)

    return {
        "overview": {
            "totalUsers": total_users,
            "activeUsers": active_users,
            "totalContent": total_content,
            "systemUptime": max(0, int((now - system_start).total_seconds() // 3600)),
            "storageUsed": round((total_applications * 0.5 + total_interviews * 0.3) * 1024),
            "apiRequests": round(total_applications * 10 + total_interviews * 8 + total_users * 5),
        },
        "userMetrics": {
            "newUsersThisMonth": new_users_this_month,
            "userGrowthRate": _growth_rate(new_users_this_month, prev_month_users),
            "averageSessionDuration": 30 if any_activity else 0,
            "userRetentionRate": round(logged_in_this_month / total_users * 100) if total_users else 0,
            "topActiveUsers": top_active_users,
        },
        "contentMetrics": {
            "contentByType": {
                "application": total_applications,
                "interview": total_interviews,
            },
            "contentGrowthRate": _growth_rate(this_month_content, prev_month_content),
            "averageContentPerUser": round(total_content / total_users, 1) if total_users else 0,
            "mostActiveContentType": "Applications" if total_applications > total_interviews else "Interviews",
            "contentCreationTrend": content_activity[-7:],
        },
        "systemMetrics": {
            "performanceScore": min(95, 70 + active_users * 2),
            "errorRate": max(0.1, 5 - active_users * 0.5),
            "responseTime": max(50, 200 - active_users * 10),
            "databaseQueries": total_applications * 3 + total_interviews * 2 + total_users,
            "serverLoad": min(90, max(10, total_content * 2)),
            "memoryUsage": min(85, max(20, total_users * 5 + total_content * 0.5)),
        },
        "reports": {
            "userActivity": user_activity,
            "contentActivity": content_activity,
            "systemHealth": [
                {
                    "date": day["date"],
                    "uptime": REPORTED_DAILY_UPTIME,
                    "response_time": max(50, 150 - day["active_users"] * 5),
                    "error_rate": max(0.1, 2 - day["active_users"] * 0.1),
                }
                for day in user_activity
            ],
        },
    }


def system_health_row(daily_activity: int) -> List[str]:
    """Uptime %, response time (ms) and error rate % estimated from a day's activity."""
    uptime = max(98.5, 99.8 - daily_activity * 0.1)
    response_time = max(45, 120 - daily_activity * 5)
    error_rate = max(0.05, min(2.0, daily_activity * 0.1))
    return [f"{uptime:.2f}", f"{response_time:.0f}", f"{error_rate:.2f}"]


async def export_report(
    db: AsyncSession,
    report_type: str,
    now: Optional[datetime] = None,
) -> Dict[str, str]:
    """CSV report covering the last 30 days; returns filename and content."""
    if report_type not in REPORT_TYPES:
        raise ValidationFailedError("Invalid report type")

    now = now or datetime.utcnow()
    days = _last_days(now)
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")

    if report_type == "user-activity":
        users = await _load(db, User)
        writer.writerow(["Date", "Active Users", "New Users", "Sessions"])
        for row in _daily_user_activity(users, days):
            writer.writerow([row["date"], row["active_users"], row["new_users"], row["sessions"]])
    else:
        applications = await _load(db, JobApplication)
        interviews = await _load(db, Interview)
        content = _daily_content_activity(applications, interviews, days)
        if report_type == "content-activity":
            writer.writerow(["Date", "Applications", "Interviews"])
            for row in content:
                writer.writerow([row["date"], row["applications"], row["interviews"]])
        else:
            writer.writerow(["Date", "Uptime %", "Response Time (ms)", "Error Rate %"])
            for row in content:
                writer.writerow([row["date"], *system_health_row(row["applications"] + row["interviews"])])

    logger.info(f"Exported {report_type} report")
    return {
        "filename": f"{report_type}-report-{now.date().isoformat()}.csv",
        "content": buffer.getvalue(),
    }
