"""
Activity Service

Records user actions in activity_logs and builds the admin activity feeds.
When nothing has been logged yet the feeds are synthesized from job
applications ("applied") and interviews ("scheduled").
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from jobtrack.core.security import role_name
from jobtrack.models.activity_log import ActivityLog, CallerActivityLog
from jobtrack.models.interview import Interview
from jobtrack.models.job_application import JobApplication
from jobtrack.models.user import User
from jobtrack.utils.constants import RELEVANT_ACTIONS, WORKSHOP_ENTITY_NAMES
from jobtrack.utils.helpers import isoformat

logger = logging.getLogger(__name__)


async def log_activity(
    db: AsyncSession,
    user_id: Optional[int],
    action: str,
    entity_type: Optional[str] = None,
    entity_id: Optional[int] = None,
    entity_name: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> ActivityLog:
    """Add an activity row to the session; the caller commits."""
    entry = ActivityLog(
        user_id=user_id,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        entity_name=entity_name,
        details=details,
        ip_address=ip_address,
        user_agent=user_agent,
    )
    db.add(entry)
    logger.debug(f"Activity {action} by user {user_id} on {entity_type} {entity_id}")
    return entry


def workshop_entity_name(action: str) -> str:
    return WORKSHOP_ENTITY_NAMES.get(action, "Workshop Activity")


def describe_activity(
    action: str,
    user_name: Optional[str],
    entity_type: Optional[str] = None,
    entity_id: Optional[Any] = None,
    entity_name: Optional[str] = None,
) -> str:
    """Human readable sentence for a user activity."""
    name = user_name or "Unknown User"
    entity = entity_name or f"{entity_type} #{entity_id}"

    if action == "login":
        return f"{name} logged in to the system"
    if action == "applied":
        return f"{name} applied for {entity}"
    if action == "scheduled":
        return f"{name} scheduled {entity}"
    if action == "updated":
        return f"{name} updated {entity}"
    if action == "status_changed":
        return f"{name} changed status of {entity}"
    if action == "created":
        return f"{name} created {entity}"
    if action == "deleted":
        return f"{name} deleted {entity}"
    if action == "logout":
        return f"{name} logged out"
    if action == "resume_optimized":
        return f"{name} optimized their resume in the workshop"
    if action == "resume_downloaded":
        return f"{name} downloaded their optimized resume"
    if action == "cover_letter_generated":
        return f"{name} generated a cover letter in the workshop"
    if action == "cover_letter_downloaded":
        return f"{name} downloaded their cover letter"
    return f"{name} performed {action} on {entity}"


def describe_caller_activity(
    activity_type: str,
    caller_name: Optional[str],
    contact_name: Optional[str],
    duration_minutes: Optional[int] = None,
) -> str:
    """Human readable sentence for a caller activity."""
    name = caller_name or "Unknown User"
    target = contact_name or "Unknown Contact"

    if activity_type == "call_scheduled":
        return f"{name} scheduled a call with {target}"
    if activity_type == "call_started":
        return f"{name} started a call with {target}"
    if activity_type == "call_completed":
        return f"{name} completed a {duration_minutes or 0}min call with {target}"
    if activity_type == "call_failed":
        return f"{name}'s call to {target} failed"
    if activity_type == "call_rescheduled":
        return f"{name} rescheduled a call with {target}"
    if activity_type == "call_cancelled":
        return f"{name} cancelled a call with {target}"
    return f"{name} performed {activity_type}"


def _entry(
    source_type: str,
    entry_id: Any,
    user: Optional[User],
    action: str,
    entity_type: Optional[str],
    entity_id: Optional[Any],
    entity_name: Optional[str],
    details: Any,
    ip_address: Optional[str],
    created_at: datetime,
) -> Dict[str, Any]:
    user_display = (user.full_name or user.username) if user else None
    return {
        "source_type": source_type,
        "id": entry_id,
        "user_id": user.id if user else None,
        "username": user.username if user else None,
        "user_name": user.full_name if user else None,
        "user_role_name": role_name(user.role if user else None),
        "user_role": user.role if user else None,
        "action": action,
        "entity_type": entity_type,
        "entity_id": entity_id,
        "entity_name": entity_name or f"{entity_type} {entity_id}",
        "details": details,
        "ip_address": ip_address,
        "created_at": created_at,
        "description": describe_activity(action, user_display, entity_type, entity_id, entity_name),
    }


async def _logged_activities(db: AsyncSession, since: Optional[datetime]) -> List[Dict[str, Any]]:
    query = (
        select(ActivityLog, User)
        .outerjoin(User, ActivityLog.user_id == User.id)
        .where(ActivityLog.action.in_(RELEVANT_ACTIONS))
    )
    if since is not None:
        query = query.where(ActivityLog.created_at >= since)

    rows = (await db.execute(query)).all()
    return [
        _entry(
            "user_activity",
            log.id,
            user,
            log.action,
            log.entity_type,
            log.entity_id,
            log.entity_name,
            log.details,
            log.ip_address,
            log.created_at,
        )
        for log, user in rows
    ]


async def synthesize_activities(db: AsyncSession, since: Optional[datetime]) -> List[Dict[str, Any]]:
    """Activities derived from applications and interviews."""
    app_query = select(JobApplication, User).outerjoin(User, JobApplication.user_id == User.id)
    interview_query = select(Interview, User).outerjoin(User, Interview.user_id == User.id)
    if since is not None:
        app_query = app_query.where(JobApplication.created_at >= since)
        interview_query = interview_query.where(Interview.created_at >= since)

    activities = []
    for application, user in (await db.execute(app_query)).all():
        activities.append(
            _entry(
                "user_activity",
                f"application-{application.id}",
                user,
                "applied",
                "job_application",
                application.id,
                f"{application.position_title} at {application.company_name}",
                {"status": application.status},
                None,
                application.created_at,
            )
        )
    for interview, user in (await db.execute(interview_query)).all():
        activities.append(
            _entry(
                "user_activity",
                f"interview-{interview.id}",
                user,
                "scheduled",
                "interview",
                interview.id,
                f"Interview for {interview.position_title} at {interview.company_name}",
                {"interview_type": interview.interview_type, "status": interview.status},
                None,
                interview.created_at,
            )
        )
    return activities


async def _caller_activities(db: AsyncSession, since: Optional[datetime]) -> List[Dict[str, Any]]:
    query = select(CallerActivityLog, User).outerjoin(User, CallerActivityLog.caller_id == User.id)
    if since is not None:
        query = query.where(CallerActivityLog.created_at >= since)

    activities = []
    for log, user in (await db.execute(query)).all():
        caller_display = (user.full_name or user.username) if user else None
        activities.append(
            {
                "source_type": "caller_activity",
                "id": f"caller-{log.id}",
                "user_id": log.caller_id,
                "username": user.username if user else None,
                "user_name": user.full_name if user else None,
                "user_role_name": "Caller",
                "user_role": user.role if user else None,
                "action": log.activity_type,
                "entity_type": "call",
                "entity_id": log.call_schedule_id,
                "entity_name": f"Call to {log.contact_name}" if log.contact_name else f"call {log.call_schedule_id}",
                "details": log.details,
                "ip_address": log.ip_address,
                "created_at": log.created_at,
                "description": describe_caller_activity(
                    log.activity_type, caller_display, log.contact_name, log.call_duration
                ),
            }
        )
    return activities


async def get_recent_activities(
    db: AsyncSession,
    limit: int = 50,
    offset: int = 0,
    entity_type: Optional[str] = None,
    user_role: Optional[int] = None,
    days: int = 7,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Merged user and caller activity, newest first."""
    now = now or datetime.utcnow()
    since = now - timedelta(days=days)

    logged_count = (await db.execute(select(func.count()).select_from(ActivityLog))).scalar() or 0
    if logged_count:
        activities = await _logged_activities(db, since)
    else:
        logger.info("No activity logs recorded yet, synthesizing from applications and interviews")
        activities = [a for a in await synthesize_activities(db, since) if a["action"] in RELEVANT_ACTIONS]

    activities.extend(await _caller_activities(db, since))

    if entity_type:
        activities = [a for a in activities if a["entity_type"] == entity_type]
    if user_role is not None:
        activities = [a for a in activities if a["user_role"] == user_role]

    activities.sort(key=lambda a: a["created_at"], reverse=True)
    page = activities[offset:offset + limit]
    for activity in page:
        activity["created_at"] = isoformat(activity["created_at"])

    return {
        "success": True,
        "activities": page,
        "total": len(activities),
        "timestamp": now.isoformat(),
    }


async def get_user_activities(db: AsyncSession, limit: int = 100) -> List[Dict[str, Any]]:
    """Latest logged activities with user details, synthesized when the log is empty."""
    query = (
        select(ActivityLog, User)
        .outerjoin(User, ActivityLog.user_id == User.id)
        .order_by(ActivityLog.created_at.desc())
        .limit(limit)
    )
    rows = (await db.execute(query)).all()
    if rows:
        activities = [
            _entry(
                "user_activity",
                log.id,
                user,
                log.action,
                log.entity_type,
                log.entity_id,
                log.entity_name,
                log.details,
                log.ip_address,
                log.created_at,
            )
            for log, user in rows
        ]
    else:
        activities = await synthesize_activities(db, None)
        activities.sort(key=lambda a: a["created_at"], reverse=True)
        activities = activities[:limit]

    for activity in activities:
        activity["created_at"] = isoformat(activity["created_at"])
    return activities
