"""
Caller Service

Everything behind the caller workspace:

- the interview-derived call list for users the caller has schedule
  permission for, plus its 7-day stats
- persisted call schedules with start/status transitions
- call notifications
- per-day performance updates when a call completes or fails
"""

import logging
from collections import Counter
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jobtrack.core.exceptions import NotFoundError, ValidationFailedError
from jobtrack.models.call import CallNotification, CallSchedule, CallerPerformance
from jobtrack.models.interview import Interview
from jobtrack.models.job_application import JobApplication
from jobtrack.models.user import User
from jobtrack.schemas.caller import (
    CallScheduleCreate,
    CallScheduleResponse,
    CallStatusUpdate,
    NotificationCreate,
    NotificationResponse,
)
from jobtrack.services.caller_activity_service import get_or_create_performance, log_caller_activity
from jobtrack.services.permission_service import permitted_user_ids
from jobtrack.utils.constants import CALL_STATUSES, CALLER_VISIBLE_INTERVIEW_STATUSES, DEFAULT_REMINDER_MINUTES
from jobtrack.utils.date_ranges import start_of_day, start_of_month
from jobtrack.utils.helpers import isoformat

logger = logging.getLogger(__name__)

NO_PERMISSIONS_MESSAGE = (
    "No schedule permissions granted. Contact admin to request access to user schedules."
)
WEEK_DAYS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
RESUME_URL_PREFIX = "/api/v1/uploads/resumes/"


def interview_to_call(
    interview: Interview,
    application: Optional[JobApplication],
    candidate: Optional[User],
    caller_id: int,
) -> Dict[str, Any]:
    """Present an interview as a call in the caller workspace."""
    company = (application.company_name if application else None) or interview.company_name
    position = (application.position_title if application else None) or interview.position_title
    job_description = (application.job_description if application else None) or interview.job_description
    candidate_name = (candidate.full_name or candidate.username) if candidate else None
    candidate_email = candidate.email if candidate else None
    resume_filename = Path(interview.resume_link).name if interview.resume_link else None

    return {
        "id": interview.id,
        "contact_name": candidate_name or "Unknown Candidate",
        "company": company or "Unknown Company",
        "phone_number": interview.location or interview.meeting_link or "",
        "email": interview.interviewer_email or candidate_email or "",
        "call_type": interview.interview_type or "interview",
        "scheduled_time": isoformat(interview.scheduled_date),
        "duration_minutes": interview.duration or 60,
        "status": interview.status or "scheduled",
        "priority": "medium",
        "notes": f"Interview for {position or 'position'}",
        "preparation_notes": interview.notes
        or f"Review candidate profile and {position or 'position'} requirements",
        "outcome_notes": interview.feedback,
        "assigned_caller_id": caller_id,
        "created_by": 1,
        "auto_dial_enabled": False,
        "recording_enabled": True,
        "follow_up_required": interview.status == "completed",
        "reminder_minutes": [15, 5, 1],
        "related_entity_type": "job_application",
        "related_entity_id": interview.job_application_id or interview.id,
        "job_title": position or "Position Not Specified",
        "job_description": job_description or "Job description not available",
        "job_requirements": (application.requirements if application else None) or "Requirements not specified",
        "job_link": (application.application_url if application else None) or "",
        "salary_range": (application.salary_range if application else None) or "Not specified",
        "resume_filename": resume_filename,
        "resume_url": f"{RESUME_URL_PREFIX}{resume_filename}" if resume_filename else None,
        "application_date": isoformat(application.application_date) if application else None,
        "candidate_name": candidate_name or "Unknown Candidate",
        "candidate_email": candidate_email or "",
        "interviewer_name": interview.interviewer_name or "Unknown Interviewer",
        "interviewer_email": interview.interviewer_email or "",
        "meeting_link": interview.meeting_link or "",
        "location": interview.location or "Remote",
        "created_at": isoformat(interview.created_at),
        "updated_at": isoformat(interview.updated_at),
        "completed_at": isoformat(interview.updated_at) if interview.status == "completed" else None,
    }


async def list_calls(db: AsyncSession, caller: User) -> Dict[str, Any]:
    user_ids = await permitted_user_ids(db, caller.id)
    if not user_ids:
        return {
            "calls": [],
            "caller_id": caller.id,
            "total_calls": 0,
            "message": NO_PERMISSIONS_MESSAGE,
        }

    result = await db.execute(
        select(Interview, JobApplication, User)
        .outerjoin(JobApplication, Interview.job_application_id == JobApplication.id)
        .outerjoin(User, Interview.user_id == User.id)
        .where(
            Interview.status.in_(CALLER_VISIBLE_INTERVIEW_STATUSES),
            Interview.user_id.in_(user_ids),
        )
        .order_by(Interview.scheduled_date.desc())
    )
    calls = [
        interview_to_call(interview, application, candidate, caller.id)
        for interview, application, candidate in result.all()
    ]
    return {"calls": calls, "caller_id": caller.id, "total_calls": len(calls)}


async def reschedule_call(
    db: AsyncSession, caller: User, call_id: int, scheduled_time: datetime
) -> Dict[str, Any]:
    user_ids = await permitted_user_ids(db, caller.id)
    row = (
        await db.execute(
            select(Interview, User)
            .outerjoin(User, Interview.user_id == User.id)
            .where(Interview.id == call_id, Interview.user_id.in_(user_ids))
        )
    ).first()
    if row is None:
        raise NotFoundError("Call not found")

    interview, candidate = row
    previous_time = interview.scheduled_date
    interview.scheduled_date = scheduled_time
    await log_caller_activity(
        db,
        caller.id,
        "call_rescheduled",
        contact_name=(candidate.full_name or candidate.username) if candidate else None,
        company=interview.company_name,
        details={
            "interview_id": call_id,
            "previous_time": isoformat(previous_time),
            "new_time": scheduled_time.isoformat(),
        },
    )
    logger.info(f"Caller {caller.id} rescheduled interview {call_id} to {scheduled_time}")
    return {
        "success": True,
        "message": "Call rescheduled successfully",
        "call_id": call_id,
        "new_scheduled_time": scheduled_time.isoformat(),
        "caller_id": caller.id,
    }


async def get_caller_stats(db: AsyncSession, caller: User, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Seven-day call summary over the interviews of permitted users."""
    now = now or datetime.utcnow()
    user_ids = await permitted_user_ids(db, caller.id)
    interviews = []
    if user_ids:
        interviews = list(
            (await db.execute(select(Interview).where(Interview.user_id.in_(user_ids)))).scalars().all()
        )

    today = start_of_day(now).date()
    week_start = now - timedelta(days=7)
    month_start = start_of_month(now)

    todays = [i for i in interviews if i.scheduled_date.date() == today]
    this_week = [i for i in interviews if i.scheduled_date >= week_start]
    completed_week = [i for i in this_week if i.status == "completed"]

    durations = [i.duration for i in completed_week if i.duration is not None]
    avg_duration = sum(durations) / len(durations) if durations else 0
    follow_ups = sum(1 for i in completed_week if i.feedback is not None)
    success_rate = round(len(completed_week) / len(this_week) * 100) if this_week else 0
    performance_score = min(100, round(success_rate * 0.7 + follow_ups * 5 + (15 if avg_duration > 30 else 5)))

    trend = {day: {"calls": 0, "success": 0} for day in WEEK_DAYS}
    for interview in this_week:
        bucket = trend[WEEK_DAYS[interview.scheduled_date.weekday()]]
        bucket["calls"] += 1
        if interview.status == "completed":
            bucket["success"] += 1

    return {
        "stats": {
            "todayCalls": len(todays),
            "pendingCalls": sum(1 for i in todays if i.status == "scheduled"),
            "completedToday": sum(1 for i in todays if i.status == "completed"),
            "successRate": success_rate,
            "totalCallsThisWeek": len(this_week),
            "totalCallsThisMonth": sum(1 for i in interviews if i.scheduled_date >= month_start),
            "averageCallDuration": round(avg_duration),
            "followUpsGenerated": follow_ups,
            "upcomingCalls": sum(1 for i in interviews if i.status == "scheduled" and i.scheduled_date > now),
            "overdueFollowUps": 0,
            "performanceScore": performance_score,
            "callsByType": dict(Counter(i.interview_type or "unknown" for i in this_week)),
            "callsByStatus": dict(Counter(i.status or "unknown" for i in this_week)),
            "weeklyTrend": [{"day": day, **trend[day]} for day in WEEK_DAYS],
        },
        "caller_id": caller.id,
        "data_period": "Last 7 days",
    }


async def list_call_schedules(db: AsyncSession, caller: User) -> List[Dict[str, Any]]:
    result = await db.execute(
        select(CallSchedule, User)
        .outerjoin(User, CallSchedule.created_by == User.id)
        .where(CallSchedule.assigned_caller_id == caller.id)
        .order_by(CallSchedule.scheduled_time.asc())
    )
    schedules = []
    for schedule, creator in result.all():
        entry = CallScheduleResponse.model_validate(schedule).model_dump(mode="json")
        entry["created_by_name"] = (creator.full_name or creator.username) if creator else None
        schedules.append(entry)
    return schedules


def _call_label(schedule: CallSchedule) -> str:
    return f"{schedule.contact_name} at {schedule.company or 'N/A'}"


async def create_call_schedule(db: AsyncSession, caller: User, payload: CallScheduleCreate) -> CallSchedule:
    if not payload.contact_name or payload.scheduled_time is None:
        raise ValidationFailedError("Contact name and scheduled time are required")

    reminders = payload.reminder_minutes or list(DEFAULT_REMINDER_MINUTES)
    schedule = CallSchedule(
        contact_name=payload.contact_name,
        contact_email=payload.contact_email,
        contact_phone=payload.contact_phone,
        company=payload.company,
        call_type=payload.call_type,
        scheduled_time=payload.scheduled_time,
        duration=payload.duration,
        priority=payload.priority,
        notes=payload.notes,
        preparation_notes=payload.preparation_notes,
        reminder_minutes=reminders,
        status="scheduled",
        assigned_caller_id=caller.id,
        created_by=caller.id,
    )
    db.add(schedule)
    await db.flush()

    db.add(
        CallNotification(
            caller_id=caller.id,
            call_schedule_id=schedule.id,
            notification_type="assignment",
            title="New Call Assigned",
            message=f"You have been assigned a new call with {_call_label(schedule)}",
            scheduled_for=payload.scheduled_time - timedelta(minutes=reminders[0] if reminders else 15),
            priority=payload.priority,
            status="pending",
        )
    )
    await log_caller_activity(
        db,
        caller.id,
        "call_scheduled",
        call_schedule_id=schedule.id,
        contact_name=schedule.contact_name,
        company=schedule.company,
    )
    return schedule


async def _assigned_schedule(db: AsyncSession, caller: User, schedule_id: int) -> CallSchedule:
    schedule = (
        await db.execute(
            select(CallSchedule).where(
                CallSchedule.id == schedule_id,
                CallSchedule.assigned_caller_id == caller.id,
            )
        )
    ).scalar_one_or_none()
    if schedule is None:
        raise NotFoundError("Call not found or not assigned to you")
    return schedule


async def start_call(
    db: AsyncSession, caller: User, schedule_id: int, now: Optional[datetime] = None
) -> CallSchedule:
    now = now or datetime.utcnow()
    schedule = await _assigned_schedule(db, caller, schedule_id)
    if schedule.status != "scheduled":
        raise ValidationFailedError("Call must be in scheduled status to start")

    schedule.status = "in_progress"
    db.add(
        CallNotification(
            caller_id=caller.id,
            call_schedule_id=schedule.id,
            notification_type="status_change",
            title="Call Started",
            message=f"Call with {_call_label(schedule)} has been started",
            scheduled_for=now,
            sent_at=now,
            status="sent",
            priority="medium",
        )
    )
    await log_caller_activity(
        db,
        caller.id,
        "call_started",
        call_schedule_id=schedule.id,
        contact_name=schedule.contact_name,
        company=schedule.company,
    )
    return schedule


STATUS_TITLES = {
    "completed": "Call Completed",
    "failed": "Call Failed",
    "in_progress": "Call Started",
}


async def record_call_outcome(
    db: AsyncSession,
    caller_id: int,
    status: str,
    actual_duration: Optional[int],
    now: datetime,
) -> CallerPerformance:
    """Fold one completed/failed call into today's performance row."""
    performance = await get_or_create_performance(db, caller_id, now.date())

    if status == "completed":
        performance.calls_completed += 1
        if actual_duration:
            performance.total_call_duration += actual_duration
    else:
        performance.calls_failed += 1

    completed = performance.calls_completed
    attempted = completed + performance.calls_failed
    performance.success_rate = round(completed / attempted * 100, 2) if attempted else 0
    performance.average_call_duration = (
        round(performance.total_call_duration / completed, 2) if completed else 0
    )
    performance.performance_score = (
        round(completed / attempted * 70 + min(completed, 10) * 3, 2) if attempted else 0
    )
    return performance


async def update_call_status(
    db: AsyncSession,
    caller: User,
    schedule_id: int,
    payload: CallStatusUpdate,
    now: Optional[datetime] = None,
) -> CallSchedule:
    now = now or datetime.utcnow()
    if not payload.status:
        raise ValidationFailedError("Status is required")
    if payload.status not in CALL_STATUSES:
        raise ValidationFailedError("Invalid call status")

    schedule = await _assigned_schedule(db, caller, schedule_id)
    schedule.status = payload.status
    if payload.outcome_notes is not None:
        schedule.outcome_notes = payload.outcome_notes
    if payload.failed_reason is not None:
        schedule.failed_reason = payload.failed_reason
    if payload.actual_duration is not None:
        schedule.actual_duration = payload.actual_duration
    if payload.completed_at is not None:
        schedule.completed_at = payload.completed_at
    elif payload.status == "completed":
        schedule.completed_at = now

    db.add(
        CallNotification(
            caller_id=caller.id,
            call_schedule_id=schedule.id,
            notification_type="status_change",
            title=STATUS_TITLES.get(payload.status, "Call Status Updated"),
            message=f"Call with {_call_label(schedule)} has been marked as {payload.status}",
            scheduled_for=now,
            sent_at=now,
            status="sent",
            priority="medium",
        )
    )

    if payload.status in ("completed", "failed"):
        await record_call_outcome(db, caller.id, payload.status, payload.actual_duration, now)
        await log_caller_activity(
            db,
            caller.id,
            f"call_{payload.status}",
            call_schedule_id=schedule.id,
            contact_name=schedule.contact_name,
            company=schedule.company,
            call_duration=payload.actual_duration,
            details={"outcome_notes": payload.outcome_notes, "failed_reason": payload.failed_reason},
        )
    elif payload.status == "cancelled":
        await log_caller_activity(
            db,
            caller.id,
            "call_cancelled",
            call_schedule_id=schedule.id,
            contact_name=schedule.contact_name,
            company=schedule.company,
        )

    logger.info(f"Call schedule {schedule.id} marked {payload.status} by caller {caller.id}")
    return schedule


async def list_notifications(db: AsyncSession, caller: User, limit: int = 50) -> List[Dict[str, Any]]:
    result = await db.execute(
        select(CallNotification, CallSchedule)
        .outerjoin(CallSchedule, CallNotification.call_schedule_id == CallSchedule.id)
        .where(CallNotification.caller_id == caller.id)
        .order_by(CallNotification.scheduled_for.desc(), CallNotification.priority.desc())
        .limit(limit)
    )
    notifications = []
    for notification, schedule in result.all():
        entry = NotificationResponse.model_validate(notification).model_dump(mode="json")
        entry["call_details"] = (
            {
                "contact_name": schedule.contact_name,
                "company": schedule.company,
                "scheduled_time": isoformat(schedule.scheduled_time),
                "call_type": schedule.call_type,
            }
            if schedule
            else None
        )
        notifications.append(entry)
    return notifications


async def create_notification(db: AsyncSession, caller: User, payload: NotificationCreate) -> CallNotification:
    if not payload.title or not payload.message or payload.scheduled_for is None:
        raise ValidationFailedError("Title, message, and scheduled_for are required")

    notification = CallNotification(
        caller_id=caller.id,
        call_schedule_id=payload.call_schedule_id,
        notification_type=payload.notification_type,
        title=payload.title,
        message=payload.message,
        scheduled_for=payload.scheduled_for,
        priority=payload.priority,
        delivery_method=payload.delivery_method,
        status="pending",
    )
    db.add(notification)
    return notification


async def mark_notification_read(
    db: AsyncSession, caller: User, notification_id: int, now: Optional[datetime] = None
) -> CallNotification:
    notification = (
        await db.execute(
            select(CallNotification).where(
                CallNotification.id == notification_id,
                CallNotification.caller_id == caller.id,
            )
        )
    ).scalar_one_or_none()
    if notification is None:
        raise NotFoundError("Notification not found")

    notification.status = "read"
    notification.read_at = now or datetime.utcnow()
    return notification


async def list_performance(
    db: AsyncSession, caller: User, days: int = 30, now: Optional[datetime] = None
) -> List[Dict[str, Any]]:
    now = now or datetime.utcnow()
    result = await db.execute(
        select(CallerPerformance)
        .where(
            CallerPerformance.caller_id == caller.id,
            CallerPerformance.date >= (now - timedelta(days=days)).date(),
        )
        .order_by(CallerPerformance.date.desc())
    )
    return [
        {
            "id": row.id,
            "date": row.date.isoformat(),
            "calls_scheduled": row.calls_scheduled,
            "calls_completed": row.calls_completed,
            "calls_failed": row.calls_failed,
            "total_call_duration": row.total_call_duration,
            "average_call_duration": row.average_call_duration,
            "success_rate": row.success_rate,
            "performance_score": row.performance_score,
        }
        for row in result.scalars().all()
    ]


async def dispatch_due_notifications(db: AsyncSession, now: Optional[datetime] = None) -> int:
    """Mark pending notifications whose time has come as sent."""
    now = now or datetime.utcnow()
    result = await db.execute(
        select(CallNotification).where(
            CallNotification.status == "pending",
            CallNotification.scheduled_for <= now,
        )
    )
    due = result.scalars().all()
    for notification in due:
        notification.status = "sent"
        notification.sent_at = now
        logger.info(
            f"Dispatched notification {notification.id} to caller {notification.caller_id}: {notification.title}"
        )
    return len(due)
