"""
Caller Activity Service

Tracks call-related actions performed by callers and rolls them up into
the daily caller_performance table.
"""

from datetime import date, datetime, time, timedelta
from typing import Any, Dict, List, Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jobtrack.models.activity_log import CallerActivityLog
from jobtrack.models.call import CallerPerformance

logger = structlog.get_logger(__name__)


async def log_caller_activity(
    db: AsyncSession,
    caller_id: int,
    activity_type: str,
    call_schedule_id: Optional[int] = None,
    contact_name: Optional[str] = None,
    company: Optional[str] = None,
    call_duration: Optional[int] = None,
    details: Optional[Dict[str, Any]] = None,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> CallerActivityLog:
    """Add a caller activity row to the session; the caller commits."""
    entry = CallerActivityLog(
        caller_id=caller_id,
        activity_type=activity_type,
        call_schedule_id=call_schedule_id,
        contact_name=contact_name,
        company=company,
        call_duration=call_duration,
        details=details,
        ip_address=ip_address,
        user_agent=user_agent,
    )
    db.add(entry)
    logger.info("caller_activity_logged", caller_id=caller_id, activity_type=activity_type)
    return entry


async def get_caller_activity_stats(
    db: AsyncSession,
    caller_id: int,
    days: int = 30,
    now: Optional[datetime] = None,
) -> List[Dict[str, Any]]:
    """Activity counts grouped by type over the last `days` days, most frequent first."""
    now = now or datetime.utcnow()
    result = await db.execute(
        select(CallerActivityLog).where(
            CallerActivityLog.caller_id == caller_id,
            CallerActivityLog.created_at >= now - timedelta(days=days),
        )
    )

    grouped: Dict[str, Dict[str, Any]] = {}
    for log in result.scalars().all():
        stats = grouped.setdefault(
            log.activity_type,
            {"activity_type": log.activity_type, "count": 0, "durations": [], "last_activity": None},
        )
        stats["count"] += 1
        if log.call_duration is not None:
            stats["durations"].append(log.call_duration)
        if stats["last_activity"] is None or log.created_at > stats["last_activity"]:
            stats["last_activity"] = log.created_at

    output = []
    for stats in grouped.values():
        durations = stats.pop("durations")
        stats["avg_duration"] = round(sum(durations) / len(durations), 2) if durations else None
        stats["last_activity"] = stats["last_activity"].isoformat()
        output.append(stats)
    output.sort(key=lambda s: s["count"], reverse=True)
    return output


def calculate_performance_score(success_rate: float, avg_duration: float, total_calls: int) -> float:
    """Weighted 0-100 score: 40 for success rate, 30 for volume, 30 for call length.

    Calls between 15 and 30 minutes get the full duration share; the share shrinks
    linearly with distance from 22.5 minutes outside that window.
    """
    success_component = (success_rate / 100) * 40
    volume_component = min(total_calls / 10, 1) * 30

    if 15 <= avg_duration <= 30:
        duration_component = 30
    else:
        duration_component = max(0, 30 - abs(avg_duration - 22.5) / 22.5 * 30)

    return round(success_component + volume_component + duration_component, 2)


async def get_or_create_performance(db: AsyncSession, caller_id: int, day: date) -> CallerPerformance:
    result = await db.execute(
        select(CallerPerformance).where(
            CallerPerformance.caller_id == caller_id,
            CallerPerformance.date == day,
        )
    )
    performance = result.scalar_one_or_none()
    if performance is None:
        performance = CallerPerformance(
            caller_id=caller_id,
            date=day,
            calls_scheduled=0,
            calls_completed=0,
            calls_failed=0,
            total_call_duration=0,
            average_call_duration=0,
            success_rate=0,
            performance_score=0,
        )
        db.add(performance)
        await db.flush()
    return performance


async def update_caller_performance(
    db: AsyncSession,
    caller_id: int,
    day: Optional[date] = None,
) -> CallerPerformance:
    """Recompute one caller's daily performance row from that day's activity logs."""
    day = day or datetime.utcnow().date()
    day_start = datetime.combine(day, time.min)

    result = await db.execute(
        select(CallerActivityLog).where(
            CallerActivityLog.caller_id == caller_id,
            CallerActivityLog.created_at >= day_start,
            CallerActivityLog.created_at < day_start + timedelta(days=1),
        )
    )
    logs = result.scalars().all()

    scheduled = sum(1 for log in logs if log.activity_type == "call_scheduled")
    completed_logs = [log for log in logs if log.activity_type == "call_completed"]
    failed = sum(1 for log in logs if log.activity_type == "call_failed")
    completed = len(completed_logs)
    total_duration = sum(log.call_duration or 0 for log in completed_logs)

    attempted = completed + failed
    success_rate = round(completed / attempted * 100, 2) if attempted else 0
    avg_duration = round(total_duration / completed, 2) if completed else 0

    performance = await get_or_create_performance(db, caller_id, day)
    performance.calls_scheduled = scheduled
    performance.calls_completed = completed
    performance.calls_failed = failed
    performance.total_call_duration = total_duration
    performance.average_call_duration = avg_duration
    performance.success_rate = success_rate
    performance.performance_score = calculate_performance_score(success_rate, avg_duration, attempted)

    logger.info(
        "caller_performance_updated",
        caller_id=caller_id,
        day=day.isoformat(),
        completed=completed,
        failed=failed,
    )
    return performance
