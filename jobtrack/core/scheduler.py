"""
Application Scheduler - APScheduler Integration

Periodic jobs for the API process:

- dispatch of due caller notifications
- optional nightly rebuild of caller performance rows from activity logs
"""

import logging
from datetime import datetime, timedelta

from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_EXECUTED
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy import select

from jobtrack.config import settings

logger = logging.getLogger(__name__)

# Global scheduler instance
scheduler = AsyncIOScheduler(
    timezone="UTC",
    job_defaults={
        "coalesce": True,  # Combine missed executions into one
        "max_instances": 1,
        "misfire_grace_time": 300,
    },
)


def scheduler_listener(event):
    """Log the outcome of every job run."""
    if event.exception:
        logger.error(f"❌ Job '{event.job_id}' failed with exception: {event.exception}")
    else:
        logger.debug(f"✅ Job '{event.job_id}' executed successfully")


scheduler.add_listener(scheduler_listener, EVENT_JOB_EXECUTED | EVENT_JOB_ERROR)


async def dispatch_notifications():
    """Scheduled task: mark pending caller notifications whose time has come as sent."""
    from jobtrack.db.session import AsyncSessionLocal
    from jobtrack.services.caller_service import dispatch_due_notifications

    async with AsyncSessionLocal() as db:
        try:
            dispatched = await dispatch_due_notifications(db)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

    if dispatched:
        logger.info(f"📨 Dispatched {dispatched} caller notifications")
    return dispatched


async def rebuild_caller_performance():
    """Scheduled task: recompute yesterday's performance row for every caller with activity."""
    from jobtrack.db.session import AsyncSessionLocal
    from jobtrack.models.activity_log import CallerActivityLog
    from jobtrack.services.caller_activity_service import update_caller_performance

    day = (datetime.utcnow() - timedelta(days=1)).date()
    day_start = datetime.combine(day, datetime.min.time())

    async with AsyncSessionLocal() as db:
        try:
            result = await db.execute(
                select(CallerActivityLog.caller_id)
                .where(
                    CallerActivityLog.created_at >= day_start,
                    CallerActivityLog.created_at < day_start + timedelta(days=1),
                )
                .distinct()
            )
            caller_ids = [row[0] for row in result.all()]
            for caller_id in caller_ids:
                await update_caller_performance(db, caller_id, day)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

    logger.info(f"📊 Rebuilt performance for {len(caller_ids)} callers ({day.isoformat()})")
    return len(caller_ids)


def setup_jobs():
    """Register all scheduled jobs."""
    logger.info("⏰ Setting up scheduled jobs...")

    scheduler.add_job(
        dispatch_notifications,
        IntervalTrigger(seconds=settings.NOTIFICATION_DISPATCH_INTERVAL_SECONDS),
        id="dispatch_notifications",
        name="Caller notification dispatch",
        replace_existing=True,
    )
    logger.info(
        f"   ✅ Added: dispatch_notifications (every {settings.NOTIFICATION_DISPATCH_INTERVAL_SECONDS}s)"
    )

    if settings.PERFORMANCE_ROLLUP_ENABLED:
        scheduler.add_job(
            rebuild_caller_performance,
            CronTrigger(hour=settings.PERFORMANCE_ROLLUP_HOUR, minute=5),
            id="caller_performance_rollup",
            name="Caller performance rollup",
            replace_existing=True,
        )
        logger.info(f"   ✅ Added: caller_performance_rollup ({settings.PERFORMANCE_ROLLUP_HOUR:02d}:05 UTC)")


def start_scheduler():
    """Start the scheduler. Called from the application lifespan."""
    if not scheduler.running:
        setup_jobs()
        scheduler.start()
        logger.info(f"🚀 Scheduler started with {len(scheduler.get_jobs())} jobs")
    else:
        logger.warning("⚠️  Scheduler already running")


def stop_scheduler():
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("🛑 Scheduler stopped")
