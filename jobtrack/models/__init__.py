"""Database models."""

# Base models (no foreign keys)
from jobtrack.models.user import User

# Models with foreign keys to users
from jobtrack.models.job_application import JobApplication
from jobtrack.models.interview import Interview
from jobtrack.models.schedule_permission import SchedulePermission
from jobtrack.models.session import UserSession
from jobtrack.models.call import CallSchedule, CallNotification, CallerPerformance
from jobtrack.models.activity_log import ActivityLog, CallerActivityLog

# Export all models
__all__ = [
    "User",
    "JobApplication",
    "Interview",
    "SchedulePermission",
    "UserSession",
    "CallSchedule",
    "CallNotification",
    "CallerPerformance",
    "ActivityLog",
    "CallerActivityLog",
]
