"""Common constants."""

# Job application statuses
APPLICATION_STATUSES = [
    "applied",
    "screening",
    "interviewing",
    "offered",
    "rejected",
    "withdrawn",
    "accepted",
]

# Interview types
INTERVIEW_TYPES = ["phone", "video", "in_person", "technical", "panel"]

# Interview statuses
INTERVIEW_STATUSES = ["scheduled", "completed", "cancelled", "rescheduled", "in_progress"]

# Interview statuses visible to callers
CALLER_VISIBLE_INTERVIEW_STATUSES = ["scheduled", "in_progress", "completed", "cancelled"]

# Call schedule statuses
CALL_STATUSES = ["scheduled", "in_progress", "completed", "failed", "cancelled"]

# Default reminder offsets (minutes before a call)
DEFAULT_REMINDER_MINUTES = [15, 5]

# Actions shown in the admin activity feeds
RELEVANT_ACTIONS = [
    "login",
    "applied",
    "scheduled",
    "updated",
    "status_changed",
    "resume_optimized",
    "resume_downloaded",
    "cover_letter_generated",
    "cover_letter_downloaded",
]

# Actions that count towards daily active users
ENGAGEMENT_ACTIONS = ["login", "applied", "scheduled", "updated", "status_changed"]

# Workshop actions and the entity name stored for each
WORKSHOP_ENTITY_NAMES = {
    "resume_optimized": "Resume Optimization",
    "resume_downloaded": "Resume Download",
    "cover_letter_generated": "Cover Letter Generation",
    "cover_letter_downloaded": "Cover Letter Download",
}

# Resume file extensions by MIME type
RESUME_EXTENSIONS = {
    "application/pdf": "pdf",
    "application/msword": "doc",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
}

RESUME_CONTENT_TYPES = {
    ".pdf": "application/pdf",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}

# Report types for CSV export
REPORT_TYPES = ["user-activity", "content-activity", "system-health"]

# Fixed reference point for uptime figures in analytics
SYSTEM_START_DATE = "2025-09-01"
