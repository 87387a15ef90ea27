"""API v1 routes."""

from fastapi import APIRouter

from jobtrack.api.v1 import (
    admin,
    auth,
    caller,
    dashboard,
    interviews,
    job_applications,
    profiles,
    uploads,
    users,
    workshop,
)
from jobtrack.api.v1.endpoints import admin_users, schedule_permissions

api_router = APIRouter()

# Include all route modules
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(profiles.router, prefix="/profiles", tags=["Profiles"])
api_router.include_router(job_applications.router, prefix="/job-applications", tags=["Job Applications"])
api_router.include_router(interviews.router, prefix="/interviews", tags=["Interviews"])
api_router.include_router(uploads.router, prefix="/uploads", tags=["Uploads"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
api_router.include_router(workshop.router, prefix="/workshop", tags=["Workshop"])
api_router.include_router(caller.router, prefix="/caller", tags=["Caller"])
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])

# Admin management
api_router.include_router(admin_users.router, prefix="/admin", tags=["Admin - User Management"])
api_router.include_router(
    schedule_permissions.router,
    prefix="/admin/schedule-permissions",
    tags=["Admin - Schedule Permissions"],
)
