"""
API Dependencies
Common dependencies for API endpoints (database, authentication, authorization).
"""

from typing import Optional

from fastapi import Request

from jobtrack.core.security import get_current_user, require_admin, require_caller
from jobtrack.db.session import get_db
from jobtrack.services.resume_storage_service import get_resume_storage

__all__ = [
    "get_db",
    "get_current_user",
    "require_admin",
    "require_caller",
    "get_resume_storage",
    "client_ip",
    "user_agent",
]


def client_ip(request: Request) -> Optional[str]:
    """Client address, honouring X-Forwarded-For behind a proxy."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


def user_agent(request: Request) -> Optional[str]:
    return request.headers.get("user-agent")
