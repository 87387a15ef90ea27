"""Authenticated resume downloads."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import FileResponse
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from jobtrack.api.deps import get_db, get_resume_storage
from jobtrack.core.security import get_user_from_token, is_admin, security
from jobtrack.services.resume_storage_service import ResumeStorageService

router = APIRouter()


@router.get("/resumes/{filename}")
async def download_resume(
    filename: str,
    token: Optional[str] = Query(None, description="Access token, for links opened outside the app"),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db),
    storage: ResumeStorageService = Depends(get_resume_storage),
):
    """Serve a stored resume inline. Non-admins may only read their own files."""
    access_token = credentials.credentials if credentials else token
    if not access_token:
        raise HTTPException(status_code=401, detail="Access token required")

    try:
        user = await get_user_from_token(access_token, db)
    except HTTPException as exc:
        raise HTTPException(status_code=401, detail="Invalid token") from exc

    path = storage.resolve(filename, user.id, is_admin(user))
    return FileResponse(
        path,
        media_type=storage.content_type_for(filename),
        headers={"Content-Disposition": f'inline; filename="{filename}"'},
    )
