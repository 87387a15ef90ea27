"""Interview endpoints."""

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jobtrack.api.deps import get_current_user, get_db, get_resume_storage
from jobtrack.core.security import is_admin
from jobtrack.models.interview import Interview
from jobtrack.models.job_application import JobApplication
from jobtrack.models.user import User
from jobtrack.schemas.interview import (
    InterviewCreate,
    InterviewListItem,
    InterviewResponse,
    InterviewUpdate,
)
from jobtrack.schemas.job_application import CopyResumeRequest, ResumeUploadResponse
from jobtrack.services.activity_service import log_activity
from jobtrack.services.permission_service import permitted_user_ids
from jobtrack.services.resume_storage_service import ResumeStorageService
from jobtrack.utils.constants import INTERVIEW_STATUSES, INTERVIEW_TYPES

logger = logging.getLogger(__name__)

router = APIRouter()


def _entity_name(interview: Interview) -> str:
    return f"Interview for {interview.position_title} at {interview.company_name}"


def _check_choices(data: dict):
    if data.get("interview_type") is not None and data["interview_type"] not in INTERVIEW_TYPES:
        raise HTTPException(status_code=400, detail="Invalid interview type")
    if data.get("status") is not None and data["status"] not in INTERVIEW_STATUSES:
        raise HTTPException(status_code=400, detail="Invalid interview status")


async def _get_own_interview(db: AsyncSession, interview_id: int, user: User) -> Interview:
    result = await db.execute(
        select(Interview).where(Interview.id == interview_id, Interview.user_id == user.id)
    )
    interview = result.scalar_one_or_none()
    if not interview:
        raise HTTPException(status_code=404, detail="Interview not found")
    return interview


async def _linked_application(db: AsyncSession, application_id: int, user: User) -> JobApplication:
    result = await db.execute(select(JobApplication).where(JobApplication.id == application_id))
    application = result.scalar_one_or_none()
    if not application or (application.user_id != user.id and not is_admin(user)):
        raise HTTPException(status_code=404, detail="Job application not found")
    return application


@router.get("", response_model=List[InterviewListItem])
async def list_interviews(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    status_filter: Optional[str] = Query(None, alias="status"),
):
    """
    Interviews visible to the current user, newest scheduled first.

    Admins see every interview. Other users see their own plus those of
    users whose schedules they were granted access to.
    """
    query = (
        select(
            Interview,
            User.username,
            User.full_name,
            JobApplication.company_name,
            JobApplication.position_title,
        )
        .outerjoin(User, Interview.user_id == User.id)
        .outerjoin(JobApplication, Interview.job_application_id == JobApplication.id)
        .order_by(Interview.scheduled_date.desc())
    )

    if not is_admin(current_user):
        visible = [current_user.id, *await permitted_user_ids(db, current_user.id)]
        query = query.where(Interview.user_id.in_(visible))

    if status_filter == "upcoming":
        query = query.where(Interview.scheduled_date > datetime.utcnow())
    elif status_filter and status_filter != "all":
        query = query.where(Interview.status == status_filter)

    result = await db.execute(query)
    items = []
    for interview, username, full_name, app_company, app_position in result.all():
        item = InterviewListItem(
            **InterviewResponse.model_validate(interview).model_dump(),
            username=username,
            full_name=full_name,
        )
        item.company_name = item.company_name or app_company
        item.position_title = item.position_title or app_position
        items.append(item)
    return items


@router.post("", response_model=InterviewResponse, status_code=status.HTTP_201_CREATED)
async def create_interview(
    payload: InterviewCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    data = payload.model_dump(exclude_none=True)
    _check_choices(data)

    if not payload.job_application_id and not (payload.company_name and payload.position_title):
        raise HTTPException(
            status_code=400,
            detail="Either job_application_id or both company_name and position_title are required",
        )

    if payload.job_application_id:
        application = await _linked_application(db, payload.job_application_id, current_user)
        data.setdefault("company_name", application.company_name)
        data.setdefault("position_title", application.position_title)

    data.setdefault("interview_type", "video")
    data.setdefault("duration", 60)
    data.setdefault("status", "scheduled")

    interview = Interview(user_id=current_user.id, **data)
    db.add(interview)
    await db.flush()

    await log_activity(
        db,
        current_user.id,
        "scheduled",
        entity_type="interview",
        entity_id=interview.id,
        entity_name=_entity_name(interview),
        details={"interview_type": interview.interview_type, "scheduled_date": interview.scheduled_date.isoformat()},
    )
    await db.commit()
    await db.refresh(interview)

    logger.info(f"User {current_user.id} scheduled interview {interview.id}")
    return interview


@router.post("/upload-resume", response_model=ResumeUploadResponse)
async def upload_interview_resume(
    resume: UploadFile = File(...),
    company: Optional[str] = Form(None),
    company_name: Optional[str] = Form(None),
    current_user: User = Depends(get_current_user),
    storage: ResumeStorageService = Depends(get_resume_storage),
):
    content = await resume.read()
    stored = storage.save(
        current_user.id,
        company or company_name or "Unknown",
        content,
        resume.content_type,
        resume.filename,
    )
    return ResumeUploadResponse(**stored)


@router.post("/copy-resume")
async def copy_interview_resume(
    payload: CopyResumeRequest,
    current_user: User = Depends(get_current_user),
    storage: ResumeStorageService = Depends(get_resume_storage),
):
    """Reuse a job application's resume for an interview."""
    copied = storage.copy(
        current_user.id,
        payload.source_resume_path,
        payload.company_name or "Unknown",
        is_admin=is_admin(current_user),
    )
    return {"success": True, "message": "Resume copied successfully", **copied}


@router.get("/{interview_id}", response_model=InterviewResponse)
async def get_interview(
    interview_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return await _get_own_interview(db, interview_id, current_user)


@router.put("/{interview_id}", response_model=InterviewResponse)
async def update_interview(
    interview_id: int,
    payload: InterviewUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    interview = await _get_own_interview(db, interview_id, current_user)

    update_data = payload.model_dump(exclude_unset=True)
    _check_choices(update_data)
    if update_data.get("job_application_id"):
        await _linked_application(db, update_data["job_application_id"], current_user)

    previous_status = interview.status
    for field, value in update_data.items():
        setattr(interview, field, value)

    if not interview.job_application_id and not (interview.company_name and interview.position_title):
        raise HTTPException(
            status_code=400,
            detail="Either job_application_id or both company_name and position_title are required",
        )

    status_changed = "status" in update_data and update_data["status"] != previous_status
    await log_activity(
        db,
        current_user.id,
        "status_changed" if status_changed else "updated",
        entity_type="interview",
        entity_id=interview.id,
        entity_name=_entity_name(interview),
        details={"from": previous_status, "to": interview.status} if status_changed else None,
    )
    await db.commit()
    await db.refresh(interview)
    return interview


@router.delete("/{interview_id}")
async def delete_interview(
    interview_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    interview = await _get_own_interview(db, interview_id, current_user)

    await log_activity(
        db,
        current_user.id,
        "deleted",
        entity_type="interview",
        entity_id=interview.id,
        entity_name=_entity_name(interview),
    )
    await db.delete(interview)
    await db.commit()

    return {"success": True, "message": "Interview deleted successfully"}
