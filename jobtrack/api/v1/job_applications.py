"""Job application endpoints, including resume upload and copy."""

import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from jobtrack.api.deps import get_current_user, get_db, get_resume_storage
from jobtrack.core.security import is_admin
from jobtrack.models.interview import Interview
from jobtrack.models.job_application import JobApplication
from jobtrack.models.user import User
from jobtrack.schemas.interview import InterviewResponse
from jobtrack.schemas.job_application import (
    CopyResumeRequest,
    JobApplicationCreate,
    JobApplicationDetail,
    JobApplicationListItem,
    JobApplicationResponse,
    JobApplicationUpdate,
    ResumeUploadResponse,
)
from jobtrack.services.activity_service import log_activity
from jobtrack.services.resume_storage_service import ResumeStorageService
from jobtrack.utils.constants import APPLICATION_STATUSES

logger = logging.getLogger(__name__)

router = APIRouter()


def _entity_name(application: JobApplication) -> str:
    return f"{application.position_title} at {application.company_name}"


def _check_status(value: Optional[str]):
    if value is not None and value not in APPLICATION_STATUSES:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid status. Must be one of: {', '.join(APPLICATION_STATUSES)}",
        )


async def _get_owned_application(db: AsyncSession, application_id: int, user: User) -> JobApplication:
    result = await db.execute(select(JobApplication).where(JobApplication.id == application_id))
    application = result.scalar_one_or_none()
    if not application:
        raise HTTPException(status_code=404, detail="Job application not found")
    if application.user_id != user.id and not is_admin(user):
        raise HTTPException(status_code=403, detail="Access denied")
    return application


@router.get("", response_model=List[JobApplicationListItem])
async def list_job_applications(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    status_filter: Optional[str] = Query(None, alias="status"),
    user_id: Optional[int] = Query(None, description="Admin only: filter by owner"),
):
    """Own applications, or every application for admins. Newest first."""
    interview_count = (
        select(func.count(Interview.id))
        .where(Interview.job_application_id == JobApplication.id)
        .correlate(JobApplication)
        .scalar_subquery()
    )
    query = (
        select(JobApplication, User.username, User.full_name, interview_count)
        .outerjoin(User, JobApplication.user_id == User.id)
        .order_by(JobApplication.created_at.desc(), JobApplication.id.desc())
    )

    if not is_admin(current_user):
        query = query.where(JobApplication.user_id == current_user.id)
    elif user_id is not None:
        query = query.where(JobApplication.user_id == user_id)

    if status_filter and status_filter != "all":
        query = query.where(JobApplication.status == status_filter)

    result = await db.execute(query)
    return [
        JobApplicationListItem(
            **JobApplicationResponse.model_validate(application).model_dump(),
            interview_count=count or 0,
            username=username,
            full_name=full_name,
        )
        for application, username, full_name, count in result.all()
    ]


@router.post("", response_model=JobApplicationResponse, status_code=status.HTTP_201_CREATED)
async def create_job_application(
    payload: JobApplicationCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not payload.company_name or not payload.position_title:
        raise HTTPException(status_code=400, detail="Company name and position title are required")
    _check_status(payload.status)

    data = payload.model_dump(exclude_none=True)
    data.setdefault("application_date", date.today())
    data["has_resume"] = bool(data.get("resume_file_path")) or data.get("has_resume", False)

    application = JobApplication(user_id=current_user.id, **data)
    db.add(application)
    await db.flush()

    await log_activity(
        db,
        current_user.id,
        "applied",
        entity_type="job_application",
        entity_id=application.id,
        entity_name=_entity_name(application),
        details={"status": application.status},
    )
    await db.commit()
    await db.refresh(application)

    logger.info(f"User {current_user.id} created job application {application.id}")
    return application


@router.post("/upload-resume", response_model=ResumeUploadResponse, response_model_by_alias=True)
async def upload_resume(
    resume: UploadFile = File(...),
    company: Optional[str] = Form(None),
    company_name: Optional[str] = Form(None),
    current_user: User = Depends(get_current_user),
    storage: ResumeStorageService = Depends(get_resume_storage),
):
    """Store a resume (pdf/doc/docx, up to 10MB) for later use on an application."""
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
async def copy_resume(
    payload: CopyResumeRequest,
    current_user: User = Depends(get_current_user),
    storage: ResumeStorageService = Depends(get_resume_storage),
):
    copied = storage.copy(
        current_user.id,
        payload.source_resume_path,
        payload.company_name or "Unknown",
        is_admin=is_admin(current_user),
    )
    return {"success": True, "message": "Resume copied successfully", **copied}


@router.get("/{application_id}", response_model=JobApplicationDetail)
async def get_job_application(
    application_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Application with its interviews, newest scheduled first."""
    application = await _get_owned_application(db, application_id, current_user)

    result = await db.execute(
        select(Interview)
        .where(Interview.job_application_id == application.id)
        .order_by(Interview.scheduled_date.desc())
    )
    interviews = [InterviewResponse.model_validate(i) for i in result.scalars().all()]

    return JobApplicationDetail(
        **JobApplicationResponse.model_validate(application).model_dump(),
        interviews=interviews,
    )


@router.put("/{application_id}", response_model=JobApplicationResponse)
async def update_job_application(
    application_id: int,
    payload: JobApplicationUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    application = await _get_owned_application(db, application_id, current_user)

    update_data = payload.model_dump(exclude_unset=True)
    _check_status(update_data.get("status"))
    for required in ("company_name", "position_title"):
        if required in update_data and not update_data[required]:
            raise HTTPException(status_code=400, detail="Company name and position title are required")

    previous_status = application.status
    for field, value in update_data.items():
        setattr(application, field, value)
    if "resume_file_path" in update_data and "has_resume" not in update_data:
        application.has_resume = bool(application.resume_file_path)

    status_changed = "status" in update_data and update_data["status"] != previous_status
    await log_activity(
        db,
        current_user.id,
        "status_changed" if status_changed else "updated",
        entity_type="job_application",
        entity_id=application.id,
        entity_name=_entity_name(application),
        details={"from": previous_status, "to": application.status} if status_changed else None,
    )
    await db.commit()
    await db.refresh(application)
    return application


@router.delete("/{application_id}")
async def delete_job_application(
    application_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    application = await _get_owned_application(db, application_id, current_user)

    await log_activity(
        db,
        current_user.id,
        "deleted",
        entity_type="job_application",
        entity_id=application.id,
        entity_name=_entity_name(application),
    )
    await db.delete(application)
    await db.commit()

    return {"success": True, "message": "Job application deleted successfully"}
