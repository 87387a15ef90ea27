"""Job application schemas."""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class JobApplicationBase(BaseModel):
    application_date: Optional[date] = None
    status: Optional[str] = Field(None, max_length=30)
    job_description: Optional[str] = None
    requirements: Optional[str] = None
    salary_range: Optional[str] = Field(None, max_length=50)
    location: Optional[str] = Field(None, max_length=100)
    application_url: Optional[str] = Field(None, max_length=500)
    notes: Optional[str] = None
    follow_up_date: Optional[date] = None
    resume_file_path: Optional[str] = Field(None, max_length=500)
    has_resume: Optional[bool] = None


class JobApplicationCreate(JobApplicationBase):
    # Checked in the handler so a blank value gets the same message as a missing one
    company_name: Optional[str] = Field(None, max_length=100)
    position_title: Optional[str] = Field(None, max_length=100)


class JobApplicationUpdate(JobApplicationBase):
    company_name: Optional[str] = Field(None, max_length=100)
    position_title: Optional[str] = Field(None, max_length=100)


class JobApplicationResponse(BaseModel):
    id: int
    user_id: int
    company_name: str
    position_title: str
    application_date: Optional[date] = None
    status: Optional[str] = None
    job_description: Optional[str] = None
    requirements: Optional[str] = None
    salary_range: Optional[str] = None
    location: Optional[str] = None
    application_url: Optional[str] = None
    notes: Optional[str] = None
    follow_up_date: Optional[date] = None
    resume_file_path: Optional[str] = None
    has_resume: bool = False
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class JobApplicationListItem(JobApplicationResponse):
    interview_count: int = 0
    username: Optional[str] = None
    full_name: Optional[str] = None


class JobApplicationDetail(JobApplicationResponse):
    interviews: List["InterviewResponse"] = []


class CopyResumeRequest(BaseModel):
    source_resume_path: Optional[str] = None
    company_name: Optional[str] = None


class ResumeUploadResponse(BaseModel):
    success: bool = True
    message: str = "Resume uploaded successfully"
    file_path: str = Field(..., alias="filePath")
    file_name: str = Field(..., alias="fileName")
    original_name: Optional[str] = Field(None, alias="originalName")
    size: int

    class Config:
        populate_by_name = True


from jobtrack.schemas.interview import InterviewResponse  # noqa: E402

JobApplicationDetail.model_rebuild()
