"""Interview schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from jobtrack.utils.date_ranges import to_naive_utc


class InterviewBase(BaseModel):
    interview_type: Optional[str] = Field(None, max_length=20)
    duration: Optional[int] = Field(None, gt=0)
    interviewer_name: Optional[str] = Field(None, max_length=100)
    interviewer_email: Optional[str] = Field(None, max_length=100)
    location: Optional[str] = Field(None, max_length=200)
    meeting_link: Optional[str] = Field(None, max_length=500)
    status: Optional[str] = Field(None, max_length=20)
    notes: Optional[str] = None
    feedback: Optional[str] = None
    rating: Optional[int] = Field(None, ge=1, le=5)
    company_name: Optional[str] = Field(None, max_length=100)
    position_title: Optional[str] = Field(None, max_length=100)
    job_description: Optional[str] = None
    resume_link: Optional[str] = Field(None, max_length=500)


class InterviewCreate(InterviewBase):
    job_application_id: Optional[int] = None
    scheduled_date: datetime

    @field_validator("scheduled_date")
    @classmethod
    def naive_scheduled_date(cls, value):
        return to_naive_utc(value)


class InterviewUpdate(InterviewBase):
    job_application_id: Optional[int] = None
    scheduled_date: Optional[datetime] = None

    @field_validator("scheduled_date")
    @classmethod
    def naive_scheduled_date(cls, value):
        return to_naive_utc(value)


class InterviewResponse(BaseModel):
    id: int
    user_id: int
    job_application_id: Optional[int] = None
    interview_type: Optional[str] = None
    scheduled_date: datetime
    duration: Optional[int] = None
    interviewer_name: Optional[str] = None
    interviewer_email: Optional[str] = None
    location: Optional[str] = None
    meeting_link: Optional[str] = None
    status: Optional[str] = None
    notes: Optional[str] = None
    feedback: Optional[str] = None
    rating: Optional[int] = None
    company_name: Optional[str] = None
    position_title: Optional[str] = None
    job_description: Optional[str] = None
    resume_link: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class InterviewListItem(InterviewResponse):
    username: Optional[str] = None
    full_name: Optional[str] = None
