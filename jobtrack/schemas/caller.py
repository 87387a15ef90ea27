"""Caller workspace schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from jobtrack.utils.date_ranges import to_naive_utc


class RescheduleRequest(BaseModel):
    scheduled_time: datetime

    @field_validator("scheduled_time")
    @classmethod
    def naive_scheduled_time(cls, value):
        return to_naive_utc(value)


class CallScheduleCreate(BaseModel):
    contact_name: Optional[str] = Field(None, max_length=100)
    contact_email: Optional[str] = Field(None, max_length=100)
    contact_phone: Optional[str] = Field(None, max_length=30)
    company: Optional[str] = Field(None, max_length=100)
    call_type: str = "follow_up"
    scheduled_time: Optional[datetime] = None
    duration: int = Field(30, gt=0)
    priority: str = "medium"
    notes: Optional[str] = None
    preparation_notes: Optional[str] = None
    reminder_minutes: Optional[List[int]] = None

    @field_validator("scheduled_time")
    @classmethod
    def naive_scheduled_time(cls, value):
        return to_naive_utc(value)


class CallScheduleResponse(BaseModel):
    id: int
    contact_name: str
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    company: Optional[str] = None
    call_type: Optional[str] = None
    scheduled_time: datetime
    duration: Optional[int] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    notes: Optional[str] = None
    preparation_notes: Optional[str] = None
    outcome_notes: Optional[str] = None
    failed_reason: Optional[str] = None
    actual_duration: Optional[int] = None
    assigned_caller_id: Optional[int] = None
    created_by: Optional[int] = None
    reminder_minutes: Optional[List[int]] = None
    completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CallStatusUpdate(BaseModel):
    status: Optional[str] = None
    outcome_notes: Optional[str] = None
    failed_reason: Optional[str] = None
    completed_at: Optional[datetime] = None
    actual_duration: Optional[int] = Field(None, ge=0)

    @field_validator("completed_at")
    @classmethod
    def naive_completed_at(cls, value):
        return to_naive_utc(value)


class NotificationCreate(BaseModel):
    title: Optional[str] = Field(None, max_length=200)
    message: Optional[str] = None
    scheduled_for: Optional[datetime] = None
    call_schedule_id: Optional[int] = None
    notification_type: str = "reminder"
    priority: str = "medium"
    delivery_method: str = "in_app"

    @field_validator("scheduled_for")
    @classmethod
    def naive_scheduled_for(cls, value):
        return to_naive_utc(value)


class NotificationResponse(BaseModel):
    id: int
    caller_id: int
    call_schedule_id: Optional[int] = None
    notification_type: Optional[str] = None
    title: str
    message: str
    scheduled_for: datetime
    sent_at: Optional[datetime] = None
    read_at: Optional[datetime] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    delivery_method: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
