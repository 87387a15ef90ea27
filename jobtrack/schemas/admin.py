"""Admin schemas."""

from typing import List, Optional

from pydantic import BaseModel, Field


class AdminUserCreate(BaseModel):
    username: Optional[str] = Field(None, max_length=50)
    email: Optional[str] = Field(None, max_length=100)
    password: Optional[str] = None
    full_name: Optional[str] = Field(None, max_length=100)
    role: int = Field(1, ge=0, le=2)
    is_active: bool = True
    phone: Optional[str] = Field(None, max_length=20)
    department: Optional[str] = Field(None, max_length=50)
    position: Optional[str] = Field(None, max_length=50)


class AdminUserUpdate(BaseModel):
    username: Optional[str] = Field(None, max_length=50)
    email: Optional[str] = Field(None, max_length=100)
    full_name: Optional[str] = Field(None, max_length=100)
    role: Optional[int] = Field(None, ge=0, le=2)
    is_active: Optional[bool] = None
    phone: Optional[str] = Field(None, max_length=20)
    department: Optional[str] = Field(None, max_length=50)
    position: Optional[str] = Field(None, max_length=50)


class ToggleStatusRequest(BaseModel):
    is_active: bool


class PermissionGrantRequest(BaseModel):
    user_id: Optional[int] = None
    target_user_id: Optional[int] = None
    target_user_ids: Optional[List[int]] = None

    def targets(self) -> List[int]:
        """Requested targets, single id or list, without duplicates."""
        ids = list(self.target_user_ids or [])
        if self.target_user_id is not None:
            ids.append(self.target_user_id)
        return list(dict.fromkeys(ids))


class PermissionRevokeRequest(BaseModel):
    permission_id: Optional[int] = None


class ExportReportRequest(BaseModel):
    report_type: str = Field(..., alias="reportType")
    start_date: Optional[str] = Field(None, alias="startDate")
    end_date: Optional[str] = Field(None, alias="endDate")

    class Config:
        populate_by_name = True
