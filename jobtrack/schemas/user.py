"""User and profile schemas."""

from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class UserUpdate(BaseModel):
    """Admin update of any user."""

    email: Optional[EmailStr] = None
    username: Optional[str] = Field(None, max_length=50)
    role: Optional[int] = Field(None, ge=0, le=2)
    is_active: Optional[bool] = None
    full_name: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)
    department: Optional[str] = Field(None, max_length=50)
    position: Optional[str] = Field(None, max_length=50)


class PasswordChange(BaseModel):
    current_password: Optional[str] = Field(None, alias="currentPassword")
    new_password: Optional[str] = Field(None, alias="newPassword")

    class Config:
        populate_by_name = True


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)
    department: Optional[str] = Field(None, max_length=50)
    position: Optional[str] = Field(None, max_length=50)
    profile_picture: Optional[str] = Field(None, max_length=255)


class ProfileResponse(BaseModel):
    user_id: int
    email: str
    username: str
    full_name: Optional[str] = None
    phone: Optional[str] = None
    department: Optional[str] = None
    position: Optional[str] = None
    profile_picture: Optional[str] = None
