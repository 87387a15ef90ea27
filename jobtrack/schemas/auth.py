"""Authentication schemas."""

from __future__ import annotations  # Enable forward references

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class RegisterRequest(BaseModel):
    """Register request schema."""

    email: Optional[EmailStr] = None
    username: Optional[str] = Field(None, max_length=50)
    password: Optional[str] = None
    full_name: Optional[str] = Field(None, max_length=100)


class RegisterResponse(BaseModel):
    """Register response schema."""

    message: str
    user: "UserResponse"
    requires_approval: bool = Field(True, alias="requiresApproval")

    class Config:
        populate_by_name = True


class LoginRequest(BaseModel):
    """Login request schema."""

    email: EmailStr
    password: str


class AuthUser(BaseModel):
    """User block returned alongside tokens."""

    id: int
    email: str
    username: str
    role: int
    full_name: Optional[str] = None

    class Config:
        from_attributes = True


class LoginResponse(BaseModel):
    """Login response schema."""

    success: bool = True
    message: str = "Login successful"
    user: AuthUser
    token: str
    refresh_token: str = Field(..., alias="refreshToken")

    class Config:
        populate_by_name = True


class RefreshRequest(BaseModel):
    refresh_token: Optional[str] = Field(None, alias="refreshToken")

    class Config:
        populate_by_name = True


class TokenPair(BaseModel):
    success: bool = True
    token: str
    refresh_token: str = Field(..., alias="refreshToken")

    class Config:
        populate_by_name = True


class UserResponse(BaseModel):
    """User response schema."""

    id: int
    email: str
    username: str
    role: int
    full_name: Optional[str] = None
    is_active: bool
    last_login: Optional[datetime] = None
    phone: Optional[str] = None
    department: Optional[str] = None
    position: Optional[str] = None
    profile_picture: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


# Rebuild models to resolve forward references
RegisterResponse.model_rebuild()
