"""Authentication endpoints."""

import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from jobtrack.api.deps import client_ip, get_current_user, get_db, user_agent
from jobtrack.config import settings
from jobtrack.core.security import (
    create_token_pair,
    decode_refresh_token,
    get_password_hash,
    verify_password,
)
from jobtrack.models.session import UserSession
from jobtrack.models.user import User
from jobtrack.schemas.auth import (
    AuthUser,
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    RegisterRequest,
    RegisterResponse,
    TokenPair,
    UserResponse,
)
from jobtrack.services.activity_service import log_activity
from jobtrack.utils.helpers import generate_hash

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """Register a new user. Accounts stay inactive until an admin approves them."""
    if not request.email or not request.username or not request.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email, username, and password are required",
        )

    if len(request.password) < settings.MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters long",
        )

    # Check if user already exists
    result = await db.execute(
        select(User).where(or_(User.email == request.email, User.username == request.username))
    )
    if result.scalars().first() is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User with this email or username already exists",
        )

    new_user = User(
        email=request.email,
        username=request.username,
        full_name=request.full_name,
        password_hash=get_password_hash(request.password),
        role=1,
        is_active=False,
    )

    db.add(new_user)
    await db.commit()
    await db.refresh(new_user)

    logger.info(f"Registered user {new_user.username} (pending approval)")
    return RegisterResponse(
        message="User registered successfully. Your account is pending admin approval.",
        user=UserResponse.model_validate(new_user),
        requires_approval=True,
    )


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: LoginRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    """Login with email and password."""
    result = await db.execute(
        select(User).where(User.email == credentials.email, User.is_active.is_(True))
    )
    user = result.scalar_one_or_none()

    if not user or not verify_password(credentials.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    now = datetime.utcnow()
    access_token, refresh_token = create_token_pair(user)

    user.last_login = now
    db.add(
        UserSession(
            user_id=user.id,
            token_hash=generate_hash(access_token),
            refresh_token_hash=generate_hash(refresh_token),
            expires_at=now + timedelta(days=settings.SESSION_EXPIRE_DAYS),
            last_used=now,
            ip_address=client_ip(request),
            user_agent=user_agent(request),
            is_active=True,
        )
    )
    await log_activity(
        db,
        user.id,
        "login",
        entity_type="user",
        entity_id=user.id,
        entity_name=user.username,
        ip_address=client_ip(request),
        user_agent=user_agent(request),
    )
    await db.commit()

    return LoginResponse(
        user=AuthUser.model_validate(user),
        token=access_token,
        refresh_token=refresh_token,
    )


@router.post("/refresh", response_model=TokenPair)
async def refresh(body: RefreshRequest, db: AsyncSession = Depends(get_db)):
    """Exchange a refresh token for a new token pair."""
    if not body.refresh_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Refresh token required",
        )

    invalid = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired refresh token",
    )
    payload = decode_refresh_token(body.refresh_token)
    if payload is None:
        raise invalid

    now = datetime.utcnow()
    result = await db.execute(
        select(UserSession, User)
        .join(User, UserSession.user_id == User.id)
        .where(
            UserSession.refresh_token_hash == generate_hash(body.refresh_token),
            UserSession.is_active.is_(True),
            UserSession.expires_at > now,
        )
    )
    row = result.first()
    if row is None or not row[1].is_active:
        raise invalid

    session, user = row
    access_token, refresh_token = create_token_pair(user)
    session.token_hash = generate_hash(access_token)
    session.refresh_token_hash = generate_hash(refresh_token)
    session.expires_at = now + timedelta(days=settings.SESSION_EXPIRE_DAYS)
    session.last_used = now
    await db.commit()

    return TokenPair(token=access_token, refresh_token=refresh_token)


@router.post("/logout")
async def logout(
    body: Optional[RefreshRequest] = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Deactivate the session for the given refresh token, or every session of the user."""
    query = select(UserSession).where(
        UserSession.user_id == current_user.id,
        UserSession.is_active.is_(True),
    )
    if body is not None and body.refresh_token:
        query = query.where(UserSession.refresh_token_hash == generate_hash(body.refresh_token))

    sessions = (await db.execute(query)).scalars().all()
    for session in sessions:
        session.is_active = False

    await log_activity(db, current_user.id, "logout", entity_type="user", entity_id=current_user.id)
    await db.commit()

    return {"success": True, "message": "Logged out successfully"}


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Get current user information."""
    return current_user
