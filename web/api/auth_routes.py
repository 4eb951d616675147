"""Auth API routes: login and current user."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy import select

from backend.models import User
from backend.models.base import async_session_factory
from backend.security import create_access_token, verify_password
from backend.services.admin import public_user
from web.auth import get_current_user, require_user
from web.middleware import AuthenticatedIdentity

router = APIRouter(prefix="/api/auth", tags=["auth"])
logger = logging.getLogger("nbm.auth")


class LoginRequest(BaseModel):
    email: str
    password: str


class UserResponse(BaseModel):
    id: int
    email: str
    username: str
    role: str
    is_active: bool
    is_email_verified: bool
    created_at: datetime
    updated_at: datetime


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class IdentityResponse(BaseModel):
    id: int
    email: str
    role: str


@router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest):
    """Authenticate by email and password and return a JWT."""
    async with async_session_factory() as session:
        result = await session.execute(select(User).where(User.email == body.email))
        user = result.scalar_one_or_none()
    if not user or not verify_password(body.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid email or password")
    if not user.is_active:
        logger.warning("Login attempt for deactivated user id=%s", user.id)
        raise HTTPException(status_code=401, detail="Account is deactivated")
    token = create_access_token(user.id, user.email, user.role)
    return LoginResponse(access_token=token, user=UserResponse(**public_user(user)))


@router.get("/me", response_model=IdentityResponse)
async def get_me(user: AuthenticatedIdentity = Depends(require_user)):
    """Get current authenticated user."""
    return IdentityResponse(id=user.id, email=user.email, role=user.role)


@router.get("/me/optional")
async def get_me_optional(user: Optional[AuthenticatedIdentity] = Depends(get_current_user)):
    """Get current user if logged in, else null. For frontend auth check."""
    if not user:
        return None
    return {"id": user.id, "email": user.email, "role": user.role}
