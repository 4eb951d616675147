"""Admin user management API (admin or superadmin only)."""
from __future__ import annotations

from typing import Literal, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr, Field

from backend.services import admin as admin_service
from web.api.auth_routes import UserResponse
from web.auth import require_admin_user
from web.middleware import AuthenticatedIdentity

router = APIRouter(prefix="/api/admin/users", tags=["admin"])


class CreateUserRequest(BaseModel):
    email: EmailStr
    username: str = Field(min_length=3, max_length=50)
    password: str = Field(min_length=8)
    role: Literal["user", "moderator", "admin"] = "user"


class UpdateUserRequest(BaseModel):
    username: Optional[str] = Field(default=None, min_length=3, max_length=50)
    email: Optional[EmailStr] = None
    is_active: Optional[bool] = None


class UserListResponse(BaseModel):
    users: list[UserResponse]
    total: int
    page: int
    limit: int
    total_pages: int


@router.post("", response_model=UserResponse)
async def create_user(body: CreateUserRequest, admin: AuthenticatedIdentity = Depends(require_admin_user)):
    """Create a new user (superadmin only)."""
    return await admin_service.create_admin(body.model_dump(), admin)


@router.get("", response_model=UserListResponse)
async def list_users(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    admin: AuthenticatedIdentity = Depends(require_admin_user),
):
    """List users, paginated. Out-of-range page/limit values are clamped rather than rejected."""
    return await admin_service.get_all_users(page, limit)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: int, admin: AuthenticatedIdentity = Depends(require_admin_user)):
    return await admin_service.get_user_by_id(user_id)


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    body: UpdateUserRequest,
    admin: AuthenticatedIdentity = Depends(require_admin_user),
):
    """Update username, email or active status."""
    return await admin_service.update_user(user_id, admin.id, body.model_dump(exclude_unset=True))


@router.delete("/{user_id}")
async def delete_user(user_id: int, admin: AuthenticatedIdentity = Depends(require_admin_user)):
    """Deactivate a user. Superadmin accounts and your own account cannot be deactivated."""
    await admin_service.delete_user(user_id, admin.id)
    return {"ok": True}
