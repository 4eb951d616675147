"""Privileged user lifecycle operations: create, list, get, update, soft-delete.

Role rules are delegated to :func:`backend.services.policy.authorize`; every
record leaving this module goes through :func:`public_user` so a password hash
is never returned.
"""
from __future__ import annotations

import logging
import math
from typing import Any, Mapping, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.errors import AuthorizationError, NotFoundError, ValidationError
from backend.models import User
from backend.models.base import async_session_factory
from backend.models.user import ASSIGNABLE_ROLES, ROLE_USER, utcnow
from backend.security import hash_password
from backend.services.policy import ACTION_CREATE, ACTION_DELETE, ACTION_UPDATE, authorize

logger = logging.getLogger("nbm.admin")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
MAX_LIMIT = 100

UPDATABLE_FIELDS = ("username", "email", "is_active")

_PUBLIC_FIELDS = (
    "id",
    "email",
    "username",
    "role",
    "is_active",
    "is_email_verified",
    "created_at",
    "updated_at",
)


def public_user(user: User) -> dict[str, Any]:
    """Outward view of a user row. The password hash is never included."""
    return {field: getattr(user, field) for field in _PUBLIC_FIELDS}


def _to_int(value: Any, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        pass
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default


def normalize_pagination(page: Any = None, limit: Any = None) -> tuple[int, int]:
    """Coerce page to >= 1 and limit to 1..MAX_LIMIT."""
    page_num = max(1, _to_int(page, DEFAULT_PAGE))
    limit_num = min(MAX_LIMIT, max(1, _to_int(limit, DEFAULT_LIMIT)))
    return page_num, limit_num


async def _get_user(session: AsyncSession, user_id: int) -> User:
    user = await session.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


async def _email_taken(session: AsyncSession, email: str, exclude_id: Optional[int] = None) -> bool:
    stmt = select(User.id).where(User.email == email)
    if exclude_id is not None:
        stmt = stmt.where(User.id != exclude_id)
    result = await session.execute(stmt.limit(1))
    return result.scalar_one_or_none() is not None


def _role_of(requesting_user: Any) -> Optional[str]:
    """Role of a caller given as an identity/User object or a {"role": ...} mapping."""
    if isinstance(requesting_user, Mapping):
        return requesting_user.get("role")
    return getattr(requesting_user, "role", None)


async def create_admin(data: Mapping[str, Any], requesting_user: Any) -> dict[str, Any]:
    """Create a user account. Only a superadmin may call this.

    Accounts created here are active and already email-verified; the
    verification flow is skipped for administratively created users.
    """
    caller_role = _role_of(requesting_user)
    try:
        authorize(ACTION_CREATE, caller_role=caller_role)
    except AuthorizationError:
        logger.warning("Denied user creation for role=%s", caller_role)
        raise

    role = data.get("role") or ROLE_USER
    if role not in ASSIGNABLE_ROLES:
        raise ValidationError("Invalid role")

    email = data["email"]
    async with async_session_factory() as session:
        if await _email_taken(session, email):
            raise ValidationError("User with this email already exists")

        user = User(
            email=email,
            username=data["username"],
            password_hash=hash_password(data["password"]),
            role=role,
            is_active=True,
            is_email_verified=True,
        )
        session.add(user)
        try:
            await session.commit()
        except IntegrityError as e:
            # Concurrent create with the same email lost the race on the unique index.
            await session.rollback()
            raise ValidationError("User with this email already exists") from e
        await session.refresh(user)

    logger.info("Created user id=%s email=%s role=%s", user.id, user.email, user.role)
    return public_user(user)


async def get_all_users(page: Any = None, limit: Any = None) -> dict[str, Any]:
    """Return one page of users ordered by id, plus totals.

    Pages past the end come back empty without a row query; the offset
    is only sent to the database when it falls inside the table.
    """
    page_num, limit_num = normalize_pagination(page, limit)
    offset = (page_num - 1) * limit_num

    async with async_session_factory() as session:
        total = (await session.execute(select(func.count(User.id)))).scalar_one()
        total = int(total or 0)
        users = []
        if offset < total:
            result = await session.execute(
                select(User).order_by(User.id).limit(limit_num).offset(offset)
            )
            users = result.scalars().all()

    return {
        "users": [public_user(u) for u in users],
        "total": total,
        "page": page_num,
        "limit": limit_num,
        "total_pages": math.ceil(total / limit_num),
    }


async def get_user_by_id(user_id: int) -> dict[str, Any]:
    async with async_session_factory() as session:
        user = await _get_user(session, user_id)
        return public_user(user)


async def update_user(user_id: int, current_user_id: int, data: Mapping[str, Any]) -> dict[str, Any]:
    """Partially update username, email and/or active flag."""
    changes = {k: v for k, v in data.items() if k in UPDATABLE_FIELDS and v is not None}

    async with async_session_factory() as session:
        user = await _get_user(session, user_id)
        try:
            authorize(ACTION_UPDATE, target_role=user.role, is_self=user_id == current_user_id)
        except AuthorizationError:
            logger.warning("Denied update of user id=%s by id=%s", user_id, current_user_id)
            raise

        new_email = changes.get("email")
        if new_email and new_email != user.email:
            if await _email_taken(session, new_email, exclude_id=user.id):
                raise ValidationError("Email already in use")

        for field, value in changes.items():
            setattr(user, field, value)
        user.updated_at = utcnow()
        try:
            await session.commit()
        except IntegrityError as e:
            # Another request claimed the email between the check and the commit.
            await session.rollback()
            raise ValidationError("Email already in use") from e
        await session.refresh(user)

    logger.info("Updated user id=%s fields=%s", user_id, sorted(changes))
    return public_user(user)


async def delete_user(user_id: int, current_user_id: int) -> None:
    """Soft-delete: deactivate the account. The row is kept."""
    async with async_session_factory() as session:
        user = await _get_user(session, user_id)
        try:
            authorize(ACTION_DELETE, target_role=user.role, is_self=user_id == current_user_id)
        except AuthorizationError:
            logger.warning("Denied deactivation of user id=%s by id=%s", user_id, current_user_id)
            raise

        user.is_active = False
        user.updated_at = utcnow()
        await session.commit()

    logger.info("Deactivated user id=%s by id=%s", user_id, current_user_id)
