"""Optional authentication: resolve the caller from a Bearer token when possible.

The resolved identity (or None) is stored on ``request.state.user`` for the
duration of the request. Resolution never fails the request: a missing,
invalid or expired token, an unknown or inactive user, or any error while
looking the user up simply leaves the request anonymous.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware

from backend.models import User
from backend.models.base import async_session_factory
from backend.security import decode_token

logger = logging.getLogger("nbm.auth")

BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class AuthenticatedIdentity:
    """Request-scoped view of the calling user. Never persisted."""

    id: int
    email: str
    role: str


async def _lookup_identity(authorization: Optional[str]) -> Optional[AuthenticatedIdentity]:
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        return None

    payload = decode_token(token)
    if not payload:
        return None
    user_id = payload.get("user_id")
    if isinstance(user_id, bool) or not isinstance(user_id, int):
        return None

    async with async_session_factory() as session:
        user = await session.get(User, user_id)
    if not user or not user.is_active:
        return None
    return AuthenticatedIdentity(id=user.id, email=user.email, role=user.role)


async def resolve_identity(authorization: Optional[str]) -> Optional[AuthenticatedIdentity]:
    """Best-effort identity from an Authorization header value. Never raises."""
    try:
        return await _lookup_identity(authorization)
    except Exception:
        logger.debug("Optional auth failed, continuing unauthenticated", exc_info=True)
        return None


class OptionalAuthMiddleware(BaseHTTPMiddleware):
    """Populate request.state.user for mixed public/authenticated routes."""

    async def dispatch(self, request, call_next):
        request.state.user = await resolve_identity(request.headers.get("Authorization"))
        return await call_next(request)
