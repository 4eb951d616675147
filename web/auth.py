"""Authentication dependencies for the web API: current identity and role checks."""
from __future__ import annotations

from typing import Optional

from fastapi import Depends, HTTPException, Request, status

from backend.models.user import ROLE_ADMIN, ROLE_SUPERADMIN
from web.middleware import AuthenticatedIdentity


async def get_current_user(request: Request) -> Optional[AuthenticatedIdentity]:
    """Return the identity resolved by OptionalAuthMiddleware, or None if anonymous."""
    return getattr(request.state, "user", None)


async def require_user(
    user: Optional[AuthenticatedIdentity] = Depends(get_current_user),
) -> AuthenticatedIdentity:
    """Require authenticated user. Raises 401 if not logged in."""
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def is_admin(user: Optional[AuthenticatedIdentity]) -> bool:
    return user is not None and user.role in (ROLE_ADMIN, ROLE_SUPERADMIN)


def require_admin(user: AuthenticatedIdentity) -> AuthenticatedIdentity:
    """Require admin or superadmin role. Raises 403 if insufficient."""
    if not is_admin(user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return user


async def require_admin_user(
    user: AuthenticatedIdentity = Depends(require_user),
) -> AuthenticatedIdentity:
    """Dependency: require logged-in admin."""
    return require_admin(user)
