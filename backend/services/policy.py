"""Who may do what to which account.

Every role decision the admin service makes goes through ``authorize`` so the
rules live in one table instead of being re-derived per operation.
"""
from __future__ import annotations

from typing import Optional

from backend.errors import AuthorizationError
from backend.models.user import ROLE_SUPERADMIN

ACTION_CREATE = "create"
ACTION_UPDATE = "update"
ACTION_DELETE = "delete"


def authorize(
    action: str,
    *,
    caller_role: Optional[str] = None,
    target_role: Optional[str] = None,
    is_self: bool = False,
) -> None:
    """Raise AuthorizationError if ``action`` is not allowed, else return None."""
    if action == ACTION_CREATE:
        if caller_role != ROLE_SUPERADMIN:
            raise AuthorizationError("Only superadmin can create users")
        return

    if action == ACTION_UPDATE:
        # A superadmin may edit their own record; nobody edits another one.
        if target_role == ROLE_SUPERADMIN and not is_self:
            raise AuthorizationError("Cannot modify superadmin account")
        return

    if action == ACTION_DELETE:
        if target_role == ROLE_SUPERADMIN:
            raise AuthorizationError("Cannot delete superadmin account")
        if is_self:
            raise AuthorizationError("Cannot delete your own account")
        return

    raise ValueError(f"Unknown action: {action}")
