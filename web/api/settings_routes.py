"""Site settings API: public read of seeded configuration (admins also see private keys)."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy import select

from backend.models import SiteSetting
from backend.models.base import async_session_factory
from web.auth import get_current_user, is_admin
from web.middleware import AuthenticatedIdentity

router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.get("")
async def get_settings(
    category: Optional[str] = None,
    user: Optional[AuthenticatedIdentity] = Depends(get_current_user),
):
    """Get settings as {key: value}. Anonymous callers only see public settings."""
    stmt = select(SiteSetting).order_by(SiteSetting.key)
    if not is_admin(user):
        stmt = stmt.where(SiteSetting.is_public.is_(True))
    if category:
        stmt = stmt.where(SiteSetting.category == category)
    async with async_session_factory() as session:
        result = await session.execute(stmt)
        rows = result.scalars().all()
    return {row.key: row.value for row in rows}
