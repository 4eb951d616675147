"""Database models."""
from backend.models.base import Base, init_db
from backend.models.user import User
from backend.models.site_settings import SiteSetting  # noqa: F401 - for metadata

__all__ = [
    "Base",
    "User",
    "SiteSetting",
    "init_db",
]
