"""Pytest configuration and fixtures for service and API tests."""
import os

# Set test env BEFORE any imports that use config
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret-not-for-production-0123456789"
os.environ["BCRYPT_ROUNDS"] = "4"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select

from backend.models import User, init_db
from backend.models.base import async_session_factory, dispose_db
from backend.security import create_access_token, hash_password
from web.api.main import app

DEFAULT_PASSWORD = "password123"


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
async def _init_db():
    """Fresh in-memory database per test (ASGI lifespan doesn't run with httpx)."""
    await init_db()
    yield
    # Dropping the pooled connection discards the in-memory database.
    await dispose_db()


@pytest.fixture
async def client():
    """Async HTTP client for testing the API."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def make_user():
    """Insert a user row directly, bypassing the service (needed for superadmins)."""

    async def _make_user(
        email: str,
        role: str = "user",
        *,
        username: str | None = None,
        password: str = DEFAULT_PASSWORD,
        is_active: bool = True,
    ) -> User:
        async with async_session_factory() as session:
            user = User(
                email=email,
                username=username or email.split("@")[0],
                password_hash=hash_password(password),
                role=role,
                is_active=is_active,
            )
            session.add(user)
            await session.commit()
            await session.refresh(user)
            return user

    return _make_user


@pytest.fixture
async def superadmin(make_user):
    return await make_user("root@example.com", "superadmin", username="root")


@pytest.fixture
async def admin(make_user):
    return await make_user("admin@example.com", "admin", username="admin")


def auth_headers_for(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.email, user.role)}"}


async def count_users() -> int:
    async with async_session_factory() as session:
        return (await session.execute(select(func.count(User.id)))).scalar_one()


async def load_user(user_id: int) -> User:
    async with async_session_factory() as session:
        return await session.get(User, user_id)
