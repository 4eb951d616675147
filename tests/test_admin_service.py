"""Tests for the admin user-management service."""
from types import SimpleNamespace

import pytest

from backend.errors import AuthorizationError, NotFoundError, ValidationError
from backend.security import verify_password
from backend.services import admin as admin_service
from conftest import count_users, load_user

NEW_USER = {"email": "new@example.com", "username": "newbie", "password": "s3cretpass"}


@pytest.mark.asyncio
@pytest.mark.parametrize("role", ["user", "moderator", "admin", None])
async def test_create_requires_superadmin(role):
    """Only a superadmin may create users; nothing is inserted otherwise."""
    with pytest.raises(AuthorizationError):
        await admin_service.create_admin(NEW_USER, SimpleNamespace(role=role))
    assert await count_users() == 0


@pytest.mark.asyncio
async def test_create_defaults(superadmin):
    """New accounts default to the user role and are active and verified."""
    created = await admin_service.create_admin(NEW_USER, superadmin)
    assert created["email"] == "new@example.com"
    assert created["role"] == "user"
    assert created["is_active"] is True
    assert created["is_email_verified"] is True
    assert "password" not in created
    assert "password_hash" not in created

    row = await load_user(created["id"])
    assert row.password_hash != "s3cretpass"
    assert verify_password("s3cretpass", row.password_hash)


@pytest.mark.asyncio
async def test_create_with_role(superadmin):
    created = await admin_service.create_admin({**NEW_USER, "role": "moderator"}, superadmin)
    assert created["role"] == "moderator"


@pytest.mark.asyncio
async def test_create_cannot_hand_out_superadmin(superadmin):
    with pytest.raises(ValidationError):
        await admin_service.create_admin({**NEW_USER, "role": "superadmin"}, superadmin)
    assert await count_users() == 1


@pytest.mark.asyncio
async def test_create_duplicate_email(superadmin):
    """Duplicate email fails with a validation error and inserts nothing."""
    await admin_service.create_admin(NEW_USER, superadmin)
    with pytest.raises(ValidationError, match="already exists"):
        await admin_service.create_admin({**NEW_USER, "username": "other"}, superadmin)
    assert await count_users() == 2


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "page,limit,expected",
    [
        (None, None, (1, 20)),
        (0, 0, (1, 1)),
        (-3, -10, (1, 1)),
        (2, 500, (2, 100)),
        ("3", "15", (3, 15)),
        ("abc", "", (1, 20)),
    ],
)
async def test_pagination_normalized(page, limit, expected):
    result = await admin_service.get_all_users(page, limit)
    assert (result["page"], result["limit"]) == expected
    assert result["total"] == 0
    assert result["total_pages"] == 0
    assert result["users"] == []


@pytest.mark.asyncio
async def test_pagination_pages(make_user):
    for i in range(21):
        await make_user(f"user{i}@example.com")

    first = await admin_service.get_all_users(1, 20)
    assert first["total"] == 21
    assert first["total_pages"] == 2
    assert len(first["users"]) == 20
    assert [u["email"] for u in first["users"]][:2] == ["user0@example.com", "user1@example.com"]

    second = await admin_service.get_all_users(2, 20)
    assert [u["email"] for u in second["users"]] == ["user20@example.com"]
    assert all("password_hash" not in u for u in first["users"] + second["users"])


@pytest.mark.asyncio
async def test_get_user_by_id(admin):
    found = await admin_service.get_user_by_id(admin.id)
    assert found["email"] == admin.email
    assert "password_hash" not in found

    with pytest.raises(NotFoundError):
        await admin_service.get_user_by_id(9999)


@pytest.mark.asyncio
async def test_update_partial(admin, make_user):
    target = await make_user("target@example.com", username="target")
    updated = await admin_service.update_user(target.id, admin.id, {"username": "renamed"})
    assert updated["username"] == "renamed"
    assert updated["email"] == "target@example.com"
    assert updated["is_active"] is True
    assert "password_hash" not in updated

    row = await load_user(target.id)
    assert row.username == "renamed"
    assert row.updated_at >= target.updated_at


@pytest.mark.asyncio
async def test_update_missing_user(admin):
    with pytest.raises(NotFoundError):
        await admin_service.update_user(9999, admin.id, {"username": "nobody"})


@pytest.mark.asyncio
async def test_update_other_superadmin_forbidden(superadmin, make_user):
    other = await make_user("root2@example.com", "superadmin", username="root2")
    with pytest.raises(AuthorizationError):
        await admin_service.update_user(superadmin.id, other.id, {"username": "hijacked"})
    row = await load_user(superadmin.id)
    assert row.username == "root"


@pytest.mark.asyncio
async def test_update_own_superadmin_record(superadmin):
    updated = await admin_service.update_user(superadmin.id, superadmin.id, {"username": "boss"})
    assert updated["username"] == "boss"
    assert updated["role"] == "superadmin"


@pytest.mark.asyncio
async def test_update_email_conflict(admin, make_user):
    target = await make_user("target@example.com")
    with pytest.raises(ValidationError, match="in use"):
        await admin_service.update_user(target.id, admin.id, {"email": admin.email})

    # Re-submitting the current email is not a conflict.
    same = await admin_service.update_user(target.id, admin.id, {"email": "target@example.com"})
    assert same["email"] == "target@example.com"


@pytest.mark.asyncio
async def test_update_ignores_unknown_fields(admin, make_user):
    target = await make_user("target@example.com")
    updated = await admin_service.update_user(
        target.id, admin.id, {"role": "superadmin", "password_hash": "x", "is_active": False}
    )
    assert updated["role"] == "user"
    assert updated["is_active"] is False


@pytest.mark.asyncio
async def test_delete_is_soft(admin, make_user):
    target = await make_user("target@example.com")
    assert await admin_service.delete_user(target.id, admin.id) is None
    row = await load_user(target.id)
    assert row is not None
    assert row.is_active is False
    assert await count_users() == 2


@pytest.mark.asyncio
async def test_delete_missing_user(admin):
    with pytest.raises(NotFoundError):
        await admin_service.delete_user(9999, admin.id)


@pytest.mark.asyncio
async def test_delete_superadmin_forbidden(superadmin, admin):
    with pytest.raises(AuthorizationError):
        await admin_service.delete_user(superadmin.id, admin.id)
    # Not even by themself.
    with pytest.raises(AuthorizationError):
        await admin_service.delete_user(superadmin.id, superadmin.id)
    row = await load_user(superadmin.id)
    assert row.is_active is True


@pytest.mark.asyncio
async def test_self_delete_forbidden(admin, make_user):
    regular = await make_user("plain@example.com")
    for user in (admin, regular):
        with pytest.raises(AuthorizationError, match="own account"):
            await admin_service.delete_user(user.id, user.id)
        assert (await load_user(user.id)).is_active is True


@pytest.mark.asyncio
async def test_create_accepts_role_mapping():
    """The caller may be given as a plain {"role": ...} mapping."""
    created = await admin_service.create_admin(NEW_USER, {"role": "superadmin"})
    assert created["email"] == "new@example.com"

    with pytest.raises(AuthorizationError):
        await admin_service.create_admin({**NEW_USER, "email": "x@example.com"}, {"role": "admin"})
    with pytest.raises(AuthorizationError):
        await admin_service.create_admin({**NEW_USER, "email": "y@example.com"}, {})
    assert await count_users() == 1


@pytest.mark.asyncio
async def test_huge_page_is_empty(admin):
    result = await admin_service.get_all_users(10**20, 20)
    assert result["page"] == 10**20
    assert result["users"] == []
    assert result["total"] == 1
    assert result["total_pages"] == 1


@pytest.mark.asyncio
async def test_page_past_end_is_empty(admin, make_user):
    await make_user("second@example.com")
    result = await admin_service.get_all_users(3, 1)
    assert result["users"] == []
    assert result["total_pages"] == 2


@pytest.mark.asyncio
async def test_update_email_race_is_validation_error(admin, make_user, monkeypatch):
    """A unique-index violation on commit is reported like the pre-check."""
    target = await make_user("target@example.com")

    async def never_taken(*args, **kwargs):
        return False

    monkeypatch.setattr(admin_service, "_email_taken", never_taken)
    with pytest.raises(ValidationError, match="in use"):
        await admin_service.update_user(target.id, admin.id, {"email": admin.email})

    row = await load_user(target.id)
    assert row.email == "target@example.com"
