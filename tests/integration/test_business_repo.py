"""Business and user repository integration tests. Require Postgres; session is rolled back after each test."""

import uuid

import pytest

from app.application.dtos import BusinessCreate, UserCreate
from app.domain.enums import UserRole
from app.infrastructure.persistence.repositories import BusinessRepository, UserRepository


def _email(prefix: str = "owner") -> str:
    return f"{prefix}-{uuid.uuid4().hex[:10]}@example.com"


@pytest.mark.requires_db
async def test_get_or_create_reuses_existing_business(db_session) -> None:
    """A second get_or_create for the same email returns the first row."""
    repo = BusinessRepository(db_session)
    email = _email()
    first, created = await repo.get_or_create(
        BusinessCreate(business_email=email, business_name="A", owner_name="A")
    )
    assert created is True
    second, created_again = await repo.get_or_create(
        BusinessCreate(business_email=email.upper(), business_name="B", owner_name="B")
    )
    assert created_again is False
    assert second.id == first.id
    assert second.business_name == "A"
    assert (await repo.find_by_email(email.upper())).id == first.id


@pytest.mark.requires_db
async def test_lock_and_delete(db_session) -> None:
    """lock returns the row until delete removes it."""
    repo = BusinessRepository(db_session)
    business, _ = await repo.get_or_create(
        BusinessCreate(business_email=_email(), business_name="A", owner_name="A")
    )
    assert (await repo.lock(business.id)).id == business.id
    assert await repo.delete(business.id) is True
    assert await repo.delete(business.id) is False
    assert await repo.lock(business.id) is None


@pytest.mark.requires_db
async def test_find_active_by_email_is_case_insensitive(db_session) -> None:
    """Email lookup ignores case."""
    users = UserRepository(db_session)
    email = _email("member")
    await users.create_user(UserCreate(email=email, name="M", role=UserRole.AGENT))
    found = await users.find_active_by_email(email.upper())
    assert [c.email for c in found] == [email]


@pytest.mark.requires_db
async def test_count_active_users_excludes_self_and_inactive(db_session) -> None:
    """The teammate count skips the caller and deactivated users."""
    businesses = BusinessRepository(db_session)
    users = UserRepository(db_session)
    business, _ = await businesses.get_or_create(
        BusinessCreate(business_email=_email(), business_name="A", owner_name="A")
    )
    owner = await users.create_user(
        UserCreate(email=_email(), name="O", role=UserRole.ADMIN, business_id=business.id)
    )
    mate = await users.create_user(
        UserCreate(email=_email(), name="M", role=UserRole.AGENT, business_id=business.id)
    )
    assert await users.count_active_users(business.id, excluding_user_id=owner.id) == 1
    await users.update_user(mate.id, is_active=False)
    assert await users.count_active_users(business.id, excluding_user_id=owner.id) == 0
