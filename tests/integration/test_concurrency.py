"""Concurrent writers on separate connections. Require Postgres; rows are committed and cleaned up."""

import asyncio
import uuid

import pytest
from sqlalchemy import delete, text
from sqlalchemy.exc import SQLAlchemyError

from app.application.dtos import BusinessCreate, UserCreate
from app.application.services import (
    AccountResolver,
    PermissionChecker,
    TeamService,
    TenancyMigrator,
)
from app.domain.enums import UserRole
from app.domain.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    TeammatesExistException,
)
from app.domain.value_objects import Identity
from app.infrastructure.persistence.database import _ensure_engine
from app.infrastructure.persistence.models import Business, User
from app.infrastructure.persistence.repositories import (
    BusinessRepository,
    SessionRepository,
    TokenRepository,
    UserRepository,
)


@pytest.fixture
async def session_factory():
    """Session factory for tests that need one transaction per task."""
    factory = _ensure_engine()
    async with factory() as session:
        try:
            await session.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as exc:
            pytest.skip(f"Postgres not reachable ({exc.__class__.__name__})")
    return factory


async def _in_transaction(factory, work):
    async with factory() as session:
        async with session.begin():
            return await work(session)


async def _cleanup(factory, emails: list[str]) -> None:
    async def purge(session):
        await session.execute(delete(User).where(User.email.in_(emails)))
        await session.execute(delete(Business).where(Business.business_email.in_(emails)))

    await _in_transaction(factory, purge)


def _migrator(session) -> TenancyMigrator:
    users = UserRepository(session)
    return TenancyMigrator(
        users, BusinessRepository(session), SessionRepository(session), TokenRepository(session)
    )


@pytest.mark.requires_db
async def test_concurrent_get_or_create_yields_one_business(session_factory) -> None:
    """Two transactions racing to create the same business end up sharing one row."""
    email = f"race-{uuid.uuid4().hex[:10]}@example.com"

    async def create(session):
        return await BusinessRepository(session).get_or_create(
            BusinessCreate(business_email=email, business_name="Race", owner_name="Race")
        )

    try:
        (first, first_created), (second, second_created) = await asyncio.gather(
            _in_transaction(session_factory, create),
            _in_transaction(session_factory, create),
        )
        assert first.id == second.id
        assert [first_created, second_created].count(True) == 1

        async def count(session):
            result = await session.execute(
                text("SELECT count(*) FROM business WHERE business_email = :email"),
                {"email": email},
            )
            return result.scalar_one()

        assert await _in_transaction(session_factory, count) == 1
    finally:
        await _cleanup(session_factory, [email])


@pytest.mark.requires_db
async def test_downgrade_and_add_member_do_not_both_succeed(session_factory) -> None:
    """Either the new teammate blocks the downgrade or the downgrade voids the add."""
    owner_email = f"owner-{uuid.uuid4().hex[:10]}@example.com"
    mate_email = f"mate-{uuid.uuid4().hex[:10]}@example.com"

    async def setup(session):
        user = await UserRepository(session).create_user(
            UserCreate(email=owner_email, name="Owner", role=UserRole.ADMIN, is_email_verified=True)
        )
        identity = Identity(user_id=user.id, email=owner_email, role=UserRole.ADMIN)
        business = await _migrator(session).upgrade(identity)
        return Identity(
            user_id=user.id, email=owner_email, role=UserRole.ADMIN, business_id=business.id
        )

    try:
        owner = await _in_transaction(session_factory, setup)

        async def downgrade(session):
            return await _migrator(session).downgrade(owner)

        async def add_member(session):
            users = UserRepository(session)
            team = TeamService(
                users, BusinessRepository(session), PermissionChecker(users), AccountResolver(users)
            )
            return await team.add_member(owner, mate_email, "Mate")

        downgraded, added = await asyncio.gather(
            _in_transaction(session_factory, downgrade),
            _in_transaction(session_factory, add_member),
            return_exceptions=True,
        )

        if isinstance(downgraded, TeammatesExistException):
            assert not isinstance(added, BaseException)
            assert added.business_id == owner.business_id
        else:
            assert not isinstance(downgraded, BaseException), downgraded
            assert isinstance(added, (ResourceNotFoundException, AuthorizationException)), added

        async def orphans(session):
            result = await session.execute(
                text(
                    "SELECT count(*) FROM app_user u WHERE u.business_id = :business_id "
                    "AND NOT EXISTS (SELECT 1 FROM business b WHERE b.id = u.business_id)"
                ),
                {"business_id": owner.business_id},
            )
            return result.scalar_one()

        assert await _in_transaction(session_factory, orphans) == 0
    finally:
        await _cleanup(session_factory, [owner_email, mate_email])
