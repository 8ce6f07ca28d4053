"""Unit tests for TenancyMigrator (upgrade, downgrade, session reconciliation)."""

from unittest.mock import AsyncMock, MagicMock, call

import pytest

from app.application.dtos import BusinessCreate
from app.application.services.tenancy_migrator import TenancyMigrator
from app.domain.enums import SubscriptionTier, UserRole
from app.domain.exceptions import (
    AlreadyInTenancyException,
    AuthenticationException,
    InconsistentStateException,
    TeammatesExistException,
)
from tests.factories import make_business, make_identity, make_user


def _migrator(user=None, business=None, created: bool = True, teammates: int = 0):
    user_repo = AsyncMock()
    user_repo.get_by_id.return_value = user
    user_repo.count_active_users.return_value = teammates
    business_repo = AsyncMock()
    business_repo.get_or_create.return_value = (business or make_business(), created)
    business_repo.lock.return_value = business or make_business()
    business_repo.delete.return_value = True
    session_store = AsyncMock()
    token_store = AsyncMock()
    token_store.reassign_by_email.return_value = 2
    migrator = TenancyMigrator(user_repo, business_repo, session_store, token_store)
    return migrator, user_repo, business_repo, session_store, token_store


class TestUpgrade:
    async def test_creates_business_and_moves_user_session_tokens(self) -> None:
        """Upgrade creates the business and moves user, session and tokens."""
        user = make_user(email="Alice@Example.com", role=UserRole.AGENT)
        migrator, user_repo, business_repo, session_store, token_store = _migrator(user)

        business = await migrator.upgrade(make_identity(role=UserRole.AGENT))

        assert business.id == "biz-1"
        business_repo.get_or_create.assert_awaited_once_with(
            BusinessCreate(
                business_email="alice@example.com",
                business_name="Alice's Business",
                owner_name="Alice",
                subscription_tier=SubscriptionTier.FREE,
                is_email_verified=True,
            )
        )
        user_repo.set_tenancy.assert_awaited_once_with("user-1", "biz-1", UserRole.ADMIN)
        session_store.update_session_business.assert_awaited_once_with("tok-1", "biz-1")
        token_store.reassign_by_email.assert_awaited_once_with(
            "alice@example.com", "biz-1", only_if_business_id_is_null=True
        )

    async def test_reuses_existing_business_for_email(self) -> None:
        """An existing business for the email is reused."""
        existing = make_business("biz-existing")
        migrator, user_repo, *_ = _migrator(make_user(), business=existing, created=False)
        business = await migrator.upgrade(make_identity())
        assert business.id == "biz-existing"
        user_repo.set_tenancy.assert_awaited_once_with("user-1", "biz-existing", UserRole.ADMIN)

    async def test_business_name_falls_back_to_email(self) -> None:
        """A blank name falls back to the email's local part."""
        migrator, _, business_repo, *_ = _migrator(make_user(name="!!!"))
        await migrator.upgrade(make_identity())
        data = business_repo.get_or_create.await_args.args[0]
        assert data.business_name == "alice@example.com's Business"

    async def test_without_session_token_skips_session_update(self) -> None:
        """No session token means no session write."""
        migrator, _, _, session_store, _ = _migrator(make_user())
        await migrator.upgrade(make_identity(session_token=None))
        session_store.update_session_business.assert_not_awaited()

    async def test_already_business_rejected(self) -> None:
        """Business users cannot upgrade again."""
        migrator, user_repo, business_repo, *_ = _migrator(make_user(business_id="biz-1"))
        with pytest.raises(AlreadyInTenancyException) as exc_info:
            await migrator.upgrade(make_identity())
        assert exc_info.value.details["account_type"] == "business"
        business_repo.get_or_create.assert_not_awaited()
        user_repo.set_tenancy.assert_not_awaited()

    async def test_reads_current_state_not_identity(self) -> None:
        """Upgrade trusts the user row over the caller's identity."""
        # Identity says personal, but the user row was upgraded concurrently.
        migrator, *_ = _migrator(make_user(business_id="biz-9"))
        with pytest.raises(AlreadyInTenancyException):
            await migrator.upgrade(make_identity(business_id=None))

    async def test_inactive_user_rejected(self) -> None:
        """Deactivated users cannot upgrade."""
        migrator, *_ = _migrator(make_user(is_active=False))
        with pytest.raises(AuthenticationException):
            await migrator.upgrade(make_identity())


class TestDowngrade:
    async def test_sole_member_downgrades(self) -> None:
        """The only member downgrades and the business is deleted."""
        user = make_user(business_id="biz-1")
        migrator, user_repo, business_repo, session_store, token_store = _migrator(user)

        await migrator.downgrade(make_identity(business_id="biz-1"))

        business_repo.lock.assert_awaited_once_with("biz-1")
        user_repo.count_active_users.assert_awaited_once_with("biz-1", excluding_user_id="user-1")
        user_repo.set_tenancy.assert_awaited_once_with("user-1", None, UserRole.AGENT)
        session_store.update_session_business.assert_awaited_once_with("tok-1", None)
        token_store.reassign_by_email.assert_awaited_once_with(
            "alice@example.com", None, only_if_business_id_is_null=False
        )
        business_repo.delete.assert_awaited_once_with("biz-1")

    async def test_teammates_block_downgrade(self) -> None:
        """Active teammates block downgrade."""
        migrator, user_repo, business_repo, session_store, token_store = _migrator(
            make_user(business_id="biz-1"), teammates=2
        )
        with pytest.raises(TeammatesExistException) as exc_info:
            await migrator.downgrade(make_identity(business_id="biz-1"))
        assert exc_info.value.details["teammate_count"] == 2
        user_repo.set_tenancy.assert_not_awaited()
        session_store.update_session_business.assert_not_awaited()
        token_store.reassign_by_email.assert_not_awaited()
        business_repo.delete.assert_not_awaited()

    async def test_personal_user_rejected(self) -> None:
        """Personal users have nothing to downgrade."""
        migrator, *_ = _migrator(make_user())
        with pytest.raises(AlreadyInTenancyException) as exc_info:
            await migrator.downgrade(make_identity())
        assert exc_info.value.details["account_type"] == "personal"

    async def test_business_already_gone_still_completes(self) -> None:
        """A business deleted concurrently does not fail the downgrade."""
        migrator, user_repo, business_repo, *_ = _migrator(make_user(business_id="biz-1"))
        business_repo.delete.return_value = False
        await migrator.downgrade(make_identity(business_id="biz-1"))
        user_repo.set_tenancy.assert_awaited_once()

    async def test_lock_taken_before_count(self) -> None:
        """The business row is locked before teammates are counted."""
        manager = MagicMock()
        migrator, user_repo, business_repo, *_ = _migrator(make_user(business_id="biz-1"))
        manager.attach_mock(business_repo.lock, "lock")
        manager.attach_mock(user_repo.count_active_users, "count")
        await migrator.downgrade(make_identity(business_id="biz-1"))
        assert manager.mock_calls[:2] == [
            call.lock("biz-1"),
            call.count("biz-1", excluding_user_id="user-1"),
        ]


class TestReconcile:
    async def test_session_follows_user(self) -> None:
        """reconcile copies the user's business onto the session."""
        migrator, _, _, session_store, _ = _migrator(make_user(business_id="biz-2"))
        user = await migrator.reconcile("user-1", "tok-1")
        assert user.business_id == "biz-2"
        session_store.update_session_business.assert_awaited_once_with("tok-1", "biz-2")

    async def test_missing_user_is_inconsistent(self) -> None:
        """A session whose user is gone is an inconsistent state."""
        migrator, *_ = _migrator(None)
        with pytest.raises(InconsistentStateException):
            await migrator.reconcile("ghost", "tok-1")
