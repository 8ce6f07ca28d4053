"""Unit tests for TeamService (membership, role changes, first-admin bootstrap)."""

from unittest.mock import AsyncMock

import pytest

from app.application.services.account_resolver import AccountResolver
from app.application.services.permission_checker import PermissionChecker
from app.application.services.team_service import TeamService
from app.domain.enums import UserRole
from app.domain.exceptions import (
    AccountAlreadyExistsException,
    AdminAlreadyExistsException,
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)
from tests.factories import BASE_TIME, make_business, make_candidate, make_identity, make_user


def _service(acting_user=None, target=None):
    """acting_user is what PermissionChecker reads; target what get_member reads."""
    user_repo = AsyncMock()
    perm_repo = AsyncMock()
    perm_repo.get_by_id.return_value = acting_user or make_user(business_id="biz-1")
    user_repo.get_by_id.return_value = target
    user_repo.find_active_by_email.return_value = []
    user_repo.create_user.side_effect = lambda data: make_user(
        "new-user", email=data.email, role=data.role, business_id=data.business_id
    )
    business_repo = AsyncMock()
    business_repo.lock.return_value = make_business()
    service = TeamService(
        user_repo, business_repo, PermissionChecker(perm_repo), AccountResolver(user_repo)
    )
    return service, user_repo, business_repo


class TestListAndGet:
    async def test_business_lists_active_members(self) -> None:
        """Business callers see the active members of their business."""
        service, user_repo, _ = _service()
        user_repo.list_active_members.return_value = [make_user(business_id="biz-1")]
        members = await service.list_members(make_identity(business_id="biz-1"))
        assert len(members) == 1
        user_repo.list_active_members.assert_awaited_once_with("biz-1")

    async def test_personal_lists_only_self(self) -> None:
        """A personal tenancy has exactly one member: the caller."""
        service, user_repo, _ = _service(target=make_user())
        members = await service.list_members(make_identity())
        assert [m.id for m in members] == ["user-1"]
        user_repo.list_active_members.assert_not_awaited()

    async def test_member_of_other_business_is_not_found(self) -> None:
        """Users of another business are reported as not found."""
        service, *_ = _service(target=make_user("user-2", business_id="biz-2"))
        with pytest.raises(ResourceNotFoundException):
            await service.get_member(make_identity(business_id="biz-1"), "user-2")

    async def test_personal_cannot_see_other_user(self) -> None:
        """Personal callers cannot read any user but themselves."""
        service, *_ = _service(target=make_user("user-2"))
        with pytest.raises(ResourceNotFoundException):
            await service.get_member(make_identity(), "user-2")


class TestAddMember:
    async def test_admin_adds_member_under_lock(self) -> None:
        """Admins add members after locking the business row."""
        service, user_repo, business_repo = _service()
        user = await service.add_member(
            make_identity(business_id="biz-1"), "Bob@Example.com", "Bob", UserRole.MANAGER
        )
        business_repo.lock.assert_awaited_once_with("biz-1")
        data = user_repo.create_user.await_args.args[0]
        assert data.email == "bob@example.com"
        assert data.business_id == "biz-1"
        assert data.role == UserRole.MANAGER
        assert user.business_id == "biz-1"

    async def test_manager_cannot_add(self) -> None:
        """Only admins add members directly."""
        service, user_repo, _ = _service(make_user(role=UserRole.MANAGER, business_id="biz-1"))
        with pytest.raises(AuthorizationException):
            await service.add_member(make_identity(business_id="biz-1"), "bob@example.com", "Bob")
        user_repo.create_user.assert_not_awaited()

    async def test_personal_account_cannot_add(self) -> None:
        """Personal tenancies have no team to add to."""
        service, *_ = _service(make_user())
        with pytest.raises(ValidationException):
            await service.add_member(make_identity(), "bob@example.com", "Bob")

    async def test_duplicate_in_business_rejected(self) -> None:
        """An email already in the business cannot be added twice."""
        service, user_repo, _ = _service()
        user_repo.find_active_by_email.return_value = [
            make_candidate("u-bob", email="bob@example.com", business_id="biz-1")
        ]
        with pytest.raises(AccountAlreadyExistsException):
            await service.add_member(make_identity(business_id="biz-1"), "bob@example.com", "Bob")

    async def test_personal_password_account_is_not_shadowed(self) -> None:
        """A password-less business row must not displace a personal password login."""
        service, user_repo, _ = _service()
        user_repo.find_active_by_email.return_value = [
            make_candidate("u-bob", email="bob@example.com", password_hash="$2b$12$bob")
        ]
        with pytest.raises(AccountAlreadyExistsException) as exc_info:
            await service.add_member(make_identity(business_id="biz-1"), "bob@example.com", "Bob")
        assert "invitation" in exc_info.value.message
        user_repo.create_user.assert_not_awaited()

    async def test_google_only_personal_account_does_not_block(self) -> None:
        """A Google-only personal account has no password login to shadow."""
        service, user_repo, _ = _service()
        user_repo.find_active_by_email.return_value = [
            make_candidate("u-bob", email="bob@example.com", password_hash="GOOGLE_OAUTH")
        ]
        await service.add_member(make_identity(business_id="biz-1"), "bob@example.com", "Bob")
        user_repo.create_user.assert_awaited_once()

    async def test_member_of_another_business_stays_primary(self) -> None:
        """An older business row elsewhere keeps precedence, so the add is allowed."""
        service, user_repo, _ = _service()
        user_repo.find_active_by_email.return_value = [
            make_candidate("u-bob", email="bob@example.com", business_id="biz-2", age_days=5),
            make_candidate("u-bob-p", email="bob@example.com", age_days=30),
        ]
        await service.add_member(make_identity(business_id="biz-1"), "bob@example.com", "Bob")
        user_repo.create_user.assert_awaited_once()


class TestUpdateMember:
    async def test_agent_can_rename_self(self) -> None:
        """Renaming yourself needs no role."""
        service, user_repo, _ = _service(
            make_user(role=UserRole.AGENT, business_id="biz-1"),
            target=make_user(role=UserRole.AGENT, business_id="biz-1"),
        )
        user_repo.update_user.return_value = make_user(name="Al", business_id="biz-1")
        identity = make_identity(role=UserRole.AGENT, business_id="biz-1")
        updated = await service.update_member(identity, "user-1", name=" Al ")
        user_repo.update_user.assert_awaited_once_with("user-1", name="Al", role=None, is_active=None)
        assert updated.name == "Al"

    async def test_agent_cannot_change_own_role(self) -> None:
        """Role changes are admin only, even on yourself."""
        service, user_repo, _ = _service(
            make_user(role=UserRole.AGENT, business_id="biz-1"),
            target=make_user(role=UserRole.AGENT, business_id="biz-1"),
        )
        identity = make_identity(role=UserRole.AGENT, business_id="biz-1")
        with pytest.raises(AuthorizationException):
            await service.update_member(identity, "user-1", role=UserRole.ADMIN)
        user_repo.update_user.assert_not_awaited()

    async def test_admin_deactivates_member(self) -> None:
        """Admins can deactivate a teammate."""
        target = make_user("user-2", role=UserRole.AGENT, business_id="biz-1")
        service, user_repo, _ = _service(target=target)
        user_repo.update_user.return_value = target
        await service.update_member(make_identity(business_id="biz-1"), "user-2", is_active=False)
        user_repo.update_user.assert_awaited_once_with(
            "user-2", name=None, role=None, is_active=False
        )


class TestPromoteFirstAdmin:
    async def test_promotes_oldest_member(self) -> None:
        """With no admin left, the oldest active member becomes admin."""
        service, user_repo, business_repo = _service()
        older = make_user("u-old", role=UserRole.AGENT, business_id="biz-1",
                          created_at=BASE_TIME.replace(year=2020))
        newer = make_user("u-new", role=UserRole.MANAGER, business_id="biz-1")
        user_repo.list_active_members.return_value = [newer, older]
        user_repo.update_user.return_value = make_user("u-old", business_id="biz-1")

        promoted = await service.promote_first_admin(make_identity(business_id="biz-1"))

        business_repo.lock.assert_awaited_once_with("biz-1")
        user_repo.update_user.assert_awaited_once_with("u-old", role=UserRole.ADMIN)
        assert promoted.role == UserRole.ADMIN

    async def test_existing_admin_blocks(self) -> None:
        """Bootstrap refuses when an active admin exists."""
        service, user_repo, _ = _service()
        user_repo.list_active_members.return_value = [make_user(business_id="biz-1")]
        with pytest.raises(AdminAlreadyExistsException):
            await service.promote_first_admin(make_identity(business_id="biz-1"))
        user_repo.update_user.assert_not_awaited()
