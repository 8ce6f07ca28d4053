"""Unit tests for PermissionChecker (role re-read on every call)."""

from unittest.mock import AsyncMock

import pytest

from app.application.services.permission_checker import PermissionChecker
from app.domain.enums import ADMIN_ONLY, ADMIN_OR_MANAGER, UserRole
from app.domain.exceptions import AuthorizationException
from tests.factories import make_identity, make_user


def _checker(user=None) -> PermissionChecker:
    repo = AsyncMock()
    repo.get_by_id.return_value = user
    return PermissionChecker(repo)


class TestCheck:
    async def test_role_in_set_is_allowed(self) -> None:
        """A role in the allowed set passes."""
        checker = _checker(make_user(role=UserRole.MANAGER))
        decision = await checker.check("user-1", ADMIN_OR_MANAGER)
        assert decision.allowed is True
        assert decision.user_role == UserRole.MANAGER

    async def test_single_role_argument(self) -> None:
        """A single role is accepted in place of a set."""
        checker = _checker(make_user(role=UserRole.AGENT))
        decision = await checker.check("user-1", UserRole.ADMIN)
        assert decision.allowed is False
        assert decision.user_role == UserRole.AGENT

    async def test_missing_user_is_denied(self) -> None:
        """Unknown users are denied."""
        decision = await _checker(None).check("ghost", ADMIN_ONLY)
        assert decision.allowed is False
        assert decision.user_role is None

    async def test_inactive_user_is_denied(self) -> None:
        """Deactivated users are denied."""
        decision = await _checker(make_user(is_active=False)).check("user-1", ADMIN_ONLY)
        assert decision.allowed is False

    async def test_role_change_applies_on_next_call(self) -> None:
        """Roles are re-read on every check."""
        repo = AsyncMock()
        repo.get_by_id.side_effect = [make_user(role=UserRole.ADMIN), make_user(role=UserRole.AGENT)]
        checker = PermissionChecker(repo)
        assert (await checker.check("user-1", ADMIN_ONLY)).allowed is True
        assert (await checker.check("user-1", ADMIN_ONLY)).allowed is False


class TestRequire:
    async def test_returns_current_role(self) -> None:
        """require returns the stored role."""
        checker = _checker(make_user(role=UserRole.ADMIN))
        assert await checker.require("user-1", ADMIN_ONLY) == UserRole.ADMIN

    async def test_raises_with_resource_and_action(self) -> None:
        """Denials carry the resource and action."""
        checker = _checker(make_user(role=UserRole.AGENT))
        with pytest.raises(AuthorizationException) as exc_info:
            await checker.require("user-1", ADMIN_ONLY, "users", "create")
        assert exc_info.value.details == {"resource": "users", "action": "create"}


class TestConvenienceChecks:
    @pytest.mark.parametrize(
        ("role", "expected"),
        [(UserRole.ADMIN, True), (UserRole.MANAGER, True), (UserRole.AGENT, False)],
    )
    async def test_admin_or_manager_checks(self, role: UserRole, expected: bool) -> None:
        """Only admins and managers pass the manager check."""
        checker = _checker(make_user(role=role))
        assert await checker.can_view_all_tickets("user-1") is expected
        assert await checker.can_reassign_tickets("user-1") is expected
        assert await checker.can_manage_knowledge_base("user-1") is expected

    @pytest.mark.parametrize(
        ("role", "expected"),
        [(UserRole.ADMIN, True), (UserRole.MANAGER, False), (UserRole.AGENT, False)],
    )
    async def test_admin_only_checks(self, role: UserRole, expected: bool) -> None:
        """Only admins pass the admin check."""
        checker = _checker(make_user(role=role))
        assert await checker.can_manage_users("user-1") is expected
        assert await checker.can_manage_guardrails("user-1") is expected


class TestSelfOrRole:
    async def test_owner_bypasses_role(self) -> None:
        """The owner is allowed whatever their role."""
        checker = _checker(make_user(role=UserRole.AGENT))
        identity = make_identity(role=UserRole.AGENT)
        decision = await checker.check_self_or_role(identity, "user-1", ADMIN_ONLY)
        assert decision.allowed is True
        checker.user_repo.get_by_id.assert_not_awaited()

    async def test_other_user_needs_role(self) -> None:
        """Anyone else needs one of the roles."""
        checker = _checker(make_user(role=UserRole.AGENT))
        identity = make_identity(role=UserRole.AGENT)
        decision = await checker.check_self_or_role(identity, "user-2", ADMIN_ONLY)
        assert decision.allowed is False
