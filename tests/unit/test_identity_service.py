"""Unit tests for IdentityService (session -> Identity)."""

from unittest.mock import AsyncMock

import pytest

from app.application.services.identity_service import IdentityService
from app.domain.enums import UserRole
from app.domain.exceptions import AuthenticationException
from tests.factories import make_session, make_user


def _service(session=None, user=None):
    session_store = AsyncMock()
    session_store.resolve_session.return_value = session
    user_repo = AsyncMock()
    user_repo.get_by_id.return_value = user
    migrator = AsyncMock()
    return IdentityService(session_store, user_repo, migrator), migrator


class TestResolve:
    async def test_missing_token(self) -> None:
        """No token is unauthenticated."""
        service, _ = _service()
        with pytest.raises(AuthenticationException):
            await service.resolve(None)

    async def test_unknown_session(self) -> None:
        """Unknown or expired sessions are unauthenticated."""
        service, _ = _service(session=None)
        with pytest.raises(AuthenticationException):
            await service.resolve("tok-1")

    async def test_inactive_user(self) -> None:
        """Deactivated users cannot authenticate."""
        service, _ = _service(make_session(), make_user(is_active=False))
        with pytest.raises(AuthenticationException):
            await service.resolve("tok-1")

    async def test_role_and_business_come_from_user_row(self) -> None:
        """Role and business are read from the user row, not the session."""
        service, migrator = _service(
            make_session(business_id="biz-1"),
            make_user(role=UserRole.MANAGER, business_id="biz-1", email="Alice@Example.com"),
        )
        identity = await service.resolve("tok-1")
        assert identity.role == UserRole.MANAGER
        assert identity.business_id == "biz-1"
        assert identity.email == "alice@example.com"
        assert identity.session_token == "tok-1"
        migrator.reconcile.assert_not_awaited()

    async def test_mismatched_session_is_reconciled(self) -> None:
        """A session with a stale business id is resynced from the user row."""
        service, migrator = _service(
            make_session(business_id=None), make_user(business_id="biz-1")
        )
        migrator.reconcile.return_value = make_user(business_id="biz-1")
        identity = await service.resolve("tok-1")
        migrator.reconcile.assert_awaited_once_with("user-1", "tok-1")
        assert identity.business_id == "biz-1"
