"""Role-based permission checks over the user's current role (no caching)."""

from __future__ import annotations

from collections.abc import Collection

from app.application.dtos.account import PermissionDecision
from app.application.interfaces.repositories import IUserRepository
from app.domain.enums import ADMIN_ONLY, ADMIN_OR_MANAGER, UserRole
from app.domain.exceptions import AuthorizationException
from app.domain.value_objects import Identity


def _as_role_set(required: UserRole | Collection[UserRole]) -> frozenset[UserRole]:
    if isinstance(required, UserRole):
        return frozenset({required})
    return frozenset(required)


class PermissionChecker:
    """Decides whether a user's current role is in a required role set.

    Every call re-reads the user, so a role change applies on the next request.
    Missing or inactive users are never allowed.
    """

    def __init__(self, user_repo: IUserRepository) -> None:
        self.user_repo = user_repo

    async def check(
        self, user_id: str, required: UserRole | Collection[UserRole]
    ) -> PermissionDecision:
        """Return allowed=True when the user is active and their role is in required."""
        user = await self.user_repo.get_by_id(user_id)
        if user is None or not user.is_active:
            return PermissionDecision(allowed=False)
        return PermissionDecision(
            allowed=user.role in _as_role_set(required),
            user_role=user.role,
        )

    async def require(
        self,
        user_id: str,
        required: UserRole | Collection[UserRole],
        resource: str | None = None,
        action: str | None = None,
    ) -> UserRole:
        """Raise AuthorizationException unless check() allows. Returns the current role."""
        decision = await self.check(user_id, required)
        if not decision.allowed or decision.user_role is None:
            raise AuthorizationException(resource=resource, action=action)
        return decision.user_role

    async def check_self_or_role(
        self,
        identity: Identity,
        owner_user_id: str,
        required: UserRole | Collection[UserRole],
    ) -> PermissionDecision:
        """Self-service access: the owner bypasses the role check, anyone else needs required."""
        if identity.user_id == owner_user_id:
            return PermissionDecision(allowed=True, user_role=identity.role)
        return await self.check(identity.user_id, required)

    async def can_view_all_tickets(self, user_id: str) -> bool:
        return (await self.check(user_id, ADMIN_OR_MANAGER)).allowed

    async def can_reassign_tickets(self, user_id: str) -> bool:
        return (await self.check(user_id, ADMIN_OR_MANAGER)).allowed

    async def can_manage_knowledge_base(self, user_id: str) -> bool:
        return (await self.check(user_id, ADMIN_OR_MANAGER)).allowed

    async def can_manage_users(self, user_id: str) -> bool:
        return (await self.check(user_id, ADMIN_ONLY)).allowed

    async def can_manage_guardrails(self, user_id: str) -> bool:
        return (await self.check(user_id, ADMIN_ONLY)).allowed
