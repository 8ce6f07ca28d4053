"""Team management: list, add and update members; first-admin bootstrap."""

from __future__ import annotations

import logging

from app.application.dtos.user import UserCreate, UserResult
from app.application.interfaces.repositories import IBusinessRepository, IUserRepository
from app.application.services.account_resolver import AccountResolver, select_primary_account
from app.application.services.permission_checker import PermissionChecker
from app.application.services.visibility_scoper import shares_tenancy
from app.domain.enums import ADMIN_ONLY, UserRole
from app.domain.exceptions import (
    AccountAlreadyExistsException,
    AdminAlreadyExistsException,
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)
from app.domain.value_objects import EmailAddress, Identity

logger = logging.getLogger(__name__)


class TeamService:
    """Members of the caller's tenancy. A personal tenancy has exactly one member: the caller."""

    def __init__(
        self,
        user_repo: IUserRepository,
        business_repo: IBusinessRepository,
        permissions: PermissionChecker,
        resolver: AccountResolver,
    ) -> None:
        self.user_repo = user_repo
        self.business_repo = business_repo
        self.permissions = permissions
        self.resolver = resolver

    async def list_members(self, identity: Identity) -> list[UserResult]:
        """Active members of the caller's business, or just the caller for personal accounts."""
        if identity.business_id:
            return await self.user_repo.list_active_members(identity.business_id)
        me = await self.user_repo.get_by_id(identity.user_id)
        return [me] if me is not None else []

    async def get_member(self, identity: Identity, user_id: str) -> UserResult:
        """Member by id within the caller's tenancy (404 otherwise)."""
        user = await self.user_repo.get_by_id(user_id)
        if user is None or not shares_tenancy(identity, user):
            raise ResourceNotFoundException("user", user_id)
        return user

    async def add_member(
        self,
        identity: Identity,
        email: str,
        name: str,
        role: UserRole = UserRole.AGENT,
    ) -> UserResult:
        """Create a member in the caller's business (admin only).

        Takes the business row lock so the add serializes with a concurrent
        downgrade's teammate count. The new row has no password, so it is
        refused when it would become the primary account over a personal
        password account; such users join through an invitation instead.
        """
        await self.permissions.require(identity.user_id, ADMIN_ONLY, "users", "create")
        if not identity.business_id:
            raise ValidationException(
                "Team members can only be added to a business account. Upgrade first."
            )
        try:
            normalized = EmailAddress.parse(email).value
        except ValueError as exc:
            raise ValidationException(str(exc), field="email") from exc

        business = await self.business_repo.lock(identity.business_id)
        if business is None:
            raise ResourceNotFoundException("business", identity.business_id)
        existing = await self.user_repo.find_active_by_email(normalized)
        if any(c.business_id == identity.business_id for c in existing):
            raise AccountAlreadyExistsException(
                "A user with this email already exists in your business"
            )
        current = select_primary_account(existing)
        if (
            current is not None
            and current.business_id is None
            and self.resolver.has_password(current.password_hash)
        ):
            raise AccountAlreadyExistsException(
                "This email has a personal account with a password. "
                "Send an invitation so they can join with their own password."
            )

        user = await self.user_repo.create_user(
            UserCreate(
                email=normalized,
                name=name.strip() or normalized,
                role=role,
                business_id=identity.business_id,
            )
        )
        logger.info(
            "User %s added %s to business %s as %s",
            identity.user_id,
            user.id,
            identity.business_id,
            role.value,
        )
        return user

    async def update_member(
        self,
        identity: Identity,
        user_id: str,
        *,
        name: str | None = None,
        role: UserRole | None = None,
        is_active: bool | None = None,
    ) -> UserResult:
        """Edit a member. Anyone may rename themselves; role and active flag are admin only."""
        await self.get_member(identity, user_id)
        if name is not None:
            decision = await self.permissions.check_self_or_role(identity, user_id, ADMIN_ONLY)
            if not decision.allowed:
                raise AuthorizationException(resource="users", action="update")
        if role is not None or is_active is not None:
            await self.permissions.require(identity.user_id, ADMIN_ONLY, "users", "update")

        updated = await self.user_repo.update_user(
            user_id,
            name=name.strip() if name is not None else None,
            role=role,
            is_active=is_active,
        )
        if updated is None:
            raise ResourceNotFoundException("user", user_id)
        return updated

    async def promote_first_admin(self, identity: Identity) -> UserResult:
        """Promote the oldest active member to admin when the tenancy has no active admin.

        Raises:
            AdminAlreadyExistsException: an active admin already exists.
        """
        if identity.business_id:
            await self.business_repo.lock(identity.business_id)
        members = await self.list_members(identity)
        if not members:
            raise ResourceNotFoundException("user", identity.user_id)
        if any(m.role == UserRole.ADMIN and m.is_active for m in members):
            raise AdminAlreadyExistsException()

        first = min(members, key=lambda m: (m.created_at is None, m.created_at, m.id))
        promoted = await self.user_repo.update_user(first.id, role=UserRole.ADMIN)
        if promoted is None:
            raise ResourceNotFoundException("user", first.id)
        logger.info("Promoted first user %s to admin", promoted.id)
        return promoted
