"""Agent invitations: admins and managers invite, invitees accept with their own password."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta

from app.application.dtos.account import AuthResult
from app.application.dtos.invitation import (
    InvitationCreate,
    InvitationDetails,
    InvitationResult,
)
from app.application.dtos.user import UserCreate
from app.application.interfaces.repositories import (
    IBusinessRepository,
    IDepartmentRepository,
    IInvitationRepository,
    IUserRepository,
)
from app.application.interfaces.services import IPasswordHasher
from app.application.services.auth_service import AuthService
from app.application.services.permission_checker import PermissionChecker
from app.application.services.visibility_scoper import VisibilityScoper
from app.domain.enums import (
    ADMIN_OR_MANAGER,
    INVITABLE_ROLES,
    InvitationStatus,
    ResourceClass,
    UserRole,
)
from app.domain.exceptions import (
    AccountAlreadyExistsException,
    InvitationExpiredException,
    InvitationInvalidException,
    InvitationPendingException,
    ResourceNotFoundException,
    ValidationException,
)
from app.domain.value_objects import EmailAddress, Identity
from app.shared.utils.datetime import ensure_utc, utc_now
from app.shared.utils.generators import generate_invitation_token
from app.shared.utils.sanitization import InputSanitizer

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8

# Stored statuses shown in the team's invitation list.
_LISTED_STATUSES = frozenset({InvitationStatus.PENDING, InvitationStatus.EXPIRED})


def invitation_status(invitation: InvitationResult, now: datetime | None = None) -> InvitationStatus:
    """Effective status: a pending invitation past expires_at is expired."""
    if invitation.status != InvitationStatus.PENDING:
        return invitation.status
    expires_at = ensure_utc(invitation.expires_at)
    if expires_at is not None and expires_at < (now or utc_now()):
        return InvitationStatus.EXPIRED
    return InvitationStatus.PENDING


class InvitationService:
    """Invite, list, revoke, validate and accept invitations to a business.

    Accepting creates the member's business row with the invitee's own
    password hash and a verified email, so the row the invitation adds
    never shadows a working password login. The business row is locked
    for the accept, which serializes it with a concurrent downgrade.
    """

    def __init__(
        self,
        invitation_repo: IInvitationRepository,
        user_repo: IUserRepository,
        business_repo: IBusinessRepository,
        department_repo: IDepartmentRepository,
        permissions: PermissionChecker,
        scoper: VisibilityScoper,
        hasher: IPasswordHasher,
        auth: AuthService,
        invitation_ttl: timedelta = timedelta(days=7),
    ) -> None:
        self.invitation_repo = invitation_repo
        self.user_repo = user_repo
        self.business_repo = business_repo
        self.department_repo = department_repo
        self.permissions = permissions
        self.scoper = scoper
        self.hasher = hasher
        self.auth = auth
        self.invitation_ttl = invitation_ttl

    async def invite(
        self,
        identity: Identity,
        email: str,
        name: str,
        role: UserRole = UserRole.AGENT,
        department_ids: list[str] | None = None,
    ) -> InvitationResult:
        """Create a pending invitation and return it with its token.

        Raises:
            ValidationException: personal caller, bad email, role or department.
            AccountAlreadyExistsException: the email is already a member.
            InvitationPendingException: an unexpired invitation is outstanding.
        """
        await self.permissions.require(identity.user_id, ADMIN_OR_MANAGER, "invitations", "create")
        if not identity.business_id:
            raise ValidationException(
                "Invitations are only available for business accounts. Upgrade first."
            )
        try:
            normalized = EmailAddress.parse(email).value
        except ValueError as exc:
            raise ValidationException(str(exc), field="email") from exc
        if role not in INVITABLE_ROLES:
            raise ValidationException("Role must be agent or manager", field="role")
        clean_name = InputSanitizer.clean_text(name)
        if not clean_name:
            raise ValidationException("Name is required", field="name")

        business = await self.business_repo.lock(identity.business_id)
        if business is None:
            raise ResourceNotFoundException("business", identity.business_id)
        existing = await self.user_repo.find_active_by_email(normalized)
        if any(c.business_id == identity.business_id for c in existing):
            raise AccountAlreadyExistsException(
                "A user with this email already exists in your business"
            )
        now = utc_now()
        for pending in await self.invitation_repo.find_pending(identity.business_id, normalized):
            if invitation_status(pending, now) == InvitationStatus.PENDING:
                raise InvitationPendingException(normalized)
            await self.invitation_repo.set_status(pending.id, InvitationStatus.EXPIRED)

        departments = list(dict.fromkeys(department_ids or []))
        scope = self.scoper.scope_for(identity, ResourceClass.DEPARTMENTS)
        for department_id in departments:
            if await self.department_repo.get_visible(scope, department_id) is None:
                raise ValidationException(
                    f"Unknown department: {department_id}", field="department_ids"
                )

        invitation = await self.invitation_repo.create(
            InvitationCreate(
                business_id=identity.business_id,
                email=normalized,
                name=clean_name,
                role=role,
                token=generate_invitation_token(),
                expires_at=now + self.invitation_ttl,
                invited_by=identity.user_id,
                department_ids=departments,
            )
        )
        logger.info(
            "User %s invited %s to business %s as %s",
            identity.user_id,
            normalized,
            identity.business_id,
            role.value,
        )
        return invitation

    async def list_invitations(self, identity: Identity) -> list[InvitationResult]:
        """Pending and expired invitations of the caller's business, newest first."""
        await self.permissions.require(identity.user_id, ADMIN_OR_MANAGER, "invitations", "list")
        if not identity.business_id:
            return []
        return await self.invitation_repo.list_for_business(
            identity.business_id, _LISTED_STATUSES
        )

    async def revoke(self, identity: Identity, invitation_id: str) -> InvitationResult:
        """Revoke a pending invitation of the caller's business."""
        await self.permissions.require(identity.user_id, ADMIN_OR_MANAGER, "invitations", "revoke")
        invitation = None
        if identity.business_id:
            invitation = await self.invitation_repo.get_for_business(
                identity.business_id, invitation_id
            )
        if invitation is None:
            raise ResourceNotFoundException("invitation", invitation_id)
        if invitation.status != InvitationStatus.PENDING:
            raise ValidationException("Only pending invitations can be revoked")
        revoked = await self.invitation_repo.set_status(invitation_id, InvitationStatus.REVOKED)
        if revoked is None:
            raise ResourceNotFoundException("invitation", invitation_id)
        logger.info("User %s revoked invitation %s", identity.user_id, invitation_id)
        return revoked

    async def _usable(self, token: str) -> InvitationResult:
        invitation = await self.invitation_repo.get_by_token(token) if token else None
        if invitation is None:
            raise InvitationInvalidException()
        status = invitation_status(invitation)
        if status == InvitationStatus.EXPIRED:
            raise InvitationExpiredException()
        if status != InvitationStatus.PENDING:
            raise InvitationInvalidException()
        return invitation

    async def validate(self, token: str) -> InvitationDetails:
        """Public check of an invitation link before the invitee sets a password."""
        invitation = await self._usable(token)
        business = await self.business_repo.get_by_id(invitation.business_id)
        if business is None:
            raise InvitationInvalidException()
        return InvitationDetails(invitation=invitation, business_name=business.business_name)

    async def accept(self, token: str, password: str, name: str | None = None) -> AuthResult:
        """Create the member with the invitee's password, assign departments and sign in.

        Raises:
            InvitationInvalidException: unknown, used or revoked token, or the business is gone.
            InvitationExpiredException: the invitation expired.
            AccountAlreadyExistsException: the email joined the business another way.
        """
        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise ValidationException(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters", field="password"
            )
        invitation = await self._usable(token)
        business = await self.business_repo.lock(invitation.business_id)
        if business is None:
            raise InvitationInvalidException()
        existing = await self.user_repo.find_active_by_email(invitation.email)
        if any(c.business_id == invitation.business_id for c in existing):
            raise AccountAlreadyExistsException(
                "A user with this email already exists in this business. Please login instead."
            )

        password_hash = await asyncio.to_thread(self.hasher.hash, password)
        display_name = InputSanitizer.clean_text(name or "") or invitation.name
        user = await self.user_repo.create_user(
            UserCreate(
                email=invitation.email,
                name=display_name or invitation.email,
                role=invitation.role,
                business_id=invitation.business_id,
                password_hash=password_hash,
                is_email_verified=True,
            )
        )
        await self.invitation_repo.set_status(
            invitation.id, InvitationStatus.ACCEPTED, accepted_at=utc_now()
        )
        if invitation.department_ids:
            await self.department_repo.set_user_departments(user.id, invitation.department_ids)
        session = await self.auth.open_session(user)
        logger.info(
            "Invitation %s accepted: user %s joined business %s",
            invitation.id,
            user.id,
            invitation.business_id,
        )
        return AuthResult(user=user, session=session)
