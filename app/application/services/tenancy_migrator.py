"""Tenancy transitions: personal -> business (upgrade) and business -> personal (downgrade).

Both transitions mutate the user, session, token and business rows. Callers run
them inside one request transaction; every step is also written so that a retry
after a partial failure converges on the same end state.
"""

from __future__ import annotations

import logging

from app.application.dtos.business import BusinessCreate, BusinessResult
from app.application.dtos.user import UserResult
from app.application.interfaces.repositories import (
    IBusinessRepository,
    ISessionStore,
    ITokenStore,
    IUserRepository,
)
from app.domain.enums import AccountType, SubscriptionTier, UserRole
from app.domain.exceptions import (
    AlreadyInTenancyException,
    AuthenticationException,
    InconsistentStateException,
    TeammatesExistException,
)
from app.domain.value_objects import Identity, normalize_email
from app.shared.utils.sanitization import InputSanitizer

logger = logging.getLogger(__name__)

# Role of a user once they leave a business.
PERSONAL_DEFAULT_ROLE = UserRole.AGENT


class TenancyMigrator:
    """Executes upgrade / downgrade over the User, Business, Session and Token stores."""

    def __init__(
        self,
        user_repo: IUserRepository,
        business_repo: IBusinessRepository,
        session_store: ISessionStore,
        token_store: ITokenStore,
        default_tier: SubscriptionTier = SubscriptionTier.FREE,
    ) -> None:
        self.user_repo = user_repo
        self.business_repo = business_repo
        self.session_store = session_store
        self.token_store = token_store
        self.default_tier = default_tier

    async def _current_user(self, identity: Identity) -> UserResult:
        """Re-read the acting user; the identity may predate a concurrent change."""
        user = await self.user_repo.get_by_id(identity.user_id)
        if user is None or not user.is_active:
            raise AuthenticationException()
        return user

    async def upgrade(self, identity: Identity) -> BusinessResult:
        """Move a personal user into a business keyed by their email.

        Reuses the business already registered under the email, otherwise
        creates one on the free tier. The user becomes its admin, the session
        is re-scoped and personal tokens follow the user.

        Raises:
            AlreadyInTenancyException: user already belongs to a business.
        """
        user = await self._current_user(identity)
        if user.business_id is not None:
            raise AlreadyInTenancyException(user.id, AccountType.BUSINESS.value)

        email = normalize_email(user.email)
        display_name = InputSanitizer.business_name(user.name or "") or email
        business, created = await self.business_repo.get_or_create(
            BusinessCreate(
                business_email=email,
                business_name=f"{display_name}'s Business",
                owner_name=display_name,
                subscription_tier=self.default_tier,
                is_email_verified=True,
            )
        )
        logger.info(
            "%s business %s for %s",
            "Created" if created else "Reusing existing",
            business.id,
            email,
        )

        await self.user_repo.set_tenancy(user.id, business.id, UserRole.ADMIN)
        if identity.session_token:
            await self.session_store.update_session_business(
                identity.session_token, business.id
            )
        moved = await self.token_store.reassign_by_email(
            email, business.id, only_if_business_id_is_null=True
        )
        logger.info(
            "Upgraded user %s to business %s (%d token(s) reassigned)",
            user.id,
            business.id,
            moved,
        )
        return business

    async def downgrade(self, identity: Identity) -> None:
        """Move the sole member of a business back to a personal account.

        The business row is locked before counting teammates so a concurrent
        add_member cannot slip in between the check and the unlink. The
        business is deleted last, once nothing references it.

        Raises:
            AlreadyInTenancyException: user has no business.
            TeammatesExistException: other active members remain.
        """
        user = await self._current_user(identity)
        business_id = user.business_id
        if business_id is None:
            raise AlreadyInTenancyException(user.id, AccountType.PERSONAL.value)

        await self.business_repo.lock(business_id)
        teammates = await self.user_repo.count_active_users(
            business_id, excluding_user_id=user.id
        )
        if teammates > 0:
            raise TeammatesExistException(business_id, teammates)

        email = normalize_email(user.email)
        await self.user_repo.set_tenancy(user.id, None, PERSONAL_DEFAULT_ROLE)
        if identity.session_token:
            await self.session_store.update_session_business(identity.session_token, None)
        moved = await self.token_store.reassign_by_email(
            email, None, only_if_business_id_is_null=False
        )
        if not await self.business_repo.delete(business_id):
            logger.warning("Business %s was already deleted during downgrade", business_id)
        logger.info(
            "Downgraded user %s from business %s (%d token(s) reassigned)",
            user.id,
            business_id,
            moved,
        )

    async def reconcile(self, user_id: str, session_token: str) -> UserResult:
        """Resync a session's business id from the user row (user is the source of truth).

        Raises:
            InconsistentStateException: the session's user no longer exists.
        """
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise InconsistentStateException(
                "Session refers to a user that no longer exists",
                {"user_id": user_id},
            )
        await self.session_store.update_session_business(session_token, user.business_id)
        logger.info(
            "Resynced session for user %s to business %s", user_id, user.business_id
        )
        return user
