"""Session -> Identity resolution with session/user reconciliation."""

from __future__ import annotations

import logging

from app.application.interfaces.repositories import ISessionStore, IUserRepository
from app.application.services.tenancy_migrator import TenancyMigrator
from app.domain.exceptions import AuthenticationException
from app.domain.value_objects import Identity, normalize_email

logger = logging.getLogger(__name__)


class IdentityService:
    """Resolves a session token to an explicit Identity for the rest of the request."""

    def __init__(
        self,
        session_store: ISessionStore,
        user_repo: IUserRepository,
        migrator: TenancyMigrator,
    ) -> None:
        self.session_store = session_store
        self.user_repo = user_repo
        self.migrator = migrator

    async def resolve(self, token: str | None) -> Identity:
        """Return the caller's identity.

        Role and business come from the user row, not the session. When the
        session's business id disagrees with the user's, the session is
        resynced from the user.

        Raises:
            AuthenticationException: missing, unknown or expired token, or the
                user is missing or inactive.
        """
        if not token:
            raise AuthenticationException()
        session = await self.session_store.resolve_session(token)
        if session is None:
            raise AuthenticationException("Session expired or invalid")
        user = await self.user_repo.get_by_id(session.user_id)
        if user is None or not user.is_active:
            raise AuthenticationException("User not found or inactive")

        if session.business_id != user.business_id:
            logger.warning(
                "Session business %s disagrees with user %s business %s; resyncing",
                session.business_id,
                user.id,
                user.business_id,
            )
            user = await self.migrator.reconcile(user.id, token)

        return Identity(
            user_id=user.id,
            email=normalize_email(user.email),
            role=user.role,
            business_id=user.business_id,
            session_token=token,
        )
