"""Authentication flows: personal registration, password login, Google check, logout."""

from __future__ import annotations

import asyncio
import logging
from datetime import timedelta

from app.application.dtos.account import AuthResult, GoogleLoginDecision
from app.application.dtos.session import SessionResult
from app.application.dtos.user import UserCreate, UserResult
from app.application.interfaces.repositories import ISessionStore, IUserRepository
from app.application.interfaces.services import IPasswordHasher
from app.application.services.account_resolver import AccountResolver
from app.domain.enums import AccountType, UserRole
from app.domain.exceptions import (
    AccountAlreadyExistsException,
    AccountTypeMismatchException,
    AuthenticationException,
    ValidationException,
)
from app.domain.value_objects import EmailAddress
from app.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)

_MSG_INVALID_CREDENTIALS = "Invalid email or password"
_MSG_GOOGLE_ONLY = "This account uses Google sign-in. Please continue with Google."

# Personal accounts own their whole tenancy.
PERSONAL_ACCOUNT_ROLE = UserRole.ADMIN


def _parse_email(raw: str) -> str:
    try:
        return EmailAddress.parse(raw).value
    except ValueError as exc:
        raise ValidationException(str(exc), field="email") from exc


class AuthService:
    """Registration and login on top of AccountResolver and the user/session stores."""

    def __init__(
        self,
        resolver: AccountResolver,
        user_repo: IUserRepository,
        session_store: ISessionStore,
        hasher: IPasswordHasher,
        session_ttl: timedelta = timedelta(days=30),
    ) -> None:
        self.resolver = resolver
        self.user_repo = user_repo
        self.session_store = session_store
        self.hasher = hasher
        self.session_ttl = session_ttl
        self._dummy_hash: str | None = None

    async def _get_dummy_hash(self) -> str:
        """Valid hash for constant-time comparison when no account matches; computed once."""
        if self._dummy_hash is None:
            self._dummy_hash = await asyncio.to_thread(self.hasher.hash, "not-a-real-password")
        return self._dummy_hash

    async def open_session(self, user: UserResult) -> SessionResult:
        """Create a session scoped to the user's current business."""
        return await self.session_store.create_session(
            user_id=user.id,
            user_email=user.email,
            business_id=user.business_id,
            expires_at=utc_now() + self.session_ttl,
        )

    async def register_personal(self, name: str, email: str, password: str) -> AuthResult:
        """Create a verified personal account and sign it in.

        Raises:
            AccountTypeMismatchException: email belongs to a business account.
            AccountAlreadyExistsException: a verified personal account exists.
            AccountLookupUnavailableException: lookup failed and we fail closed.
        """
        normalized = _parse_email(email)
        if not name.strip():
            raise ValidationException("Name is required", field="name")
        if not password:
            raise ValidationException("Password is required", field="password")

        check = await self.resolver.validate_account_type(normalized, AccountType.PERSONAL)
        info = check.account_info
        if not check.is_valid:
            raise AccountTypeMismatchException(
                check.error or "Account type mismatch",
                actual_type=info.account_type.value if info.account_type else "unknown",
                expected_type=AccountType.PERSONAL.value,
            )
        if info.exists:
            if info.is_verified:
                raise AccountAlreadyExistsException()
            # The primary row is the oldest personal one; a newer row may be verified.
            candidates = await self.user_repo.find_active_by_email(normalized)
            if any(c.business_id is None and c.is_email_verified for c in candidates):
                raise AccountAlreadyExistsException()
            removed = await self.user_repo.delete_unverified_personal(normalized)
            logger.info("Replaced %d unverified personal account(s) for %s", removed, normalized)

        password_hash = await asyncio.to_thread(self.hasher.hash, password)
        user = await self.user_repo.create_user(
            UserCreate(
                email=normalized,
                name=name.strip(),
                role=PERSONAL_ACCOUNT_ROLE,
                business_id=None,
                password_hash=password_hash,
                is_email_verified=True,
            )
        )
        session = await self.open_session(user)
        logger.info("Registered personal account %s", user.id)
        return AuthResult(user=user, session=session)

    async def login(self, email: str, password: str) -> AuthResult:
        """Verify password against the primary account for email and open a session.

        Raises:
            AuthenticationException: unknown email, wrong password, Google-only
                account, or inactive user.
        """
        candidate = await self.resolver.resolve_candidate(email)
        if candidate is None:
            await asyncio.to_thread(self.hasher.verify, password, await self._get_dummy_hash())
            raise AuthenticationException(_MSG_INVALID_CREDENTIALS)
        if not self.resolver.has_password(candidate.password_hash):
            raise AuthenticationException(_MSG_GOOGLE_ONLY)
        password_hash = candidate.password_hash or ""
        if not await asyncio.to_thread(self.hasher.verify, password, password_hash):
            raise AuthenticationException(_MSG_INVALID_CREDENTIALS)

        user = await self.user_repo.get_by_id(candidate.id)
        if user is None or not user.is_active:
            raise AuthenticationException(_MSG_INVALID_CREDENTIALS)
        session = await self.open_session(user)
        logger.info("User %s logged in (business=%s)", user.id, user.business_id)
        return AuthResult(user=user, session=session)

    async def google_login_allowed(self, email: str) -> GoogleLoginDecision:
        """Whether email may use Google sign-in."""
        return await self.resolver.can_login_with_google(email)

    async def logout(self, token: str | None) -> None:
        """Delete the session. Unknown tokens are ignored."""
        if token:
            await self.session_store.delete_session(token)
