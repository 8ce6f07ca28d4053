"""Account resolution: which tenancy an email belongs to and which row is primary."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime

from app.application.dtos.account import AccountInfo, AccountTypeCheck, GoogleLoginDecision
from app.application.dtos.user import AccountCandidate
from app.application.interfaces.repositories import IUserRepository
from app.domain.enums import AccountType
from app.domain.exceptions import AccountLookupUnavailableException, StorageFailureException
from app.domain.value_objects import normalize_email

logger = logging.getLogger(__name__)

DEFAULT_GOOGLE_PASSWORD_SENTINEL = "GOOGLE_OAUTH"

_MSG_BUSINESS_NEEDS_PASSWORD = (
    "This email is registered as a business account. Please use password login."
)


def primary_account_sort_key(candidate: AccountCandidate) -> tuple[bool, datetime, str]:
    """Total order over candidate rows: business-linked first, then oldest, then id."""
    return (candidate.business_id is None, candidate.created_at, candidate.id)


def select_primary_account(
    candidates: Iterable[AccountCandidate],
) -> AccountCandidate | None:
    """Return the canonical account among rows sharing an email (None if empty)."""
    return min(candidates, key=primary_account_sort_key, default=None)


def account_type_mismatch_message(actual: AccountType | None, attempted: AccountType) -> str:
    """User-facing message for signing in through the wrong tenancy's flow."""
    if actual == AccountType.BUSINESS and attempted == AccountType.PERSONAL:
        return (
            "This email is registered as a business account. "
            "Please sign in using the business login."
        )
    if actual == AccountType.PERSONAL and attempted == AccountType.BUSINESS:
        return (
            "This email is registered as a personal account. "
            "Please sign in using the personal login or upgrade to business."
        )
    return "Account type mismatch. Please use the correct login method."


class AccountResolver:
    """Determines account existence, tenancy type, role and verification for an email.

    Never raises for "not found": an unknown email resolves to exists=False.
    A storage failure also resolves to exists=False but with lookup_failed=True;
    callers deciding anything security-relevant go through ensure_resolved.
    """

    def __init__(
        self,
        user_repo: IUserRepository,
        google_password_sentinel: str = DEFAULT_GOOGLE_PASSWORD_SENTINEL,
        fail_closed: bool = True,
    ) -> None:
        self.user_repo = user_repo
        self.google_password_sentinel = google_password_sentinel
        self.fail_closed = fail_closed

    def has_password(self, password_hash: str | None) -> bool:
        """True when real password material is stored (not empty, not the Google marker)."""
        return bool(password_hash) and password_hash != self.google_password_sentinel

    async def _load_candidates(self, email: str) -> list[AccountCandidate] | None:
        """Active rows for email; None when the store failed."""
        try:
            return await self.user_repo.find_active_by_email(email)
        except StorageFailureException as exc:
            logger.warning(
                "Account lookup failed for %s (%s); treating as no account",
                email,
                exc.details.get("reason", exc.message),
            )
            return None

    def _to_info(self, candidate: AccountCandidate) -> AccountInfo:
        return AccountInfo(
            exists=True,
            account_type=(
                AccountType.BUSINESS if candidate.business_id else AccountType.PERSONAL
            ),
            user_id=candidate.id,
            business_id=candidate.business_id,
            has_password=self.has_password(candidate.password_hash),
            is_verified=candidate.is_email_verified,
            role=candidate.role,
        )

    async def resolve(self, email: str) -> AccountInfo:
        """Resolve the primary account for email (lower-cased, trimmed)."""
        key = normalize_email(email)
        if not key:
            return AccountInfo(exists=False)
        candidates = await self._load_candidates(key)
        if candidates is None:
            return AccountInfo(exists=False, lookup_failed=True)
        primary = select_primary_account(candidates)
        if primary is None:
            return AccountInfo(exists=False)
        return self._to_info(primary)

    async def resolve_candidate(self, email: str) -> AccountCandidate | None:
        """Primary account row including password material (for login).

        Raises AccountLookupUnavailableException when the lookup failed and
        fail_closed is set.
        """
        key = normalize_email(email)
        if not key:
            return None
        candidates = await self._load_candidates(key)
        if candidates is None:
            if self.fail_closed:
                raise AccountLookupUnavailableException()
            return None
        return select_primary_account(candidates)

    def ensure_resolved(self, info: AccountInfo) -> AccountInfo:
        """Raise AccountLookupUnavailableException if info came from a failed lookup and we fail closed."""
        if info.lookup_failed and self.fail_closed:
            raise AccountLookupUnavailableException()
        return info

    async def can_login_with_google(self, email: str) -> GoogleLoginDecision:
        """Whether email may sign in with Google.

        New and personal accounts may; a business account with a real password
        must use password login; a business account without one may.
        """
        info = self.ensure_resolved(await self.resolve(email))
        if not info.exists or info.account_type == AccountType.PERSONAL:
            return GoogleLoginDecision(can_login=True, account_info=info)
        if info.has_password:
            return GoogleLoginDecision(
                can_login=False,
                account_info=info,
                reason=_MSG_BUSINESS_NEEDS_PASSWORD,
            )
        return GoogleLoginDecision(can_login=True, account_info=info)

    async def validate_account_type(
        self, email: str, expected: AccountType
    ) -> AccountTypeCheck:
        """Check that email is new or already of the expected tenancy type."""
        info = self.ensure_resolved(await self.resolve(email))
        if not info.exists or info.account_type == expected:
            return AccountTypeCheck(is_valid=True, account_info=info)
        actual = info.account_type.value if info.account_type else "unknown"
        hint = (
            " or upgrade your account"
            if expected == AccountType.BUSINESS and info.account_type == AccountType.PERSONAL
            else ""
        )
        return AccountTypeCheck(
            is_valid=False,
            account_info=info,
            error=(
                f"This email is already registered as a {actual} account. "
                f"Please use the {actual} login{hint}."
            ),
        )

    async def has_multiple_accounts(self, email: str) -> bool:
        """True when more than one active row shares email. False on lookup failure."""
        key = normalize_email(email)
        if not key:
            return False
        candidates = await self._load_candidates(key)
        return candidates is not None and len(candidates) > 1

    async def get_primary_account(self, email: str) -> AccountInfo | None:
        """Resolved primary account, or None when none exists."""
        info = await self.resolve(email)
        return info if info.exists else None
