"""DTOs returned by account resolution, permission checks and auth flows."""

from dataclasses import dataclass

from app.application.dtos.session import SessionResult
from app.application.dtos.user import UserResult
from app.domain.enums import AccountType, UserRole


@dataclass(frozen=True)
class AccountInfo:
    """What kind of account an email belongs to.

    exists=False with lookup_failed=True means the lookup itself failed: the
    account may well exist. Security-sensitive callers must not treat that as
    confirmed absence.
    """

    exists: bool
    account_type: AccountType | None = None
    user_id: str | None = None
    business_id: str | None = None
    has_password: bool = False
    is_verified: bool = False
    role: UserRole | None = None
    lookup_failed: bool = False


@dataclass(frozen=True)
class AccountTypeCheck:
    """Result of validating an email against the tenancy type a flow expects."""

    is_valid: bool
    account_info: AccountInfo
    error: str | None = None


@dataclass(frozen=True)
class GoogleLoginDecision:
    """Whether an email may sign in with Google, and why not."""

    can_login: bool
    account_info: AccountInfo
    reason: str | None = None


@dataclass(frozen=True)
class PermissionDecision:
    """Outcome of a role check. user_role is None when the user is missing or inactive."""

    allowed: bool
    user_role: UserRole | None = None


@dataclass(frozen=True)
class AuthResult:
    """Result of registration or login: the user and the session that was opened."""

    user: UserResult
    session: SessionResult
