"""DTOs for user and account use cases (no dependency on ORM)."""

from dataclasses import dataclass, field
from datetime import datetime

from app.domain.enums import UserRole


@dataclass(frozen=True)
class UserResult:
    """User read-model (result of get_by_id, create_user, etc.). No password."""

    id: str
    email: str
    name: str
    role: UserRole
    business_id: str | None
    is_active: bool
    is_email_verified: bool
    created_at: datetime | None = None


@dataclass(frozen=True)
class AccountCandidate:
    """One active user row for an email, as seen by account resolution and login.

    Carries the stored password material so callers can tell password accounts
    from Google-only ones; never serialize this to a response.
    """

    id: str
    email: str
    business_id: str | None
    role: UserRole
    is_email_verified: bool
    created_at: datetime
    password_hash: str | None = field(default=None, repr=False)


@dataclass(frozen=True)
class UserCreate:
    """Input for creating a user row."""

    email: str
    name: str
    role: UserRole
    business_id: str | None = None
    password_hash: str | None = field(default=None, repr=False)
    is_email_verified: bool = False
