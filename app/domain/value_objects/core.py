"""Domain value objects for the helpdesk account subsystem.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

import re
from dataclasses import dataclass

from app.domain.enums import AccountType, UserRole

# Deliberately loose: one "@", no whitespace, a dot in the domain part.
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def normalize_email(value: str) -> str:
    """Return the canonical lookup key for an email (trimmed, lower-cased)."""
    return value.strip().lower()


@dataclass(frozen=True)
class EmailAddress:
    """Value object for a normalized email address.

    Emails are case-insensitive keys everywhere in the system; construct
    through EmailAddress.parse to get the canonical form.
    """

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("Email must be a non-empty string")
        if self.value != normalize_email(self.value):
            raise ValueError("Email must be normalized (trimmed, lower-case)")
        if not _EMAIL_RE.match(self.value):
            raise ValueError(f"Invalid email address: {self.value!r}")

    @classmethod
    def parse(cls, raw: str) -> "EmailAddress":
        """Normalize then validate."""
        return cls(normalize_email(raw))

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Identity:
    """Resolved caller identity, passed explicitly into every core operation.

    Built from the session on each request; role and business_id are read from
    the user row at resolution time, so a role change applies on the next request.
    """

    user_id: str
    email: str
    role: UserRole
    business_id: str | None = None
    session_token: str | None = None

    @property
    def account_type(self) -> AccountType:
        return AccountType.BUSINESS if self.business_id else AccountType.PERSONAL

    @property
    def is_business(self) -> bool:
        return self.business_id is not None
