"""DTOs for sessions and mailbox tokens."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class SessionResult:
    """Resolved session: who the token belongs to and its denormalized business scope."""

    token: str = field(repr=False)
    user_id: str
    user_email: str
    business_id: str | None
    expires_at: datetime


@dataclass(frozen=True)
class MailboxTokenResult:
    """Connected external mailbox credential (metadata only)."""

    id: str
    user_email: str
    business_id: str | None
    provider: str
    account_email: str
