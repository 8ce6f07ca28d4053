"""DTOs for tenancy-scoped helpdesk records: tickets, ticket notes, knowledge items, departments."""

from dataclasses import dataclass, field
from datetime import datetime

from app.domain.enums import KnowledgeStatus, TicketPriority, TicketStatus


@dataclass(frozen=True)
class TicketResult:
    """Ticket read-model."""

    id: str
    thread_id: str
    subject: str
    customer_email: str
    customer_name: str | None
    status: TicketStatus
    priority: TicketPriority | None
    assignee_user_id: str | None
    tags: list[str]
    user_email: str | None
    business_id: str | None
    last_customer_reply_at: datetime | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class TicketCreate:
    """Input for opening a ticket from a mailbox thread."""

    thread_id: str
    subject: str
    customer_email: str
    customer_name: str | None = None
    status: TicketStatus = TicketStatus.OPEN
    tags: list[str] = field(default_factory=list)
    last_customer_reply_at: datetime | None = None


@dataclass(frozen=True)
class KnowledgeItemResult:
    """Knowledge base entry read-model."""

    id: str
    title: str
    body: str
    tags: list[str]
    can_paraphrase: bool
    status: KnowledgeStatus
    version: int
    user_email: str | None
    business_id: str | None
    created_at: datetime | None = None


@dataclass(frozen=True)
class KnowledgeItemCreate:
    """Input for a new knowledge item (status decided by the author's role)."""

    title: str
    body: str
    tags: list[str] = field(default_factory=list)
    can_paraphrase: bool = False


@dataclass(frozen=True)
class KnowledgeItemUpdate:
    """Partial update; None fields are left unchanged."""

    title: str | None = None
    body: str | None = None
    tags: list[str] | None = None
    can_paraphrase: bool | None = None
    status: KnowledgeStatus | None = None


@dataclass(frozen=True)
class DepartmentResult:
    """Department read-model."""

    id: str
    name: str
    description: str
    is_active: bool
    user_email: str | None
    business_id: str | None
    created_by: str | None = None


@dataclass(frozen=True)
class TicketNoteResult:
    """Internal note on a ticket. user_name is the author's current display name."""

    id: str
    ticket_id: str
    user_id: str
    content: str
    user_name: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
