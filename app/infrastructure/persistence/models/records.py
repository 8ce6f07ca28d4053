"""Tenancy-scoped helpdesk records: tickets, ticket notes, knowledge items, departments."""

from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.domain.enums import KnowledgeStatus, TicketPriority, TicketStatus
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import (
    CuidMixin,
    ScopedModel,
    TimestampMixin,
    VersionedMixin,
)


def _in_check(column: str, values: list[str]) -> str:
    return "{} IN ({})".format(column, ", ".join("'{}'".format(v) for v in values))


class Ticket(ScopedModel, Base):
    """Support ticket opened from a mailbox thread. Table: ticket."""

    __tablename__ = "ticket"

    thread_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    subject: Mapped[str] = mapped_column(String, nullable=False, server_default="")
    customer_email: Mapped[str] = mapped_column(String, nullable=False)
    customer_name: Mapped[str | None] = mapped_column(String, nullable=True)
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=TicketStatus.OPEN.value
    )
    priority: Mapped[str | None] = mapped_column(String, nullable=True)
    assignee_user_id: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    last_customer_reply_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        CheckConstraint(_in_check("status", TicketStatus.values()), name="ticket_status_check"),
        CheckConstraint(
            "priority IS NULL OR " + _in_check("priority", TicketPriority.values()),
            name="ticket_priority_check",
        ),
    )


class TicketNote(CuidMixin, TimestampMixin, Base):
    """Internal note on a ticket, never sent to the customer. Table: ticket_note.

    Scope comes from the parent ticket; notes go away with it.
    """

    __tablename__ = "ticket_note"

    ticket_id: Mapped[str] = mapped_column(
        String, ForeignKey("ticket.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False, index=True
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)


class KnowledgeItem(ScopedModel, VersionedMixin, Base):
    """Knowledge base entry used for replies and AI drafts. Table: knowledge_item."""

    __tablename__ = "knowledge_item"

    title: Mapped[str] = mapped_column(String, nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    can_paraphrase: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("false")
    )
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=KnowledgeStatus.PENDING.value, index=True
    )

    __table_args__ = (
        CheckConstraint(
            _in_check("status", KnowledgeStatus.values()), name="knowledge_item_status_check"
        ),
    )


class Department(ScopedModel, Base):
    """Routing department. Table: department."""

    __tablename__ = "department"

    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, server_default="")
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("true")
    )
    created_by: Mapped[str | None] = mapped_column(String, nullable=True)


class UserDepartment(CuidMixin, TimestampMixin, Base):
    """Assignment of a user to a department. Table: user_department."""

    __tablename__ = "user_department"

    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False, index=True
    )
    department_id: Mapped[str] = mapped_column(
        String, ForeignKey("department.id", ondelete="CASCADE"), nullable=False, index=True
    )

    __table_args__ = (
        UniqueConstraint("user_id", "department_id", name="user_department_user_department_key"),
    )
