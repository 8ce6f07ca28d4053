"""Ticket API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.domain.enums import TicketPriority, TicketStatus


class TicketCreateRequest(BaseModel):
    thread_id: str = Field(..., min_length=1)
    subject: str = Field(default="", max_length=998)
    customer_email: EmailStr
    customer_name: str | None = Field(default=None, max_length=200)
    tags: list[str] = Field(default_factory=list)
    last_customer_reply_at: datetime | None = None


class TicketAssignRequest(BaseModel):
    """Assign to a team member; null unassigns."""

    assignee_user_id: str | None = None


class TicketResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    thread_id: str
    subject: str
    customer_email: str
    customer_name: str | None = None
    status: TicketStatus
    priority: TicketPriority | None = None
    assignee_user_id: str | None = None
    tags: list[str]
    last_customer_reply_at: datetime | None = None
    created_at: datetime | None = None


class TicketNoteRequest(BaseModel):
    """Body for adding or editing an internal note."""

    content: str = Field(..., min_length=1, max_length=10000)


class TicketNoteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    ticket_id: str
    user_id: str
    user_name: str | None = None
    content: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
