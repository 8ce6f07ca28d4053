"""Persistence models: ORM entities and mixins."""

from app.infrastructure.persistence.models.business import Business
from app.infrastructure.persistence.models.invitation import AgentInvitation
from app.infrastructure.persistence.models.mixins import (
    CuidMixin,
    ScopedModel,
    ScopeMixin,
    TimestampMixin,
    VersionedMixin,
)
from app.infrastructure.persistence.models.records import (
    Department,
    KnowledgeItem,
    Ticket,
    TicketNote,
    UserDepartment,
)
from app.infrastructure.persistence.models.session import MailboxToken, UserSession
from app.infrastructure.persistence.models.user import User

__all__ = [
    "AgentInvitation",
    "Business",
    "CuidMixin",
    "Department",
    "KnowledgeItem",
    "MailboxToken",
    "ScopeMixin",
    "ScopedModel",
    "Ticket",
    "TicketNote",
    "TimestampMixin",
    "User",
    "UserDepartment",
    "UserSession",
    "VersionedMixin",
]
