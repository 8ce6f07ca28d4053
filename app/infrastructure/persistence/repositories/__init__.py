"""Persistence repositories. Re-exports for dependency injection."""

from app.infrastructure.persistence.repositories.base import BaseRepository, storage_errors
from app.infrastructure.persistence.repositories.business_repo import BusinessRepository
from app.infrastructure.persistence.repositories.department_repo import DepartmentRepository
from app.infrastructure.persistence.repositories.invitation_repo import InvitationRepository
from app.infrastructure.persistence.repositories.knowledge_repo import KnowledgeRepository
from app.infrastructure.persistence.repositories.scoping import scope_clause
from app.infrastructure.persistence.repositories.session_repo import SessionRepository
from app.infrastructure.persistence.repositories.ticket_note_repo import TicketNoteRepository
from app.infrastructure.persistence.repositories.ticket_repo import TicketRepository
from app.infrastructure.persistence.repositories.token_repo import TokenRepository
from app.infrastructure.persistence.repositories.user_repo import UserRepository

__all__ = [
    "BaseRepository",
    "BusinessRepository",
    "DepartmentRepository",
    "InvitationRepository",
    "KnowledgeRepository",
    "SessionRepository",
    "TicketNoteRepository",
    "TicketRepository",
    "TokenRepository",
    "UserRepository",
    "scope_clause",
    "storage_errors",
]
