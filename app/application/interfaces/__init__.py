"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from app.infrastructure or app.api.
"""

from app.application.interfaces.repositories import (
    IBusinessRepository,
    IDepartmentRepository,
    IInvitationRepository,
    IKnowledgeRepository,
    ISessionStore,
    ITicketRepository,
    ITicketNoteRepository,
    ITokenStore,
    IUserRepository,
)
from app.application.interfaces.services import IPasswordHasher

__all__ = [
    "IBusinessRepository",
    "IDepartmentRepository",
    "IInvitationRepository",
    "IKnowledgeRepository",
    "IPasswordHasher",
    "ISessionStore",
    "ITicketRepository",
    "ITicketNoteRepository",
    "ITokenStore",
    "IUserRepository",
]
