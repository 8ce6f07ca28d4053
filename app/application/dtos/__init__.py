"""Application DTOs (no ORM dependency)."""

from app.application.dtos.account import (
    AccountInfo,
    AccountTypeCheck,
    AuthResult,
    GoogleLoginDecision,
    PermissionDecision,
)
from app.application.dtos.business import BusinessCreate, BusinessResult
from app.application.dtos.invitation import (
    InvitationCreate,
    InvitationDetails,
    InvitationResult,
)
from app.application.dtos.records import (
    DepartmentResult,
    KnowledgeItemCreate,
    KnowledgeItemResult,
    KnowledgeItemUpdate,
    TicketCreate,
    TicketNoteResult,
    TicketResult,
)
from app.application.dtos.scope import ScopeDiscriminator, VisibilityScope
from app.application.dtos.session import MailboxTokenResult, SessionResult
from app.application.dtos.user import AccountCandidate, UserCreate, UserResult

__all__ = [
    "AccountCandidate",
    "AccountInfo",
    "AccountTypeCheck",
    "AuthResult",
    "BusinessCreate",
    "BusinessResult",
    "DepartmentResult",
    "GoogleLoginDecision",
    "InvitationCreate",
    "InvitationDetails",
    "InvitationResult",
    "KnowledgeItemCreate",
    "KnowledgeItemResult",
    "KnowledgeItemUpdate",
    "MailboxTokenResult",
    "PermissionDecision",
    "ScopeDiscriminator",
    "SessionResult",
    "TicketCreate",
    "TicketNoteResult",
    "TicketResult",
    "UserCreate",
    "UserResult",
    "VisibilityScope",
]
