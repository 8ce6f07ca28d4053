"""Repository and store interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
Implementations raise StorageFailureException when the underlying store fails.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Protocol

from app.domain.enums import InvitationStatus, KnowledgeStatus, UserRole

if TYPE_CHECKING:
    from app.application.dtos.business import BusinessCreate, BusinessResult
    from app.application.dtos.invitation import InvitationCreate, InvitationResult
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


# User store
class IUserRepository(Protocol):
    """Protocol for user persistence (UserStore)."""

    async def find_active_by_email(self, email: str) -> list[AccountCandidate]:
        """Return every active user row for a normalized email (any order)."""

    async def get_by_id(self, user_id: str) -> UserResult | None:
        """Return user by id, active or not."""

    async def count_active_users(
        self, business_id: str, excluding_user_id: str | None = None
    ) -> int:
        """Count active users linked to business_id, optionally excluding one user."""

    async def set_tenancy(
        self, user_id: str, business_id: str | None, role: UserRole
    ) -> UserResult | None:
        """Set the user's business link and role together. Returns None if the user is gone."""

    async def create_user(self, data: UserCreate) -> UserResult:
        """Insert a user row."""

    async def list_active_members(
        self, business_id: str, role: UserRole | None = None
    ) -> list[UserResult]:
        """Active users of a business, oldest first; optionally filtered by role."""

    async def update_user(
        self,
        user_id: str,
        *,
        name: str | None = None,
        role: UserRole | None = None,
        is_active: bool | None = None,
    ) -> UserResult | None:
        """Apply a partial update. Returns None if the user does not exist."""

    async def delete_unverified_personal(self, email: str) -> int:
        """Delete unverified user rows for email that have no business. Returns rows removed."""


# Business store
class IBusinessRepository(Protocol):
    """Protocol for business (tenant) persistence (BusinessStore)."""

    async def find_by_email(self, business_email: str) -> BusinessResult | None:
        """Return the business registered under business_email, if any."""

    async def get_by_id(self, business_id: str) -> BusinessResult | None:
        """Return business by id."""

    async def get_or_create(self, data: BusinessCreate) -> tuple[BusinessResult, bool]:
        """Atomic find-or-create keyed by business_email. Returns (business, created)."""

    async def lock(self, business_id: str) -> BusinessResult | None:
        """Lock the business row for the rest of the transaction. None if it does not exist."""

    async def delete(self, business_id: str) -> bool:
        """Delete business. Returns False when it was already gone."""


# Session store
class ISessionStore(Protocol):
    """Protocol for session persistence (SessionStore)."""

    async def resolve_session(self, token: str) -> SessionResult | None:
        """Return the live session for token; None if unknown or expired."""

    async def create_session(
        self,
        user_id: str,
        user_email: str,
        business_id: str | None,
        expires_at: datetime,
    ) -> SessionResult:
        """Create a session with a fresh opaque token."""

    async def update_session_business(self, token: str, business_id: str | None) -> bool:
        """Set the denormalized business id on a session. Returns False if token is unknown."""

    async def delete_session(self, token: str) -> bool:
        """Delete a session. Returns False if it did not exist."""


# Token store
class ITokenStore(Protocol):
    """Protocol for external mailbox credential persistence (TokenStore)."""

    async def reassign_by_email(
        self,
        user_email: str,
        new_business_id: str | None,
        only_if_business_id_is_null: bool,
    ) -> int:
        """Point every token of user_email at new_business_id. Returns rows updated."""

    async def list_by_email(self, user_email: str) -> list[MailboxTokenResult]:
        """Return tokens owned by user_email."""


# Scoped domain records
class ITicketRepository(Protocol):
    """Protocol for ticket persistence, filtered by a VisibilityScope."""

    async def list_visible(self, scope: VisibilityScope) -> list[TicketResult]:
        """Tickets matching scope, by last customer reply ascending (nulls last)."""

    async def get_visible(self, scope: VisibilityScope, ticket_id: str) -> TicketResult | None:
        """Ticket by id, or None if it does not exist or is outside scope."""

    async def create(self, owner: ScopeDiscriminator, data: TicketCreate) -> TicketResult:
        """Insert a ticket stamped with the owner's scope discriminator."""

    async def set_assignee(self, ticket_id: str, assignee_user_id: str | None) -> TicketResult | None:
        """Assign or unassign a ticket."""


class ITicketNoteRepository(Protocol):
    """Protocol for internal ticket notes. Callers check ticket visibility first."""

    async def list_for_ticket(self, ticket_id: str) -> list[TicketNoteResult]:
        """Notes on a ticket, newest first."""

    async def get(self, note_id: str) -> TicketNoteResult | None:
        """Note by id."""

    async def create(self, ticket_id: str, user_id: str, content: str) -> TicketNoteResult:
        """Insert a note authored by user_id."""

    async def update(self, note_id: str, content: str) -> TicketNoteResult | None:
        """Replace a note's content. Returns None if the note is gone."""

    async def delete(self, note_id: str) -> bool:
        """Delete a note. Returns False if already gone."""


class IKnowledgeRepository(Protocol):
    """Protocol for knowledge item persistence, filtered by a VisibilityScope."""

    async def list_visible(self, scope: VisibilityScope) -> list[KnowledgeItemResult]:
        """Knowledge items matching scope, newest first."""

    async def get_visible(
        self, scope: VisibilityScope, item_id: str
    ) -> KnowledgeItemResult | None:
        """Knowledge item by id, or None if outside scope."""

    async def create(
        self,
        owner: ScopeDiscriminator,
        data: KnowledgeItemCreate,
        status: KnowledgeStatus,
    ) -> KnowledgeItemResult:
        """Insert a knowledge item with the given status."""

    async def update(
        self, item_id: str, data: KnowledgeItemUpdate, bump_version: bool
    ) -> KnowledgeItemResult | None:
        """Apply a partial update, incrementing version when bump_version."""

    async def delete(self, item_id: str) -> bool:
        """Delete item. Returns False if already gone."""


class IDepartmentRepository(Protocol):
    """Protocol for department persistence, filtered by a VisibilityScope."""

    async def list_visible(self, scope: VisibilityScope) -> list[DepartmentResult]:
        """Departments matching scope, ordered by name."""

    async def create(
        self,
        owner: ScopeDiscriminator,
        name: str,
        description: str,
        created_by: str | None,
    ) -> DepartmentResult:
        """Insert a department."""

    async def get_visible(
        self, scope: VisibilityScope, department_id: str
    ) -> DepartmentResult | None:
        """Department by id, or None if outside scope."""

    async def list_members(self, department_id: str) -> list[UserResult]:
        """Active users assigned to the department, by name."""

    async def add_members(self, department_id: str, user_ids: list[str]) -> int:
        """Assign users to the department; existing assignments are kept. Returns rows added."""

    async def remove_member(self, department_id: str, user_id: str) -> bool:
        """Unassign a user. Returns False if they were not assigned."""

    async def list_for_user(self, user_id: str) -> list[DepartmentResult]:
        """Departments the user is assigned to, by name."""

    async def set_user_departments(self, user_id: str, department_ids: list[str]) -> None:
        """Replace the user's assignments with exactly department_ids."""


# Invitation store
class IInvitationRepository(Protocol):
    """Protocol for agent invitation persistence."""

    async def create(self, data: InvitationCreate) -> InvitationResult:
        """Insert a pending invitation."""

    async def get_by_token(self, token: str) -> InvitationResult | None:
        """Invitation by its opaque token, any status."""

    async def get_for_business(
        self, business_id: str, invitation_id: str
    ) -> InvitationResult | None:
        """Invitation by id, only if it belongs to business_id."""

    async def find_pending(self, business_id: str, email: str) -> list[InvitationResult]:
        """Pending invitations (expired or not) for a normalized email in a business."""

    async def list_for_business(
        self, business_id: str, statuses: frozenset[InvitationStatus]
    ) -> list[InvitationResult]:
        """Invitations of a business with a stored status in statuses, newest first."""

    async def set_status(
        self,
        invitation_id: str,
        status: InvitationStatus,
        accepted_at: datetime | None = None,
    ) -> InvitationResult | None:
        """Set the stored status (and acceptance time). Returns None if the invitation is gone."""
