"""Tickets and their internal notes within the caller's visibility scope."""

from __future__ import annotations

import logging

from app.application.dtos.records import TicketCreate, TicketNoteResult, TicketResult
from app.application.interfaces.repositories import (
    ITicketNoteRepository,
    ITicketRepository,
    IUserRepository,
)
from app.application.services.permission_checker import PermissionChecker
from app.application.services.visibility_scoper import (
    VisibilityScoper,
    scope_discriminator,
    shares_tenancy,
)
from app.domain.enums import ADMIN_ONLY, ADMIN_OR_MANAGER, ResourceClass
from app.domain.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)
from app.domain.value_objects import Identity
from app.shared.utils.sanitization import InputSanitizer

logger = logging.getLogger(__name__)


class TicketService:
    """List, read, open and assign tickets; keep notes on them.

    Reads always go through a VisibilityScope; a note is reachable only
    through a ticket the caller can see.
    """

    def __init__(
        self,
        ticket_repo: ITicketRepository,
        user_repo: IUserRepository,
        permissions: PermissionChecker,
        scoper: VisibilityScoper,
        note_repo: ITicketNoteRepository,
    ) -> None:
        self.ticket_repo = ticket_repo
        self.user_repo = user_repo
        self.permissions = permissions
        self.scoper = scoper
        self.note_repo = note_repo

    async def list(self, identity: Identity) -> list[TicketResult]:
        scope = self.scoper.scope_for(identity, ResourceClass.TICKETS)
        if scope.matches_nothing:
            return []
        return await self.ticket_repo.list_visible(scope)

    async def get(self, identity: Identity, ticket_id: str) -> TicketResult:
        """Ticket by id; outside-scope tickets are reported as not found."""
        scope = self.scoper.scope_for(identity, ResourceClass.TICKETS)
        ticket = None
        if not scope.matches_nothing:
            ticket = await self.ticket_repo.get_visible(scope, ticket_id)
        if ticket is None:
            raise ResourceNotFoundException("ticket", ticket_id)
        return ticket

    async def create(self, identity: Identity, data: TicketCreate) -> TicketResult:
        """Open a ticket stamped with the caller's scope discriminator."""
        clean = TicketCreate(
            thread_id=data.thread_id,
            subject=InputSanitizer.clean_text(data.subject),
            customer_email=data.customer_email.strip().lower(),
            customer_name=(
                InputSanitizer.clean_text(data.customer_name) if data.customer_name else None
            ),
            status=data.status,
            tags=InputSanitizer.clean_tags(data.tags),
            last_customer_reply_at=data.last_customer_reply_at,
        )
        return await self.ticket_repo.create(scope_discriminator(identity), clean)

    async def assign(
        self, identity: Identity, ticket_id: str, assignee_user_id: str | None
    ) -> TicketResult:
        """Assign (or unassign with None). Admin or manager; assignee must share the tenancy."""
        await self.permissions.require(identity.user_id, ADMIN_OR_MANAGER, "tickets", "assign")
        await self.get(identity, ticket_id)
        if assignee_user_id is not None:
            assignee = await self.user_repo.get_by_id(assignee_user_id)
            if (
                assignee is None
                or not shares_tenancy(identity, assignee)
                or not assignee.is_active
            ):
                raise ValidationException(
                    "Assignee must be an active member of your team", field="assignee_user_id"
                )
        updated = await self.ticket_repo.set_assignee(ticket_id, assignee_user_id)
        if updated is None:
            raise ResourceNotFoundException("ticket", ticket_id)
        logger.info(
            "Ticket %s assigned to %s by %s", ticket_id, assignee_user_id, identity.user_id
        )
        return updated

    # ---- Notes ----

    async def list_notes(self, identity: Identity, ticket_id: str) -> list[TicketNoteResult]:
        """Notes on a visible ticket, newest first."""
        await self.get(identity, ticket_id)
        return await self.note_repo.list_for_ticket(ticket_id)

    async def add_note(
        self, identity: Identity, ticket_id: str, content: str
    ) -> TicketNoteResult:
        """Any member who can see the ticket may add a note."""
        await self.get(identity, ticket_id)
        clean = _note_content(content)
        note = await self.note_repo.create(ticket_id, identity.user_id, clean)
        logger.info("Note %s added to ticket %s by %s", note.id, ticket_id, identity.user_id)
        return note

    async def _note_on_ticket(
        self, identity: Identity, ticket_id: str, note_id: str
    ) -> TicketNoteResult:
        await self.get(identity, ticket_id)
        note = await self.note_repo.get(note_id)
        if note is None or note.ticket_id != ticket_id:
            raise ResourceNotFoundException("ticket_note", note_id)
        return note

    async def update_note(
        self, identity: Identity, ticket_id: str, note_id: str, content: str
    ) -> TicketNoteResult:
        """Only the author may edit a note."""
        note = await self._note_on_ticket(identity, ticket_id, note_id)
        if note.user_id != identity.user_id:
            raise AuthorizationException(resource="ticket_notes", action="update")
        updated = await self.note_repo.update(note_id, _note_content(content))
        if updated is None:
            raise ResourceNotFoundException("ticket_note", note_id)
        return updated

    async def delete_note(self, identity: Identity, ticket_id: str, note_id: str) -> None:
        """The author may delete their note; admins may delete any note."""
        note = await self._note_on_ticket(identity, ticket_id, note_id)
        decision = await self.permissions.check_self_or_role(identity, note.user_id, ADMIN_ONLY)
        if not decision.allowed:
            raise AuthorizationException(resource="ticket_notes", action="delete")
        if not await self.note_repo.delete(note_id):
            raise ResourceNotFoundException("ticket_note", note_id)
        logger.info("Note %s on ticket %s deleted by %s", note_id, ticket_id, identity.user_id)


def _note_content(content: str) -> str:
    clean = InputSanitizer.clean_text(content)
    if not clean:
        raise ValidationException("Note content is required", field="content")
    return clean
