"""Tickets API. Agents only see tickets assigned to them or unassigned.

Notes hang off a ticket and share its visibility.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from app.api.v1.dependencies import CurrentIdentity, get_ticket_service
from app.application.dtos.records import TicketCreate
from app.application.services import TicketService
from app.core.limiter import limit_writes
from app.schemas.ticket import (
    TicketAssignRequest,
    TicketCreateRequest,
    TicketNoteRequest,
    TicketNoteResponse,
    TicketResponse,
)

router = APIRouter()


@router.get("", response_model=list[TicketResponse])
async def list_tickets(
    identity: CurrentIdentity,
    tickets: Annotated[TicketService, Depends(get_ticket_service)],
):
    """Visible tickets, oldest customer reply first."""
    return [TicketResponse.model_validate(t) for t in await tickets.list(identity)]


@router.get("/{ticket_id}", response_model=TicketResponse)
async def get_ticket(
    ticket_id: str,
    identity: CurrentIdentity,
    tickets: Annotated[TicketService, Depends(get_ticket_service)],
):
    return TicketResponse.model_validate(await tickets.get(identity, ticket_id))


@router.post("", response_model=TicketResponse, status_code=201)
@limit_writes
async def create_ticket(
    request: Request,
    body: TicketCreateRequest,
    identity: CurrentIdentity,
    tickets: Annotated[TicketService, Depends(get_ticket_service)],
):
    ticket = await tickets.create(
        identity,
        TicketCreate(
            thread_id=body.thread_id,
            subject=body.subject,
            customer_email=str(body.customer_email),
            customer_name=body.customer_name,
            tags=body.tags,
            last_customer_reply_at=body.last_customer_reply_at,
        ),
    )
    return TicketResponse.model_validate(ticket)


@router.patch("/{ticket_id}/assign", response_model=TicketResponse)
@limit_writes
async def assign_ticket(
    request: Request,
    ticket_id: str,
    body: TicketAssignRequest,
    identity: CurrentIdentity,
    tickets: Annotated[TicketService, Depends(get_ticket_service)],
):
    """Assign or unassign (admin or manager)."""
    ticket = await tickets.assign(identity, ticket_id, body.assignee_user_id)
    return TicketResponse.model_validate(ticket)


@router.get("/{ticket_id}/notes", response_model=list[TicketNoteResponse])
async def list_notes(
    ticket_id: str,
    identity: CurrentIdentity,
    tickets: Annotated[TicketService, Depends(get_ticket_service)],
):
    """Internal notes on the ticket, newest first."""
    notes = await tickets.list_notes(identity, ticket_id)
    return [TicketNoteResponse.model_validate(n) for n in notes]


@router.post("/{ticket_id}/notes", response_model=TicketNoteResponse, status_code=201)
@limit_writes
async def add_note(
    request: Request,
    ticket_id: str,
    body: TicketNoteRequest,
    identity: CurrentIdentity,
    tickets: Annotated[TicketService, Depends(get_ticket_service)],
):
    note = await tickets.add_note(identity, ticket_id, body.content)
    return TicketNoteResponse.model_validate(note)


@router.patch("/{ticket_id}/notes/{note_id}", response_model=TicketNoteResponse)
@limit_writes
async def update_note(
    request: Request,
    ticket_id: str,
    note_id: str,
    body: TicketNoteRequest,
    identity: CurrentIdentity,
    tickets: Annotated[TicketService, Depends(get_ticket_service)],
):
    """Edit a note (author only)."""
    note = await tickets.update_note(identity, ticket_id, note_id, body.content)
    return TicketNoteResponse.model_validate(note)


@router.delete("/{ticket_id}/notes/{note_id}", status_code=204)
@limit_writes
async def delete_note(
    request: Request,
    ticket_id: str,
    note_id: str,
    identity: CurrentIdentity,
    tickets: Annotated[TicketService, Depends(get_ticket_service)],
):
    """Delete a note (author, or any admin)."""
    await tickets.delete_note(identity, ticket_id, note_id)
    return Response(status_code=204)
