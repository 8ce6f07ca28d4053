"""Ticket repository: reads filtered by VisibilityScope."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.records import TicketCreate, TicketResult
from app.application.dtos.scope import ScopeDiscriminator, VisibilityScope
from app.domain.enums import TicketPriority, TicketStatus
from app.infrastructure.persistence.models.records import Ticket
from app.infrastructure.persistence.repositories.base import BaseRepository, storage_errors
from app.infrastructure.persistence.repositories.scoping import scope_clause


def _ticket_to_result(t: Ticket) -> TicketResult:
    return TicketResult(
        id=t.id,
        thread_id=t.thread_id,
        subject=t.subject,
        customer_email=t.customer_email,
        customer_name=t.customer_name,
        status=TicketStatus(t.status),
        priority=TicketPriority(t.priority) if t.priority else None,
        assignee_user_id=t.assignee_user_id,
        tags=list(t.tags or []),
        user_email=t.user_email,
        business_id=t.business_id,
        last_customer_reply_at=t.last_customer_reply_at,
        created_at=t.created_at,
    )


class TicketRepository(BaseRepository[Ticket]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Ticket)

    async def list_visible(self, scope: VisibilityScope) -> list[TicketResult]:
        stmt = (
            select(Ticket)
            .where(scope_clause(Ticket, scope))
            .order_by(Ticket.last_customer_reply_at.asc().nulls_last(), Ticket.id)
        )
        with storage_errors("ticket.list_visible"):
            result = await self.db.execute(stmt)
            return [_ticket_to_result(t) for t in result.scalars().all()]

    async def get_visible(self, scope: VisibilityScope, ticket_id: str) -> TicketResult | None:
        with storage_errors("ticket.get_visible"):
            result = await self.db.execute(
                select(Ticket).where(Ticket.id == ticket_id, scope_clause(Ticket, scope))
            )
            ticket = result.scalar_one_or_none()
        return _ticket_to_result(ticket) if ticket else None

    async def create(self, owner: ScopeDiscriminator, data: TicketCreate) -> TicketResult:
        ticket = Ticket(
            thread_id=data.thread_id,
            subject=data.subject,
            customer_email=data.customer_email,
            customer_name=data.customer_name,
            status=data.status.value,
            tags=list(data.tags),
            last_customer_reply_at=data.last_customer_reply_at,
            user_email=owner.user_email,
            business_id=owner.business_id,
        )
        with storage_errors("ticket.create"):
            created = await self.add(ticket)
        return _ticket_to_result(created)

    async def set_assignee(
        self, ticket_id: str, assignee_user_id: str | None
    ) -> TicketResult | None:
        with storage_errors("ticket.set_assignee"):
            ticket = await self.get_entity(ticket_id)
            if ticket is None:
                return None
            ticket.assignee_user_id = assignee_user_id
            ticket = await self.save(ticket)
        return _ticket_to_result(ticket)
