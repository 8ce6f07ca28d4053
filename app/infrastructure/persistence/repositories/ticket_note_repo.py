"""Ticket note repository. Visibility is enforced on the parent ticket by the caller."""

from __future__ import annotations

from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.records import TicketNoteResult
from app.infrastructure.persistence.models.records import TicketNote
from app.infrastructure.persistence.models.user import User
from app.infrastructure.persistence.repositories.base import BaseRepository, storage_errors


def _note_to_result(n: TicketNote, user_name: str | None = None) -> TicketNoteResult:
    return TicketNoteResult(
        id=n.id,
        ticket_id=n.ticket_id,
        user_id=n.user_id,
        content=n.content,
        user_name=user_name,
        created_at=n.created_at,
        updated_at=n.updated_at,
    )


class TicketNoteRepository(BaseRepository[TicketNote]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, TicketNote)

    def _with_author(self) -> Any:
        return select(TicketNote, User.name).join(User, User.id == TicketNote.user_id)

    async def list_for_ticket(self, ticket_id: str) -> list[TicketNoteResult]:
        stmt = (
            self._with_author()
            .where(TicketNote.ticket_id == ticket_id)
            .order_by(TicketNote.created_at.desc(), TicketNote.id)
        )
        with storage_errors("ticket_note.list_for_ticket"):
            result = await self.db.execute(stmt)
            return [_note_to_result(note, name) for note, name in result.all()]

    async def get(self, note_id: str) -> TicketNoteResult | None:
        with storage_errors("ticket_note.get"):
            result = await self.db.execute(self._with_author().where(TicketNote.id == note_id))
            row = result.first()
        return _note_to_result(row[0], row[1]) if row else None

    async def create(self, ticket_id: str, user_id: str, content: str) -> TicketNoteResult:
        note = TicketNote(ticket_id=ticket_id, user_id=user_id, content=content)
        with storage_errors("ticket_note.create"):
            created = await self.add(note)
        return await self.get(created.id) or _note_to_result(created)

    async def update(self, note_id: str, content: str) -> TicketNoteResult | None:
        with storage_errors("ticket_note.update"):
            note = await self.get_entity(note_id)
            if note is None:
                return None
            note.content = content
            await self.save(note)
        return await self.get(note_id)

    async def delete(self, note_id: str) -> bool:
        with storage_errors("ticket_note.delete"):
            result = await self.db.execute(delete(TicketNote).where(TicketNote.id == note_id))
        return bool(result.rowcount)
