"""Agent invitation repository."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.invitation import InvitationCreate, InvitationResult
from app.domain.enums import InvitationStatus, UserRole
from app.domain.value_objects import normalize_email
from app.infrastructure.persistence.models.invitation import AgentInvitation
from app.infrastructure.persistence.repositories.base import BaseRepository, storage_errors


def _invitation_to_result(i: AgentInvitation) -> InvitationResult:
    """Map ORM AgentInvitation to InvitationResult (token included; never serialize it in lists)."""
    return InvitationResult(
        id=i.id,
        business_id=i.business_id,
        email=i.email,
        name=i.name,
        role=UserRole(i.role),
        status=InvitationStatus(i.status),
        expires_at=i.expires_at,
        invited_by=i.invited_by,
        department_ids=list(i.department_ids or []),
        accepted_at=i.accepted_at,
        created_at=i.created_at,
        token=i.token,
    )


class InvitationRepository(BaseRepository[AgentInvitation]):
    """Invitations keyed by opaque token; email lookups go through lower(email)."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, AgentInvitation)

    async def create(self, data: InvitationCreate) -> InvitationResult:
        invitation = AgentInvitation(
            business_id=data.business_id,
            invited_by=data.invited_by,
            email=normalize_email(data.email),
            name=data.name,
            role=data.role.value,
            token=data.token,
            status=InvitationStatus.PENDING.value,
            expires_at=data.expires_at,
            department_ids=list(data.department_ids),
        )
        with storage_errors("invitation.create"):
            created = await self.add(invitation)
        return _invitation_to_result(created)

    async def get_by_token(self, token: str) -> InvitationResult | None:
        with storage_errors("invitation.get_by_token"):
            result = await self.db.execute(
                select(AgentInvitation).where(AgentInvitation.token == token)
            )
            invitation = result.scalar_one_or_none()
        return _invitation_to_result(invitation) if invitation else None

    async def get_for_business(
        self, business_id: str, invitation_id: str
    ) -> InvitationResult | None:
        with storage_errors("invitation.get_for_business"):
            result = await self.db.execute(
                select(AgentInvitation).where(
                    AgentInvitation.id == invitation_id,
                    AgentInvitation.business_id == business_id,
                )
            )
            invitation = result.scalar_one_or_none()
        return _invitation_to_result(invitation) if invitation else None

    async def find_pending(self, business_id: str, email: str) -> list[InvitationResult]:
        stmt = select(AgentInvitation).where(
            AgentInvitation.business_id == business_id,
            func.lower(AgentInvitation.email) == normalize_email(email),
            AgentInvitation.status == InvitationStatus.PENDING.value,
        )
        with storage_errors("invitation.find_pending"):
            result = await self.db.execute(stmt)
            return [_invitation_to_result(i) for i in result.scalars().all()]

    async def list_for_business(
        self, business_id: str, statuses: frozenset[InvitationStatus]
    ) -> list[InvitationResult]:
        stmt = (
            select(AgentInvitation)
            .where(
                AgentInvitation.business_id == business_id,
                AgentInvitation.status.in_(sorted(s.value for s in statuses)),
            )
            .order_by(AgentInvitation.created_at.desc(), AgentInvitation.id)
        )
        with storage_errors("invitation.list_for_business"):
            result = await self.db.execute(stmt)
            return [_invitation_to_result(i) for i in result.scalars().all()]

    async def set_status(
        self,
        invitation_id: str,
        status: InvitationStatus,
        accepted_at: datetime | None = None,
    ) -> InvitationResult | None:
        with storage_errors("invitation.set_status"):
            invitation = await self.get_entity(invitation_id)
            if invitation is None:
                return None
            invitation.status = status.value
            if accepted_at is not None:
                invitation.accepted_at = accepted_at
            invitation = await self.save(invitation)
        return _invitation_to_result(invitation)
