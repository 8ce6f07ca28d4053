"""Agent invitation ORM model."""

from datetime import datetime

from sqlalchemy import JSON, CheckConstraint, DateTime, ForeignKey, Index, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.domain.enums import InvitationStatus, UserRole
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class AgentInvitation(CuidMixin, TimestampMixin, Base):
    """Invitation to join a business. Table: agent_invitation.

    Deleted with its business. A pending row past expires_at is expired even
    before its status is rewritten.
    """

    __tablename__ = "agent_invitation"

    business_id: Mapped[str] = mapped_column(
        String, ForeignKey("business.id", ondelete="CASCADE"), nullable=False, index=True
    )
    invited_by: Mapped[str | None] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True
    )
    email: Mapped[str] = mapped_column(String, nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False, server_default="")
    role: Mapped[str] = mapped_column(String, nullable=False, default=UserRole.AGENT.value)
    token: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=InvitationStatus.PENDING.value
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    accepted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    department_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    __table_args__ = (
        CheckConstraint(
            "role IN ({})".format(", ".join("'{}'".format(v) for v in UserRole.values())),
            name="agent_invitation_role_check",
        ),
        CheckConstraint(
            "status IN ({})".format(
                ", ".join("'{}'".format(v) for v in InvitationStatus.values())
            ),
            name="agent_invitation_status_check",
        ),
    )


Index(
    "ix_agent_invitation_business_email_lower",
    AgentInvitation.business_id,
    func.lower(AgentInvitation.email),
)
