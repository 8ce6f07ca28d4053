"""DTOs for agent invitations (no dependency on ORM)."""

from dataclasses import dataclass, field
from datetime import datetime

from app.domain.enums import InvitationStatus, UserRole


@dataclass(frozen=True)
class InvitationResult:
    """Invitation read-model. status is as stored; see invitation_status for the effective one."""

    id: str
    business_id: str
    email: str
    name: str
    role: UserRole
    status: InvitationStatus
    expires_at: datetime
    invited_by: str | None = None
    department_ids: list[str] = field(default_factory=list)
    accepted_at: datetime | None = None
    created_at: datetime | None = None
    token: str = field(default="", repr=False)


@dataclass(frozen=True)
class InvitationCreate:
    """Input for a new pending invitation."""

    business_id: str
    email: str
    name: str
    role: UserRole
    token: str = field(repr=False)
    expires_at: datetime
    invited_by: str | None = None
    department_ids: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class InvitationDetails:
    """What an invitee sees before accepting: the invitation and the inviting business."""

    invitation: InvitationResult
    business_name: str
