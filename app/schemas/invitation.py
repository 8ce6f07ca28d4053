"""Invitation API schemas."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from app.domain.enums import InvitationStatus, UserRole


class InvitationCreateRequest(BaseModel):
    """Request body for inviting someone to the caller's business."""

    email: EmailStr
    name: str = Field(..., min_length=1, max_length=200)
    role: UserRole = UserRole.AGENT
    department_ids: list[str] = Field(default_factory=list)


class InvitationResponse(BaseModel):
    """Invitation as listed to admins and managers (no token)."""

    id: str
    email: str
    name: str
    role: UserRole
    status: InvitationStatus
    department_ids: list[str]
    invited_by: str | None = None
    expires_at: datetime
    created_at: datetime | None = None


class InvitationCreatedResponse(InvitationResponse):
    """A new invitation with the link to share with the invitee."""

    token: str
    invite_url: str


class InvitationDetailsResponse(BaseModel):
    """Public view of a usable invitation."""

    email: str
    name: str
    role: UserRole
    business_name: str
    expires_at: datetime


class AcceptInvitationRequest(BaseModel):
    """Request body for accepting an invitation."""

    token: str = Field(..., min_length=1)
    password: str = Field(..., min_length=8, description="Password (min 8 characters)")
    name: str | None = Field(default=None, min_length=1, max_length=200)
