"""Invitations API: admins and managers invite people into their business.

The accept side is public and lives under /auth.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import CurrentIdentity, get_invitation_service
from app.application.dtos.invitation import InvitationResult
from app.application.services import InvitationService, invitation_status
from app.core.config import get_settings
from app.core.limiter import limit_writes
from app.schemas.invitation import (
    InvitationCreatedResponse,
    InvitationCreateRequest,
    InvitationResponse,
)

router = APIRouter()


def _invitation_response(invitation: InvitationResult) -> InvitationResponse:
    return InvitationResponse(
        id=invitation.id,
        email=invitation.email,
        name=invitation.name,
        role=invitation.role,
        status=invitation_status(invitation),
        department_ids=invitation.department_ids,
        invited_by=invitation.invited_by,
        expires_at=invitation.expires_at,
        created_at=invitation.created_at,
    )


@router.get("", response_model=list[InvitationResponse])
async def list_invitations(
    identity: CurrentIdentity,
    invitations: Annotated[InvitationService, Depends(get_invitation_service)],
):
    """Pending and expired invitations of the caller's business (admin or manager)."""
    return [_invitation_response(i) for i in await invitations.list_invitations(identity)]


@router.post("", response_model=InvitationCreatedResponse, status_code=201)
@limit_writes
async def create_invitation(
    request: Request,
    body: InvitationCreateRequest,
    identity: CurrentIdentity,
    invitations: Annotated[InvitationService, Depends(get_invitation_service)],
):
    """Invite an agent or manager. The response carries the accept link to share."""
    invitation = await invitations.invite(
        identity,
        str(body.email),
        body.name,
        body.role,
        body.department_ids,
    )
    base_url = get_settings().app_base_url.rstrip("/")
    return InvitationCreatedResponse(
        **_invitation_response(invitation).model_dump(),
        token=invitation.token,
        invite_url=f"{base_url}/invite/{invitation.token}",
    )


@router.delete("/{invitation_id}", response_model=InvitationResponse)
@limit_writes
async def revoke_invitation(
    request: Request,
    invitation_id: str,
    identity: CurrentIdentity,
    invitations: Annotated[InvitationService, Depends(get_invitation_service)],
):
    return _invitation_response(await invitations.revoke(identity, invitation_id))
