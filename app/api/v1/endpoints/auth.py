"""Auth API: email checks, personal registration, login, logout, invitation accept and current user.

Session tokens are opaque and stored server-side; they are returned in the body
and set as an HttpOnly cookie.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from app.api.v1.dependencies import (
    CurrentIdentity,
    get_account_resolver,
    get_auth_service,
    get_invitation_service,
    get_session_token_optional,
    get_team_service,
)
from app.application.dtos.account import AuthResult
from app.application.dtos.user import UserResult
from app.application.services import (
    AccountResolver,
    AuthService,
    InvitationService,
    TeamService,
)
from app.core.config import get_settings
from app.core.limiter import limit_auth, limit_email_check, limit_register
from app.domain.enums import AccountType
from app.schemas.auth import (
    AuthResponse,
    EmailCheckRequest,
    EmailCheckResponse,
    GoogleCheckResponse,
    LoginRequest,
    RegisterRequest,
    SessionUserResponse,
)
from app.schemas.invitation import AcceptInvitationRequest, InvitationDetailsResponse

router = APIRouter()


def _session_user(user: UserResult) -> SessionUserResponse:
    return SessionUserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        business_id=user.business_id,
        account_type=AccountType.BUSINESS if user.business_id else AccountType.PERSONAL,
    )


def _auth_response(response: Response, result: AuthResult) -> AuthResponse:
    """Set the session cookie and build the body."""
    settings = get_settings()
    response.set_cookie(
        key=settings.session_cookie_name,
        value=result.session.token,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        expires=result.session.expires_at,
        path="/",
    )
    return AuthResponse(
        user=_session_user(result.user),
        session_token=result.session.token,
        expires_at=result.session.expires_at,
    )


@router.post("/check-email", response_model=EmailCheckResponse)
@limit_email_check
async def check_email(
    request: Request,
    body: EmailCheckRequest,
    resolver: Annotated[AccountResolver, Depends(get_account_resolver)],
):
    """Report whether an account exists for the email and of which type."""
    info = resolver.ensure_resolved(await resolver.resolve(body.email))
    return EmailCheckResponse(
        exists=info.exists,
        has_password=info.has_password,
        account_type=info.account_type,
        is_verified=info.is_verified,
        role=info.role,
    )


@router.post("/google-check", response_model=GoogleCheckResponse)
@limit_email_check
async def google_check(
    request: Request,
    body: EmailCheckRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Whether the email may continue with Google sign-in."""
    decision = await auth_service.google_login_allowed(body.email)
    return GoogleCheckResponse(
        can_login=decision.can_login,
        reason=decision.reason,
        account_type=decision.account_info.account_type,
    )


@router.post("/register", response_model=AuthResponse, status_code=201)
@limit_register
async def register(
    request: Request,
    response: Response,
    body: RegisterRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Register a personal account and sign it in (public endpoint)."""
    result = await auth_service.register_personal(body.name, body.email, body.password)
    return _auth_response(response, result)


@router.post("/login", response_model=AuthResponse)
@limit_auth
async def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Authenticate with email and password against the primary account for the email."""
    result = await auth_service.login(body.email, body.password)
    return _auth_response(response, result)


@router.get("/invitations/{token}", response_model=InvitationDetailsResponse)
@limit_email_check
async def validate_invitation(
    request: Request,
    token: str,
    invitations: Annotated[InvitationService, Depends(get_invitation_service)],
):
    """Check an invitation link before the invitee chooses a password (public endpoint)."""
    details = await invitations.validate(token)
    return InvitationDetailsResponse(
        email=details.invitation.email,
        name=details.invitation.name,
        role=details.invitation.role,
        business_name=details.business_name,
        expires_at=details.invitation.expires_at,
    )


@router.post("/accept-invite", response_model=AuthResponse, status_code=201)
@limit_register
async def accept_invite(
    request: Request,
    response: Response,
    body: AcceptInvitationRequest,
    invitations: Annotated[InvitationService, Depends(get_invitation_service)],
):
    """Join the inviting business with a new password and sign in (public endpoint)."""
    result = await invitations.accept(body.token, body.password, body.name)
    return _auth_response(response, result)


@router.post("/logout")
async def logout(
    response: Response,
    token: Annotated[str | None, Depends(get_session_token_optional)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Delete the session (if any) and clear the cookie."""
    await auth_service.logout(token)
    response.delete_cookie(get_settings().session_cookie_name, path="/")
    return {"success": True}


@router.get("/me", response_model=SessionUserResponse)
async def get_me(
    identity: CurrentIdentity,
    team: Annotated[TeamService, Depends(get_team_service)],
):
    """Return the signed-in user. Requires a session cookie or Authorization: Bearer."""
    user = await team.get_member(identity, identity.user_id)
    return _session_user(user)
