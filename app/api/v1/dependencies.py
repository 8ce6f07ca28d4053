"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for DB sessions, the caller's Identity and the
application services. All services are built from infrastructure
implementations here; routes depend only on these dependencies.

Every service in one request shares the same transactional session, so a
tenancy transition's user, session, token and business writes commit together.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.services import (
    AccountResolver,
    AuthService,
    DepartmentService,
    IdentityService,
    InvitationService,
    KnowledgeService,
    PermissionChecker,
    TeamService,
    TenancyMigrator,
    TicketService,
    VisibilityScoper,
)
from app.core.config import get_settings
from app.domain.enums import SubscriptionTier
from app.domain.exceptions import AuthenticationException
from app.domain.value_objects import Identity
from app.infrastructure.persistence.database import get_db_transactional
from app.infrastructure.persistence.repositories import (
    BusinessRepository,
    DepartmentRepository,
    InvitationRepository,
    KnowledgeRepository,
    SessionRepository,
    TicketNoteRepository,
    TicketRepository,
    TokenRepository,
    UserRepository,
)
from app.infrastructure.security import BcryptPasswordHasher

_http_bearer = HTTPBearer(auto_error=False)

DbSession = Annotated[AsyncSession, Depends(get_db_transactional)]


def get_session_token_optional(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
) -> str | None:
    """Session token from the session cookie, else from Authorization: Bearer."""
    token = request.cookies.get(get_settings().session_cookie_name)
    if token:
        return token
    if credentials and credentials.credentials:
        return credentials.credentials
    return None


def require_session_token(
    token: Annotated[str | None, Depends(get_session_token_optional)],
) -> str:
    """Raise 401 before any storage is touched when no token was sent."""
    if not token:
        raise AuthenticationException()
    return token


# ---- Stores and core services ----


def get_account_resolver(db: DbSession) -> AccountResolver:
    settings = get_settings()
    return AccountResolver(
        UserRepository(db),
        google_password_sentinel=settings.google_oauth_password_sentinel,
        fail_closed=settings.account_lookup_fail_closed,
    )


def get_permission_checker(db: DbSession) -> PermissionChecker:
    return PermissionChecker(UserRepository(db))


def get_visibility_scoper() -> VisibilityScoper:
    return VisibilityScoper()


def get_tenancy_migrator(db: DbSession) -> TenancyMigrator:
    return TenancyMigrator(
        user_repo=UserRepository(db),
        business_repo=BusinessRepository(db),
        session_store=SessionRepository(db),
        token_store=TokenRepository(db),
        default_tier=SubscriptionTier(get_settings().default_subscription_tier),
    )


def get_identity_service(
    db: DbSession,
    migrator: Annotated[TenancyMigrator, Depends(get_tenancy_migrator)],
) -> IdentityService:
    return IdentityService(SessionRepository(db), UserRepository(db), migrator)


async def get_identity(
    token: Annotated[str, Depends(require_session_token)],
    identity_service: Annotated[IdentityService, Depends(get_identity_service)],
) -> Identity:
    """Resolve the caller for this request; raise 401 if the session is unusable."""
    return await identity_service.resolve(token)


CurrentIdentity = Annotated[Identity, Depends(get_identity)]


# ---- Use-case services ----


def get_auth_service(
    db: DbSession,
    resolver: Annotated[AccountResolver, Depends(get_account_resolver)],
) -> AuthService:
    return AuthService(
        resolver=resolver,
        user_repo=UserRepository(db),
        session_store=SessionRepository(db),
        hasher=BcryptPasswordHasher(),
        session_ttl=timedelta(days=get_settings().session_ttl_days),
    )


def get_team_service(
    db: DbSession,
    permissions: Annotated[PermissionChecker, Depends(get_permission_checker)],
    resolver: Annotated[AccountResolver, Depends(get_account_resolver)],
) -> TeamService:
    return TeamService(UserRepository(db), BusinessRepository(db), permissions, resolver)


def get_ticket_service(
    db: DbSession,
    permissions: Annotated[PermissionChecker, Depends(get_permission_checker)],
    scoper: Annotated[VisibilityScoper, Depends(get_visibility_scoper)],
) -> TicketService:
    return TicketService(
        TicketRepository(db),
        UserRepository(db),
        permissions,
        scoper,
        TicketNoteRepository(db),
    )


def get_knowledge_service(
    db: DbSession,
    permissions: Annotated[PermissionChecker, Depends(get_permission_checker)],
    scoper: Annotated[VisibilityScoper, Depends(get_visibility_scoper)],
) -> KnowledgeService:
    return KnowledgeService(KnowledgeRepository(db), permissions, scoper)


def get_department_service(
    db: DbSession,
    permissions: Annotated[PermissionChecker, Depends(get_permission_checker)],
    scoper: Annotated[VisibilityScoper, Depends(get_visibility_scoper)],
) -> DepartmentService:
    return DepartmentService(DepartmentRepository(db), UserRepository(db), permissions, scoper)


def get_invitation_service(
    db: DbSession,
    permissions: Annotated[PermissionChecker, Depends(get_permission_checker)],
    scoper: Annotated[VisibilityScoper, Depends(get_visibility_scoper)],
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> InvitationService:
    return InvitationService(
        invitation_repo=InvitationRepository(db),
        user_repo=UserRepository(db),
        business_repo=BusinessRepository(db),
        department_repo=DepartmentRepository(db),
        permissions=permissions,
        scoper=scoper,
        hasher=BcryptPasswordHasher(),
        auth=auth,
        invitation_ttl=timedelta(days=get_settings().invitation_ttl_days),
    )
