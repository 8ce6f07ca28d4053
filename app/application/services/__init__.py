"""Application services: account resolution, permissions, visibility, tenancy migration."""

from app.application.services.account_resolver import (
    AccountResolver,
    account_type_mismatch_message,
    primary_account_sort_key,
    select_primary_account,
)
from app.application.services.auth_service import AuthService
from app.application.services.department_service import DepartmentService
from app.application.services.identity_service import IdentityService
from app.application.services.invitation_service import InvitationService, invitation_status
from app.application.services.knowledge_service import KnowledgeService
from app.application.services.permission_checker import PermissionChecker
from app.application.services.team_service import TeamService
from app.application.services.tenancy_migrator import TenancyMigrator
from app.application.services.ticket_service import TicketService
from app.application.services.visibility_scoper import (
    VisibilityScoper,
    scope_discriminator,
    shares_tenancy,
)

__all__ = [
    "AccountResolver",
    "AuthService",
    "DepartmentService",
    "IdentityService",
    "InvitationService",
    "KnowledgeService",
    "PermissionChecker",
    "TeamService",
    "TenancyMigrator",
    "TicketService",
    "VisibilityScoper",
    "account_type_mismatch_message",
    "invitation_status",
    "primary_account_sort_key",
    "scope_discriminator",
    "select_primary_account",
    "shares_tenancy",
]
