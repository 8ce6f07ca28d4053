"""Pydantic request/response schemas for the API."""

from app.schemas.account import BusinessResponse, DowngradeResponse, UpgradeResponse
from app.schemas.auth import (
    AuthResponse,
    EmailCheckRequest,
    EmailCheckResponse,
    GoogleCheckResponse,
    LoginRequest,
    RegisterRequest,
    SessionUserResponse,
)
from app.schemas.department import (
    DepartmentAssignResponse,
    DepartmentCreateRequest,
    DepartmentMembersRequest,
    DepartmentResponse,
    UserDepartmentsUpdate,
)
from app.schemas.health import HealthResponse, ReadinessErrorResponse, ReadinessResponse
from app.schemas.invitation import (
    AcceptInvitationRequest,
    InvitationCreatedResponse,
    InvitationCreateRequest,
    InvitationDetailsResponse,
    InvitationResponse,
)
from app.schemas.knowledge import (
    KnowledgeItemCreateRequest,
    KnowledgeItemResponse,
    KnowledgeItemUpdateRequest,
    KnowledgeListResponse,
)
from app.schemas.ticket import (
    TicketAssignRequest,
    TicketCreateRequest,
    TicketNoteRequest,
    TicketNoteResponse,
    TicketResponse,
)
from app.schemas.user import UserCreateRequest, UserResponse, UserUpdate

__all__ = [
    "AcceptInvitationRequest",
    "AuthResponse",
    "BusinessResponse",
    "DepartmentAssignResponse",
    "DepartmentCreateRequest",
    "DepartmentMembersRequest",
    "DepartmentResponse",
    "DowngradeResponse",
    "EmailCheckRequest",
    "EmailCheckResponse",
    "GoogleCheckResponse",
    "HealthResponse",
    "InvitationCreateRequest",
    "InvitationCreatedResponse",
    "InvitationDetailsResponse",
    "InvitationResponse",
    "KnowledgeItemCreateRequest",
    "KnowledgeItemResponse",
    "KnowledgeItemUpdateRequest",
    "KnowledgeListResponse",
    "LoginRequest",
    "ReadinessErrorResponse",
    "ReadinessResponse",
    "RegisterRequest",
    "SessionUserResponse",
    "TicketAssignRequest",
    "TicketCreateRequest",
    "TicketNoteRequest",
    "TicketNoteResponse",
    "TicketResponse",
    "UpgradeResponse",
    "UserCreateRequest",
    "UserDepartmentsUpdate",
    "UserResponse",
    "UserUpdate",
]
