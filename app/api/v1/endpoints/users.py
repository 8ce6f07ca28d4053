"""Users API: team members of the caller's tenancy and their departments."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import CurrentIdentity, get_department_service, get_team_service
from app.application.services import DepartmentService, TeamService
from app.core.limiter import limit_writes
from app.schemas.department import DepartmentResponse, UserDepartmentsUpdate
from app.schemas.user import UserCreateRequest, UserResponse, UserUpdate

router = APIRouter()


@router.get("", response_model=list[UserResponse])
async def list_users(
    identity: CurrentIdentity,
    team: Annotated[TeamService, Depends(get_team_service)],
):
    """Active members of the caller's business (or just the caller when personal)."""
    return [UserResponse.model_validate(u) for u in await team.list_members(identity)]


@router.post("", response_model=UserResponse, status_code=201)
@limit_writes
async def create_user(
    request: Request,
    body: UserCreateRequest,
    identity: CurrentIdentity,
    team: Annotated[TeamService, Depends(get_team_service)],
):
    """Add a member to the caller's business (admin only)."""
    user = await team.add_member(identity, body.email, body.name, body.role)
    return UserResponse.model_validate(user)


@router.post("/promote-first-admin", response_model=UserResponse)
async def promote_first_admin(
    identity: CurrentIdentity,
    team: Annotated[TeamService, Depends(get_team_service)],
):
    """Promote the oldest member to admin when the tenancy has none."""
    return UserResponse.model_validate(await team.promote_first_admin(identity))


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    identity: CurrentIdentity,
    team: Annotated[TeamService, Depends(get_team_service)],
):
    return UserResponse.model_validate(await team.get_member(identity, user_id))


@router.patch("/{user_id}", response_model=UserResponse)
@limit_writes
async def update_user(
    request: Request,
    user_id: str,
    body: UserUpdate,
    identity: CurrentIdentity,
    team: Annotated[TeamService, Depends(get_team_service)],
):
    """Rename (self or admin); change role or active flag (admin only)."""
    user = await team.update_member(
        identity,
        user_id,
        name=body.name,
        role=body.role,
        is_active=body.is_active,
    )
    return UserResponse.model_validate(user)


@router.get("/{user_id}/departments", response_model=list[DepartmentResponse])
async def get_user_departments(
    user_id: str,
    identity: CurrentIdentity,
    departments: Annotated[DepartmentService, Depends(get_department_service)],
):
    result = await departments.list_user_departments(identity, user_id)
    return [DepartmentResponse.model_validate(d) for d in result]


@router.patch("/{user_id}/departments", response_model=list[DepartmentResponse])
@limit_writes
async def update_user_departments(
    request: Request,
    user_id: str,
    body: UserDepartmentsUpdate,
    identity: CurrentIdentity,
    departments: Annotated[DepartmentService, Depends(get_department_service)],
):
    """Replace the member's departments (admin or manager)."""
    result = await departments.set_user_departments(identity, user_id, body.department_ids)
    return [DepartmentResponse.model_validate(d) for d in result]
