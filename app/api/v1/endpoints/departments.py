"""Departments API: departments of the caller's tenancy and their members."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from app.api.v1.dependencies import CurrentIdentity, get_department_service
from app.application.services import DepartmentService
from app.core.limiter import limit_writes
from app.schemas.department import (
    DepartmentAssignResponse,
    DepartmentCreateRequest,
    DepartmentMembersRequest,
    DepartmentResponse,
)
from app.schemas.user import UserResponse

router = APIRouter()


@router.get("", response_model=list[DepartmentResponse])
async def list_departments(
    identity: CurrentIdentity,
    departments: Annotated[DepartmentService, Depends(get_department_service)],
):
    return [DepartmentResponse.model_validate(d) for d in await departments.list(identity)]


@router.post("", response_model=DepartmentResponse, status_code=201)
@limit_writes
async def create_department(
    request: Request,
    body: DepartmentCreateRequest,
    identity: CurrentIdentity,
    departments: Annotated[DepartmentService, Depends(get_department_service)],
):
    """Create a department (admin only)."""
    department = await departments.create(identity, body.name, body.description)
    return DepartmentResponse.model_validate(department)


@router.get("/{department_id}", response_model=DepartmentResponse)
async def get_department(
    department_id: str,
    identity: CurrentIdentity,
    departments: Annotated[DepartmentService, Depends(get_department_service)],
):
    return DepartmentResponse.model_validate(await departments.get(identity, department_id))


@router.get("/{department_id}/users", response_model=list[UserResponse])
async def list_department_users(
    department_id: str,
    identity: CurrentIdentity,
    departments: Annotated[DepartmentService, Depends(get_department_service)],
):
    """Active members assigned to the department."""
    members = await departments.list_members(identity, department_id)
    return [UserResponse.model_validate(u) for u in members]


@router.post("/{department_id}/users", response_model=DepartmentAssignResponse)
@limit_writes
async def assign_department_users(
    request: Request,
    department_id: str,
    body: DepartmentMembersRequest,
    identity: CurrentIdentity,
    departments: Annotated[DepartmentService, Depends(get_department_service)],
):
    """Assign team members to the department (admin only)."""
    added = await departments.add_members(identity, department_id, body.user_ids)
    return DepartmentAssignResponse(assigned_count=added)


@router.delete("/{department_id}/users/{user_id}", status_code=204)
@limit_writes
async def remove_department_user(
    request: Request,
    department_id: str,
    user_id: str,
    identity: CurrentIdentity,
    departments: Annotated[DepartmentService, Depends(get_department_service)],
):
    """Unassign a member from the department (admin only)."""
    await departments.remove_member(identity, department_id, user_id)
    return Response(status_code=204)
