"""Departments within the caller's visibility scope and their member assignments."""

from __future__ import annotations

import logging

from app.application.dtos.records import DepartmentResult
from app.application.dtos.user import UserResult
from app.application.interfaces.repositories import IDepartmentRepository, IUserRepository
from app.application.services.permission_checker import PermissionChecker
from app.application.services.visibility_scoper import (
    VisibilityScoper,
    scope_discriminator,
    shares_tenancy,
)
from app.domain.enums import ADMIN_ONLY, ADMIN_OR_MANAGER, ResourceClass
from app.domain.exceptions import ResourceNotFoundException, ValidationException
from app.domain.value_objects import Identity
from app.shared.utils.sanitization import InputSanitizer

logger = logging.getLogger(__name__)


class DepartmentService:
    """List active departments; admins create them and assign members.

    Members must be active users of the caller's tenancy. Admins assign
    users to a department; admins and managers replace a user's set of
    departments in one call.
    """

    def __init__(
        self,
        department_repo: IDepartmentRepository,
        user_repo: IUserRepository,
        permissions: PermissionChecker,
        scoper: VisibilityScoper,
    ) -> None:
        self.department_repo = department_repo
        self.user_repo = user_repo
        self.permissions = permissions
        self.scoper = scoper

    async def list(self, identity: Identity) -> list[DepartmentResult]:
        scope = self.scoper.scope_for(identity, ResourceClass.DEPARTMENTS)
        if scope.matches_nothing:
            return []
        return await self.department_repo.list_visible(scope)

    async def get(self, identity: Identity, department_id: str) -> DepartmentResult:
        """Department by id; outside-scope departments are reported as not found."""
        scope = self.scoper.scope_for(identity, ResourceClass.DEPARTMENTS)
        department = None
        if not scope.matches_nothing:
            department = await self.department_repo.get_visible(scope, department_id)
        if department is None:
            raise ResourceNotFoundException("department", department_id)
        return department

    async def create(
        self, identity: Identity, name: str, description: str = ""
    ) -> DepartmentResult:
        await self.permissions.require(identity.user_id, ADMIN_ONLY, "departments", "create")
        clean_name = InputSanitizer.clean_text(name)
        if not clean_name:
            raise ValidationException("Department name is required", field="name")
        return await self.department_repo.create(
            scope_discriminator(identity),
            name=clean_name,
            description=InputSanitizer.clean_text(description),
            created_by=identity.user_id,
        )

    async def _member(self, identity: Identity, user_id: str) -> UserResult | None:
        user = await self.user_repo.get_by_id(user_id)
        if user is None or not user.is_active or not shares_tenancy(identity, user):
            return None
        return user

    async def list_members(self, identity: Identity, department_id: str) -> list[UserResult]:
        await self.get(identity, department_id)
        return await self.department_repo.list_members(department_id)

    async def add_members(
        self, identity: Identity, department_id: str, user_ids: list[str]
    ) -> int:
        """Assign users (admin only). Already-assigned users are skipped; returns how many were added."""
        await self.permissions.require(
            identity.user_id, ADMIN_ONLY, "departments", "assign_users"
        )
        await self.get(identity, department_id)
        if not user_ids:
            raise ValidationException("At least one user is required", field="user_ids")
        for user_id in user_ids:
            if await self._member(identity, user_id) is None:
                raise ValidationException(
                    "Users must be active members of your team", field="user_ids"
                )
        added = await self.department_repo.add_members(department_id, user_ids)
        logger.info(
            "User %s assigned %d user(s) to department %s", identity.user_id, added, department_id
        )
        return added

    async def remove_member(self, identity: Identity, department_id: str, user_id: str) -> None:
        await self.permissions.require(
            identity.user_id, ADMIN_ONLY, "departments", "remove_user"
        )
        await self.get(identity, department_id)
        if not await self.department_repo.remove_member(department_id, user_id):
            raise ResourceNotFoundException("department_member", user_id)

    async def list_user_departments(
        self, identity: Identity, user_id: str
    ) -> list[DepartmentResult]:
        """Departments of a member of the caller's tenancy (404 for anyone else)."""
        user = await self.user_repo.get_by_id(user_id)
        if user is None or not shares_tenancy(identity, user):
            raise ResourceNotFoundException("user", user_id)
        return await self.department_repo.list_for_user(user_id)

    async def set_user_departments(
        self, identity: Identity, user_id: str, department_ids: list[str]
    ) -> list[DepartmentResult]:
        """Replace a member's departments (admin or manager). Every id must be a visible department."""
        await self.permissions.require(
            identity.user_id, ADMIN_OR_MANAGER, "departments", "assign_users"
        )
        if await self._member(identity, user_id) is None:
            raise ResourceNotFoundException("user", user_id)
        for department_id in department_ids:
            try:
                await self.get(identity, department_id)
            except ResourceNotFoundException as exc:
                raise ValidationException(
                    f"Unknown department: {department_id}", field="department_ids"
                ) from exc
        await self.department_repo.set_user_departments(user_id, list(department_ids))
        logger.info(
            "User %s set departments of %s to %s", identity.user_id, user_id, department_ids
        )
        return await self.department_repo.list_for_user(user_id)
