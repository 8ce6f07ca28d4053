"""Department repository: reads filtered by VisibilityScope, plus user membership."""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.records import DepartmentResult
from app.application.dtos.scope import ScopeDiscriminator, VisibilityScope
from app.application.dtos.user import UserResult
from app.infrastructure.persistence.models.records import Department, UserDepartment
from app.infrastructure.persistence.models.user import User
from app.infrastructure.persistence.repositories.base import BaseRepository, storage_errors
from app.infrastructure.persistence.repositories.scoping import scope_clause
from app.infrastructure.persistence.repositories.user_repo import _user_to_result
from app.shared.utils.generators import generate_cuid


def _department_to_result(d: Department) -> DepartmentResult:
    return DepartmentResult(
        id=d.id,
        name=d.name,
        description=d.description,
        is_active=d.is_active,
        user_email=d.user_email,
        business_id=d.business_id,
        created_by=d.created_by,
    )


class DepartmentRepository(BaseRepository[Department]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Department)

    async def list_visible(self, scope: VisibilityScope) -> list[DepartmentResult]:
        stmt = (
            select(Department)
            .where(scope_clause(Department, scope))
            .order_by(Department.name, Department.id)
        )
        with storage_errors("department.list_visible"):
            result = await self.db.execute(stmt)
            return [_department_to_result(d) for d in result.scalars().all()]

    async def get_visible(
        self, scope: VisibilityScope, department_id: str
    ) -> DepartmentResult | None:
        with storage_errors("department.get_visible"):
            result = await self.db.execute(
                select(Department).where(
                    Department.id == department_id, scope_clause(Department, scope)
                )
            )
            department = result.scalar_one_or_none()
        return _department_to_result(department) if department else None

    async def create(
        self,
        owner: ScopeDiscriminator,
        name: str,
        description: str,
        created_by: str | None,
    ) -> DepartmentResult:
        department = Department(
            name=name,
            description=description,
            is_active=True,
            created_by=created_by,
            user_email=owner.user_email,
            business_id=owner.business_id,
        )
        with storage_errors("department.create"):
            created = await self.add(department)
        return _department_to_result(created)

    async def list_members(self, department_id: str) -> list[UserResult]:
        stmt = (
            select(User)
            .join(UserDepartment, UserDepartment.user_id == User.id)
            .where(UserDepartment.department_id == department_id, User.is_active.is_(True))
            .order_by(User.name, User.id)
        )
        with storage_errors("department.list_members"):
            result = await self.db.execute(stmt)
            return [_user_to_result(u) for u in result.scalars().all()]

    async def add_members(self, department_id: str, user_ids: list[str]) -> int:
        """INSERT ... ON CONFLICT (user_id, department_id) DO NOTHING."""
        if not user_ids:
            return 0
        stmt = (
            pg_insert(UserDepartment)
            .values(
                [
                    {"id": generate_cuid(), "user_id": uid, "department_id": department_id}
                    for uid in dict.fromkeys(user_ids)
                ]
            )
            .on_conflict_do_nothing(
                index_elements=[UserDepartment.user_id, UserDepartment.department_id]
            )
            .returning(UserDepartment.id)
        )
        with storage_errors("department.add_members"):
            result = await self.db.execute(stmt)
            return len(result.scalars().all())

    async def remove_member(self, department_id: str, user_id: str) -> bool:
        with storage_errors("department.remove_member"):
            result = await self.db.execute(
                delete(UserDepartment).where(
                    UserDepartment.department_id == department_id,
                    UserDepartment.user_id == user_id,
                )
            )
        return bool(result.rowcount)

    async def list_for_user(self, user_id: str) -> list[DepartmentResult]:
        stmt = (
            select(Department)
            .join(UserDepartment, UserDepartment.department_id == Department.id)
            .where(UserDepartment.user_id == user_id)
            .order_by(Department.name, Department.id)
        )
        with storage_errors("department.list_for_user"):
            result = await self.db.execute(stmt)
            return [_department_to_result(d) for d in result.scalars().all()]

    async def set_user_departments(self, user_id: str, department_ids: list[str]) -> None:
        with storage_errors("department.set_user_departments"):
            await self.db.execute(delete(UserDepartment).where(UserDepartment.user_id == user_id))
            if department_ids:
                await self.db.execute(
                    pg_insert(UserDepartment)
                    .values(
                        [
                            {"id": generate_cuid(), "user_id": user_id, "department_id": did}
                            for did in dict.fromkeys(department_ids)
                        ]
                    )
                    .on_conflict_do_nothing(
                        index_elements=[UserDepartment.user_id, UserDepartment.department_id]
                    )
                )
