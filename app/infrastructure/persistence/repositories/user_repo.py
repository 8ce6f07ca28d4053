"""User repository (UserStore). Interface methods return application DTOs."""

from __future__ import annotations

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.user import AccountCandidate, UserCreate, UserResult
from app.domain.enums import UserRole
from app.domain.value_objects import normalize_email
from app.infrastructure.persistence.models.user import User
from app.infrastructure.persistence.repositories.base import BaseRepository, storage_errors


def _user_to_result(u: User) -> UserResult:
    """Map ORM User to application UserResult (no password)."""
    return UserResult(
        id=u.id,
        email=u.email,
        name=u.name,
        role=UserRole(u.role),
        business_id=u.business_id,
        is_active=u.is_active,
        is_email_verified=u.is_email_verified,
        created_at=u.created_at,
    )


def _user_to_candidate(u: User) -> AccountCandidate:
    return AccountCandidate(
        id=u.id,
        email=u.email,
        business_id=u.business_id,
        role=UserRole(u.role),
        is_email_verified=u.is_email_verified,
        created_at=u.created_at,
        password_hash=u.password_hash,
    )


class UserRepository(BaseRepository[User]):
    """User repository. Emails are matched case-insensitively through lower(email)."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, User)

    async def find_active_by_email(self, email: str) -> list[AccountCandidate]:
        with storage_errors("user.find_active_by_email"):
            result = await self.db.execute(
                select(User).where(
                    func.lower(User.email) == normalize_email(email),
                    User.is_active.is_(True),
                )
            )
            return [_user_to_candidate(u) for u in result.scalars().all()]

    async def get_by_id(self, user_id: str) -> UserResult | None:
        with storage_errors("user.get_by_id"):
            user = await self.get_entity(user_id)
        return _user_to_result(user) if user else None

    async def count_active_users(
        self, business_id: str, excluding_user_id: str | None = None
    ) -> int:
        stmt = (
            select(func.count())
            .select_from(User)
            .where(User.business_id == business_id, User.is_active.is_(True))
        )
        if excluding_user_id is not None:
            stmt = stmt.where(User.id != excluding_user_id)
        with storage_errors("user.count_active_users"):
            result = await self.db.execute(stmt)
            return int(result.scalar_one())

    async def set_tenancy(
        self, user_id: str, business_id: str | None, role: UserRole
    ) -> UserResult | None:
        with storage_errors("user.set_tenancy"):
            user = await self.get_entity(user_id)
            if user is None:
                return None
            user.business_id = business_id
            user.role = role.value
            user = await self.save(user)
        return _user_to_result(user)

    async def create_user(self, data: UserCreate) -> UserResult:
        user = User(
            email=normalize_email(data.email),
            name=data.name,
            role=data.role.value,
            business_id=data.business_id,
            password_hash=data.password_hash,
            is_active=True,
            is_email_verified=data.is_email_verified,
        )
        with storage_errors("user.create_user"):
            created = await self.add(user)
        return _user_to_result(created)

    async def list_active_members(
        self, business_id: str, role: UserRole | None = None
    ) -> list[UserResult]:
        stmt = (
            select(User)
            .where(User.business_id == business_id, User.is_active.is_(True))
            .order_by(User.created_at, User.id)
        )
        if role is not None:
            stmt = stmt.where(User.role == role.value)
        with storage_errors("user.list_active_members"):
            result = await self.db.execute(stmt)
            return [_user_to_result(u) for u in result.scalars().all()]

    async def update_user(
        self,
        user_id: str,
        *,
        name: str | None = None,
        role: UserRole | None = None,
        is_active: bool | None = None,
    ) -> UserResult | None:
        with storage_errors("user.update_user"):
            user = await self.get_entity(user_id)
            if user is None:
                return None
            if name is not None:
                user.name = name
            if role is not None:
                user.role = role.value
            if is_active is not None:
                user.is_active = is_active
            user = await self.save(user)
        return _user_to_result(user)

    async def delete_unverified_personal(self, email: str) -> int:
        with storage_errors("user.delete_unverified_personal"):
            result = await self.db.execute(
                delete(User).where(
                    func.lower(User.email) == normalize_email(email),
                    User.is_email_verified.is_(False),
                    User.business_id.is_(None),
                )
            )
            return result.rowcount or 0
