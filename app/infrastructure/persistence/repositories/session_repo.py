"""Session repository (SessionStore). Opaque tokens stored server-side with an expiry."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.session import SessionResult
from app.domain.value_objects import normalize_email
from app.infrastructure.persistence.models.session import UserSession
from app.infrastructure.persistence.repositories.base import BaseRepository, storage_errors
from app.shared.utils.datetime import ensure_utc, utc_now
from app.shared.utils.generators import generate_session_token


def _session_to_result(s: UserSession) -> SessionResult:
    return SessionResult(
        token=s.token,
        user_id=s.user_id,
        user_email=s.user_email,
        business_id=s.business_id,
        expires_at=ensure_utc(s.expires_at),
    )


class SessionRepository(BaseRepository[UserSession]):
    """Session repository. Expired sessions resolve to None."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, UserSession)

    async def resolve_session(self, token: str) -> SessionResult | None:
        with storage_errors("session.resolve_session"):
            result = await self.db.execute(
                select(UserSession).where(
                    UserSession.token == token,
                    UserSession.expires_at > utc_now(),
                )
            )
            session = result.scalar_one_or_none()
        return _session_to_result(session) if session else None

    async def create_session(
        self,
        user_id: str,
        user_email: str,
        business_id: str | None,
        expires_at: datetime,
    ) -> SessionResult:
        session = UserSession(
            token=generate_session_token(),
            user_id=user_id,
            user_email=normalize_email(user_email),
            business_id=business_id,
            expires_at=expires_at,
        )
        with storage_errors("session.create_session"):
            created = await self.add(session)
        return _session_to_result(created)

    async def update_session_business(self, token: str, business_id: str | None) -> bool:
        with storage_errors("session.update_session_business"):
            result = await self.db.execute(
                update(UserSession)
                .where(UserSession.token == token)
                .values(business_id=business_id)
            )
        return bool(result.rowcount)

    async def delete_session(self, token: str) -> bool:
        with storage_errors("session.delete_session"):
            result = await self.db.execute(delete(UserSession).where(UserSession.token == token))
        return bool(result.rowcount)
