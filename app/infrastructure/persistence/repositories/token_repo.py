"""Mailbox token repository (TokenStore)."""

from __future__ import annotations

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.session import MailboxTokenResult
from app.domain.value_objects import normalize_email
from app.infrastructure.persistence.models.session import MailboxToken
from app.infrastructure.persistence.repositories.base import BaseRepository, storage_errors


def _token_to_result(t: MailboxToken) -> MailboxTokenResult:
    return MailboxTokenResult(
        id=t.id,
        user_email=t.user_email,
        business_id=t.business_id,
        provider=t.provider,
        account_email=t.account_email,
    )


class TokenRepository(BaseRepository[MailboxToken]):
    """Tokens follow their owner's email across tenancy changes."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, MailboxToken)

    async def reassign_by_email(
        self,
        user_email: str,
        new_business_id: str | None,
        only_if_business_id_is_null: bool,
    ) -> int:
        stmt = (
            update(MailboxToken)
            .where(func.lower(MailboxToken.user_email) == normalize_email(user_email))
            .values(business_id=new_business_id)
        )
        if only_if_business_id_is_null:
            stmt = stmt.where(MailboxToken.business_id.is_(None))
        with storage_errors("token.reassign_by_email"):
            result = await self.db.execute(stmt.execution_options(synchronize_session=False))
        return result.rowcount or 0

    async def list_by_email(self, user_email: str) -> list[MailboxTokenResult]:
        with storage_errors("token.list_by_email"):
            result = await self.db.execute(
                select(MailboxToken)
                .where(func.lower(MailboxToken.user_email) == normalize_email(user_email))
                .order_by(MailboxToken.created_at, MailboxToken.id)
            )
            return [_token_to_result(t) for t in result.scalars().all()]

    async def add_token(
        self,
        user_email: str,
        account_email: str,
        business_id: str | None = None,
        provider: str = "gmail",
    ) -> MailboxTokenResult:
        """Record a connected mailbox (called by the mailbox integration)."""
        token = MailboxToken(
            user_email=normalize_email(user_email),
            account_email=normalize_email(account_email),
            business_id=business_id,
            provider=provider,
        )
        with storage_errors("token.add_token"):
            created = await self.add(token)
        return _token_to_result(created)
