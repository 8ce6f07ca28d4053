"""Knowledge item repository: reads filtered by VisibilityScope."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.records import (
    KnowledgeItemCreate,
    KnowledgeItemResult,
    KnowledgeItemUpdate,
)
from app.application.dtos.scope import ScopeDiscriminator, VisibilityScope
from app.domain.enums import KnowledgeStatus
from app.infrastructure.persistence.models.records import KnowledgeItem
from app.infrastructure.persistence.repositories.base import BaseRepository, storage_errors
from app.infrastructure.persistence.repositories.scoping import scope_clause


def _item_to_result(k: KnowledgeItem) -> KnowledgeItemResult:
    return KnowledgeItemResult(
        id=k.id,
        title=k.title,
        body=k.body,
        tags=list(k.tags or []),
        can_paraphrase=k.can_paraphrase,
        status=KnowledgeStatus(k.status),
        version=k.version,
        user_email=k.user_email,
        business_id=k.business_id,
        created_at=k.created_at,
    )


class KnowledgeRepository(BaseRepository[KnowledgeItem]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, KnowledgeItem)

    async def list_visible(self, scope: VisibilityScope) -> list[KnowledgeItemResult]:
        stmt = (
            select(KnowledgeItem)
            .where(scope_clause(KnowledgeItem, scope))
            .order_by(KnowledgeItem.created_at.desc(), KnowledgeItem.id)
        )
        with storage_errors("knowledge.list_visible"):
            result = await self.db.execute(stmt)
            return [_item_to_result(k) for k in result.scalars().all()]

    async def get_visible(
        self, scope: VisibilityScope, item_id: str
    ) -> KnowledgeItemResult | None:
        with storage_errors("knowledge.get_visible"):
            result = await self.db.execute(
                select(KnowledgeItem).where(
                    KnowledgeItem.id == item_id, scope_clause(KnowledgeItem, scope)
                )
            )
            item = result.scalar_one_or_none()
        return _item_to_result(item) if item else None

    async def create(
        self,
        owner: ScopeDiscriminator,
        data: KnowledgeItemCreate,
        status: KnowledgeStatus,
    ) -> KnowledgeItemResult:
        item = KnowledgeItem(
            title=data.title,
            body=data.body,
            tags=list(data.tags),
            can_paraphrase=data.can_paraphrase,
            status=status.value,
            version=1,
            user_email=owner.user_email,
            business_id=owner.business_id,
        )
        with storage_errors("knowledge.create"):
            created = await self.add(item)
        return _item_to_result(created)

    async def update(
        self, item_id: str, data: KnowledgeItemUpdate, bump_version: bool
    ) -> KnowledgeItemResult | None:
        with storage_errors("knowledge.update"):
            item = await self.get_entity(item_id)
            if item is None:
                return None
            if data.title is not None:
                item.title = data.title
            if data.body is not None:
                item.body = data.body
            if data.tags is not None:
                item.tags = list(data.tags)
            if data.can_paraphrase is not None:
                item.can_paraphrase = data.can_paraphrase
            if data.status is not None:
                item.status = data.status.value
            if bump_version:
                item.version = item.version + 1
            item = await self.save(item)
        return _item_to_result(item)

    async def delete(self, item_id: str) -> bool:
        with storage_errors("knowledge.delete"):
            item = await self.get_entity(item_id)
            if item is None:
                return False
            await self.delete_entity(item)
        return True
