"""Knowledge base items within the caller's visibility scope."""

from __future__ import annotations

import logging

from app.application.dtos.records import (
    KnowledgeItemCreate,
    KnowledgeItemResult,
    KnowledgeItemUpdate,
)
from app.application.interfaces.repositories import IKnowledgeRepository
from app.application.services.permission_checker import PermissionChecker
from app.application.services.visibility_scoper import VisibilityScoper, scope_discriminator
from app.domain.enums import ADMIN_OR_MANAGER, KnowledgeStatus, ResourceClass, UserRole
from app.domain.exceptions import AuthorizationException, ResourceNotFoundException
from app.domain.value_objects import Identity
from app.shared.utils.sanitization import InputSanitizer

logger = logging.getLogger(__name__)


class KnowledgeService:
    """Knowledge items. Admins publish directly; managers submit items for review."""

    def __init__(
        self,
        knowledge_repo: IKnowledgeRepository,
        permissions: PermissionChecker,
        scoper: VisibilityScoper,
    ) -> None:
        self.knowledge_repo = knowledge_repo
        self.permissions = permissions
        self.scoper = scoper

    async def list(
        self, identity: Identity, include_all: bool = False
    ) -> list[KnowledgeItemResult]:
        """Published items in scope; include_all (admin/manager) adds pending ones."""
        if include_all:
            await self.permissions.require(
                identity.user_id, ADMIN_OR_MANAGER, "knowledge", "view_all"
            )
        scope = self.scoper.scope_for(identity, ResourceClass.KNOWLEDGE, include_all=include_all)
        if scope.matches_nothing:
            return []
        return await self.knowledge_repo.list_visible(scope)

    async def _get_manageable(self, identity: Identity, item_id: str) -> KnowledgeItemResult:
        scope = self.scoper.scope_for(identity, ResourceClass.KNOWLEDGE, include_all=True)
        item = await self.knowledge_repo.get_visible(scope, item_id)
        if item is None:
            raise ResourceNotFoundException("knowledge_item", item_id)
        return item

    async def create(self, identity: Identity, data: KnowledgeItemCreate) -> KnowledgeItemResult:
        role = await self.permissions.require(
            identity.user_id, ADMIN_OR_MANAGER, "knowledge", "create"
        )
        status = KnowledgeStatus.PUBLISHED if role == UserRole.ADMIN else KnowledgeStatus.PENDING
        clean = KnowledgeItemCreate(
            title=InputSanitizer.clean_text(data.title),
            body=InputSanitizer.clean_text(data.body),
            tags=InputSanitizer.clean_tags(data.tags),
            can_paraphrase=data.can_paraphrase,
        )
        item = await self.knowledge_repo.create(scope_discriminator(identity), clean, status)
        logger.info("Knowledge item %s created as %s by %s", item.id, status.value, identity.user_id)
        return item

    async def update(
        self, identity: Identity, item_id: str, data: KnowledgeItemUpdate
    ) -> KnowledgeItemResult:
        """Edit an item. Only admins may publish; admin edits bump the version."""
        role = await self.permissions.require(
            identity.user_id, ADMIN_OR_MANAGER, "knowledge", "update"
        )
        if data.status == KnowledgeStatus.PUBLISHED and role != UserRole.ADMIN:
            raise AuthorizationException(resource="knowledge", action="publish")
        await self._get_manageable(identity, item_id)
        clean = KnowledgeItemUpdate(
            title=InputSanitizer.clean_text(data.title) if data.title is not None else None,
            body=InputSanitizer.clean_text(data.body) if data.body is not None else None,
            tags=InputSanitizer.clean_tags(data.tags) if data.tags is not None else None,
            can_paraphrase=data.can_paraphrase,
            status=data.status,
        )
        updated = await self.knowledge_repo.update(
            item_id, clean, bump_version=role == UserRole.ADMIN
        )
        if updated is None:
            raise ResourceNotFoundException("knowledge_item", item_id)
        return updated

    async def delete(self, identity: Identity, item_id: str) -> None:
        await self.permissions.require(identity.user_id, ADMIN_OR_MANAGER, "knowledge", "delete")
        await self._get_manageable(identity, item_id)
        await self.knowledge_repo.delete(item_id)
