"""Visibility scoping: which tickets, knowledge items and departments a caller may see."""

from __future__ import annotations

from typing import Any

from app.application.dtos.scope import ScopeDiscriminator, VisibilityScope
from app.application.dtos.user import UserResult
from app.domain.enums import ADMIN_OR_MANAGER, KnowledgeStatus, ResourceClass
from app.domain.exceptions import AuthorizationException
from app.domain.value_objects import Identity

_PUBLISHED_ONLY = frozenset({KnowledgeStatus.PUBLISHED})


def scope_discriminator(identity: Identity) -> ScopeDiscriminator:
    """Scope fields to stamp on a record created by identity (business wins over email)."""
    if identity.business_id:
        return ScopeDiscriminator(user_email=None, business_id=identity.business_id)
    return ScopeDiscriminator(user_email=identity.email, business_id=None)


def shares_tenancy(identity: Identity, user: UserResult) -> bool:
    """True when user belongs to identity's tenancy (only the caller, for personal accounts)."""
    if identity.business_id:
        return user.business_id == identity.business_id
    return user.id == identity.user_id


class VisibilityScoper:
    """Builds VisibilityScope descriptors from an identity. Pure; no I/O."""

    def scope_for(
        self,
        identity: Identity,
        resource: ResourceClass,
        include_all: bool = False,
    ) -> VisibilityScope:
        """Scope for resource.

        Business users see their business's records, personal users their own
        email's. Agents see only tickets assigned to them or unassigned.
        Knowledge is published-only unless include_all, which requires
        admin or manager.
        """
        base: dict[str, Any] = (
            {"business_id": identity.business_id}
            if identity.business_id
            else {"user_email": identity.email or None}
        )
        if resource == ResourceClass.TICKETS:
            if identity.role not in ADMIN_OR_MANAGER:
                base["assignee_user_id"] = identity.user_id
            return VisibilityScope(resource=resource, **base)
        if resource == ResourceClass.KNOWLEDGE:
            if include_all and identity.role not in ADMIN_OR_MANAGER:
                raise AuthorizationException(resource="knowledge", action="view_all")
            return VisibilityScope(
                resource=resource,
                statuses=None if include_all else _PUBLISHED_ONLY,
                **base,
            )
        return VisibilityScope(resource=resource, active_only=True, **base)

    @staticmethod
    def is_visible(scope: VisibilityScope, record: Any) -> bool:
        """In-memory check of one record (any object with the scope attributes)."""
        if scope.matches_nothing:
            return False
        if scope.business_id is not None:
            if getattr(record, "business_id", None) != scope.business_id:
                return False
        elif getattr(record, "user_email", None) != scope.user_email:
            return False
        if scope.assignee_user_id is not None:
            assignee = getattr(record, "assignee_user_id", None)
            if assignee is not None and assignee != scope.assignee_user_id:
                return False
        if scope.statuses is not None and getattr(record, "status", None) not in scope.statuses:
            return False
        if scope.active_only and not getattr(record, "is_active", True):
            return False
        return True
