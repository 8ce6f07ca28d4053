"""Visibility scope descriptor consumed by scoped repositories."""

from dataclasses import dataclass

from app.domain.enums import KnowledgeStatus, ResourceClass


@dataclass(frozen=True)
class VisibilityScope:
    """Filter for one resource class.

    Exactly one of business_id / user_email is the discriminator: business_id
    when set, otherwise user_email. assignee_user_id restricts tickets to
    those assigned to that user or unassigned. statuses restricts knowledge
    items; None means any status.
    """

    resource: ResourceClass
    business_id: str | None = None
    user_email: str | None = None
    assignee_user_id: str | None = None
    statuses: frozenset[KnowledgeStatus] | None = None
    active_only: bool = False

    @property
    def matches_nothing(self) -> bool:
        return self.business_id is None and not self.user_email


@dataclass(frozen=True)
class ScopeDiscriminator:
    """Scope fields stamped on a record at creation time (one of them is None)."""

    user_email: str | None
    business_id: str | None
