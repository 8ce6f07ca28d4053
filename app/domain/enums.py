"""Domain enumerations for the helpdesk account subsystem.

Enums represent fixed sets of domain values (roles, tenancy types, record
statuses).
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class UserRole(_ValuesMixin, str, Enum):
    """Role of a user inside its tenancy.

    admin > manager > agent by privilege, but checks compare set
    membership, not rank.
    """

    ADMIN = "admin"
    MANAGER = "manager"
    AGENT = "agent"


class AccountType(_ValuesMixin, str, Enum):
    """Tenancy model an email address resolves to."""

    PERSONAL = "personal"
    BUSINESS = "business"


class SubscriptionTier(_ValuesMixin, str, Enum):
    """Business subscription tier."""

    FREE = "free"
    PRO = "pro"
    ENTERPRISE = "enterprise"


class KnowledgeStatus(_ValuesMixin, str, Enum):
    """Knowledge item review status. Only published items reach agents and AI drafts."""

    PUBLISHED = "published"
    PENDING = "pending"


class TicketStatus(_ValuesMixin, str, Enum):
    """Ticket lifecycle status."""

    OPEN = "open"
    PENDING = "pending"
    ON_HOLD = "on_hold"
    CLOSED = "closed"


class TicketPriority(_ValuesMixin, str, Enum):
    """Ticket priority (set once a ticket is assigned)."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class InvitationStatus(_ValuesMixin, str, Enum):
    """Invitation lifecycle. A pending invitation past its expiry counts as expired."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REVOKED = "revoked"
    EXPIRED = "expired"


class ResourceClass(_ValuesMixin, str, Enum):
    """Record classes whose visibility is scoped per tenancy."""

    TICKETS = "tickets"
    KNOWLEDGE = "knowledge"
    DEPARTMENTS = "departments"


ADMIN_ONLY: frozenset[UserRole] = frozenset({UserRole.ADMIN})
ADMIN_OR_MANAGER: frozenset[UserRole] = frozenset({UserRole.ADMIN, UserRole.MANAGER})
# Roles an invitation may grant; admins are made through team management.
INVITABLE_ROLES: frozenset[UserRole] = frozenset({UserRole.AGENT, UserRole.MANAGER})
