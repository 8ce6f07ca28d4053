"""Domain layer: value objects, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.enums import (
    ADMIN_ONLY,
    ADMIN_OR_MANAGER,
    AccountType,
    KnowledgeStatus,
    ResourceClass,
    SubscriptionTier,
    TicketPriority,
    TicketStatus,
    UserRole,
)
from app.domain.exceptions import (
    AccountAlreadyExistsException,
    AccountLookupUnavailableException,
    AccountTypeMismatchException,
    AdminAlreadyExistsException,
    AlreadyInTenancyException,
    AuthenticationException,
    AuthorizationException,
    HelpdeskException,
    InconsistentStateException,
    ResourceNotFoundException,
    StorageFailureException,
    TeammatesExistException,
    ValidationException,
)
from app.domain.value_objects import EmailAddress, Identity, normalize_email

__all__ = [
    # Enums
    "ADMIN_ONLY",
    "ADMIN_OR_MANAGER",
    "AccountType",
    "KnowledgeStatus",
    "ResourceClass",
    "SubscriptionTier",
    "TicketPriority",
    "TicketStatus",
    "UserRole",
    # Exceptions
    "AccountAlreadyExistsException",
    "AccountLookupUnavailableException",
    "AccountTypeMismatchException",
    "AdminAlreadyExistsException",
    "AlreadyInTenancyException",
    "AuthenticationException",
    "AuthorizationException",
    "HelpdeskException",
    "InconsistentStateException",
    "ResourceNotFoundException",
    "StorageFailureException",
    "TeammatesExistException",
    "ValidationException",
    # Value objects
    "EmailAddress",
    "Identity",
    "normalize_email",
]
