"""Domain exceptions for the helpdesk account subsystem.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class HelpdeskException(Exception):
    """Base exception for all application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON error responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(HelpdeskException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(HelpdeskException):
    """Raised when no identity can be resolved (missing, unknown or expired session)."""

    def __init__(self, message: str = "Not authenticated") -> None:
        """Initialize with optional message.

        Args:
            message: Description of the authentication failure.
        """
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(HelpdeskException):
    """Raised when an identity resolved but its role or ownership check failed."""

    def __init__(
        self,
        resource: str | None = None,
        action: str | None = None,
        message: str = "Permission denied",
    ) -> None:
        """Initialize with optional resource, action, and message.

        Args:
            resource: Optional resource type (e.g. 'ticket', 'knowledge').
            action: Optional action that was attempted (e.g. 'assign', 'create').
            message: Human-readable message; default used when resource/action omitted.
        """
        if resource and action:
            message = f"Permission denied: {action} on {resource}"
        details: dict[str, Any] = {}
        if resource:
            details["resource"] = resource
        if action:
            details["action"] = action
        super().__init__(message, "PERMISSION_DENIED", details)


class AlreadyInTenancyException(HelpdeskException):
    """Raised when an upgrade targets a business user or a downgrade a personal user."""

    def __init__(self, user_id: str, account_type: str) -> None:
        """Initialize with the user and the tenancy they are already in.

        Args:
            user_id: Acting user.
            account_type: 'business' (upgrade rejected) or 'personal' (downgrade rejected).
        """
        super().__init__(
            f"User is already on a {account_type} plan",
            "ALREADY_IN_TENANCY",
            {"user_id": user_id, "account_type": account_type},
        )


class TeammatesExistException(HelpdeskException):
    """Raised when a downgrade would orphan other active members of the business."""

    def __init__(self, business_id: str, teammate_count: int) -> None:
        """Initialize with the business and the number of remaining teammates.

        Args:
            business_id: Business the acting user belongs to.
            teammate_count: Active members other than the acting user.
        """
        super().__init__(
            "Cannot downgrade while other team members exist. Please remove them first.",
            "TEAMMATES_EXIST",
            {"business_id": business_id, "teammate_count": teammate_count},
        )


class StorageFailureException(HelpdeskException):
    """Raised when an underlying persistence operation fails."""

    def __init__(self, operation: str, reason: str) -> None:
        """Initialize with the failed operation and the driver's reason.

        Args:
            operation: Store operation name (e.g. 'user.find_active_by_email').
            reason: Short description of the failure.
        """
        super().__init__(
            f"Storage operation failed: {operation}",
            "STORAGE_FAILURE",
            {"operation": operation, "reason": reason},
        )


class AccountLookupUnavailableException(HelpdeskException):
    """Raised when an account lookup failed and the caller must fail closed."""

    def __init__(self) -> None:
        super().__init__(
            "Account lookup is temporarily unavailable; try again later",
            "ACCOUNT_LOOKUP_UNAVAILABLE",
        )


class AccountTypeMismatchException(HelpdeskException):
    """Raised when an email is registered under a different tenancy type than requested."""

    def __init__(self, message: str, actual_type: str, expected_type: str) -> None:
        super().__init__(
            message,
            "ACCOUNT_TYPE_MISMATCH",
            {"actual_type": actual_type, "expected_type": expected_type},
        )


class AccountAlreadyExistsException(HelpdeskException):
    """Raised when registering an email that already has a verified account."""

    def __init__(
        self,
        message: str = "An account with this email already exists. Please login instead.",
    ) -> None:
        super().__init__(message, "ACCOUNT_ALREADY_EXISTS")


class AdminAlreadyExistsException(HelpdeskException):
    """Raised by first-admin bootstrap when the tenancy already has an active admin."""

    def __init__(self) -> None:
        super().__init__(
            "An admin user already exists. Use team management to change roles.",
            "ADMIN_ALREADY_EXISTS",
        )


class InconsistentStateException(HelpdeskException):
    """Raised when user, session and token rows disagree and cannot be resynced."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, "INCONSISTENT_STATE", details)


class ResourceNotFoundException(HelpdeskException):
    """Raised when a requested resource is not found (or is outside the caller's scope)."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'ticket', 'user').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class InvitationInvalidException(HelpdeskException):
    """Raised when an invitation token is unknown, revoked or already accepted."""

    def __init__(self) -> None:
        super().__init__("Invalid or already used invitation", "INVITATION_INVALID")


class InvitationExpiredException(HelpdeskException):
    """Raised when a pending invitation is used after its expiry."""

    def __init__(self) -> None:
        super().__init__("This invitation has expired", "INVITATION_EXPIRED")


class InvitationPendingException(HelpdeskException):
    """Raised when the email already has an unexpired pending invitation to the business."""

    def __init__(self, email: str) -> None:
        super().__init__(
            "An invitation has already been sent to this email",
            "INVITATION_PENDING",
            {"email": email},
        )
