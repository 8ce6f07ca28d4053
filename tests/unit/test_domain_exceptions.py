"""Tests for domain exceptions (error_code, message, details) and their HTTP mapping."""

import pytest

from app.core.exception_handlers import status_for
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


def test_helpdesk_exception_default_error_code() -> None:
    """Base HelpdeskException uses class name as error_code when not provided."""
    exc = HelpdeskException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "HelpdeskException"
    assert exc.details == {}


def test_to_dict() -> None:
    """to_dict carries error code, message and details."""
    exc = ValidationException("Invalid format", field="email")
    assert exc.to_dict() == {
        "error": "VALIDATION_ERROR",
        "message": "Invalid format",
        "details": {"field": "email"},
    }


def test_authorization_exception_message_names_action() -> None:
    """Authorization errors name the resource and action."""
    exc = AuthorizationException(resource="tickets", action="assign")
    assert exc.message == "Permission denied: assign on tickets"
    assert exc.error_code == "PERMISSION_DENIED"


def test_teammates_exist_details() -> None:
    """TeammatesExistException reports the teammate count."""
    exc = TeammatesExistException("biz-1", 3)
    assert exc.details == {"business_id": "biz-1", "teammate_count": 3}
    assert "remove them first" in exc.message


def test_already_in_tenancy_message() -> None:
    """AlreadyInTenancyException explains the current tenancy."""
    exc = AlreadyInTenancyException("user-1", "business")
    assert exc.message == "User is already on a business plan"


@pytest.mark.parametrize(
    ("exc", "status"),
    [
        (AuthenticationException(), 401),
        (AuthorizationException(), 403),
        (ResourceNotFoundException("ticket", "t-1"), 404),
        (ValidationException("bad"), 400),
        (AlreadyInTenancyException("u", "personal"), 409),
        (TeammatesExistException("b", 1), 409),
        (AccountTypeMismatchException("x", "business", "personal"), 409),
        (AccountAlreadyExistsException(), 409),
        (AdminAlreadyExistsException(), 409),
        (InconsistentStateException("x"), 409),
        (StorageFailureException("op", "down"), 503),
        (AccountLookupUnavailableException(), 503),
        (HelpdeskException("unmapped"), 400),
    ],
)
def test_status_mapping(exc: HelpdeskException, status: int) -> None:
    """Each error code maps to its HTTP status."""
    assert status_for(exc) == status
