"""Builders for DTOs and identities used across unit tests."""

from datetime import datetime, timedelta, timezone

from app.application.dtos import (
    AccountCandidate,
    BusinessResult,
    InvitationResult,
    SessionResult,
    UserResult,
)
from app.domain.enums import InvitationStatus, SubscriptionTier, UserRole
from app.domain.value_objects import Identity
from app.shared.utils.datetime import utc_now

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_user(
    user_id: str = "user-1",
    email: str = "alice@example.com",
    role: UserRole = UserRole.ADMIN,
    business_id: str | None = None,
    is_active: bool = True,
    is_email_verified: bool = True,
    name: str = "Alice",
    created_at: datetime = BASE_TIME,
) -> UserResult:
    return UserResult(
        id=user_id,
        email=email,
        name=name,
        role=role,
        business_id=business_id,
        is_active=is_active,
        is_email_verified=is_email_verified,
        created_at=created_at,
    )


def make_candidate(
    user_id: str = "user-1",
    email: str = "alice@example.com",
    business_id: str | None = None,
    role: UserRole = UserRole.ADMIN,
    password_hash: str | None = "$2b$12$hash",
    is_email_verified: bool = True,
    age_days: int = 0,
) -> AccountCandidate:
    """Candidate row; larger age_days means an older row."""
    return AccountCandidate(
        id=user_id,
        email=email,
        business_id=business_id,
        role=role,
        is_email_verified=is_email_verified,
        created_at=BASE_TIME - timedelta(days=age_days),
        password_hash=password_hash,
    )


def make_identity(
    user_id: str = "user-1",
    email: str = "alice@example.com",
    role: UserRole = UserRole.ADMIN,
    business_id: str | None = None,
    session_token: str | None = "tok-1",
) -> Identity:
    return Identity(
        user_id=user_id,
        email=email,
        role=role,
        business_id=business_id,
        session_token=session_token,
    )


def make_session(
    token: str = "tok-1",
    user_id: str = "user-1",
    user_email: str = "alice@example.com",
    business_id: str | None = None,
) -> SessionResult:
    return SessionResult(
        token=token,
        user_id=user_id,
        user_email=user_email,
        business_id=business_id,
        expires_at=BASE_TIME + timedelta(days=30),
    )


def make_business(
    business_id: str = "biz-1",
    business_email: str = "alice@example.com",
) -> BusinessResult:
    return BusinessResult(
        id=business_id,
        business_email=business_email,
        business_name="Alice's Business",
        owner_name="Alice",
        subscription_tier=SubscriptionTier.FREE,
        is_email_verified=True,
    )


def make_invitation(
    invitation_id: str = "inv-1",
    email: str = "bob@example.com",
    business_id: str = "biz-1",
    role: UserRole = UserRole.AGENT,
    status: InvitationStatus = InvitationStatus.PENDING,
    expires_in_days: int = 7,
    department_ids: list[str] | None = None,
    token: str = "invite-token",
) -> InvitationResult:
    """Invitation expiring relative to now; a negative expires_in_days is already expired."""
    return InvitationResult(
        id=invitation_id,
        business_id=business_id,
        email=email,
        name="Bob",
        role=role,
        status=status,
        expires_at=utc_now() + timedelta(days=expires_in_days),
        invited_by="user-1",
        department_ids=department_ids or [],
        token=token,
    )
