"""DTOs for business (tenant) use cases (no dependency on ORM)."""

from dataclasses import dataclass

from app.domain.enums import SubscriptionTier


@dataclass(frozen=True)
class BusinessResult:
    """Business read-model."""

    id: str
    business_email: str
    business_name: str
    owner_name: str
    subscription_tier: SubscriptionTier
    is_email_verified: bool


@dataclass(frozen=True)
class BusinessCreate:
    """Fields for find-or-create keyed by business_email."""

    business_email: str
    business_name: str
    owner_name: str
    subscription_tier: SubscriptionTier = SubscriptionTier.FREE
    is_email_verified: bool = True
