"""Account (tenancy transition) API schemas."""

from pydantic import BaseModel, ConfigDict

from app.domain.enums import SubscriptionTier


class BusinessResponse(BaseModel):
    """Business returned by POST /account/upgrade."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    business_email: str
    business_name: str
    owner_name: str
    subscription_tier: SubscriptionTier
    is_email_verified: bool


class UpgradeResponse(BaseModel):
    success: bool = True
    business: BusinessResponse


class DowngradeResponse(BaseModel):
    success: bool = True
