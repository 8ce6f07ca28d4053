"""Business ORM model. Root entity of a business tenancy."""

from sqlalchemy import Boolean, CheckConstraint, String, text
from sqlalchemy.orm import Mapped, mapped_column

from app.domain.enums import SubscriptionTier
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class Business(CuidMixin, TimestampMixin, Base):
    """Business tenant. Table: business. At most one row per business_email."""

    __tablename__ = "business"

    business_email: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    business_name: Mapped[str] = mapped_column(String, nullable=False)
    owner_name: Mapped[str] = mapped_column(String, nullable=False)
    subscription_tier: Mapped[str] = mapped_column(
        String, nullable=False, default=SubscriptionTier.FREE.value
    )
    is_email_verified: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("false")
    )

    __table_args__ = (
        CheckConstraint(
            "subscription_tier IN ({})".format(
                ", ".join("'{}'".format(v) for v in SubscriptionTier.values())
            ),
            name="business_subscription_tier_check",
        ),
    )
