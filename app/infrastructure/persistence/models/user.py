"""User ORM model. A user belongs to one business or to none (personal)."""

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Index, String, func, text
from sqlalchemy.orm import Mapped, mapped_column

from app.domain.enums import UserRole
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class User(CuidMixin, TimestampMixin, Base):
    """User model. Table: app_user.

    Email is not unique: the same address may have a personal and a business
    row. Lookups go through the lower(email) index.
    """

    __tablename__ = "app_user"

    email: Mapped[str] = mapped_column(String, nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False, server_default="")
    password_hash: Mapped[str | None] = mapped_column(String, nullable=True)
    role: Mapped[str] = mapped_column(String, nullable=False, default=UserRole.AGENT.value)
    business_id: Mapped[str | None] = mapped_column(
        String,
        ForeignKey("business.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("true")
    )
    is_email_verified: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("false")
    )

    __table_args__ = (
        CheckConstraint(
            "role IN ({})".format(", ".join("'{}'".format(v) for v in UserRole.values())),
            name="app_user_role_check",
        ),
    )


Index("ix_app_user_email_lower", func.lower(User.email))
