"""Session and mailbox token ORM models."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class UserSession(CuidMixin, TimestampMixin, Base):
    """Login session. Table: user_session. business_id mirrors the user's at write time."""

    __tablename__ = "user_session"

    token: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_email: Mapped[str] = mapped_column(String, nullable=False)
    business_id: Mapped[str | None] = mapped_column(String, nullable=True)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class MailboxToken(CuidMixin, TimestampMixin, Base):
    """Connected external mailbox credential. Table: mailbox_token.

    Only metadata lives here; credential material is owned by the mailbox integration.
    """

    __tablename__ = "mailbox_token"

    user_email: Mapped[str] = mapped_column(String, nullable=False, index=True)
    business_id: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    provider: Mapped[str] = mapped_column(String, nullable=False, default="gmail")
    account_email: Mapped[str] = mapped_column(String, nullable=False)
