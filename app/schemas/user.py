"""User (team member) API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.domain.enums import UserRole


class UserCreateRequest(BaseModel):
    """Request body for adding a member to the caller's business."""

    email: EmailStr
    name: str = Field(..., min_length=1, max_length=200)
    role: UserRole = UserRole.AGENT


class UserUpdate(BaseModel):
    """Partial update of a member. Omitted fields are unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    role: UserRole | None = None
    is_active: bool | None = None


class UserResponse(BaseModel):
    """User response (no password)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: str
    role: UserRole
    business_id: str | None = None
    is_active: bool
    is_email_verified: bool
    created_at: datetime | None = None
