"""Auth API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.domain.enums import AccountType, UserRole


class EmailCheckRequest(BaseModel):
    """Request body for POST /auth/check-email and /auth/google-check."""

    email: EmailStr


class EmailCheckResponse(BaseModel):
    """What kind of account an email belongs to."""

    exists: bool
    has_password: bool
    account_type: AccountType | None = None
    is_verified: bool
    role: UserRole | None = None


class GoogleCheckResponse(BaseModel):
    """Whether the email may continue with Google sign-in."""

    can_login: bool
    reason: str | None = None
    account_type: AccountType | None = None


class RegisterRequest(BaseModel):
    """Request body for personal account registration."""

    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    password: str = Field(..., min_length=8, description="Password (min 8 characters)")


class LoginRequest(BaseModel):
    """Request body for email/password login."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class SessionUserResponse(BaseModel):
    """The signed-in user as returned by register, login and /auth/me."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    role: UserRole
    business_id: str | None = None
    account_type: AccountType


class AuthResponse(BaseModel):
    """Register/login response. The session token is also set as an HttpOnly cookie."""

    user: SessionUserResponse
    session_token: str
    expires_at: datetime
