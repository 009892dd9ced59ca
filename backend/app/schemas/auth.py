"""Pydantic schemas for authentication API."""

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.schemas.user import UserProfile


def _strip(value: object) -> object:
    return value.strip() if isinstance(value, str) else value


class RegisterRequest(BaseModel):
    """Request for account registration."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)
    confirm_password: str = Field(..., min_length=1, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)

    strip_email = field_validator("email", mode="before")(_strip)


class RegisterResponse(BaseModel):
    """Response after successful registration."""

    message: str
    data: UserProfile


class LoginRequest(BaseModel):
    """Request for login."""

    email: EmailStr
    password: str = Field(..., min_length=1)

    strip_email = field_validator("email", mode="before")(_strip)


class TokenData(BaseModel):
    """Access and refresh tokens as returned to the client."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int = Field(description="Access token expiry in seconds")


class TokenResponse(BaseModel):
    """Response with JWT tokens."""

    message: str
    data: TokenData


class RefreshRequest(BaseModel):
    """Request for token refresh. Falls back to the refresh cookie when empty."""

    refresh_token: str | None = None


class LogoutRequest(BaseModel):
    """Request for logout with optional refresh token revocation."""

    refresh_token: str | None = Field(
        None,
        description="Refresh token to revoke alongside the access token.",
    )
