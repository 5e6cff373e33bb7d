"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, Field

from docvault.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
)


class LoginRequest(BaseModel):
    """Credentials for login."""

    username: str = Field(
        ..., min_length=USERNAME_MIN_LEN, max_length=USERNAME_MAX_LEN, description="Username"
    )
    password: str = Field(
        ..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN, description="Password"
    )


class TokenResponse(BaseModel):
    """Bearer token returned after successful login."""

    jwt: str = Field(..., description="Send as 'Authorization: Bearer <jwt>'")
