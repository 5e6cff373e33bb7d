"""Request/response schemas for user and manager management."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from docvault.core.security import PASSWORD_MAX_LEN, USERNAME_MAX_LEN
from docvault.models.user import Role

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class UserRegistration(BaseModel):
    """Body for creating a user or manager."""

    names: str = Field(..., min_length=1, max_length=255)
    username: str = Field(..., min_length=1, max_length=USERNAME_MAX_LEN)
    password: str = Field(..., min_length=8, max_length=PASSWORD_MAX_LEN)
    email: str | None = Field(default=None, max_length=255, pattern=EMAIL_PATTERN)
    id_card: str = Field(..., min_length=1, max_length=64)
    role: Role


class UserUpdate(BaseModel):
    """Body for partial updates; omitted (null) fields are left unchanged."""

    names: str | None = Field(default=None, min_length=1, max_length=255)
    username: str | None = Field(default=None, min_length=1, max_length=USERNAME_MAX_LEN)
    password: str | None = Field(default=None, min_length=8, max_length=PASSWORD_MAX_LEN)
    email: str | None = Field(default=None, max_length=255, pattern=EMAIL_PATTERN)
    id_card: str | None = Field(default=None, min_length=1, max_length=64)
    role: Role | None = None


class UserBasic(BaseModel):
    """User entry for listings (no password)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    names: str
    role: Role
    active: bool


class UserDetail(BaseModel):
    """Full user view (no password)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    names: str
    email: str | None
    id_card: str
    role: Role
    active: bool
    locked: bool
    created_by: int | None
    modified_by: int | None
    created_at: datetime
    modified_at: datetime
