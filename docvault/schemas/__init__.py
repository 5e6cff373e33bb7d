"""Pydantic request/response schemas."""

from docvault.schemas.auth import LoginRequest, TokenResponse
from docvault.schemas.common import Page
from docvault.schemas.documents import (
    DocumentBasic,
    DocumentCreate,
    DocumentDetail,
    DocumentUpdate,
)
from docvault.schemas.health import HealthResponse
from docvault.schemas.users import UserBasic, UserDetail, UserRegistration, UserUpdate

__all__ = [
    "DocumentBasic",
    "DocumentCreate",
    "DocumentDetail",
    "DocumentUpdate",
    "HealthResponse",
    "LoginRequest",
    "Page",
    "TokenResponse",
    "UserBasic",
    "UserDetail",
    "UserRegistration",
    "UserUpdate",
]
