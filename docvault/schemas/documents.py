"""Request/response schemas for JSON documents. The payload travels as the "json" field."""

import json
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

PAYLOAD_MIN_CHARS = 2
PAYLOAD_MAX_CHARS = 2048
PATH_PATTERN = r"^[A-Za-z0-9._~/-]*$"


def _check_payload_size(value: Any) -> Any:
    size = len(json.dumps(value, separators=(",", ":")))
    if size < PAYLOAD_MIN_CHARS or size > PAYLOAD_MAX_CHARS:
        raise ValueError(
            f"JSON payload must serialize to {PAYLOAD_MIN_CHARS}-{PAYLOAD_MAX_CHARS} characters"
        )
    return value


class DocumentCreate(BaseModel):
    """Body for creating a document."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, max_length=255)
    payload: Any = Field(..., alias="json")
    path: str | None = Field(default=None, max_length=255, pattern=PATH_PATTERN)

    @field_validator("payload")
    @classmethod
    def validate_payload(cls, v: Any) -> Any:
        return _check_payload_size(v)


class DocumentUpdate(BaseModel):
    """Body for partial updates; omitted fields are left unchanged."""

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = Field(default=None, min_length=1, max_length=255)
    payload: Any = Field(default=None, alias="json")
    path: str | None = Field(default=None, max_length=255, pattern=PATH_PATTERN)

    @field_validator("payload")
    @classmethod
    def validate_payload(cls, v: Any) -> Any:
        if v is None:
            return v
        return _check_payload_size(v)


class DocumentBasic(BaseModel):
    """Document entry for listings."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    path: str | None


class DocumentDetail(BaseModel):
    """Full document view."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    name: str
    payload: Any = Field(..., alias="json")
    path: str | None
    created_by: int | None
    modified_by: int | None
    created_at: datetime
    modified_at: datetime
