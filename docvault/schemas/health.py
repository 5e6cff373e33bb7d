"""Health check response."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Liveness plus database reachability, labelled with the answering instance."""

    status: Literal["ok"] = "ok"
    environment: str = Field(description="APP_ENV of the instance (dev or prod)")
    hostname: str = Field(description="HOSTNAME_LABEL of the instance")
    database: Literal["connected", "disconnected"] | None = Field(
        default=None, description="Result of a SELECT 1 against the configured database"
    )
