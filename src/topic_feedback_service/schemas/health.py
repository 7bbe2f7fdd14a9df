"""Health check response schemas."""

from typing import Literal

from pydantic import BaseModel, Field

ServiceStatus = Literal["ok", "degraded", "error"]
DatabaseStatus = Literal["connected", "disconnected"]


class HealthResponse(BaseModel):
    """Service status, version and topic model database connectivity.

    "degraded" means the process is up but the topic model tables cannot be
    read, so every expansion request would fail with 502.
    """

    status: ServiceStatus = Field(..., examples=["ok"])
    version: str = Field(..., description="Service version", examples=["0.1.0"])
    database: DatabaseStatus = Field(
        ...,
        description="Result of a SELECT 1 against the topic model database",
        examples=["disconnected"],
    )
