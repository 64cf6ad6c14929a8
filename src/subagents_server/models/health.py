"""Health check response model."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response model for the health check endpoint.

    Attributes:
        status: Health status indicator ("ok" or "error").
        version: The version of subagents-server.
        tiers: Whether each tier's root directory currently exists.
    """

    status: str = Field(..., description="Health status of the service")
    version: str = Field(..., description="Version of subagents-server")
    tiers: dict[str, bool] = Field(
        default_factory=dict,
        description="Tier name -> whether its root directory exists",
    )
