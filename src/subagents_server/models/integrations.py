"""Pydantic models for integration status responses."""

from pydantic import BaseModel, ConfigDict, Field


class IntegrationStatusResponse(BaseModel):
    """Enabled/initialized state of one optional integration."""

    name: str
    enabled: bool
    initialized: bool
    indexed_at: str | None = Field(None, description="When the project was last indexed")

    model_config = ConfigDict(from_attributes=True)


class IntegrationListResponse(BaseModel):
    """Response model for listing integrations."""

    integrations: list[IntegrationStatusResponse] = Field(default_factory=list)
