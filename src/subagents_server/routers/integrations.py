"""Integrations router exposing the project's integration state."""

from typing import Annotated

from fastapi import APIRouter, Depends

from subagents_server.dependencies import get_integration_service
from subagents_server.models.integrations import (
    IntegrationListResponse,
    IntegrationStatusResponse,
)
from subagents_server.services import IntegrationStateService

router = APIRouter(prefix="/api/v1/integrations", tags=["integrations"])


@router.get(
    "",
    response_model=IntegrationListResponse,
    summary="List integration status",
)
async def list_integrations(
    service: Annotated[IntegrationStateService, Depends(get_integration_service)],
) -> IntegrationListResponse:
    """List known and recorded integrations with their setup state."""
    statuses = await service.load()
    return IntegrationListResponse(
        integrations=[
            IntegrationStatusResponse.model_validate(s) for s in statuses.values()
        ]
    )
