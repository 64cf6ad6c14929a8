"""Health check endpoint router."""

import logging

from fastapi import APIRouter, Request

from subagents_server import __version__
from subagents_server.config import SubAgentsSettings
from subagents_server.models.health import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Health check endpoint.

    Returns the current health status and version of the subagents-server,
    along with whether each tier's root directory exists.

    Args:
        request: The FastAPI request object.

    Returns:
        HealthResponse: Health status and version information.
    """
    settings: SubAgentsSettings = request.app.state.settings
    tiers = {
        "bundled": settings.resolved_bundled_agents_dir.is_dir(),
        "global": settings.resolved_global_agents_dir.is_dir(),
        "local": settings.resolved_local_agents_dir.is_dir(),
    }
    logger.debug(f"Tier directories present: {tiers}")

    return HealthResponse(status="ok", version=__version__, tiers=tiers)
