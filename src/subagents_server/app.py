"""FastAPI application factory and lifespan management.

This module contains the create_app() factory function that creates and configures
the FastAPI application instance, including lifespan management for startup/shutdown
and router registration.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from subagents_server import __version__
from subagents_server.config import SubAgentsSettings
from subagents_server.routers import agents, backups, categories, health, integrations

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context manager for FastAPI application.

    On startup the writable tier directories are created so that installs
    have somewhere to go. The bundled tier is read-only and is only
    reported on if missing.

    Args:
        app: The FastAPI application instance.

    Yields:
        None: Control is yielded while the app is running.
    """
    settings: SubAgentsSettings = app.state.settings

    for directory in (
        settings.resolved_global_agents_dir,
        settings.resolved_local_agents_dir,
    ):
        directory.mkdir(parents=True, exist_ok=True)
        logger.debug(f"Agents directory ready: {directory}")

    bundled = settings.resolved_bundled_agents_dir
    if not bundled.is_dir():
        logger.warning(f"Bundled agents directory not found: {bundled}")

    logger.info(
        f"Agent tiers: bundled={bundled}, "
        f"global={settings.resolved_global_agents_dir}, "
        f"local={settings.resolved_local_agents_dir}"
    )

    yield

    logger.info("subagents-server shutting down")


def create_app(settings: SubAgentsSettings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    This factory function creates a FastAPI instance with all routers,
    middleware, and configuration applied. It can accept an optional
    settings object for testing or explicit configuration.

    Args:
        settings: Optional SubAgentsSettings instance. If not provided,
                  settings will be loaded from environment variables.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    if settings is None:
        from subagents_server.dependencies import get_settings

        settings = get_settings()

    app = FastAPI(
        title="subagents-server",
        description="Headless FastAPI server for managing installable agent definitions",
        version=__version__,
        lifespan=lifespan,
    )

    # Store settings in app.state for lifespan access
    app.state.settings = settings

    # Configure CORS
    # Note: FastAPI's type hints for add_middleware are overly strict
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routers
    app.include_router(health.router)
    app.include_router(agents.router)
    app.include_router(categories.router)
    app.include_router(backups.router)
    app.include_router(integrations.router)

    return app
