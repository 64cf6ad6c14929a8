"""Dependency injection providers for FastAPI endpoints.

This module provides FastAPI dependency functions that are used across
multiple routers to inject common dependencies like settings and services.
"""

from functools import lru_cache

from fastapi import Request

from subagents_server.config import SubAgentsSettings
from subagents_server.registry import AgentManager
from subagents_server.services import (
    BackupService,
    CategoryCatalog,
    IntegrationStateService,
)


@lru_cache
def get_settings() -> SubAgentsSettings:
    """Get the application settings instance.

    This function is cached so that the same settings instance is reused
    across all requests. Settings are loaded from environment variables
    with the SUBAGENTS_ prefix.

    Returns:
        SubAgentsSettings: The application configuration settings.
    """
    return SubAgentsSettings()


def get_backup_service(request: Request) -> BackupService:
    """Get a BackupService instance with app configuration.

    Args:
        request: The FastAPI request object.

    Returns:
        BackupService: A new BackupService instance.
    """
    settings: SubAgentsSettings = request.app.state.settings
    return BackupService(
        backups_dir=settings.resolved_backups_dir,
        retention=settings.backup_retention,
    )


def get_agent_manager(request: Request) -> AgentManager:
    """Get an AgentManager instance with app configuration.

    Creates a new AgentManager for each request. The manager holds no
    registry state of its own, so every request sees the tiers as they
    are on disk.

    Args:
        request: The FastAPI request object.

    Returns:
        AgentManager: A new AgentManager instance.
    """
    # Use settings from app.state instead of cached get_settings()
    # This ensures tests can use their own isolated settings
    settings: SubAgentsSettings = request.app.state.settings

    return AgentManager(
        bundled_dir=settings.resolved_bundled_agents_dir,
        global_dir=settings.resolved_global_agents_dir,
        local_dir=settings.resolved_local_agents_dir,
        backup_service=get_backup_service(request),
        locks_dir=settings.resolved_locks_dir,
        backup_before_install=settings.backup_before_install,
    )


def get_category_catalog() -> CategoryCatalog:
    """Get the static category catalog."""
    return CategoryCatalog()


def get_integration_service(request: Request) -> IntegrationStateService:
    """Get an IntegrationStateService reading the project's state file.

    Args:
        request: The FastAPI request object.

    Returns:
        IntegrationStateService: A new IntegrationStateService instance.
    """
    settings: SubAgentsSettings = request.app.state.settings
    return IntegrationStateService(state_file=settings.resolved_integration_state_file)
