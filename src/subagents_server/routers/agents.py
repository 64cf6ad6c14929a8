"""Agents router for registry queries and lifecycle operations.

This module provides REST API endpoints for:
- Listing, searching and retrieving resolved agents
- Validating agent files
- Installing, uninstalling and updating agents (singly or in batches)
"""

import logging
from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from subagents_server.dependencies import get_agent_manager, get_integration_service
from subagents_server.models.agents import (
    AgentDetailResponse,
    AgentListResponse,
    AgentResponse,
    BulkInstallRequest,
    BulkResultResponse,
    InstallAgentRequest,
    InstallAgentResponse,
    LifecycleResponse,
    UpdateAgentRequest,
    ValidateAgentRequest,
    ValidationResponse,
)
from subagents_server.registry import (
    AgentManager,
    AgentNotFoundError,
    AlreadyInstalledError,
    AlreadyUpToDateError,
    BackupFailedError,
    ConflictError,
    DependencyViolationError,
    InstallOptions,
    ListFilters,
    NoUpdateAvailableError,
    RegistryError,
    SearchOptions,
    Tier,
    UpdateOptions,
)
from subagents_server.registry.validator import validate_agent_text
from subagents_server.services import IntegrationStateService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/agents", tags=["agents"])

_ERROR_STATUS: list[tuple[type[RegistryError], int]] = [
    (AgentNotFoundError, status.HTTP_404_NOT_FOUND),
    (AlreadyInstalledError, status.HTTP_409_CONFLICT),
    (ConflictError, status.HTTP_409_CONFLICT),
    (DependencyViolationError, status.HTTP_409_CONFLICT),
    (NoUpdateAvailableError, status.HTTP_409_CONFLICT),
    (AlreadyUpToDateError, status.HTTP_409_CONFLICT),
    (BackupFailedError, status.HTTP_500_INTERNAL_SERVER_ERROR),
]


def _registry_http_error(error: RegistryError) -> HTTPException:
    """Translate a lifecycle failure into an HTTP error."""
    for error_type, status_code in _ERROR_STATUS:
        if isinstance(error, error_type):
            if status_code >= 500:
                logger.error(f"Lifecycle operation failed for '{error.name}': {error}")
            return HTTPException(status_code=status_code, detail=str(error))
    logger.error(f"Unhandled registry error for '{error.name}': {error}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(error)
    )


def _target_tier(request: Request, requested: str | None) -> Tier:
    """Pick the install tier, falling back to the prefer_global setting."""
    if requested is not None:
        return Tier(requested)
    return Tier.GLOBAL if request.app.state.settings.prefer_global else Tier.LOCAL


@router.get(
    "",
    response_model=AgentListResponse,
    summary="List agents",
)
async def list_agents(
    manager: Annotated[AgentManager, Depends(get_agent_manager)],
    category: str | None = None,
    installed: bool | None = None,
    available: bool | None = None,
) -> AgentListResponse:
    """List resolved agents across all tiers.

    Args:
        manager: Injected AgentManager
        category: Only agents declaring this category
        installed: Only installed (true) or not installed (false) agents
        available: Only agents available for install (true) or not (false)

    Returns:
        Resolved agents in registry order
    """
    agents = await manager.list_agents(
        ListFilters(category=category, installed=installed, available=available)
    )
    return AgentListResponse(
        agents=[AgentResponse.model_validate(a) for a in agents],
        count=len(agents),
    )


@router.get(
    "/search",
    response_model=AgentListResponse,
    summary="Search agents",
)
async def search_agents(
    manager: Annotated[AgentManager, Depends(get_agent_manager)],
    q: str = "",
    category: str | None = None,
    tags: Annotated[list[str] | None, Query()] = None,
    limit: Annotated[int, Query(ge=0)] = 20,
) -> AgentListResponse:
    """Search agents by name, description, tags and keywords.

    Every whitespace-separated token in ``q`` must match. Results keep
    registry order.

    Args:
        manager: Injected AgentManager
        q: Query text
        category: Restrict to one category
        tags: Require at least one of these tags
        limit: Maximum number of results

    Returns:
        Matching agents
    """
    agents = await manager.search_agents(
        q,
        SearchOptions(category=category, tags=frozenset(tags or []), limit=limit),
    )
    return AgentListResponse(
        agents=[AgentResponse.model_validate(a) for a in agents],
        count=len(agents),
    )


@router.post(
    "/validate",
    response_model=ValidationResponse,
    summary="Validate an agent file",
)
async def validate_agent(
    request: ValidateAgentRequest,
    manager: Annotated[AgentManager, Depends(get_agent_manager)],
) -> ValidationResponse:
    """Validate an agent file on the server, or raw agent file contents.

    Validation problems are reported in the response body; the request
    itself only fails when it is malformed.

    Args:
        request: Path or content to validate
        manager: Injected AgentManager

    Returns:
        Validation outcome with errors and warnings
    """
    if request.path is not None:
        result = await manager.validate_agent(Path(request.path))
    else:
        result = validate_agent_text(request.content or "")
    return ValidationResponse.model_validate(result)


@router.post(
    "/install",
    response_model=BulkResultResponse,
    summary="Install several agents",
)
async def install_agents(
    request: BulkInstallRequest,
    http_request: Request,
    manager: Annotated[AgentManager, Depends(get_agent_manager)],
) -> BulkResultResponse:
    """Install the named agents and every agent of the given categories.

    Already-installed agents are skipped; other failures are reported per
    agent without stopping the batch.

    Args:
        request: Agent names, categories, target tier and force flag
        http_request: The FastAPI request object
        manager: Injected AgentManager

    Returns:
        Per-agent outcomes
    """
    options = InstallOptions(
        target_tier=_target_tier(http_request, request.target_tier),
        force=request.force,
    )
    result = await manager.install_many(request.names, request.categories, options)
    return BulkResultResponse.model_validate(result)


@router.post(
    "/update",
    response_model=BulkResultResponse,
    summary="Update all installed agents",
)
async def update_all_agents(
    request: UpdateAgentRequest,
    manager: Annotated[AgentManager, Depends(get_agent_manager)],
) -> BulkResultResponse:
    """Update every installed agent that has an available update.

    Args:
        request: Force flag
        manager: Injected AgentManager

    Returns:
        Per-agent outcomes
    """
    result = await manager.update_all(UpdateOptions(force=request.force))
    return BulkResultResponse.model_validate(result)


@router.get(
    "/{name}",
    response_model=AgentDetailResponse,
    summary="Get an agent",
)
async def get_agent(
    name: str,
    manager: Annotated[AgentManager, Depends(get_agent_manager)],
) -> AgentDetailResponse:
    """Get the resolved record for one agent, including its body.

    Raises:
        HTTPException: 404 if no tier holds the agent
    """
    agent = await manager.get_agent(name)
    if agent is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Agent '{name}' not found",
        )
    return AgentDetailResponse.model_validate(agent)


@router.post(
    "/{name}/install",
    response_model=InstallAgentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Install an agent",
)
async def install_agent(
    name: str,
    request: InstallAgentRequest,
    http_request: Request,
    manager: Annotated[AgentManager, Depends(get_agent_manager)],
    integrations: Annotated[IntegrationStateService, Depends(get_integration_service)],
) -> InstallAgentResponse:
    """Install an agent into the global or local tier.

    Args:
        name: Agent name
        request: Target tier and force flag
        http_request: The FastAPI request object
        manager: Injected AgentManager
        integrations: Injected IntegrationStateService

    Returns:
        The installed record, any backup taken, and integrations still
        awaiting setup

    Raises:
        HTTPException: 404 if not found, 409 if already installed or
            conflicting, 500 if the backup failed
    """
    options = InstallOptions(
        target_tier=_target_tier(http_request, request.target_tier),
        force=request.force,
    )
    try:
        result = await manager.install_agent(name, options)
    except RegistryError as e:
        raise _registry_http_error(e)

    response = InstallAgentResponse.model_validate(result)
    response.suggested_integrations = await integrations.pending()
    return response


@router.delete(
    "/{name}",
    response_model=LifecycleResponse,
    summary="Uninstall an agent",
)
async def uninstall_agent(
    name: str,
    manager: Annotated[AgentManager, Depends(get_agent_manager)],
) -> LifecycleResponse:
    """Uninstall an agent.

    Raises:
        HTTPException: 404 if not installed, 409 if another installed
            agent depends on it
    """
    try:
        result = await manager.uninstall_agent(name)
    except RegistryError as e:
        raise _registry_http_error(e)
    return LifecycleResponse.model_validate(result)


@router.post(
    "/{name}/update",
    response_model=LifecycleResponse,
    summary="Update an agent",
)
async def update_agent(
    name: str,
    request: UpdateAgentRequest,
    manager: Annotated[AgentManager, Depends(get_agent_manager)],
) -> LifecycleResponse:
    """Update an installed agent to the newer version from a lower tier.

    Raises:
        HTTPException: 404 if not installed, 409 if no update is available
            or it is already up to date, 500 if the backup failed
    """
    try:
        result = await manager.update_agent(name, UpdateOptions(force=request.force))
    except RegistryError as e:
        raise _registry_http_error(e)
    return LifecycleResponse.model_validate(result)
