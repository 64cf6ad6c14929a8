"""Categories router for browsing the static category catalog."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from subagents_server.dependencies import get_agent_manager, get_category_catalog
from subagents_server.models.categories import (
    CategoryDetailResponse,
    CategoryDriftResponse,
    CategoryListResponse,
    CategoryMismatch,
    CategoryResponse,
)
from subagents_server.registry import VALID_CATEGORIES, AgentManager, ListFilters
from subagents_server.services import Category, CategoryCatalog

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/categories", tags=["categories"])


def _category_response(category: Category) -> CategoryResponse:
    return CategoryResponse(
        name=category.name,
        description=category.description,
        agents=list(category.agents),
        installable=category.name in VALID_CATEGORIES,
    )


@router.get(
    "",
    response_model=CategoryListResponse,
    summary="List categories",
)
async def list_categories(
    catalog: Annotated[CategoryCatalog, Depends(get_category_catalog)],
) -> CategoryListResponse:
    """List every category in the catalog."""
    return CategoryListResponse(
        categories=[_category_response(c) for c in catalog.list_categories()]
    )


@router.get(
    "/drift",
    response_model=CategoryDriftResponse,
    summary="Compare the catalog with resolved agents",
)
async def category_drift(
    catalog: Annotated[CategoryCatalog, Depends(get_category_catalog)],
    manager: Annotated[AgentManager, Depends(get_agent_manager)],
) -> CategoryDriftResponse:
    """Report agents filed differently than the catalog expects.

    The report is informational: an agent's own category field is what
    the registry uses.
    """
    drift = catalog.drift(await manager.list_agents())
    return CategoryDriftResponse(
        mismatched={
            name: CategoryMismatch(catalog_category=listed, declared_category=declared)
            for name, (listed, declared) in drift.mismatched.items()
        },
        uncatalogued=drift.uncatalogued,
    )


@router.get(
    "/{name}",
    response_model=CategoryDetailResponse,
    summary="Get a category",
)
async def get_category(
    name: str,
    catalog: Annotated[CategoryCatalog, Depends(get_category_catalog)],
    manager: Annotated[AgentManager, Depends(get_agent_manager)],
) -> CategoryDetailResponse:
    """Get a catalog category and the resolved agents declaring it.

    Raises:
        HTTPException: 404 if the catalog has no such category
    """
    category = catalog.get(name)
    if category is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Category '{name}' not found",
        )

    agents = await manager.list_agents(ListFilters(category=name))
    return CategoryDetailResponse(
        **_category_response(category).model_dump(),
        resolved_agents=[a.name for a in agents],
    )
