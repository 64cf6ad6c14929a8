"""Pydantic models for category API responses."""

from pydantic import BaseModel, ConfigDict, Field


class CategoryResponse(BaseModel):
    """A category from the static catalog."""

    name: str
    description: str
    agents: list[str] = Field(
        default_factory=list, description="Agent names the catalog lists"
    )
    installable: bool = Field(
        ..., description="Whether agent files may declare this category"
    )

    model_config = ConfigDict(from_attributes=True)


class CategoryDetailResponse(CategoryResponse):
    """A catalog category plus the resolved agents declaring it."""

    resolved_agents: list[str] = Field(
        default_factory=list,
        description="Resolved agents whose own category field names this category",
    )


class CategoryListResponse(BaseModel):
    """Response model for listing categories."""

    categories: list[CategoryResponse] = Field(default_factory=list)


class CategoryMismatch(BaseModel):
    """An agent filed under a different category than the catalog expects."""

    catalog_category: str
    declared_category: str


class CategoryDriftResponse(BaseModel):
    """Disagreements between the catalog and the resolved agents."""

    mismatched: dict[str, CategoryMismatch] = Field(default_factory=dict)
    uncatalogued: list[str] = Field(default_factory=list)
