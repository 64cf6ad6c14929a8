"""Pydantic models for agent API requests and responses."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from subagents_server.models.backups import BackupResponse
from subagents_server.registry import Tier


class AgentResponse(BaseModel):
    """A resolved agent record."""

    name: str = Field(..., description="Unique agent name")
    category: str = Field(..., description="Category declared by the agent file")
    description: str = Field(..., description="Short description")
    version: str = Field(..., description="Semantic version of the resolved copy")
    author: str = Field(..., description="Agent author")
    license: str = Field(..., description="License identifier")
    tools: list[str] = Field(default_factory=list, description="Declared tools")
    tags: list[str] = Field(default_factory=list, description="Tags")
    keywords: list[str] = Field(default_factory=list, description="Search keywords")
    dependencies: list[str] = Field(
        default_factory=list, description="Agents this agent requires"
    )
    conflicts: list[str] = Field(
        default_factory=list, description="Agents that may not be installed alongside"
    )
    repository: str | None = Field(None, description="Source repository URL")
    homepage: str | None = Field(None, description="Homepage URL")
    path: Path | None = Field(None, description="File the record was read from")
    tier: Tier = Field(..., description="Tier the resolved copy lives in")
    installed: bool = Field(..., description="Whether a global or local copy exists")
    installed_version: str | None = Field(
        None, description="Version of the installed copy"
    )
    available_update: str | None = Field(
        None, description="Newer version held by a lower-precedence tier"
    )

    model_config = ConfigDict(from_attributes=True)


class AgentDetailResponse(AgentResponse):
    """A resolved agent record including its markdown body."""

    content: str = Field(..., description="Markdown body of the agent file")


class AgentListResponse(BaseModel):
    """Response model for listing or searching agents."""

    agents: list[AgentResponse] = Field(default_factory=list)
    count: int = Field(..., description="Number of agents returned")


class InstallAgentRequest(BaseModel):
    """Request body for installing a single agent."""

    target_tier: Literal["global", "local"] | None = Field(
        None,
        description="Tier to install into; defaults to the server's prefer_global setting",
    )
    force: bool = Field(False, description="Reinstall even if already installed")


class BulkInstallRequest(InstallAgentRequest):
    """Request body for installing several agents at once."""

    names: list[str] = Field(default_factory=list, description="Agent names")
    categories: list[str] = Field(
        default_factory=list,
        description="Install every agent declaring one of these categories",
    )

    @model_validator(mode="after")
    def require_selection(self) -> "BulkInstallRequest":
        """Ensure at least one agent or category is selected."""
        if not self.names and not self.categories:
            raise ValueError("Specify at least one agent name or category")
        return self


class UpdateAgentRequest(BaseModel):
    """Request body for updating agents."""

    force: bool = Field(False, description="Update even if not newer")


class ValidateAgentRequest(BaseModel):
    """Request body for validating an agent file or raw content."""

    path: str | None = Field(None, description="Path of an agent file on the server")
    content: str | None = Field(None, description="Raw agent file contents")

    @model_validator(mode="after")
    def require_one_source(self) -> "ValidateAgentRequest":
        """Ensure exactly one of path or content is given."""
        if (self.path is None) == (self.content is None):
            raise ValueError("Provide exactly one of 'path' or 'content'")
        return self


class ValidationResponse(BaseModel):
    """Outcome of validating an agent file."""

    valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    agent: AgentResponse | None = Field(
        None, description="Parsed record, present when the metadata could be read"
    )

    model_config = ConfigDict(from_attributes=True)


class LifecycleResponse(BaseModel):
    """Result of an install, uninstall or update."""

    agent: AgentResponse | None = Field(
        None, description="Record after the change; null when no tier holds it any more"
    )
    previous_version: str | None = Field(
        None, description="Installed version before the change"
    )
    backup: BackupResponse | None = Field(
        None, description="Snapshot taken before writing, if any"
    )

    model_config = ConfigDict(from_attributes=True)


class InstallAgentResponse(LifecycleResponse):
    """Result of an install, with integrations still awaiting setup."""

    suggested_integrations: list[str] = Field(
        default_factory=list,
        description="Optional integrations not yet initialized for this project",
    )


class BulkResultResponse(BaseModel):
    """Per-agent outcomes of a batch install or update."""

    succeeded: list[LifecycleResponse] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    failed: dict[str, str] = Field(
        default_factory=dict, description="Agent name -> failure message"
    )

    model_config = ConfigDict(from_attributes=True)
