"""Data types for the agent registry.

This module defines the core data structures for agent records, validation
results, and the option structures accepted by registry operations.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

VALID_CATEGORIES: tuple[str, ...] = (
    "frontend",
    "backend",
    "cloud-devops",
    "automation",
    "database",
    "ai-ml",
    "generic",
)

REQUIRED_FIELDS: tuple[str, ...] = (
    "name",
    "category",
    "description",
    "version",
    "author",
    "license",
)

LIST_FIELDS: tuple[str, ...] = (
    "tools",
    "tags",
    "keywords",
    "dependencies",
    "conflicts",
)


class Tier(str, Enum):
    """Storage tier holding agent files, lowest precedence first."""

    BUNDLED = "bundled"
    GLOBAL = "global"
    LOCAL = "local"

    @property
    def precedence(self) -> int:
        return _PRECEDENCE[self]

    @property
    def installable(self) -> bool:
        """Whether agents can be installed into this tier."""
        return self is not Tier.BUNDLED


_PRECEDENCE = {Tier.BUNDLED: 0, Tier.GLOBAL: 1, Tier.LOCAL: 2}


@dataclass
class Agent:
    """A single agent record as seen from one tier (or the merged registry)."""

    name: str
    category: str
    description: str
    version: str
    author: str
    license: str
    tools: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)
    dependencies: list[str] = field(default_factory=list)
    conflicts: list[str] = field(default_factory=list)
    repository: str | None = None
    homepage: str | None = None
    content: str = ""
    path: Path | None = None
    tier: Tier = Tier.BUNDLED
    installed: bool = False
    installed_version: str | None = None
    available_update: str | None = None


@dataclass
class ValidationResult:
    """Outcome of validating one agent file.

    ``agent`` is populated whenever the metadata block could be parsed,
    even if the record is invalid, so callers can report on it.
    """

    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    agent: Agent | None = None


@dataclass(frozen=True)
class InstallOptions:
    """Options for installing an agent.

    Attributes:
        target_tier: Tier to install into (GLOBAL or LOCAL)
        force: Reinstall even if the agent is already installed
    """

    target_tier: Tier = Tier.LOCAL
    force: bool = False

    def __post_init__(self) -> None:
        if not self.target_tier.installable:
            raise ValueError(f"Cannot install into the {self.target_tier.value} tier")


@dataclass(frozen=True)
class UpdateOptions:
    """Options for updating an installed agent."""

    force: bool = False


@dataclass(frozen=True)
class ListFilters:
    """Post-filters applied to the merged registry."""

    category: str | None = None
    installed: bool | None = None
    available: bool | None = None


@dataclass(frozen=True)
class SearchOptions:
    """Options for searching the merged registry."""

    category: str | None = None
    tags: frozenset[str] = frozenset()
    limit: int = 20

    def __post_init__(self) -> None:
        if self.limit < 0:
            raise ValueError("limit must not be negative")


@dataclass
class BackupSnapshot:
    """A retained archive of a directory taken before a mutation."""

    name: str
    path: Path
    source: Path | None
    created_at: str


@dataclass
class LifecycleResult:
    """Result of a single install, uninstall or update.

    Attributes:
        agent: The re-resolved record after the mutation (None if removed)
        previous_version: Installed version before the mutation, if any
        backup: Snapshot taken before the write, if one was taken
    """

    agent: Agent | None
    previous_version: str | None = None
    backup: BackupSnapshot | None = None


@dataclass
class BulkResult:
    """Per-agent outcomes of a batch install or update."""

    succeeded: list[LifecycleResult] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)
