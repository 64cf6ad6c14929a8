"""Agent registry: tier scanning, resolution, search and lifecycle.

This package provides the core data types, the schema validator, the tier
loader, the resolver that merges tiers by precedence, token search, and the
AgentManager that installs, uninstalls and updates agents.
"""

from subagents_server.registry.errors import (
    AgentNotFoundError,
    AlreadyInstalledError,
    AlreadyUpToDateError,
    BackupFailedError,
    ConflictError,
    DependencyViolationError,
    NoUpdateAvailableError,
    RegistryError,
)
from subagents_server.registry.manager import AgentManager
from subagents_server.registry.types import (
    VALID_CATEGORIES,
    Agent,
    BackupSnapshot,
    BulkResult,
    InstallOptions,
    LifecycleResult,
    ListFilters,
    SearchOptions,
    Tier,
    UpdateOptions,
    ValidationResult,
)

__all__ = [
    "VALID_CATEGORIES",
    "Agent",
    "AgentManager",
    "AgentNotFoundError",
    "AlreadyInstalledError",
    "AlreadyUpToDateError",
    "BackupFailedError",
    "BackupSnapshot",
    "BulkResult",
    "ConflictError",
    "DependencyViolationError",
    "InstallOptions",
    "LifecycleResult",
    "ListFilters",
    "NoUpdateAvailableError",
    "RegistryError",
    "SearchOptions",
    "Tier",
    "UpdateOptions",
    "ValidationResult",
]
