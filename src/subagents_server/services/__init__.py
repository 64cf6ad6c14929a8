"""Supporting services for subagents-server.

This package contains service classes for backups, the static category
catalog, and the integration state file.
"""

from subagents_server.services.backups import BackupService
from subagents_server.services.categories import (
    Category,
    CategoryCatalog,
    CategoryDrift,
)
from subagents_server.services.integrations import (
    IntegrationStateService,
    IntegrationStatus,
)

__all__ = [
    "BackupService",
    "Category",
    "CategoryCatalog",
    "CategoryDrift",
    "IntegrationStateService",
    "IntegrationStatus",
]
