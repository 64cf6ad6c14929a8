"""Pydantic models for API request and response schemas.

This package contains all Pydantic models used for validating and
serializing API requests and responses across all endpoints.
"""

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
from subagents_server.models.backups import (
    BackupListResponse,
    BackupResponse,
    RestoreBackupRequest,
    RestoreBackupResponse,
)
from subagents_server.models.categories import (
    CategoryDetailResponse,
    CategoryDriftResponse,
    CategoryListResponse,
    CategoryMismatch,
    CategoryResponse,
)
from subagents_server.models.health import HealthResponse
from subagents_server.models.integrations import (
    IntegrationListResponse,
    IntegrationStatusResponse,
)

__all__ = [
    "AgentDetailResponse",
    "AgentListResponse",
    "AgentResponse",
    "BackupListResponse",
    "BackupResponse",
    "BulkInstallRequest",
    "BulkResultResponse",
    "CategoryDetailResponse",
    "CategoryDriftResponse",
    "CategoryListResponse",
    "CategoryMismatch",
    "CategoryResponse",
    "HealthResponse",
    "InstallAgentRequest",
    "InstallAgentResponse",
    "IntegrationListResponse",
    "IntegrationStatusResponse",
    "LifecycleResponse",
    "RestoreBackupRequest",
    "RestoreBackupResponse",
    "UpdateAgentRequest",
    "ValidateAgentRequest",
    "ValidationResponse",
]
