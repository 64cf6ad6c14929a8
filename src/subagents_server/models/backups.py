"""Pydantic models for backup API requests and responses."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class BackupResponse(BaseModel):
    """A retained backup archive."""

    name: str = Field(..., description="Archive filename")
    path: Path = Field(..., description="Archive location")
    source: Path | None = Field(None, description="Directory that was snapshotted")
    created_at: str = Field(..., description="Creation time (ISO 8601, UTC)")

    model_config = ConfigDict(from_attributes=True)


class BackupListResponse(BaseModel):
    """Response model for listing backups, newest first."""

    backups: list[BackupResponse] = Field(default_factory=list)


class RestoreBackupRequest(BaseModel):
    """Request body for restoring a backup."""

    target_parent: str | None = Field(
        None,
        description="Directory to extract into; defaults to the snapshotted directory's parent",
    )


class RestoreBackupResponse(BaseModel):
    """Response model for a restored backup."""

    name: str = Field(..., description="Archive that was restored")
    restored_path: Path = Field(..., description="Directory written by the restore")
