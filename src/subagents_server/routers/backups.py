"""Backups router for listing and restoring pre-mutation snapshots."""

import logging
from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from subagents_server.dependencies import get_backup_service
from subagents_server.models.backups import (
    BackupListResponse,
    BackupResponse,
    RestoreBackupRequest,
    RestoreBackupResponse,
)
from subagents_server.services import BackupService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/backups", tags=["backups"])


@router.get(
    "",
    response_model=BackupListResponse,
    summary="List backups",
)
async def list_backups(
    service: Annotated[BackupService, Depends(get_backup_service)],
) -> BackupListResponse:
    """List retained backup archives, newest first."""
    backups = await service.list_backups()
    return BackupListResponse(
        backups=[BackupResponse.model_validate(b) for b in backups]
    )


@router.post(
    "/{name}/restore",
    response_model=RestoreBackupResponse,
    summary="Restore a backup",
)
async def restore_backup(
    name: str,
    request: RestoreBackupRequest,
    service: Annotated[BackupService, Depends(get_backup_service)],
) -> RestoreBackupResponse:
    """Extract a backup archive back onto disk.

    Args:
        name: Archive filename
        request: Optional directory to extract into
        service: Injected BackupService

    Returns:
        The directory written by the restore

    Raises:
        HTTPException: 404 if the archive doesn't exist
        HTTPException: 400 if the name or target is invalid
        HTTPException: 500 if extraction fails
    """
    target = Path(request.target_parent) if request.target_parent else None
    try:
        restored = await service.restore_backup(name, target_parent=target)
    except FileNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Backup '{name}' not found",
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except Exception as e:
        logger.error(f"Failed to restore backup '{name}': {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to restore backup: {str(e)}",
        )
    return RestoreBackupResponse(name=name, restored_path=restored)
