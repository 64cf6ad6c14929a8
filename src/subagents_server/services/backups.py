"""Backup service for snapshotting agent directories before mutation.

Snapshots are gzip tar archives named ``backup-<UTC timestamp>.tar.gz`` in
the configured backups directory. Only the most recent archives are kept.
"""

import asyncio
import logging
import tarfile
from datetime import datetime, timezone
from pathlib import Path

from subagents_server.registry.errors import BackupFailedError
from subagents_server.registry.types import BackupSnapshot

logger = logging.getLogger(__name__)

ARCHIVE_PREFIX = "backup-"
ARCHIVE_SUFFIX = ".tar.gz"
SOURCE_HEADER = "subagents.source"
CREATED_HEADER = "subagents.created_at"


class BackupService:
    """Creates, lists, prunes and restores directory snapshots."""

    def __init__(self, backups_dir: Path, retention: int = 5):
        """Initialize the BackupService.

        Args:
            backups_dir: Directory where archives are written
            retention: Number of most recent archives to keep
        """
        if retention < 1:
            raise ValueError("Backup retention must be at least 1")
        self.backups_dir = backups_dir
        self.retention = retention

    async def create_backup(self, source: Path) -> BackupSnapshot:
        """Archive a directory and prune old archives.

        Args:
            source: Directory to snapshot

        Returns:
            The snapshot that was written

        Raises:
            BackupFailedError: If the archive could not be written
        """
        try:
            snapshot = await asyncio.to_thread(self._write_archive, source)
        except (OSError, tarfile.TarError) as e:
            raise BackupFailedError(
                str(source), f"Failed to back up {source}: {e}"
            ) from e

        logger.info(f"Created backup {snapshot.name} of {source}")
        await self._cleanup_old_backups()
        return snapshot

    async def list_backups(self) -> list[BackupSnapshot]:
        """List retained snapshots, newest first."""
        return await asyncio.to_thread(self._list_snapshots)

    async def restore_backup(self, name: str, target_parent: Path | None = None) -> Path:
        """Extract a snapshot back onto disk.

        Args:
            name: Archive filename (e.g. 'backup-2024-01-01T00-00-00-000000Z.tar.gz')
            target_parent: Directory to extract into; defaults to the parent
                of the directory that was snapshotted

        Returns:
            Path of the restored directory

        Raises:
            ValueError: If the name is not a backup archive name, or no
                target can be determined
            FileNotFoundError: If the archive does not exist
        """
        self._validate_name(name)
        archive = self.backups_dir / name
        if not archive.is_file():
            raise FileNotFoundError(f"Backup '{name}' not found")

        snapshot = await asyncio.to_thread(self._read_snapshot, archive)
        if target_parent is None:
            if snapshot.source is None:
                raise ValueError(f"Backup '{name}' does not record its source directory")
            target_parent = snapshot.source.parent

        restored = await asyncio.to_thread(self._extract_archive, archive, target_parent)
        logger.info(f"Restored backup {name} into {restored}")
        return restored

    async def _cleanup_old_backups(self) -> None:
        """Delete archives beyond the retention count, oldest first."""
        names = await asyncio.to_thread(self._archive_names)
        for name in names[self.retention :]:
            await asyncio.to_thread((self.backups_dir / name).unlink, missing_ok=True)
            logger.info(f"Removed old backup {name}")

    def _write_archive(self, source: Path) -> BackupSnapshot:
        if not source.is_dir():
            raise FileNotFoundError(f"Backup source is not a directory: {source}")

        self.backups_dir.mkdir(parents=True, exist_ok=True)

        now = datetime.now(timezone.utc)
        archive = self.backups_dir / _archive_name(now)
        while archive.exists():
            now = datetime.now(timezone.utc)
            archive = self.backups_dir / _archive_name(now)

        created_at = now.isoformat().replace("+00:00", "Z")
        headers = {SOURCE_HEADER: str(source), CREATED_HEADER: created_at}
        try:
            with tarfile.open(
                archive, "w:gz", format=tarfile.PAX_FORMAT, pax_headers=headers
            ) as tar:
                tar.add(source, arcname=source.name)
        except BaseException:
            archive.unlink(missing_ok=True)
            raise

        return BackupSnapshot(
            name=archive.name, path=archive, source=source, created_at=created_at
        )

    def _archive_names(self) -> list[str]:
        """Archive filenames, newest first."""
        if not self.backups_dir.is_dir():
            return []
        names = [
            p.name
            for p in self.backups_dir.iterdir()
            if p.is_file()
            and p.name.startswith(ARCHIVE_PREFIX)
            and p.name.endswith(ARCHIVE_SUFFIX)
        ]
        return sorted(names, reverse=True)

    def _list_snapshots(self) -> list[BackupSnapshot]:
        snapshots = []
        for name in self._archive_names():
            try:
                snapshots.append(self._read_snapshot(self.backups_dir / name))
            except (OSError, tarfile.TarError) as e:
                logger.warning(f"Failed to read backup {name}: {e}")
        return snapshots

    def _read_snapshot(self, archive: Path) -> BackupSnapshot:
        with tarfile.open(archive, "r:gz") as tar:
            headers = dict(tar.pax_headers)
        source = headers.get(SOURCE_HEADER)
        return BackupSnapshot(
            name=archive.name,
            path=archive,
            source=Path(source) if source else None,
            created_at=headers.get(CREATED_HEADER, ""),
        )

    def _extract_archive(self, archive: Path, target_parent: Path) -> Path:
        target_parent.mkdir(parents=True, exist_ok=True)
        with tarfile.open(archive, "r:gz") as tar:
            roots = {Path(member.name).parts[0] for member in tar.getmembers()}
            tar.extractall(target_parent, filter="data")
        if len(roots) == 1:
            return target_parent / roots.pop()
        return target_parent

    def _validate_name(self, name: str) -> None:
        if not name.startswith(ARCHIVE_PREFIX) or not name.endswith(ARCHIVE_SUFFIX):
            raise ValueError(f"'{name}' is not a backup archive name")
        if "/" in name or "\\" in name:
            raise ValueError("Backup name cannot contain path separators")


def _archive_name(moment: datetime) -> str:
    return f"{ARCHIVE_PREFIX}{moment.strftime('%Y-%m-%dT%H-%M-%S-%fZ')}{ARCHIVE_SUFFIX}"
