"""AgentManager: registry queries and install/uninstall/update lifecycle.

This module provides the AgentManager class which handles:
- Scanning the bundled, global and local tiers and resolving them
- Listing, looking up, searching and validating agents
- Installing, uninstalling and updating agents with conflict,
  dependency and backup safeguards
- Batch installs and updates
"""

import asyncio
import logging
import shutil
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, AsyncIterator

from filelock import AsyncFileLock

from subagents_server.registry.errors import (
    AgentNotFoundError,
    AlreadyInstalledError,
    AlreadyUpToDateError,
    ConflictError,
    DependencyViolationError,
    NoUpdateAvailableError,
    RegistryError,
)
from subagents_server.registry.loader import load_tier
from subagents_server.registry.resolver import (
    filter_agents,
    lower_tier_candidates,
    resolve,
)
from subagents_server.registry.search import search
from subagents_server.registry.types import (
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
from subagents_server.registry.validator import compare_versions, validate_agent_file

if TYPE_CHECKING:
    from subagents_server.services.backups import BackupService

logger = logging.getLogger(__name__)


@dataclass
class TierListing:
    """Valid agents found in each tier during one scan."""

    bundled: list[Agent]
    global_: list[Agent]
    local: list[Agent]

    def resolve(self) -> list[Agent]:
        return resolve(self.bundled, self.global_, self.local)

    def lower_candidates(self, name: str, tier: Tier) -> list[Agent]:
        return lower_tier_candidates(name, tier, self.bundled, self.global_, self.local)


def _find(agents: list[Agent], name: str) -> Agent | None:
    for agent in agents:
        if agent.name == name:
            return agent
    return None


def _copy_file(source: Path, target: Path) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(source, target)


class AgentManager:
    """Manages agents across the bundled, global and local tiers.

    Nothing is cached: every operation scans the tier directories again and
    resolves them from scratch. Mutations hold an advisory lock file keyed
    by tier and agent name for their whole read-validate-write sequence.
    """

    def __init__(
        self,
        bundled_dir: Path,
        global_dir: Path,
        local_dir: Path,
        backup_service: "BackupService",
        locks_dir: Path,
        backup_before_install: bool = True,
    ):
        """Initialize the AgentManager.

        Args:
            bundled_dir: Read-only directory of agents shipped with the server
            global_dir: User-wide agents directory
            local_dir: Project agents directory
            backup_service: Snapshots directories before writes
            locks_dir: Directory for per-agent lock files
            backup_before_install: Snapshot the destination category
                directory before install and update writes
        """
        self.tier_roots = {
            Tier.BUNDLED: bundled_dir,
            Tier.GLOBAL: global_dir,
            Tier.LOCAL: local_dir,
        }
        self.backup_service = backup_service
        self.locks_dir = locks_dir
        self.backup_before_install = backup_before_install

    async def scan(self) -> TierListing:
        """Load all three tiers, one after another."""
        bundled = await load_tier(self.tier_roots[Tier.BUNDLED], Tier.BUNDLED)
        global_ = await load_tier(self.tier_roots[Tier.GLOBAL], Tier.GLOBAL)
        local = await load_tier(self.tier_roots[Tier.LOCAL], Tier.LOCAL)
        return TierListing(bundled=bundled, global_=global_, local=local)

    async def list_agents(self, filters: ListFilters = ListFilters()) -> list[Agent]:
        """List merged agents, optionally filtered."""
        listing = await self.scan()
        return filter_agents(listing.resolve(), filters)

    async def get_agent(self, name: str) -> Agent | None:
        """Get the resolved record for an agent name, or None."""
        listing = await self.scan()
        return _find(listing.resolve(), name)

    async def search_agents(
        self, query: str, options: SearchOptions = SearchOptions()
    ) -> list[Agent]:
        """Search merged agents by query tokens, category and tags."""
        listing = await self.scan()
        return search(listing.resolve(), query, options)

    async def validate_agent(self, path: Path) -> ValidationResult:
        """Validate an agent file on disk."""
        return await validate_agent_file(path)

    async def install_agent(
        self, name: str, options: InstallOptions = InstallOptions()
    ) -> LifecycleResult:
        """Install an agent into the global or local tier.

        Args:
            name: Agent name
            options: Target tier and force flag

        Returns:
            The re-resolved agent and the backup taken, if any

        Raises:
            AgentNotFoundError: If no tier holds the agent
            AlreadyInstalledError: If installed and ``force`` is not set
            ConflictError: If a conflicting agent is installed
            BackupFailedError: If the pre-install snapshot failed
        """
        async with self._lock(options.target_tier, name):
            listing = await self.scan()
            merged = listing.resolve()
            agent = _find(merged, name)

            if agent is None:
                raise AgentNotFoundError(name, f"Agent '{name}' not found")

            if agent.installed and not options.force:
                raise AlreadyInstalledError(
                    name, f"Agent '{name}' is already installed. Use force to reinstall."
                )

            self._check_conflicts(agent, merged)

            target = self.tier_roots[options.target_tier] / agent.category / f"{name}.md"
            source = self._install_source(agent, target, listing)

            backup = await self._backup(target.parent)
            if source is not None:
                await asyncio.to_thread(_copy_file, source, target)
            logger.info(
                f"Installed agent {name} v{agent.version} into {options.target_tier.value} tier"
            )

            return LifecycleResult(
                agent=await self.get_agent(name),
                previous_version=agent.installed_version,
                backup=backup,
            )

    async def uninstall_agent(self, name: str) -> LifecycleResult:
        """Remove the installed copy of an agent.

        The copy chosen by resolution is deleted; if a lower tier still holds
        the agent, that copy becomes the resolved record.

        Raises:
            AgentNotFoundError: If the agent is not installed
            DependencyViolationError: If another installed agent depends on it
        """
        tier = await self._installed_tier(name)

        async with self._lock(tier, name):
            merged = (await self.scan()).resolve()
            agent = _find(merged, name)

            if agent is None or not agent.installed or agent.path is None:
                raise AgentNotFoundError(name, f"Agent '{name}' is not installed")

            dependents = [
                other.name
                for other in merged
                if other.installed and other.name != name and name in other.dependencies
            ]
            if dependents:
                raise DependencyViolationError(name, dependents)

            await asyncio.to_thread(agent.path.unlink)
            logger.info(f"Uninstalled agent {name} from {agent.tier.value} tier")

            return LifecycleResult(
                agent=await self.get_agent(name),
                previous_version=agent.installed_version,
            )

    async def update_agent(
        self, name: str, options: UpdateOptions = UpdateOptions()
    ) -> LifecycleResult:
        """Replace an installed agent with the newer copy from a lower tier.

        The installed file is overwritten in place, in the tier it occupies.

        Raises:
            AgentNotFoundError: If the agent is not installed
            NoUpdateAvailableError: If no lower tier holds a newer version
            AlreadyUpToDateError: If the update is not newer and ``force``
                is not set
            BackupFailedError: If the pre-update snapshot failed
        """
        tier = await self._installed_tier(name)

        async with self._lock(tier, name):
            listing = await self.scan()
            agent = _find(listing.resolve(), name)

            if agent is None or not agent.installed or agent.path is None:
                raise AgentNotFoundError(name, f"Agent '{name}' is not installed")

            if agent.available_update is None:
                raise NoUpdateAvailableError(
                    name, f"No updates available for agent '{name}'"
                )

            installed_version = agent.installed_version or agent.version
            if (
                not options.force
                and compare_versions(agent.available_update, installed_version) <= 0
            ):
                raise AlreadyUpToDateError(name, f"Agent '{name}' is already up to date")

            source = next(
                (
                    c
                    for c in listing.lower_candidates(name, agent.tier)
                    if c.version == agent.available_update and c.path is not None
                ),
                None,
            )
            if source is None:
                raise NoUpdateAvailableError(
                    name, f"No updates available for agent '{name}'"
                )

            backup = await self._backup(agent.path.parent)
            await asyncio.to_thread(_copy_file, source.path, agent.path)
            logger.info(
                f"Updated agent {name} from v{installed_version} "
                f"to v{agent.available_update} in {agent.tier.value} tier"
            )

            return LifecycleResult(
                agent=await self.get_agent(name),
                previous_version=installed_version,
                backup=backup,
            )

    async def install_many(
        self,
        names: list[str],
        categories: list[str] | None = None,
        options: InstallOptions = InstallOptions(),
    ) -> BulkResult:
        """Install several agents, collecting per-agent outcomes.

        Agents are taken from ``names`` followed by every resolved agent in
        ``categories``, without duplicates. Already-installed agents are
        reported as skipped; other failures do not stop the batch.
        """
        targets = list(dict.fromkeys(names))
        if categories:
            for agent in await self.list_agents():
                if agent.category in categories and agent.name not in targets:
                    targets.append(agent.name)

        result = BulkResult()
        for name in targets:
            try:
                result.succeeded.append(await self.install_agent(name, options))
            except AlreadyInstalledError:
                result.skipped.append(name)
            except RegistryError as e:
                logger.warning(f"Failed to install {name}: {e}")
                result.failed[name] = str(e)
        return result

    async def update_all(self, options: UpdateOptions = UpdateOptions()) -> BulkResult:
        """Update every installed agent that has an available update."""
        result = BulkResult()
        for agent in await self.list_agents(ListFilters(installed=True)):
            if agent.available_update is None:
                result.skipped.append(agent.name)
                continue
            try:
                result.succeeded.append(await self.update_agent(agent.name, options))
            except AlreadyUpToDateError:
                result.skipped.append(agent.name)
            except RegistryError as e:
                logger.warning(f"Failed to update {agent.name}: {e}")
                result.failed[agent.name] = str(e)
        return result

    def _check_conflicts(self, agent: Agent, merged: list[Agent]) -> None:
        installed = {a.name for a in merged if a.installed}
        for conflict in agent.conflicts:
            if conflict != agent.name and conflict in installed:
                raise ConflictError(agent.name, conflict)

    def _install_source(
        self, agent: Agent, target: Path, listing: TierListing
    ) -> Path | None:
        """File to copy for an install.

        Normally the resolved copy. When that copy already is the target
        file (a forced reinstall in place), the newest lower-tier copy is
        used instead, provided it is not older than the installed version.
        Returns None when there is nothing to reinstall from.
        """
        if agent.path is None:
            return None
        if agent.path.resolve() != target.resolve():
            return agent.path

        candidates = [
            c
            for c in listing.lower_candidates(agent.name, agent.tier)
            if compare_versions(c.version, agent.version) >= 0
        ]
        if not candidates:
            logger.debug(
                f"No lower-tier copy of {agent.name} at v{agent.version} or newer, "
                f"leaving {target}"
            )
            return None
        return candidates[0].path

    async def _installed_tier(self, name: str) -> Tier:
        agent = await self.get_agent(name)
        if agent is None or not agent.installed:
            raise AgentNotFoundError(name, f"Agent '{name}' is not installed")
        return agent.tier

    async def _backup(self, directory: Path) -> BackupSnapshot | None:
        """Snapshot a destination directory before writing into it."""
        if not self.backup_before_install:
            return None
        if not await asyncio.to_thread(directory.is_dir):
            logger.debug(f"No backup needed, {directory} does not exist yet")
            return None
        return await self.backup_service.create_backup(directory)

    @asynccontextmanager
    async def _lock(self, tier: Tier, name: str) -> AsyncIterator[None]:
        """Hold the advisory lock for one (tier, agent) pair."""
        await asyncio.to_thread(self.locks_dir.mkdir, parents=True, exist_ok=True)
        lock = AsyncFileLock(str(self.locks_dir / f"{tier.value}-{name}.lock"))
        async with lock:
            yield
