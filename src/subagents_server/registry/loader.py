"""Registry loader: scans one tier's directory tree for agent files."""

import asyncio
import logging
from pathlib import Path

from subagents_server.registry.types import Agent, Tier
from subagents_server.registry.validator import validate_agent_file

logger = logging.getLogger(__name__)

AGENT_FILE_PATTERN = "*.md"
COMMONS_DIR = "commons"


def _discover_files(root: Path) -> list[Path]:
    """Find candidate agent files under root, skipping commons subtrees."""
    if not root.is_dir():
        return []

    files = []
    for file_path in sorted(root.rglob(AGENT_FILE_PATTERN)):
        relative = file_path.relative_to(root)
        if COMMONS_DIR in relative.parts[:-1]:
            continue
        if file_path.is_file():
            files.append(file_path)
    return files


async def load_tier(root: Path, tier: Tier) -> list[Agent]:
    """Load every valid agent stored under a tier root.

    Files are validated one at a time; invalid files are left out of the
    result. A missing root yields an empty list.

    Args:
        root: Root directory of the tier
        tier: Which tier the directory represents

    Returns:
        Valid agents in sorted path order, stamped with their tier and
        installation state
    """
    files = await asyncio.to_thread(_discover_files, root)
    agents: list[Agent] = []

    for file_path in files:
        result = await validate_agent_file(file_path)
        if not result.valid or result.agent is None:
            logger.debug(f"Skipping invalid agent file {file_path}: {result.errors}")
            continue

        agent = result.agent
        agent.tier = tier
        agent.installed = tier.installable
        if agent.installed:
            agent.installed_version = agent.version
        agents.append(agent)

    logger.debug(f"Loaded {len(agents)} agent(s) from {tier.value} tier at {root}")
    return agents
