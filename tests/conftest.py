"""Pytest configuration and shared fixtures for subagents-server tests.

This module provides common fixtures used across all test modules,
including isolated tier directories, an agent file writer, test app
creation and async client setup.
"""

from pathlib import Path
from typing import Callable

import pytest
import pytest_asyncio
import yaml
from httpx import ASGITransport, AsyncClient

from subagents_server import create_app
from subagents_server.config import SubAgentsSettings
from subagents_server.registry import AgentManager
from subagents_server.services import BackupService

DEFAULT_BODY = (
    "You are a focused specialist. Read the task carefully, plan the change, "
    "implement it in small steps and verify the result before reporting back."
)

AgentWriter = Callable[..., Path]


def render_agent(
    name: str,
    version: str = "1.0.0",
    category: str = "frontend",
    body: str = DEFAULT_BODY,
    **fields,
) -> str:
    """Render an agent file with YAML front matter."""
    metadata = {
        "name": name,
        "category": category,
        "description": f"The {name} agent",
        "version": version,
        "author": "Test Author",
        "license": "MIT",
        "tools": ["Read", "Write"],
    }
    metadata.update(fields)
    metadata = {k: v for k, v in metadata.items() if v is not None}
    return f"---\n{yaml.safe_dump(metadata, sort_keys=False)}---\n\n{body}\n"


@pytest.fixture
def agent_text() -> Callable[..., str]:
    """Return the agent file renderer (front matter + body)."""
    return render_agent


@pytest.fixture
def write_agent() -> AgentWriter:
    """Return a function writing an agent file under a tier root.

    The file is placed at ``<root>/<category>/<name>.md``.
    """

    def _write(root: Path, name: str, version: str = "1.0.0", category: str = "frontend", **fields) -> Path:
        path = root / category / f"{name}.md"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            render_agent(name, version=version, category=category, **fields),
            encoding="utf-8",
        )
        return path

    return _write


@pytest.fixture
def tiers(tmp_path: Path) -> dict[str, Path]:
    """Isolated bundled, global and local tier roots plus state directory."""
    return {
        "bundled": tmp_path / "bundled",
        "global": tmp_path / "home" / ".claude" / "agents",
        "local": tmp_path / "project" / ".claude" / "agents",
        "state": tmp_path / "state",
    }


@pytest.fixture
def backup_service(tiers: dict[str, Path]) -> BackupService:
    """BackupService writing into the isolated state directory."""
    return BackupService(backups_dir=tiers["state"] / "backups", retention=5)


@pytest.fixture
def manager(tiers: dict[str, Path], backup_service: BackupService) -> AgentManager:
    """AgentManager over the isolated tiers, with backups enabled."""
    return AgentManager(
        bundled_dir=tiers["bundled"],
        global_dir=tiers["global"],
        local_dir=tiers["local"],
        backup_service=backup_service,
        locks_dir=tiers["state"] / "locks",
        backup_before_install=True,
    )


@pytest.fixture
def test_settings(tmp_path: Path) -> SubAgentsSettings:
    """Create test settings with isolated temporary directories.

    Args:
        tmp_path: Pytest fixture providing a temporary directory.

    Returns:
        SubAgentsSettings: Settings instance configured for testing.
    """
    return SubAgentsSettings(
        host="127.0.0.1",
        port=8000,
        project_dir=str(tmp_path / "project"),
        local_agents_dir=".claude/agents",
        global_agents_dir=str(tmp_path / "home" / ".claude" / "agents"),
        bundled_agents_dir=str(tmp_path / "bundled"),
        state_dir=str(tmp_path / "state"),
        log_level="DEBUG",
        cors_origins=["*"],
    )


@pytest.fixture
def test_app(test_settings):
    """Create a FastAPI test application instance.

    Args:
        test_settings: Test settings fixture.

    Returns:
        FastAPI: Configured test application.
    """
    return create_app(settings=test_settings)


@pytest_asyncio.fixture
async def async_client(test_app):
    """Create an async HTTP client for testing FastAPI endpoints.

    Args:
        test_app: Test application fixture.

    Yields:
        AsyncClient: Async HTTP client for making test requests.
    """
    # Trigger the lifespan startup manually for tests
    async with test_app.router.lifespan_context(test_app):
        transport = ASGITransport(app=test_app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
