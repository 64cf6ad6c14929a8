"""Unit tests for tier scanning."""

import pytest

from subagents_server.registry.loader import load_tier
from subagents_server.registry.types import Tier


@pytest.mark.asyncio
async def test_load_missing_root_returns_empty(tmp_path):
    """Test that a tier whose directory does not exist is empty."""
    agents = await load_tier(tmp_path / "nowhere", Tier.GLOBAL)
    assert agents == []


@pytest.mark.asyncio
async def test_load_tier_stamps_tier_and_install_state(tmp_path, write_agent):
    """Test that loaded agents carry their tier and installed state."""
    write_agent(tmp_path / "bundled", "react-helper", version="1.2.0")
    write_agent(tmp_path / "global", "react-helper", version="1.0.0")

    bundled = await load_tier(tmp_path / "bundled", Tier.BUNDLED)
    global_ = await load_tier(tmp_path / "global", Tier.GLOBAL)

    assert bundled[0].tier == Tier.BUNDLED
    assert bundled[0].installed is False
    assert bundled[0].installed_version is None
    assert global_[0].tier == Tier.GLOBAL
    assert global_[0].installed is True
    assert global_[0].installed_version == "1.0.0"


@pytest.mark.asyncio
async def test_load_skips_commons(tmp_path, write_agent, agent_text):
    """Test that files under a commons directory are not agents."""
    root = tmp_path / "bundled"
    write_agent(root, "real-agent")
    for shared in (root / "commons", root / "frontend" / "commons"):
        shared.mkdir(parents=True)
        (shared / "shared-snippet.md").write_text(
            agent_text("shared-snippet"), encoding="utf-8"
        )

    agents = await load_tier(root, Tier.BUNDLED)

    assert [a.name for a in agents] == ["real-agent"]


@pytest.mark.asyncio
async def test_load_skips_invalid_files(tmp_path, write_agent):
    """Test that invalid agent files are left out silently."""
    root = tmp_path / "bundled"
    write_agent(root, "good-agent")
    write_agent(root, "bad-version", version="latest")
    (root / "frontend" / "notes.md").write_text("# not an agent\n", encoding="utf-8")
    (root / "frontend" / "README.txt").write_text("ignored\n", encoding="utf-8")

    agents = await load_tier(root, Tier.BUNDLED)

    assert [a.name for a in agents] == ["good-agent"]


@pytest.mark.asyncio
async def test_load_keeps_warnings_only_files(tmp_path, write_agent):
    """Test that files with only warnings still load."""
    root = tmp_path / "local"
    write_agent(root, "terse-agent", body="Short.", tools=[])

    agents = await load_tier(root, Tier.LOCAL)

    assert len(agents) == 1
    assert agents[0].path == root / "frontend" / "terse-agent.md"


@pytest.mark.asyncio
async def test_load_order_is_sorted_by_path(tmp_path, write_agent):
    """Test that scan order is stable across calls."""
    root = tmp_path / "bundled"
    write_agent(root, "zeta", category="backend")
    write_agent(root, "alpha", category="frontend")
    write_agent(root, "beta", category="backend")

    agents = await load_tier(root, Tier.BUNDLED)

    assert [a.name for a in agents] == ["beta", "zeta", "alpha"]
