"""Pytest configuration for integration tests.

This module provides integration-test-specific fixtures: a seeded bundled
tier and the project's integration state file.
"""

import json

import pytest


@pytest.fixture
def seed_bundled(tiers, write_agent):
    """Populate the bundled tier with a small set of agents.

    Returns:
        dict: Agent name -> path of its bundled file
    """
    return {
        "react-component-builder": write_agent(
            tiers["bundled"],
            "react-component-builder",
            tags=["react", "ui"],
            keywords=["components"],
        ),
        "vue-specialist": write_agent(
            tiers["bundled"], "vue-specialist", conflicts=["react-component-builder"]
        ),
        "django-developer": write_agent(
            tiers["bundled"], "django-developer", category="backend", tags=["python"]
        ),
        "fastapi-builder": write_agent(
            tiers["bundled"],
            "fastapi-builder",
            category="backend",
            tags=["python"],
            dependencies=["django-developer"],
        ),
    }


@pytest.fixture
def write_integration_state(test_settings):
    """Return a function writing the project's integration state file."""

    def _write(integrations: dict) -> None:
        path = test_settings.resolved_integration_state_file
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps({"integrations": integrations}), encoding="utf-8")

    return _write
