"""Integration tests for agents API endpoints."""

import pytest


@pytest.mark.asyncio
async def test_list_agents_empty(async_client):
    """Test listing agents when no tier holds any."""
    response = await async_client.get("/api/v1/agents")

    assert response.status_code == 200
    assert response.json() == {"agents": [], "count": 0}


@pytest.mark.asyncio
async def test_list_agents(async_client, seed_bundled):
    """Test listing bundled agents."""
    response = await async_client.get("/api/v1/agents")

    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 4
    agent = next(a for a in data["agents"] if a["name"] == "react-component-builder")
    assert agent["tier"] == "bundled"
    assert agent["installed"] is False
    assert agent["installed_version"] is None
    assert agent["tags"] == ["react", "ui"]
    assert "content" not in agent


@pytest.mark.asyncio
async def test_list_agents_filters(async_client, seed_bundled):
    """Test category and installed filters."""
    await async_client.post(
        "/api/v1/agents/django-developer/install", json={"target_tier": "local"}
    )

    response = await async_client.get("/api/v1/agents", params={"category": "backend"})
    assert sorted(a["name"] for a in response.json()["agents"]) == [
        "django-developer",
        "fastapi-builder",
    ]

    response = await async_client.get("/api/v1/agents", params={"installed": "true"})
    assert [a["name"] for a in response.json()["agents"]] == ["django-developer"]

    response = await async_client.get("/api/v1/agents", params={"available": "true"})
    assert response.json()["count"] == 3


@pytest.mark.asyncio
async def test_get_agent(async_client, seed_bundled):
    """Test retrieving one agent with its body."""
    response = await async_client.get("/api/v1/agents/vue-specialist")

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "vue-specialist"
    assert data["conflicts"] == ["react-component-builder"]
    assert data["content"].startswith("You are a focused specialist")


@pytest.mark.asyncio
async def test_get_agent_not_found(async_client):
    """Test retrieving an unknown agent."""
    response = await async_client.get("/api/v1/agents/ghost")

    assert response.status_code == 404
    assert "not found" in response.json()["detail"]


@pytest.mark.asyncio
async def test_search_agents(async_client, seed_bundled):
    """Test searching by query, tags and limit."""
    response = await async_client.get("/api/v1/agents/search", params={"q": "React"})
    assert [a["name"] for a in response.json()["agents"]] == ["react-component-builder"]

    response = await async_client.get("/api/v1/agents/search", params={"tags": "python"})
    assert response.json()["count"] == 2

    response = await async_client.get(
        "/api/v1/agents/search", params={"q": "agent", "limit": 1}
    )
    assert response.json()["count"] == 1

    response = await async_client.get("/api/v1/agents/search", params={"limit": -1})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_install_agent(async_client, seed_bundled, tiers):
    """Test installing an agent into the global tier."""
    response = await async_client.post(
        "/api/v1/agents/react-component-builder/install", json={"target_tier": "global"}
    )

    assert response.status_code == 201
    data = response.json()
    assert data["agent"]["tier"] == "global"
    assert data["agent"]["installed"] is True
    assert data["agent"]["installed_version"] == "1.0.0"
    assert data["previous_version"] is None
    assert data["backup"] is None
    assert data["suggested_integrations"] == ["serena"]
    assert (tiers["global"] / "frontend" / "react-component-builder.md").is_file()


@pytest.mark.asyncio
async def test_install_defaults_to_local(async_client, seed_bundled, tiers):
    """Test that installs go to the local tier unless told otherwise."""
    response = await async_client.post(
        "/api/v1/agents/react-component-builder/install", json={}
    )

    assert response.status_code == 201
    assert response.json()["agent"]["tier"] == "local"
    assert (tiers["local"] / "frontend" / "react-component-builder.md").is_file()


@pytest.mark.asyncio
async def test_install_prefer_global(async_client, test_app, seed_bundled, tiers):
    """Test that prefer_global changes the default target tier."""
    test_app.state.settings.prefer_global = True

    response = await async_client.post(
        "/api/v1/agents/react-component-builder/install", json={}
    )

    assert response.status_code == 201
    assert response.json()["agent"]["tier"] == "global"


@pytest.mark.asyncio
async def test_install_rejects_bundled_target(async_client, seed_bundled):
    """Test that the bundled tier cannot be an install target."""
    response = await async_client.post(
        "/api/v1/agents/react-component-builder/install", json={"target_tier": "bundled"}
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_install_twice_conflicts(async_client, seed_bundled):
    """Test that installing an installed agent returns 409."""
    url = "/api/v1/agents/react-component-builder/install"
    await async_client.post(url, json={"target_tier": "global"})

    response = await async_client.post(url, json={"target_tier": "global"})
    assert response.status_code == 409
    assert "already installed" in response.json()["detail"]

    response = await async_client.post(url, json={"target_tier": "global", "force": True})
    assert response.status_code == 201
    assert response.json()["previous_version"] == "1.0.0"


@pytest.mark.asyncio
async def test_install_unknown_agent(async_client):
    """Test installing an agent no tier holds."""
    response = await async_client.post("/api/v1/agents/ghost/install", json={})

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_install_conflicting_agent(async_client, seed_bundled, tiers):
    """Test that a conflict with an installed agent returns 409."""
    await async_client.post("/api/v1/agents/react-component-builder/install", json={})

    response = await async_client.post("/api/v1/agents/vue-specialist/install", json={})

    assert response.status_code == 409
    assert "conflicts with installed agent 'react-component-builder'" in response.json()["detail"]
    assert not (tiers["local"] / "frontend" / "vue-specialist.md").exists()


@pytest.mark.asyncio
async def test_install_suggests_only_pending_integrations(
    async_client, seed_bundled, write_integration_state
):
    """Test that initialized integrations are not suggested."""
    write_integration_state({"serena": {"enabled": True, "initialized": True}})

    response = await async_client.post(
        "/api/v1/agents/react-component-builder/install", json={}
    )

    assert response.status_code == 201
    assert response.json()["suggested_integrations"] == []


@pytest.mark.asyncio
async def test_uninstall_agent(async_client, seed_bundled, tiers):
    """Test uninstalling an installed agent."""
    await async_client.post("/api/v1/agents/django-developer/install", json={})

    response = await async_client.delete("/api/v1/agents/django-developer")

    assert response.status_code == 200
    data = response.json()
    assert data["previous_version"] == "1.0.0"
    assert data["agent"]["tier"] == "bundled"
    assert data["agent"]["installed"] is False
    assert not (tiers["local"] / "backend" / "django-developer.md").exists()


@pytest.mark.asyncio
async def test_uninstall_custom_agent_removes_record(async_client, tiers, write_agent):
    """Test that uninstalling an agent with no bundled copy drops it."""
    write_agent(tiers["local"], "custom-helper")

    response = await async_client.delete("/api/v1/agents/custom-helper")

    assert response.status_code == 200
    assert response.json()["agent"] is None
    assert (await async_client.get("/api/v1/agents/custom-helper")).status_code == 404


@pytest.mark.asyncio
async def test_uninstall_not_installed(async_client, seed_bundled):
    """Test uninstalling a bundled-only agent returns 404."""
    response = await async_client.delete("/api/v1/agents/django-developer")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_uninstall_with_dependents(async_client, seed_bundled, tiers):
    """Test that a required agent cannot be uninstalled."""
    await async_client.post("/api/v1/agents/django-developer/install", json={})
    await async_client.post("/api/v1/agents/fastapi-builder/install", json={})

    response = await async_client.delete("/api/v1/agents/django-developer")

    assert response.status_code == 409
    assert "fastapi-builder" in response.json()["detail"]
    assert (tiers["local"] / "backend" / "django-developer.md").is_file()


@pytest.mark.asyncio
async def test_update_agent(async_client, tiers, write_agent):
    """Test updating an installed agent from a newer bundled copy."""
    write_agent(tiers["bundled"], "widget-helper", version="1.0.0")
    await async_client.post(
        "/api/v1/agents/widget-helper/install", json={"target_tier": "global"}
    )
    write_agent(tiers["bundled"], "widget-helper", version="2.0.0")

    response = await async_client.get("/api/v1/agents/widget-helper")
    assert response.json()["available_update"] == "2.0.0"

    response = await async_client.post("/api/v1/agents/widget-helper/update", json={})

    assert response.status_code == 200
    data = response.json()
    assert data["previous_version"] == "1.0.0"
    assert data["agent"]["installed_version"] == "2.0.0"
    assert data["agent"]["available_update"] is None
    assert data["backup"]["name"].startswith("backup-")

    response = await async_client.post("/api/v1/agents/widget-helper/update", json={})
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_update_not_installed(async_client, seed_bundled):
    """Test updating a bundled-only agent returns 404."""
    response = await async_client.post("/api/v1/agents/django-developer/update", json={})

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_bulk_install(async_client, seed_bundled):
    """Test installing by names and categories in one request."""
    await async_client.post("/api/v1/agents/django-developer/install", json={})

    response = await async_client.post(
        "/api/v1/agents/install",
        json={"names": ["react-component-builder", "ghost"], "categories": ["backend"]},
    )

    assert response.status_code == 200
    data = response.json()
    assert [r["agent"]["name"] for r in data["succeeded"]] == [
        "react-component-builder",
        "fastapi-builder",
    ]
    assert data["skipped"] == ["django-developer"]
    assert list(data["failed"]) == ["ghost"]


@pytest.mark.asyncio
async def test_bulk_install_requires_selection(async_client):
    """Test that an empty bulk install is rejected."""
    response = await async_client.post("/api/v1/agents/install", json={})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_update_all(async_client, tiers, write_agent):
    """Test updating every installed agent."""
    write_agent(tiers["bundled"], "widget-helper", version="2.0.0")
    write_agent(tiers["bundled"], "gadget-helper", version="1.0.0")
    write_agent(tiers["global"], "widget-helper", version="1.0.0")
    write_agent(tiers["global"], "gadget-helper", version="1.0.0")

    response = await async_client.post("/api/v1/agents/update", json={})

    assert response.status_code == 200
    data = response.json()
    assert [r["agent"]["name"] for r in data["succeeded"]] == ["widget-helper"]
    assert data["skipped"] == ["gadget-helper"]


@pytest.mark.asyncio
async def test_validate_content(async_client, agent_text):
    """Test validating raw agent file contents."""
    response = await async_client.post(
        "/api/v1/agents/validate", json={"content": agent_text("draft-agent")}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["valid"] is True
    assert data["agent"]["name"] == "draft-agent"


@pytest.mark.asyncio
async def test_validate_path(async_client, tiers, write_agent):
    """Test validating an agent file on disk."""
    path = write_agent(tiers["bundled"], "broken-agent", category="gaming")

    response = await async_client.post("/api/v1/agents/validate", json={"path": str(path)})

    assert response.status_code == 200
    data = response.json()
    assert data["valid"] is False
    assert data["errors"][0].startswith("Invalid category: gaming")


@pytest.mark.asyncio
async def test_validate_requires_one_source(async_client):
    """Test that exactly one of path or content is accepted."""
    response = await async_client.post("/api/v1/agents/validate", json={})
    assert response.status_code == 422

    response = await async_client.post(
        "/api/v1/agents/validate", json={"path": "a.md", "content": "x"}
    )
    assert response.status_code == 422
