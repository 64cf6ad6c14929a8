"""FastAPI routers for API endpoints.

This package contains all route handlers organized by resource type.
Each router module defines endpoints for a specific domain (health, agents, backups, etc.).
"""

from subagents_server.routers import agents, backups, categories, health, integrations

__all__ = [
    "agents",
    "backups",
    "categories",
    "health",
    "integrations",
]
