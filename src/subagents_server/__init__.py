"""subagents-server: Headless FastAPI server for managing installable agent definitions.

This package provides a REST API for listing, searching, validating,
installing, uninstalling and updating agents across the bundled, global
and local tiers.
"""

__version__ = "0.1.0"

from subagents_server.app import create_app  # noqa: E402

__all__ = ["create_app", "__version__"]
