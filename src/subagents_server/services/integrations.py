"""Read-only access to the per-project integration state file.

The state file (``.claude/config.json`` by default) is written by the
integration bootstrap tooling. This service only reads it to decide which
integrations still need their setup step.
"""

import asyncio
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

KNOWN_INTEGRATIONS: tuple[str, ...] = ("serena",)


@dataclass
class IntegrationStatus:
    """Enabled/initialized state of one optional integration."""

    name: str
    enabled: bool = False
    initialized: bool = False
    indexed_at: str | None = None


class IntegrationStateService:
    """Loads integration state merged over the known defaults."""

    def __init__(self, state_file: Path):
        self.state_file = state_file

    async def load(self) -> dict[str, IntegrationStatus]:
        """Load integration state.

        Known integrations are always present (disabled by default); any
        extra integrations recorded in the file are included as well. A
        missing or malformed file yields the defaults.

        Returns:
            Mapping of integration name to its status
        """
        statuses = {name: IntegrationStatus(name=name) for name in KNOWN_INTEGRATIONS}

        raw = await asyncio.to_thread(self._read_state)
        for name, entry in raw.items():
            if not isinstance(entry, dict):
                logger.warning(f"Ignoring malformed integration entry '{name}'")
                continue
            statuses[name] = IntegrationStatus(
                name=name,
                enabled=bool(entry.get("enabled", False)),
                initialized=bool(entry.get("initialized", False)),
                indexed_at=entry.get("indexedAt"),
            )
        return statuses

    async def pending(self) -> list[str]:
        """Names of integrations whose setup step has not run yet."""
        statuses = await self.load()
        return [name for name, status in statuses.items() if not status.initialized]

    def _read_state(self) -> dict[str, Any]:
        if not self.state_file.is_file():
            return {}
        try:
            data = json.loads(self.state_file.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to read integration state {self.state_file}: {e}")
            return {}

        integrations = data.get("integrations") if isinstance(data, dict) else None
        if not isinstance(integrations, dict):
            return {}
        return integrations
