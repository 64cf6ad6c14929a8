"""Configuration module for subagents-server using pydantic-settings."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_DIR = Path(__file__).resolve().parent


class SubAgentsSettings(BaseSettings):
    """Main configuration settings for subagents-server.

    All settings can be overridden via environment variables with the SUBAGENTS_ prefix.
    For example, SUBAGENTS_PROJECT_DIR will override the project_dir setting.
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # Agent tiers
    project_dir: str = "."
    local_agents_dir: str = ".claude/agents"
    global_agents_dir: str = "~/.claude/agents"
    bundled_agents_dir: str | None = None

    # State (relative to state_dir)
    state_dir: str = "~/.sub-agents"
    backups_dir: str = "backups"
    locks_dir: str = "locks"

    # Integration state file (relative to project_dir)
    integration_state_file: str = ".claude/config.json"

    # Lifecycle
    backup_before_install: bool = True
    backup_retention: int = Field(default=5, ge=1)
    prefer_global: bool = False

    # CORS
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="SUBAGENTS_")

    # --- Resolved paths ---

    @property
    def resolved_project_dir(self) -> Path:
        """Get the full path to the project directory."""
        return Path(self.project_dir).expanduser()

    @property
    def resolved_local_agents_dir(self) -> Path:
        """Get the full path to the local (project) agents tier."""
        return self.resolved_project_dir / self.local_agents_dir

    @property
    def resolved_global_agents_dir(self) -> Path:
        """Get the full path to the global (user-wide) agents tier."""
        return Path(self.global_agents_dir).expanduser()

    @property
    def resolved_bundled_agents_dir(self) -> Path:
        """Get the full path to the bundled agents tier."""
        if self.bundled_agents_dir is None:
            return PACKAGE_DIR / "bundled_agents"
        return Path(self.bundled_agents_dir).expanduser()

    @property
    def resolved_state_dir(self) -> Path:
        """Get the full path to the state directory."""
        return Path(self.state_dir).expanduser()

    @property
    def resolved_backups_dir(self) -> Path:
        """Get the full path to the backups directory."""
        return self.resolved_state_dir / self.backups_dir

    @property
    def resolved_locks_dir(self) -> Path:
        """Get the full path to the lock files directory."""
        return self.resolved_state_dir / self.locks_dir

    @property
    def resolved_integration_state_file(self) -> Path:
        """Get the full path to the integration state file."""
        return self.resolved_project_dir / self.integration_state_file
