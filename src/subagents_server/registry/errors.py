"""Named failure conditions raised by registry lifecycle operations."""


class RegistryError(Exception):
    """Base class for lifecycle failures callers are expected to branch on."""

    def __init__(self, name: str, message: str):
        super().__init__(message)
        self.name = name


class AgentNotFoundError(RegistryError):
    """The agent does not resolve, or is not installed when it must be."""


class AlreadyInstalledError(RegistryError):
    """Install was requested for an installed agent without force."""


class ConflictError(RegistryError):
    """A conflicting agent is currently installed."""

    def __init__(self, name: str, conflict: str):
        super().__init__(name, f"Agent '{name}' conflicts with installed agent '{conflict}'")
        self.conflict = conflict


class DependencyViolationError(RegistryError):
    """Another installed agent depends on the agent being uninstalled."""

    def __init__(self, name: str, dependents: list[str]):
        joined = ", ".join(dependents)
        super().__init__(
            name, f"Cannot uninstall '{name}': required by installed agent(s) {joined}"
        )
        self.dependents = dependents


class NoUpdateAvailableError(RegistryError):
    """No lower-precedence tier holds a newer version."""


class AlreadyUpToDateError(RegistryError):
    """The installed version is not older than the available one."""


class BackupFailedError(RegistryError):
    """The pre-mutation snapshot could not be written."""
