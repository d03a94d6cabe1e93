"""
Exception classes for the launcher.

Per project patterns:
- Inherit from a common base exception type
- Store context data in attributes for error handling
- Include descriptive message with relevant details
"""

from pathlib import Path


class LauncherError(Exception):
    """Base class for launcher failures."""


class ReplicaConnectError(LauncherError):
    """
    Raised when a replica gives up waiting for its primary.

    This is the only fatal startup failure. The launcher maps it to
    exit status 1.

    Attributes:
        target: The host:port that never answered
        attempts: Number of probes made
    """

    def __init__(self, target: str, attempts: int) -> None:
        self.target = target
        self.attempts = attempts
        super().__init__(
            f"Primary {target} unreachable after {attempts} attempts"
        )


class RegistryError(LauncherError):
    """
    Raised when the registry cannot be read or written.

    Attributes:
        operation: What was attempted (e.g., "list pods", "label pod")
        detail: Underlying error message
    """

    def __init__(self, operation: str, detail: str) -> None:
        self.operation = operation
        self.detail = detail
        super().__init__(f"Registry {operation} failed: {detail}")


class StartupOptionsError(LauncherError):
    """
    Raised when a store startup-options file cannot be loaded or written.

    Attributes:
        path: The file involved
        detail: Underlying error message
    """

    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Startup options {path}: {detail}")
