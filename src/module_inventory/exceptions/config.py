"""Configuration exceptions: scan target and settings."""

from pathlib import Path
from typing import Any

from .base import ModuleInventoryError


class ConfigurationError(ModuleInventoryError):
    """Base class for configuration-related errors."""

    pass


class InvalidPathError(ConfigurationError):
    """Raised when the scan target is unusable."""

    def __init__(self, path: Any, reason: str):
        super().__init__(reason, details={"path": str(path)})
        self.path = path
        self.reason = reason


class TargetNotFoundError(InvalidPathError):
    """Raised when the scan target does not exist."""

    def __init__(self, path: Path):
        super().__init__(path, f"Target not found: {path}")


class NotADirectoryTargetError(InvalidPathError):
    """Raised when the scan target exists but is not a directory."""

    def __init__(self, path: Path):
        super().__init__(path, "Please provide a path to a directory")


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value}",
            details={"key": key, "value": str(value), "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason
