"""Exception hierarchy for module-inventory."""

from .base import ModuleInventoryError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
    NotADirectoryTargetError,
    TargetNotFoundError,
)
from .scanning import (
    ExtractionError,
    ReadError,
    ScanError,
    SourceSyntaxError,
    TraversalError,
)

__all__ = [
    "ModuleInventoryError",
    "ConfigurationError",
    "InvalidPathError",
    "TargetNotFoundError",
    "NotADirectoryTargetError",
    "InvalidConfigError",
    "ScanError",
    "TraversalError",
    "ReadError",
    "ExtractionError",
    "SourceSyntaxError",
]
