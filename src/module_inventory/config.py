"""Configuration loading and management for module-inventory.

Configuration sources are merged in priority order:
    1. Defaults (defined in ScanConfig)
    2. Project config (./module-inventory.toml)
    3. Explicit config file (--config)
    4. Environment variables (MODULE_INVENTORY_* prefix)
    5. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(quiet=True, unique=True)
    >>> config.verbosity
    'quiet'
    >>> config.unique
    True
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Literal, Optional, get_args, get_origin, get_type_hints

from .exceptions import (
    InvalidConfigError,
    InvalidPathError,
    NotADirectoryTargetError,
    TargetNotFoundError,
)
from .scanning.models import TraversalPolicy

Verbosity = Literal["quiet", "normal", "verbose"]
ExtractorName = Literal["treesitter", "regex"]

DEFAULT_EXCLUDE_DIRS: tuple[str, ...] = ("node_modules", ".git")
DEFAULT_EXTENSIONS: tuple[str, ...] = (".js", ".mjs")
EXTRACTORS: tuple[str, ...] = ("treesitter", "regex")
PROJECT_CONFIG_NAME = "module-inventory.toml"
ENV_PREFIX = "MODULE_INVENTORY_"

# Default worker count: CPU count capped at 8 to avoid overwhelming I/O
DEFAULT_WORKERS = min(os.cpu_count() or 4, 8)


def normalize_extension(ext: str) -> str:
    """Lower-case an extension and give it a leading dot."""
    ext = ext.strip().lower()
    if ext and not ext.startswith("."):
        ext = "." + ext
    return ext


@dataclass(frozen=True)
class ScanConfig:
    """Settings for one scan.

    Attributes:
        exclude_dirs: Directory basenames never descended into
        include_extensions: File extensions eligible for reference extraction
        workers: Thread pool size for listing, reading and extraction
                 (None = auto-detect)
        timeout_seconds: Per-file read timeout (None = no timeout)
        max_file_size_mb: Files above this size are reported, not read
        unique: List a file once per distinct module it references
        extractor: Reference extractor backend
        verbosity: Logging verbosity level
    """

    exclude_dirs: tuple[str, ...] = DEFAULT_EXCLUDE_DIRS
    include_extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    workers: Optional[int] = None
    timeout_seconds: Optional[float] = None
    max_file_size_mb: float = 10.0
    unique: bool = False
    extractor: ExtractorName = "treesitter"
    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Normalize collections and validate values."""
        # Lists arrive from TOML and the CLI; store tuples so the config stays hashable
        for name in ("exclude_dirs", "include_extensions"):
            value = getattr(self, name)
            if isinstance(value, str):
                object.__setattr__(self, name, (value,))

        type_hints = get_type_hints(type(self))
        for f in fields(self):
            _check_type(f.name, getattr(self, f.name), type_hints[f.name])

        for name in ("exclude_dirs", "include_extensions"):
            object.__setattr__(self, name, tuple(getattr(self, name)))
        object.__setattr__(
            self,
            "include_extensions",
            tuple(normalize_extension(e) for e in self.include_extensions),
        )

        if not self.include_extensions or "" in self.include_extensions:
            raise InvalidConfigError(
                "include_extensions", self.include_extensions, "must list non-empty extensions"
            )
        if self.workers is not None and self.workers < 1:
            raise InvalidConfigError("workers", self.workers, "must be at least 1")
        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            raise InvalidConfigError("timeout_seconds", self.timeout_seconds, "must be positive")
        if self.max_file_size_mb <= 0:
            raise InvalidConfigError("max_file_size_mb", self.max_file_size_mb, "must be positive")
        if self.extractor not in EXTRACTORS:
            raise InvalidConfigError(
                "extractor", self.extractor, f"must be one of {', '.join(EXTRACTORS)}"
            )
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise InvalidConfigError(
                "verbosity", self.verbosity, "must be quiet, normal or verbose"
            )

    @property
    def quiet(self) -> bool:
        return self.verbosity == "quiet"

    @property
    def max_workers(self) -> int:
        return self.workers or DEFAULT_WORKERS

    @property
    def max_file_size_bytes(self) -> int:
        """Get max file size in bytes."""
        return int(self.max_file_size_mb * 1024 * 1024)

    @property
    def policy(self) -> TraversalPolicy:
        return TraversalPolicy(
            excluded_dir_names=frozenset(self.exclude_dirs),
            included_extensions=frozenset(self.include_extensions),
        )


def _check_type(name: str, value: Any, type_hint: Any) -> None:
    """Raise InvalidConfigError if value does not fit the field's type hint.

    TOML files can carry any type for any key.
    """
    args = get_args(type_hint)
    if type(None) in args:
        if value is None:
            return
        type_hint = next(t for t in args if t is not type(None))

    if get_origin(type_hint) is tuple:
        ok = isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value)
        expected = "a list of strings"
    elif type_hint is bool:
        ok = isinstance(value, bool)
        expected = "true or false"
    elif type_hint is int:
        ok = isinstance(value, int) and not isinstance(value, bool)
        expected = "an integer"
    elif type_hint is float:
        ok = isinstance(value, (int, float)) and not isinstance(value, bool)
        expected = "a number"
    else:
        # str and Literal string choices
        ok = isinstance(value, str)
        expected = "a string"

    if not ok:
        raise InvalidConfigError(name, value, f"must be {expected}")


def resolve_target(target: Any) -> Path:
    """Validate the scan target and return it as a Path.

    Raises:
        InvalidPathError: If the target is missing or not absolute
        TargetNotFoundError: If the target does not exist
        NotADirectoryTargetError: If the target is not a directory
    """
    if target is None or not isinstance(target, (str, Path)) or str(target) == "":
        raise InvalidPathError(target, "Please provide a target path")

    path = Path(target)
    if not path.is_absolute():
        raise InvalidPathError(path, "Please provide an absolute path")
    if not path.exists():
        raise TargetNotFoundError(path)
    if not path.is_dir():
        raise NotADirectoryTargetError(path)
    return path


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> ScanConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags); None values
                     are ignored so unset flags do not mask file settings

    Returns:
        Validated ScanConfig instance

    Raises:
        InvalidConfigError: If a config file or value is invalid
    """
    merged: dict[str, Any] = {}

    project_config = Path.cwd() / PROJECT_CONFIG_NAME
    if project_config.exists():
        merged.update(_load_toml_file(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise InvalidConfigError("config_file", config_file, "file not found")
        merged.update(_load_toml_file(config_file))

    merged.update(_load_env_vars())

    # Convert verbosity boolean flags to string
    if overrides.pop("verbose", False):
        overrides["verbosity"] = "verbose"
    if overrides.pop("quiet", False):
        overrides["verbosity"] = "quiet"

    merged.update({k: v for k, v in overrides.items() if v is not None})

    known = {f.name for f in fields(ScanConfig)}
    unknown = sorted(set(merged) - known)
    if unknown:
        raise InvalidConfigError(unknown[0], merged[unknown[0]], "unknown setting")

    return ScanConfig(**merged)


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from MODULE_INVENTORY_* environment variables.

    List settings take comma-separated values, e.g.
    MODULE_INVENTORY_EXCLUDE_DIRS=node_modules,.git,dist
    """
    type_hints = get_type_hints(ScanConfig)
    result: dict[str, Any] = {}

    for f in fields(ScanConfig):
        env_key = f"{ENV_PREFIX}{f.name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is None:
            continue
        try:
            result[f.name] = _parse_env_value(env_value, type_hints[f.name])
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment variable string to the field's type."""
    args = getattr(type_hint, "__args__", ())
    # Optional[X] is Union[X, None]
    if type(None) in args:
        type_hint = next(t for t in args if t is not type(None))
        args = getattr(type_hint, "__args__", ())

    origin = getattr(type_hint, "__origin__", None)

    if origin is tuple:
        return tuple(part.strip() for part in value.split(",") if part.strip())

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        if lower in ("false", "0", "no", "off"):
            return False
        raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    # String, including Literal types
    return value


def _load_toml_file(path: Path) -> dict[str, Any]:
    """Load a TOML config file, accepting an optional [module-inventory] table."""
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise InvalidConfigError("config_file", path, str(e))

    section = data.get("module-inventory", data)
    if not isinstance(section, dict):
        raise InvalidConfigError("config_file", path, "[module-inventory] must be a table")
    return dict(section)
