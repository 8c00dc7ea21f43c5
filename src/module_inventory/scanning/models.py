"""Data models for the scanning layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

IssueKind = Literal["traversal", "read", "extraction"]

DependencyIndex = dict[str, list[str]]


@dataclass(frozen=True)
class TraversalPolicy:
    """Which directories are descended into and which files are read.

    Attributes:
        excluded_dir_names: Directory basenames never descended into (exact match)
        included_extensions: Lower-case suffixes eligible for extraction
    """

    excluded_dir_names: frozenset[str]
    included_extensions: frozenset[str]

    def includes_file(self, name: str) -> bool:
        return Path(name).suffix.lower() in self.included_extensions

    def includes_dir(self, name: str) -> bool:
        return name not in self.excluded_dir_names


@dataclass(frozen=True)
class ReferenceRecord:
    """One module reference found in one file.

    Attributes:
        module: Module name exactly as written in the source
        source_file: POSIX-style path relative to the scan root
    """

    module: str
    source_file: str


@dataclass(frozen=True)
class ScanIssue:
    """A failure isolated to one file or subtree during a scan."""

    path: str
    kind: IssueKind
    reason: str


@dataclass
class ScanResult:
    """Outcome of scanning one tree."""

    root: Path
    index: DependencyIndex
    files_scanned: int = 0
    reference_count: int = 0
    issues: list[ScanIssue] = field(default_factory=list)

    @property
    def module_count(self) -> int:
        return len(self.index)

    @property
    def ok(self) -> bool:
        """True when every eligible file and directory was processed."""
        return not self.issues
