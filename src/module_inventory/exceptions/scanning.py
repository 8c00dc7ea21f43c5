"""Scanning exceptions: directory listing, file reads, reference extraction."""

from pathlib import Path

from .base import ModuleInventoryError


class ScanError(ModuleInventoryError):
    """Base class for errors raised while walking a tree.

    Every subclass is attributed to one path and carries the reason, so the
    walker can turn it into a ScanIssue.
    """

    kind = "scan"

    def __init__(self, path: Path, message: str, reason: str):
        super().__init__(message, details={"path": str(path), "reason": reason})
        self.path = path
        self.reason = reason


class TraversalError(ScanError):
    """Raised when a directory cannot be listed."""

    kind = "traversal"

    def __init__(self, path: Path, reason: str):
        super().__init__(path, f"Cannot list directory: {path}", reason)


class ReadError(ScanError):
    """Raised when a file cannot be opened or decoded."""

    kind = "read"

    def __init__(self, path: Path, reason: str):
        super().__init__(path, f"Cannot read file: {path}", reason)


class ExtractionError(ScanError):
    """Raised when a file's content cannot be parsed for references."""

    kind = "extraction"

    def __init__(self, path: Path, reason: str):
        super().__init__(path, f"Failed to extract references from {path}", reason)


class SourceSyntaxError(ModuleInventoryError):
    """Raised by an extractor for unparsable source text.

    Extractors only see text, so the error carries no path; the reader
    re-raises it as ExtractionError for the file being read.
    """

    def __init__(self, reason: str, line: int = 0):
        details = {"line": str(line)} if line else None
        super().__init__(f"Syntax error: {reason}", details=details)
        self.reason = reason
        self.line = line
