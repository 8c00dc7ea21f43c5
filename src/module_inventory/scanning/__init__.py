"""Tree walking, file reading and reference extraction."""

from .extractors import (
    ReferenceExtractor,
    RegexExtractor,
    TreeSitterExtractor,
    create_extractor,
)
from .models import (
    DependencyIndex,
    ReferenceRecord,
    ScanIssue,
    ScanResult,
    TraversalPolicy,
)
from .reader import FileReferenceReader
from .walker import TreeWalker, list_directory

__all__ = [
    # Extractors
    "ReferenceExtractor",
    "TreeSitterExtractor",
    "RegexExtractor",
    "create_extractor",
    # Models
    "DependencyIndex",
    "ReferenceRecord",
    "ScanIssue",
    "ScanResult",
    "TraversalPolicy",
    # Components
    "FileReferenceReader",
    "TreeWalker",
    "list_directory",
]
