"""
module-inventory - static inventory of the modules a source tree references

Walks a directory tree, extracts every require/import/define reference from
its JavaScript files and reports, for each referenced module, the files that
reference it. Nothing is executed or resolved.
"""

__version__ = "0.1.0"

from .aggregate import aggregate
from .api import scan
from .config import ScanConfig, load_config
from .scanning.models import ReferenceRecord, ScanIssue, ScanResult

__all__ = [
    "scan",  # Main entry point
    "aggregate",
    "load_config",
    "ScanConfig",
    "ScanResult",
    "ScanIssue",
    "ReferenceRecord",
]
