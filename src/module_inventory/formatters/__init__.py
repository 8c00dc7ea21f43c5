"""Output formatters for the dependency index."""

from .base import BaseFormatter
from .json_formatter import JsonFormatter
from .table_formatter import TableFormatter


def get_formatter(name: str) -> BaseFormatter:
    """Get a formatter instance by name.

    Args:
        name: One of "json", "table"

    Returns:
        Formatter instance

    Raises:
        ValueError: If name is not recognized
    """
    formatters = {
        "json": JsonFormatter,
        "table": TableFormatter,
    }
    cls = formatters.get(name)
    if cls is None:
        raise ValueError(f"Unknown formatter: {name!r}. Choose from: {', '.join(sorted(formatters))}")
    return cls()


__all__ = [
    "BaseFormatter",
    "JsonFormatter",
    "TableFormatter",
    "get_formatter",
]
