"""Base formatter interface for dependency index output."""

from abc import ABC, abstractmethod

from ..scanning.models import ScanResult


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def render(self, result: ScanResult) -> None:
        """Write the index to stdout."""

    @abstractmethod
    def format(self, result: ScanResult) -> str:
        """Return formatted string representation of the index."""
