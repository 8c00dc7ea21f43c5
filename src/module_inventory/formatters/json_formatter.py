"""JSON formatter: the index as a single JSON object."""

import json

from ..scanning.models import ScanResult
from .base import BaseFormatter


class JsonFormatter(BaseFormatter):
    """Render the index as JSON, keys in discovery order."""

    def render(self, result: ScanResult) -> None:
        print(self.format(result))

    def format(self, result: ScanResult) -> str:
        return json.dumps(result.index, indent=2)
