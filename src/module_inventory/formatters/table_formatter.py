"""Rich table formatter for terminal reading."""

from typing import Optional

from rich.console import Console
from rich.table import Table

from ..scanning.models import ScanResult
from .base import BaseFormatter


class TableFormatter(BaseFormatter):
    """One row per module, sorted by name, with its referencing files."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def render(self, result: ScanResult) -> None:
        self.console.print(self._build_table(result))

    def format(self, result: ScanResult) -> str:
        with self.console.capture() as capture:
            self.render(result)
        return capture.get()

    def _build_table(self, result: ScanResult) -> Table:
        table = Table(
            title=f"Modules referenced in {result.root}",
            caption=(
                f"{result.module_count} modules, {result.reference_count} references "
                f"in {result.files_scanned} files"
            ),
        )
        table.add_column("Module", style="cyan", no_wrap=True)
        table.add_column("Refs", justify="right")
        table.add_column("Files")

        for module in sorted(result.index):
            files = result.index[module]
            table.add_row(module, str(len(files)), "\n".join(dict.fromkeys(files)))

        return table
