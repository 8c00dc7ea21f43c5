"""Command-line interface for module-inventory"""

import dataclasses
from pathlib import Path
from typing import List, NoReturn, Optional

import click
import typer
from rich.console import Console
from rich.markup import escape

from . import __version__
from .api import scan
from .config import EXTRACTORS, load_config
from .exceptions import ModuleInventoryError
from .formatters import get_formatter
from .logging_config import setup_logging

app = typer.Typer(
    name="module-inventory",
    help="List every module a source tree references, and the files that reference it.",
    add_completion=False,
    rich_markup_mode="rich",
)

# Errors go to stderr; stdout carries only the index
console = Console(stderr=True)


@app.command()
def main(
    target: Optional[Path] = typer.Argument(
        None,
        help="Absolute path of the directory to scan (default: current directory)",
        show_default=False,
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress progress and per-file warnings",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug output",
    ),
    exclude_dir: Optional[List[str]] = typer.Option(
        None,
        "--exclude-dir",
        "-x",
        help="Directory name to skip, added to the configured set (repeatable)",
    ),
    ext: Optional[List[str]] = typer.Option(
        None,
        "--ext",
        "-e",
        help="File extension to scan (repeatable; replaces the default .js/.mjs)",
    ),
    workers: Optional[int] = typer.Option(
        None,
        "-w",
        "--workers",
        help="Parallel workers (default: auto-detect)",
        min=1,
        max=64,
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Per-file read timeout in seconds (default: none)",
    ),
    unique: bool = typer.Option(
        False,
        "--unique",
        help="List a file once per module even if it references the module repeatedly",
    ),
    extractor: Optional[str] = typer.Option(
        None,
        "--extractor",
        help="Reference extractor backend",
        click_type=click.Choice(list(EXTRACTORS), case_sensitive=False),
    ),
    fmt: str = typer.Option(
        "json",
        "--format",
        "-f",
        help="Output format",
        click_type=click.Choice(["json", "table"], case_sensitive=False),
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the index to this file instead of stdout",
        dir_okay=False,
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Exit 1 if any file or directory could not be processed",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
    ),
):
    """
    Scan a directory tree and print a JSON object mapping each referenced
    module to the files that reference it.

    Understands CommonJS require, AMD define/require and ES module
    import/export syntax.

    [bold cyan]Examples:[/bold cyan]

      module-inventory /path/to/project

      module-inventory /path/to/project --quiet --unique

      module-inventory /path/to/project -x dist -e .js -e .cjs -f table
    """
    if version:
        console.print(f"[bold cyan]module-inventory[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)

    try:
        config = load_config(
            config_file=config_file,
            quiet=quiet,
            verbose=verbose,
            workers=workers,
            timeout_seconds=timeout,
            unique=unique or None,
            extractor=extractor.lower() if extractor else None,
        )
        if exclude_dir:
            config = dataclasses.replace(
                config, exclude_dirs=config.exclude_dirs + tuple(exclude_dir)
            )
        if ext:
            config = dataclasses.replace(config, include_extensions=tuple(ext))
    except ModuleInventoryError as e:
        _fail(e)

    logger = setup_logging(
        verbose=config.verbosity == "verbose",
        quiet=config.quiet,
    )

    try:
        result = scan(target if target is not None else Path.cwd(), config)

        formatter = get_formatter(fmt.lower())
        if output is not None:
            output.write_text(formatter.format(result) + "\n", encoding="utf-8")
            logger.info(f"Index written to {output}")
        else:
            formatter.render(result)

    except ModuleInventoryError as e:
        logger.debug(f"{e.__class__.__name__}: {e}")
        _fail(e)

    except OSError as e:
        logger.debug(f"Cannot write output: {e}")
        console.print(f"[red]Error writing output:[/red] {escape(str(e))}", soft_wrap=True)
        raise typer.Exit(1)

    except KeyboardInterrupt:
        logger.info("Scan interrupted by user")
        console.print("\n[yellow]Scan interrupted[/yellow]")
        raise typer.Exit(130)

    if strict and not result.ok:
        console.print(
            f"[red]{len(result.issues)} file(s) or directories could not be processed[/red]"
        )
        raise typer.Exit(1)


def _fail(error: ModuleInventoryError) -> NoReturn:
    console.print(f"[red]Error:[/red] {escape(str(error))}", soft_wrap=True)
    raise typer.Exit(1)


if __name__ == "__main__":
    app()
