"""
Utility functions for kintone CLI output and logging.
"""

import csv
import json
import logging
import re
import sys
from enum import Enum
from typing import Any, List, Optional

import click

ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*m")


class OutputFormat(str, Enum):
    """Supported output formats."""
    TABLE = "table"
    JSON = "json"
    CSV = "csv"


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """
    Configure logging for the CLI.

    Args:
        verbose: Enable debug output
        quiet: Only show warnings and errors
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    logging.getLogger().setLevel(level)
    # urllib3 is chatty at DEBUG
    logging.getLogger("urllib3").setLevel(logging.INFO if verbose else logging.WARNING)


def print_success(message: str) -> None:
    click.echo(click.style("✓ ", fg="green") + message)


def print_error(message: str, details: Optional[str] = None) -> None:
    click.echo(click.style("✗ ", fg="red") + message, err=True)
    if details:
        click.echo(f"  {details}", err=True)


def print_warning(message: str) -> None:
    click.echo(click.style("! ", fg="yellow") + message)


def print_info(message: str) -> None:
    click.echo(click.style("ℹ ", fg="blue") + message)


def print_json(data: Any, indent: int = 2) -> None:
    """Print data as JSON."""
    click.echo(json.dumps(data, indent=indent, ensure_ascii=False, default=str))


def print_table(headers: List[str], rows: List[List[Any]]) -> None:
    """Print rows as a simple aligned table."""
    widths = [len(ANSI_ESCAPE.sub("", str(h))) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(ANSI_ESCAPE.sub("", str(cell))))

    def _format_row(cells: List[Any]) -> str:
        parts = []
        for i, cell in enumerate(cells):
            text = str(cell)
            padding = widths[i] - len(ANSI_ESCAPE.sub("", text))
            parts.append(text + " " * padding)
        return "  ".join(parts).rstrip()

    click.echo(click.style(_format_row(headers), bold=True))
    click.echo("  ".join("-" * w for w in widths))
    for row in rows:
        click.echo(_format_row(row))


def print_csv(headers: List[str], rows: List[List[Any]]) -> None:
    """Print rows as CSV, stripping any ANSI color codes."""
    writer = csv.writer(sys.stdout, lineterminator="\n")
    writer.writerow(headers)
    for row in rows:
        writer.writerow([ANSI_ESCAPE.sub("", str(cell)) for cell in row])


def confirm_action(message: str, default: bool = False) -> bool:
    """Ask the user to confirm an action."""
    return click.confirm(message, default=default)
