"""Console helpers shared by all tool CLIs."""

import functools
import sys
from typing import Callable, Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from shared.logger import get_logger

console = Console()
err_console = Console(stderr=True)


def info(message: str) -> None:
    """Print an informational message."""
    console.print(message)


def success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]{message}[/yellow]")


def error(message: str) -> None:
    """Print an error message to stderr."""
    err_console.print(f"[bold red]{message}[/bold red]")


def literal(text: str) -> str:
    """Escape text so square brackets are printed instead of read as markup."""
    return escape(text)


def create_table(title: Optional[str] = None) -> Table:
    """Create a table with the common look."""
    return Table(title=title, show_header=True, header_style="bold")


def print_table(table: Table) -> None:
    console.print(table)


def handle_errors(func: Callable) -> Callable:
    """
    Turn uncaught exceptions of a command into an error message and exit code.

    KeyboardInterrupt exits with 130. click's own exceptions pass through so
    usage errors keep their formatting.
    """

    # Log under the command's own module so the tool's --verbose setup applies
    logger = get_logger(func.__module__)

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt:
            error("Interrupted")
            sys.exit(130)
        except (click.ClickException, click.Abort, click.exceptions.Exit):
            raise
        except Exception as e:
            logger.debug("Unhandled error", exc_info=True)
            error(f"Error: {literal(str(e))}")
            sys.exit(1)

    return wrapper
