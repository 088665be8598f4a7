"""Rich-powered console output and logging for codefetch.

Status output goes to stderr so the document itself can be piped from stdout.
"""

from __future__ import annotations

import logging

from rich.console import Console as RichConsole
from rich.logging import RichHandler
from rich.table import Table


class Console:
    """Terminal output for codefetch using Rich."""

    def __init__(self, stderr: bool = True) -> None:
        self.console = RichConsole(stderr=stderr)

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {message}")

    def error(self, message: str) -> None:
        self.console.print(f"[red]✗[/red] {message}")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]![/yellow] {message}")

    def info(self, message: str) -> None:
        self.console.print(f"[blue]i[/blue] {message}")

    def show_summary(self, stats: dict) -> None:
        """Display what went into the document."""
        table = Table(title="Summary", border_style="cyan")
        table.add_column("Metric", style="bold")
        table.add_column("Value", justify="right", style="cyan")

        table.add_row("Files", str(stats.get("files", 0)))
        table.add_row("Encoder", str(stats.get("encoder", "")))
        table.add_row("Tokens", f"{stats.get('tokens', 0):,}")
        max_tokens = stats.get("max_tokens")
        table.add_row("Token limit", f"{max_tokens:,}" if max_tokens else "none")
        if stats.get("output"):
            table.add_row("Output", str(stats["output"]))

        self.console.print(table)


def setup_logging(verbose: bool = False, console: Console | None = None) -> logging.Logger:
    """Route codefetch's loggers through a Rich handler on stderr."""
    level = logging.DEBUG if verbose else logging.WARNING
    rich_console = console.console if console else RichConsole(stderr=True)

    handler = RichHandler(console=rich_console, show_path=False, markup=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    handler.setLevel(level)

    logger = logging.getLogger("codefetch")
    logger.handlers.clear()
    logger.setLevel(level)
    logger.addHandler(handler)
    return logger
