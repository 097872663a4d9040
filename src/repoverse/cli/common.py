"""Common CLI option factories and helpers.

This module centralizes reusable CLI options and provides
`run_async_command` for unified async execution with error handling.
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from pathlib import Path
from typing import Annotated, TypeVar

import typer
from rich.console import Console

from repoverse.config import ConfigurationError, SyncConfig, load_sync_config
from repoverse.sync.enums import OutputFormat

# Shared console instance for CLI output
console = Console()

T = TypeVar("T")


def run_async_command(
    coro: Coroutine[object, object, T],
    *,
    error_prefix: str = "Error",
) -> T:
    """Execute async code from synchronous CLI command with unified error handling.

    Uses asyncio.run() for clean event loop management. Catches exceptions,
    prints user-friendly error messages, and exits with code 1.

    Args:
        coro: Async coroutine to execute
        error_prefix: Prefix for error messages (default: "Error")

    Returns:
        Result from the coroutine

    Raises:
        typer.Exit: Re-raised from deliberate exits, or raised with code 1 on error
    """
    try:
        return asyncio.run(coro)
    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]{error_prefix}:[/red] {e}")
        raise typer.Exit(1) from None


def load_config_or_exit(path: Path | None) -> SyncConfig:
    """Load the sync configuration, exiting with code 1 when it is unusable."""
    try:
        return load_sync_config(path)
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None


# Typer requires function calls as default arguments, which triggers B008.
# Using Annotated with a centralized type alias keeps the noqa in one place.

OutputFormatOption = Annotated[
    OutputFormat,
    typer.Option(
        "--format",
        "-f",
        help="Output format",
    ),
]
"""Output format option type for CLI commands.

Usage:
    def command(output_format: OutputFormatOption = OutputFormat.TEXT):
"""

ConfigFileOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Sync configuration JSON. Defaults to CONFIG_FILE or ./repoverse.json.",
        dir_okay=False,
    ),
]
"""Sync configuration path override.

Usage:
    def command(config_file: ConfigFileOption = None):
"""
