"""Main CLI application for Repoverse."""

from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from repoverse import __version__
from repoverse.cli import sync as sync_cmd
from repoverse.cli.common import ConfigFileOption, console, load_config_or_exit
from repoverse.config import get_settings
from repoverse.logging import setup_logging

app = typer.Typer(
    name="repoverse",
    help="Keep a shared directory in sync across GitHub repositories.",
    add_completion=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"repoverse version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable debug logging.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-error output (WARNING level).",
        ),
    ] = False,
) -> None:
    """Repoverse - propagate directory changes as pull requests."""
    settings = get_settings()
    log_config = settings.logging

    setup_logging(
        level=settings.log_level,
        verbose=verbose,
        quiet=quiet,
        log_file=Path(log_config.log_file) if log_config.log_file else None,
        rotation=log_config.rotation,
        retention=log_config.retention,
        serialize=log_config.serialize,
    )


@app.command("config")
def show_config(config_file: ConfigFileOption = None) -> None:
    """Validate the sync configuration and list its repositories."""
    config = load_config_or_exit(config_file)

    table = Table(title=f"Sync branch prefix: {config.sync_branch_prefix}")
    table.add_column("Repository", style="cyan")
    table.add_column("Path")
    table.add_column("Base Branch")
    table.add_column("Reviewers")

    for repo in config.repositories:
        table.add_row(repo.full_name, repo.path, repo.branch, ", ".join(repo.reviewers))

    console.print(table)


app.add_typer(sync_cmd.app, name="sync")


if __name__ == "__main__":
    app()
