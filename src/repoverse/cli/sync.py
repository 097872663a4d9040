"""Sync commands for Repoverse."""

import json
import sys
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.table import Table

from repoverse.cli.common import (
    ConfigFileOption,
    OutputFormatOption,
    console,
    load_config_or_exit,
    run_async_command,
)
from repoverse.schemas import PushEvent
from repoverse.sync import OutputFormat, Repoverse, SyncRunResult, TargetSyncStatus

app = typer.Typer(help="Sync commits across repositories")

_STATUS_STYLES = {
    TargetSyncStatus.PENDING: "dim",
    TargetSyncStatus.SYNCED: "green",
    TargetSyncStatus.SKIPPED_SOURCE: "dim",
    TargetSyncStatus.SKIPPED_EMPTY: "yellow",
    TargetSyncStatus.FAILED: "red",
}


def _read_push_event(event_file: str) -> PushEvent:
    """Parse a push event payload from a file path or "-" for stdin.

    Raises:
        typer.Exit(1): If the file is missing or not a valid push payload
    """
    try:
        if event_file == "-":
            raw = sys.stdin.read()
        else:
            raw = Path(event_file).read_text(encoding="utf-8")
        return PushEvent.model_validate_json(raw)
    except OSError as e:
        console.print(f"[red]Error:[/red] Cannot read event file: {e}")
        raise typer.Exit(1) from None
    except ValidationError as e:
        console.print(f"[red]Error:[/red] Invalid push event payload: {e}")
        raise typer.Exit(1) from None


def _print_result(result: SyncRunResult) -> None:
    """Render a sync result as a rich table."""
    console.print(
        f"[bold]Synced {len(result.commit_ids)} commit(s)[/bold] from {result.source} "
        f"on branch [cyan]{result.branch_name}[/cyan]"
    )

    table = Table(title="Targets")
    table.add_column("Repository", style="cyan")
    table.add_column("Status")
    table.add_column("Written", justify="right")
    table.add_column("Deleted", justify="right")
    table.add_column("Pull Request / Error", max_width=60)

    for target in result.target_results:
        style = _STATUS_STYLES[target.status]
        detail = str(target.error) if target.error else (target.pull_request_url or "")
        table.add_row(
            target.repository,
            f"[{style}]{target.status.value}[/{style}]",
            str(target.files_written),
            str(target.files_deleted),
            detail,
        )

    console.print(table)


@app.command("push")
def sync_push(
    event_file: Annotated[
        str,
        typer.Argument(
            help="GitHub push event JSON file (e.g., $GITHUB_EVENT_PATH), or '-' for stdin",
        ),
    ],
    source: Annotated[
        str | None,
        typer.Option(
            "--source",
            "-s",
            help="Source repository (owner/repo). Defaults to the event's repository.",
        ),
    ] = None,
    config_file: ConfigFileOption = None,
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Propagate the commits of a push event to every other configured repository.

    Examples:
        repoverse sync push $GITHUB_EVENT_PATH
        repoverse sync push event.json --source acme/models --format json
        cat event.json | repoverse -v sync push -
    """
    config = load_config_or_exit(config_file)
    event = _read_push_event(event_file)
    source_repo = source or event.repository.full_name

    async def _sync() -> SyncRunResult:
        async with Repoverse(config) as engine:
            return await engine.synchronize(source_repo, event.commits, raise_on_failure=False)

    result = run_async_command(_sync(), error_prefix="Sync failed")

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(result.to_dict()))
    else:
        _print_result(result)

    if result.targets_failed:
        raise typer.Exit(1)
