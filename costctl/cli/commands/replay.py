"""Replay session command"""

import asyncio
import csv
import io
import json
from enum import Enum
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from costctl.config import ConfigManager, ConfigurationError
from costctl.replay import (
    FetchError,
    PlaybackController,
    PlaybackMode,
    PlaybackSpeed,
    ReplayOptions,
    SessionClient,
    SessionListing,
)
from costctl.replay.renderer import format_ms

console = Console()
app = typer.Typer(help="Replay recorded sessions step by step")

RULE = "━" * 51


class OutputFormat(str, Enum):
    TABLE = "table"
    JSON = "json"
    CSV = "csv"


def _config_manager(ctx: typer.Context) -> ConfigManager:
    if isinstance(ctx.obj, ConfigManager):
        return ctx.obj
    return ConfigManager()


def _print_config_missing(error: ConfigurationError) -> None:
    console.print("\n[bold red]❌ Configuration Missing[/bold red]")
    console.print(f"[dim]{RULE}[/dim]")
    if "api_key" in error.missing:
        console.print("[yellow]• API Key is not set[/yellow]")
    if "base_url" in error.missing:
        console.print("[yellow]• Base URL is not set[/yellow]")
    console.print(f"[dim]{RULE}[/dim]")
    console.print("[cyan]To set up your configuration, run:[/cyan]")
    console.print("  costctl init\n")


def _client(ctx: typer.Context) -> SessionClient:
    try:
        config = _config_manager(ctx).require_api()
    except ConfigurationError as e:
        _print_config_missing(e)
        raise typer.Exit(1)
    return SessionClient(config.base_url, config.api_key)


def _status_markup(status: str) -> str:
    color = "green" if status == "completed" else "yellow"
    return f"[{color}]{escape(status)}[/{color}]"


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    """Replay full conversations and step through agent logic."""
    if ctx.invoked_subcommand is not None:
        return

    console.print("\n[bold cyan]🔄 Session Replay & Conversation Analysis[/bold cyan]")
    console.print(f"[dim]{RULE}[/dim]")
    console.print("[yellow]Available commands:[/yellow]")
    console.print("  costctl replay-session id <sessionId>         Replay specific session")
    console.print("  costctl replay-session workflow <workflowId>  List workflow sessions")
    console.print("  costctl replay-session recent                 Show recent sessions")

    console.print("\n[dim]Examples:[/dim]")
    console.print("  costctl replay-session id session-1234")
    console.print("  costctl replay-session id session-1234 --mode step")
    console.print("  costctl replay-session workflow workflow-98765")
    console.print("  costctl replay-session recent --number 5")

    console.print("\n[dim]Playback Modes:[/dim]")
    console.print("  • cli - Auto-play every message, then show the summary")
    console.print("  • step - Interactive step-through mode")
    console.print("  • webview - Not yet implemented, falls back to cli")
    console.print(f"[dim]{RULE}[/dim]")


@app.command("id")
def replay_by_id(
    ctx: typer.Context,
    session_id: str = typer.Argument(..., help="Session ID to replay"),
    mode: PlaybackMode = typer.Option(PlaybackMode.CLI, help="Playback mode"),
    speed: PlaybackSpeed = typer.Option(PlaybackSpeed.NORMAL, help="Auto-play speed"),
    include_cache: bool = typer.Option(False, "--include-cache", help="Show cache usage vs live calls"),
    include_feedback: bool = typer.Option(False, "--include-feedback", help="Show feedback tags per message"),
    include_policy_intervention: bool = typer.Option(
        False, "--include-policy-intervention", help="Show policy intervention points"
    ),
    auto_play: bool = typer.Option(False, "--auto-play", help="Play without pausing between messages"),
    export: Optional[Path] = typer.Option(None, help="Export the session record to a JSON file"),
) -> None:
    """Replay a specific session by ID."""

    client = _client(ctx)
    try:
        record = asyncio.run(
            client.fetch_session(
                session_id,
                include_cache=include_cache,
                include_feedback=include_feedback,
                include_policy_intervention=include_policy_intervention,
            )
        )
    except FetchError as e:
        console.print(f"[red]Failed to replay session {escape(session_id)}: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    if export:
        export.parent.mkdir(parents=True, exist_ok=True)
        with open(export, "w") as f:
            json.dump(record.to_export(), f, indent=2)
        console.print(f"[green]Exported session to {export}[/green]")

    options = ReplayOptions(
        mode=mode,
        speed=speed,
        include_cache=include_cache,
        include_feedback=include_feedback,
        include_policy_intervention=include_policy_intervention,
        auto_play=auto_play,
        project=_config_manager(ctx).config.current_project,
    )
    PlaybackController(record, options, console=console).run()


@app.command()
def workflow(
    ctx: typer.Context,
    workflow_id: str = typer.Argument(..., help="Workflow ID"),
) -> None:
    """List the sessions recorded for a workflow."""

    client = _client(ctx)
    try:
        sessions = asyncio.run(client.fetch_workflow_sessions(workflow_id))
    except FetchError as e:
        console.print(f"[red]Failed to fetch workflow sessions: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    if not sessions:
        console.print("[yellow]No sessions found for this workflow.[/yellow]")
        return

    console.print(_sessions_table(sessions, title=f"🔄 Workflow Sessions: {escape(workflow_id)}"))
    console.print("\n[dim]To replay a specific session:[/dim]")
    console.print("  costctl replay-session id <sessionId>")


@app.command()
def recent(
    ctx: typer.Context,
    number: int = typer.Option(10, "--number", "-n", min=1, help="Number of recent sessions to show"),
    output_format: OutputFormat = typer.Option(OutputFormat.TABLE, "--format", help="Output format"),
    export: Optional[Path] = typer.Option(None, help="Export the session list to a file"),
) -> None:
    """Show recent sessions available for replay."""

    client = _client(ctx)
    try:
        sessions = asyncio.run(client.fetch_recent_sessions(number))
    except FetchError as e:
        console.print(f"[red]Failed to fetch recent sessions: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    if export:
        text = sessions_csv(sessions) if output_format is OutputFormat.CSV else sessions_json(sessions)
        export.parent.mkdir(parents=True, exist_ok=True)
        with open(export, "w") as f:
            f.write(text)
        console.print(f"[green]Exported {len(sessions)} sessions to {export}[/green]")
        return

    if output_format is OutputFormat.JSON:
        console.print_json(sessions_json(sessions))
        return
    if output_format is OutputFormat.CSV:
        console.print(sessions_csv(sessions), markup=False, highlight=False, end="")
        return

    if not sessions:
        console.print("[yellow]No recent sessions found.[/yellow]")
        return

    console.print(_sessions_table(sessions, title="📋 Recent Sessions"))
    console.print("\n[yellow]💡 Commands:[/yellow]")
    console.print("  • Replay session: costctl replay-session id <sessionId>")
    console.print("  • Step mode: costctl replay-session id <sessionId> --mode step")
    console.print("  • With cache info: costctl replay-session id <sessionId> --include-cache")


def _sessions_table(sessions: List[SessionListing], title: str) -> Table:
    table = Table(title=title)
    table.add_column("#", style="dim")
    table.add_column("Session ID", style="cyan")
    table.add_column("Workflow", style="blue")
    table.add_column("Created", style="white")
    table.add_column("Duration", style="white")
    table.add_column("Cost", style="green")
    table.add_column("Status", style="bold")
    table.add_column("Messages", style="magenta")

    for i, session in enumerate(sessions, 1):
        table.add_row(
            str(i),
            escape(session.session_id),
            escape(session.workflow_id or "N/A"),
            escape(session.created_at),
            format_ms(session.duration),
            f"${session.total_cost:.4f}",
            _status_markup(session.status),
            str(session.message_count),
        )
    return table


def sessions_json(sessions: List[SessionListing]) -> str:
    return json.dumps(
        [s.model_dump(mode="json", by_alias=True) for s in sessions], indent=2
    )


def sessions_csv(sessions: List[SessionListing]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(["Session ID", "Workflow ID", "Created", "Duration", "Cost", "Status", "Messages"])
    for s in sessions:
        writer.writerow([
            s.session_id,
            s.workflow_id or "N/A",
            s.created_at,
            s.duration,
            s.total_cost,
            s.status,
            s.message_count,
        ])
    return buffer.getvalue()
