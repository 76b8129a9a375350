"""
Initialize command - set up API access for the CLI
"""

import typer
from rich.console import Console
from rich.prompt import Prompt, Confirm
from typing import Optional

from costctl.config import ConfigManager, DEFAULT_BASE_URL

console = Console()
app = typer.Typer(help="Set up API key and base URL")

def _mask(secret: str) -> str:
    if len(secret) <= 8:
        return "*" * len(secret)
    return f"{secret[:4]}...{secret[-4:]}"

@app.command()
def setup(
    ctx: typer.Context,
    api_key: Optional[str] = typer.Option(None, help="API key (prompted if omitted)"),
    base_url: Optional[str] = typer.Option(None, help="API base URL"),
    project: Optional[str] = typer.Option(None, help="Current project to show in replays"),
    force: bool = typer.Option(False, "--force", help="Overwrite existing settings without asking"),
) -> None:
    """Write API key, base URL and project to the config file."""

    manager = ctx.obj if isinstance(ctx.obj, ConfigManager) else ConfigManager()
    current = manager.config

    if current.api_key and not force and api_key is None:
        if not Confirm.ask(f"API key {_mask(current.api_key)} is already set. Replace it?"):
            raise typer.Abort()

    if api_key is None:
        api_key = Prompt.ask("API key", password=True)
    if base_url is None:
        base_url = Prompt.ask("Base URL", default=current.base_url or DEFAULT_BASE_URL)

    api_key = api_key.strip()
    if not api_key:
        console.print("[red]API key cannot be empty[/red]")
        raise typer.Exit(1)

    manager.set("api_key", api_key)
    manager.set("base_url", base_url.strip())
    if project:
        manager.set("current_project", project)

    console.print(f"\n[bold green]✅ Configuration saved to {manager.path}[/bold green]")
    console.print(f"[blue]Base URL: {base_url}[/blue]")
    console.print(f"[blue]API key: {_mask(api_key)}[/blue]")
    console.print(f"\n[yellow]Next steps:[/yellow]")
    console.print("1. costctl replay-session recent")
    console.print("2. costctl replay-session id <sessionId> --mode step")

# Make setup the default command
@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    """Set up API key and base URL."""
    if ctx.invoked_subcommand is None:
        setup(ctx, api_key=None, base_url=None, project=None, force=False)
