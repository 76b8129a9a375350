"""
Main CLI entry point for costctl
"""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.traceback import install

from costctl.config import ConfigManager

# Install rich traceback handler
install(show_locals=True)

# Initialize console for rich output
console = Console()

# Main app
app = typer.Typer(
    name="costctl",
    help="Cost observability and session replay for LLM applications",
    rich_markup_mode="rich",
    no_args_is_help=True,
)

# Import subcommands
from .commands import (
    config,
    init,
    replay,
)

# Add subcommands
app.add_typer(init.app, name="init", help="Set up API key and base URL")
app.add_typer(config.app, name="config", help="Show and edit CLI configuration")
app.add_typer(replay.app, name="replay-session", help="Replay recorded sessions step by step")

LOG_LEVELS = ("debug", "info", "warning", "error")

# Global options
@app.callback()
def main(
    ctx: typer.Context,
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file path (TOML)",
        file_okay=True,
        dir_okay=False,
    ),
    log_level: str = typer.Option(
        "warning",
        "--log-level",
        help="Log level (debug, info, warning, error)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output",
    ),
) -> None:
    """
    Cost observability and session replay for LLM applications

    Fetch recorded sessions from the cost API and walk through them message
    by message, with cache, feedback and policy intervention annotations.
    """
    if log_level.lower() not in LOG_LEVELS:
        raise typer.BadParameter(f"choose from {', '.join(LOG_LEVELS)}", param_hint="--log-level")
    if verbose and log_level.lower() == "warning":
        log_level = "info"

    logging.basicConfig(
        format='%(asctime)s - %(levelname)s - %(name)s - %(message)s',
        level=getattr(logging, log_level.upper()),
    )

    ctx.obj = ConfigManager(config_path)
    if verbose:
        console.print(f"[dim]Config file: {ctx.obj.path}[/dim]")

if __name__ == "__main__":
    app()
