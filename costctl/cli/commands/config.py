"""Config command"""

import typer
from rich.console import Console
from rich.table import Table

from costctl.config import CLIConfig, ConfigManager

console = Console()
app = typer.Typer(help="Show and edit CLI configuration")

SECRET_KEYS = {"api_key"}

def _manager(ctx: typer.Context) -> ConfigManager:
    return ctx.obj if isinstance(ctx.obj, ConfigManager) else ConfigManager()

def _check_key(key: str) -> None:
    if key not in CLIConfig.keys():
        console.print(f"[red]Unknown config key: {key}[/red]")
        console.print(f"[dim]Valid keys: {', '.join(CLIConfig.keys())}[/dim]")
        raise typer.Exit(1)

def _display(key: str, value) -> str:
    if value is None:
        return "[dim]not set[/dim]"
    if key in SECRET_KEYS:
        return "*" * 8 + str(value)[-4:]
    return str(value)

@app.command()
def show(ctx: typer.Context) -> None:
    """Show all configuration values."""
    manager = _manager(ctx)
    config = manager.config

    table = Table(title=f"Configuration ({manager.path})")
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="white")
    for key in CLIConfig.keys():
        table.add_row(key, _display(key, getattr(config, key)))
    console.print(table)

@app.command()
def get(ctx: typer.Context, key: str = typer.Argument(..., help="Config key")) -> None:
    """Print a single configuration value."""
    _check_key(key)
    console.print(_display(key, _manager(ctx).get(key)))

@app.command("set")
def set_value(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Config key"),
    value: str = typer.Argument(..., help="New value"),
) -> None:
    """Set a configuration value."""
    _check_key(key)
    try:
        _manager(ctx).set(key, value)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]✓[/green] {key} updated")

@app.command()
def unset(ctx: typer.Context, key: str = typer.Argument(..., help="Config key")) -> None:
    """Reset a configuration value to its default."""
    _check_key(key)
    _manager(ctx).unset(key)
    console.print(f"[green]✓[/green] {key} reset")

@app.command()
def path(ctx: typer.Context) -> None:
    """Print the configuration file path."""
    console.print(str(_manager(ctx).path))
