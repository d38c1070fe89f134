"""Command-line interface for the market info monitor."""

import logging
import time
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from .config.database import ChannelDirectory
from .config.settings import Settings
from .core.diff import DiffOptions, build_digest
from .core.fetcher import CatalogFetcher
from .core.monitor import CatalogMonitor
from .exceptions import FetchError
from .models.destination import Destination
from .models.package import resolve_description
from .utils.logger import setup_logger
from .utils.platform import get_config_dir

app = typer.Typer(help="Plugin market update notifier")
console = Console()


def config_option():
    """Shared --config option."""
    return typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration file"
    )


def get_settings(config_path: Optional[Path] = None) -> Settings:
    """Load settings from file or defaults."""
    return Settings.from_file_or_default(config_path)


def get_config_path(config_path: Optional[Path] = None) -> Path:
    return config_path or get_config_dir() / 'config.yaml'


def load_settings_for_edit(config_path: Path) -> Settings:
    """Load settings that are about to be written back.

    Unlike get_settings, an invalid file is an error instead of a silent
    fallback to defaults, so saving never clobbers a broken config.
    """
    return Settings.load(config_path)


def get_directory(settings: Settings) -> ChannelDirectory:
    """Get channel directory."""
    return ChannelDirectory(settings.database.path)


def get_fetcher(settings: Settings, logger: logging.Logger) -> CatalogFetcher:
    """Get catalog fetcher for a one-off command."""
    return CatalogFetcher(
        logger=logger,
        endpoint=settings.market.endpoint,
        show_hidden=settings.market.show_hidden,
        timeout=settings.market.timeout,
        retries=settings.market.retries
    )


@app.command()
def start(config: Optional[Path] = config_option()):
    """Start the monitoring service."""
    console.print("[cyan]Starting market info monitor service...[/cyan]")

    # Import here to keep CLI startup light
    from .service import MarketInfoService

    try:
        service = MarketInfoService(config_path=config)
        service.start()
    except KeyboardInterrupt:
        console.print("\n[yellow]Service stopped by user[/yellow]")
    except Exception as e:
        console.print(f"[red]Service error: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def market(
    name: Optional[str] = typer.Argument(None, help="Package name to show"),
    config: Optional[Path] = config_option()
):
    """Show the number of packages on the market, or one package in detail.

    The CLI runs outside the service, so this reads a fresh fetch rather
    than the service's stored snapshot.
    """
    settings = get_settings(config)
    logger = setup_logger(log_file=None, level="WARNING", console=True)
    fetcher = get_fetcher(settings, logger)

    try:
        snapshot = fetcher.fetch()
    except FetchError as e:
        console.print(f"[red]Failed to fetch market: {e}[/red]")
        raise typer.Exit(1)

    if not name:
        count = sum(1 for _ in snapshot.visible())
        console.print(f"The market currently lists [bold]{count}[/bold] plugin(s).")
        return

    entry = snapshot.get(name)
    if entry is None:
        console.print(f"[yellow]Plugin {name} not found[/yellow]")
        raise typer.Exit(1)

    table = Table(title=entry.name, show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Version", entry.version)
    table.add_row("Publisher", f"@{entry.publisher}" if entry.publisher else "Unknown")
    table.add_row("Description", resolve_description(entry.description) or "")
    if entry.hidden:
        table.add_row("Hidden", "yes")
    console.print(table)


@app.command(name="check-now")
def check_now(
    wait: float = typer.Option(60.0, "--wait", "-w", min=0, help="Seconds between the two fetches"),
    config: Optional[Path] = config_option()
):
    """Fetch the market twice and print the digest of the changes in between.

    Nothing is dispatched.
    """
    settings = get_settings(config)
    logger = setup_logger(log_file=None, level="WARNING", console=True)
    monitor = CatalogMonitor(
        fetcher=get_fetcher(settings, logger),
        logger=logger,
        options=DiffOptions(
            show_deletion=settings.market.show_deletion,
            show_publisher=settings.market.show_publisher,
            show_description=settings.market.show_description
        )
    )

    try:
        snapshot = monitor.seed()
        console.print(f"Fetched {len(snapshot)} plugin(s), checking again in {wait:g}s...")
        time.sleep(wait)
        lines = monitor.check()
    except FetchError as e:
        console.print(f"[red]Failed to fetch market: {e}[/red]")
        raise typer.Exit(1)

    if not lines:
        console.print("[green]No catalog changes[/green]")
        return

    # Digest lines are plain text; "[...]" must not be read as markup
    console.print(build_digest(lines), markup=False, highlight=False)


@app.command(name="add-rule")
def add_rule(
    platform: str = typer.Argument(..., help="Platform name"),
    channel_id: str = typer.Argument(..., help="Channel ID"),
    self_id: Optional[str] = typer.Option(None, "--self-id", help="Bot ID (resolved from the channel directory if omitted)"),
    guild_id: Optional[str] = typer.Option(None, "--guild-id", help="Group/guild ID"),
    config: Optional[Path] = config_option()
):
    """Add a push destination."""
    config_path = get_config_path(config)

    try:
        settings = load_settings_for_edit(config_path)
        rule = Destination(platform=platform, channel_id=channel_id, self_id=self_id, guild_id=guild_id)
    except (TypeError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if any(r.platform == platform and r.channel_id == channel_id for r in settings.dispatch.rules):
        console.print(f"[yellow]{rule.label} is already a destination[/yellow]")
        return

    settings.dispatch.rules.append(rule)
    settings.save(config_path)
    console.print(f"[green]Added destination {rule.label}[/green]")
    console.print("A running service picks this up after restart")


@app.command(name="remove-rule")
def remove_rule(
    platform: str = typer.Argument(..., help="Platform name"),
    channel_id: str = typer.Argument(..., help="Channel ID"),
    config: Optional[Path] = config_option()
):
    """Remove a push destination."""
    config_path = get_config_path(config)

    try:
        settings = load_settings_for_edit(config_path)
    except (TypeError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    remaining = [
        r for r in settings.dispatch.rules
        if not (r.platform == platform and r.channel_id == channel_id)
    ]
    if len(remaining) == len(settings.dispatch.rules):
        console.print(f"[red]{platform}:{channel_id} is not a destination[/red]")
        raise typer.Exit(1)

    settings.dispatch.rules = remaining
    settings.save(config_path)
    console.print(f"[green]Removed destination {platform}:{channel_id}[/green]")


@app.command(name="list-rules")
def list_rules(config: Optional[Path] = config_option()):
    """List push destinations in delivery order."""
    settings = get_settings(config)

    if not settings.dispatch.rules:
        console.print("[yellow]No destinations configured[/yellow]")
        console.print("\nUse 'add-rule' command to add destinations")
        return

    table = Table(title="Destinations")
    table.add_column("#", justify="right")
    table.add_column("Platform", style="cyan")
    table.add_column("Channel", style="green")
    table.add_column("Bot")
    table.add_column("Guild")

    for index, rule in enumerate(settings.dispatch.rules, start=1):
        table.add_row(
            str(index),
            rule.platform,
            rule.channel_id,
            rule.self_id or "[dim]directory[/dim]",
            rule.guild_id or ""
        )

    console.print(table)


@app.command(name="assign-channel")
def assign_channel(
    platform: str = typer.Argument(..., help="Platform name"),
    channel_id: str = typer.Argument(..., help="Channel ID"),
    assignee: str = typer.Argument(..., help="Bot ID that serves the channel"),
    guild_id: Optional[str] = typer.Option(None, "--guild-id", help="Group/guild ID"),
    config: Optional[Path] = config_option()
):
    """Assign a bot to a channel in the channel directory."""
    settings = get_settings(config)
    directory = get_directory(settings)

    directory.assign_channel(platform, channel_id, assignee, guild_id)
    console.print(f"[green]{platform}:{channel_id} is now served by {assignee}[/green]")


@app.command(name="unassign-channel")
def unassign_channel(
    platform: str = typer.Argument(..., help="Platform name"),
    channel_id: str = typer.Argument(..., help="Channel ID"),
    config: Optional[Path] = config_option()
):
    """Remove a channel from the channel directory."""
    settings = get_settings(config)
    directory = get_directory(settings)

    if directory.unassign_channel(platform, channel_id):
        console.print(f"[green]Removed assignment of {platform}:{channel_id}[/green]")
    else:
        console.print(f"[yellow]{platform}:{channel_id} has no assignment[/yellow]")


@app.command(name="list-channels")
def list_channels(config: Optional[Path] = config_option()):
    """List channel assignments."""
    settings = get_settings(config)
    directory = get_directory(settings)

    channels = directory.list_channels()
    if not channels:
        console.print("[yellow]No channels assigned[/yellow]")
        return

    table = Table(title="Channel Directory")
    table.add_column("Platform", style="cyan")
    table.add_column("Channel", style="green")
    table.add_column("Assignee")
    table.add_column("Guild")

    for channel in channels:
        table.add_row(channel.platform, channel.channel_id, channel.assignee, channel.guild_id or "")

    console.print(table)


@app.command()
def status(config: Optional[Path] = config_option()):
    """Show configuration summary."""
    settings = get_settings(config)
    directory = get_directory(settings)

    console.print("[cyan]Market Info Monitor Status[/cyan]\n")

    console.print(f"Config directory: {get_config_dir()}")
    console.print(f"Database: {settings.database.path}")
    console.print(f"Log file: {settings.logging.path}\n")

    console.print("[bold]Market:[/bold]")
    console.print(f"  Endpoint: {settings.market.endpoint}")
    console.print(f"  Interval: {settings.scheduler.interval} ms")
    console.print(f"  Hidden: {settings.market.show_hidden}")
    console.print(f"  Deletions: {settings.market.show_deletion}")
    console.print(f"  Publisher: {settings.market.show_publisher}")
    console.print(f"  Description: {settings.market.show_description}\n")

    console.print("[bold]Delivery:[/bold]")
    console.print(f"  Destinations: {len(settings.dispatch.rules)}")
    console.print(f"  Delay: {settings.dispatch.delay} ms")
    console.print(f"  Bots: {len(settings.bots)}")
    console.print(f"  Assigned channels: {len(directory.list_channels())}")


@app.command()
def init_config(
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output path for config file"
    )
):
    """Initialize a configuration file with defaults."""
    if output is None:
        output = get_config_dir() / 'config.yaml'

    if output.exists():
        overwrite = typer.confirm(
            f"Config file already exists at {output}. Overwrite?",
            default=False
        )
        if not overwrite:
            console.print("[yellow]Cancelled[/yellow]")
            return

    settings = Settings()
    settings.save(output)

    console.print(f"[green]Configuration file created: {output}[/green]")
    console.print("\nEdit this file to add bots and destinations")


if __name__ == "__main__":
    app()
