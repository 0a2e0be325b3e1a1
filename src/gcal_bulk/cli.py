"""
Command-line interface for gcal-bulk.
"""

import logging
from dataclasses import dataclass
from dataclasses import field
from datetime import datetime
from pathlib import Path
from typing import Annotated
from zoneinfo import ZoneInfo

import typer
from dateutil.parser import isoparse
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from gcal_bulk.config import load_config
from gcal_bulk.models import DEFAULT_CONFIG
from gcal_bulk.models import BulkConfig
from gcal_bulk.models import BulkOperationError
from gcal_bulk.models import CalendarBulkError
from gcal_bulk.models import ConfigError
from gcal_bulk.models import Rule
from gcal_bulk.models import RunStats

# ---------------------------------------------------------------------------
# Typer app
# ---------------------------------------------------------------------------

app = typer.Typer(
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="Bulk recolor, delete or copy Google Calendar events by title rules.",
)

console = Console()


# ---------------------------------------------------------------------------
# Global state shared across subcommands
# ---------------------------------------------------------------------------


@dataclass
class _State:
    config_path: Path = field(default_factory=lambda: DEFAULT_CONFIG)
    verbose: bool = False


state = _State()


@app.callback()
def _global(
    config: Annotated[
        Path,
        typer.Option("--config", "-c", help=f"Config file path (default: {DEFAULT_CONFIG})"),
    ] = DEFAULT_CONFIG,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose debug output"),
    ] = False,
) -> None:
    state.config_path = config
    state.verbose = verbose
    _setup_logging(verbose)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False, console=console)],
    )
    # googleapiclient logs every discovery/HTTP detail at INFO.
    logging.getLogger("googleapiclient").setLevel(logging.WARNING)


def parse_when(value: str, time_zone: str | None = None) -> datetime:
    """Parse an ISO date or date-time; naive values get ``time_zone`` or the local zone."""
    try:
        parsed = isoparse(value)
    except ValueError as e:
        raise ConfigError(f"Invalid date: {value!r}") from e
    if parsed.tzinfo is not None:
        return parsed
    if time_zone:
        return parsed.replace(tzinfo=ZoneInfo(time_zone))
    return parsed.astimezone()


def _load(calendar: str | None = None) -> BulkConfig:
    try:
        return load_config(state.config_path, calendar_id=calendar, verbose=state.verbose)
    except ConfigError as e:
        console.print(f"[bold red]Configuration error:[/] {e}")
        raise typer.Exit(1) from None


def _connect(cfg: BulkConfig):
    from gcal_bulk.google_client import GoogleCalendarStore
    from gcal_bulk.preflight import run_preflight_checks

    if not run_preflight_checks(cfg, console):
        raise typer.Exit(1)
    try:
        return GoogleCalendarStore.connect(cfg)
    except CalendarBulkError as e:
        console.print(f"[bold red]Authorization failed:[/] {e}")
        raise typer.Exit(1) from None


def _results_panel(mode: str, stats: RunStats, failed: bool = False) -> Panel:
    results = Table.grid(padding=(0, 2))
    results.add_column(style="bold")
    results.add_column(justify="right")
    if mode == "copy":
        results.add_row("Created", str(stats.created))
        results.add_row("Skipped (duplicates)", str(stats.skipped))
    elif mode == "delete":
        results.add_row("Deleted", str(stats.deleted))
    else:
        results.add_row("Updated", str(stats.updated))
        results.add_row("Already correct", str(stats.unchanged))
        results.add_row("No rule", str(stats.unmatched))
    status = Text("aborted", style="bold red") if failed else Text("done ✓", style="green")
    results.add_row("Status", status)
    return Panel(results, title="[bold]Results[/bold]", expand=False)


# ---------------------------------------------------------------------------
# Subcommand: run
# ---------------------------------------------------------------------------


@app.command()
def run(
    start: Annotated[str, typer.Argument(help="Window start (ISO date or date-time)")],
    end: Annotated[str, typer.Argument(help="Window end, exclusive (ISO date or date-time)")],
    delete: Annotated[
        bool, typer.Option("--delete", help="Delete events matching a delete rule")
    ] = False,
    copy_to: Annotated[
        str | None,
        typer.Option(
            "--copy-to",
            "--copyTo",
            help="Copy the window so that it starts at this date",
        ),
    ] = None,
    calendar: Annotated[
        str | None,
        typer.Option("--calendar", help="Calendar ID (overrides config)"),
    ] = None,
) -> None:
    """Recolor events in a window (default), or delete / copy them.

    Example: [cyan]gcal-bulk run 2025-09-01 2025-09-14 --copy-to 2025-09-14[/]
    """
    from gcal_bulk.ops import BulkOperationRunner

    if delete and copy_to is not None:
        console.print("[bold red]Error:[/] Cannot use --delete and --copy-to together in one run.")
        raise typer.Exit(1)

    cfg = _load(calendar)

    try:
        window_start = parse_when(start, cfg.time_zone)
        window_end = parse_when(end, cfg.time_zone)
        target_start = parse_when(copy_to, cfg.time_zone) if copy_to is not None else None
    except ConfigError as e:
        console.print(f"[bold red]Error:[/] {e}")
        raise typer.Exit(1) from None

    if window_end <= window_start:
        console.print("[bold red]Error:[/] End must be after start.")
        raise typer.Exit(1)

    mode = "copy" if target_start is not None else "delete" if delete else "recolor"

    if target_start is not None and target_start == window_start:
        console.print("[yellow]Copy target equals the window start; nothing to shift.[/]")
        return

    store = _connect(cfg)

    # -- Info panel ----------------------------------------------------------
    from gcal_bulk.google_client import get_calendar_display_info

    cal_name, cal_tz = get_calendar_display_info(store, cfg.calendar_id)
    op_line = {
        "recolor": Text("RECOLOR", style="bold green"),
        "delete": Text("DELETE (no confirmation)", style="bold red"),
        "copy": Text("COPY", style="bold yellow"),
    }[mode]

    info = Text()
    info.append("  Calendar:  ", style="bold")
    info.append(f"{cal_name}\n")
    info.append(f"             {cfg.calendar_id}\n", style="dim")
    info.append("  Window:    ", style="bold")
    info.append(f"{window_start.isoformat()} .. {window_end.isoformat()}\n")
    if target_start is not None:
        info.append("  Copy to:   ", style="bold")
        info.append(f"{target_start.isoformat()}\n")
    info.append("  Time zone: ", style="bold")
    info.append(f"{cfg.time_zone or cal_tz or 'calendar default'}\n")
    info.append("  Operation: ")
    info.append_text(op_line)
    console.print(Panel(info, title="[bold]gcal-bulk[/bold]"))

    # -- Run -----------------------------------------------------------------
    runner = BulkOperationRunner(cfg, store)

    try:
        if mode == "copy":
            stats = runner.copy(window_start, window_end, target_start)
        elif mode == "delete":
            stats = runner.delete(window_start, window_end)
        else:
            stats = runner.recolor(window_start, window_end)
    except BulkOperationError as e:
        console.print(f"[bold red]Run failed:[/] {e}")
        console.print(_results_panel(mode, e.stats, failed=True))
        raise typer.Exit(1) from None
    except ConfigError as e:
        console.print(f"[bold red]Configuration error:[/] {e}")
        raise typer.Exit(1) from None
    except KeyboardInterrupt:
        console.print("[yellow]Interrupted by user[/]")
        console.print(_results_panel(mode, runner.stats, failed=True))
        raise typer.Exit(130) from None

    console.print(_results_panel(mode, stats))


# ---------------------------------------------------------------------------
# Subcommand: rules
# ---------------------------------------------------------------------------


def _rules_table(rules: list[Rule], with_color: bool) -> Table:
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("#", style="bold", justify="right", width=3)
    table.add_column("Name")
    table.add_column("Match")
    table.add_column("Pattern", overflow="fold")
    if with_color:
        table.add_column("Color")
    for i, rule in enumerate(rules, 1):
        match_cell = Text(rule.match_type)
        if rule.kind is None:
            match_cell.stylize("bold red")
        row = [str(i), rule.name, match_cell, rule.pattern]
        if with_color:
            row.append(rule.color_id or Text("(none)", style="dim"))
        table.add_row(*row)
    return table


@app.command()
def rules() -> None:
    """Show configuration and the color / delete rules in evaluation order."""
    cfg = _load()
    config_exists = state.config_path.exists()

    info = Text()
    info.append("  Config:    ", style="bold")
    info.append(str(state.config_path) + " ")
    info.append("✓" if config_exists else "(not found)", style="green" if config_exists else "red")
    info.append("\n  Calendar:  ", style="bold")
    info.append(cfg.calendar_id)
    info.append("\n  Time zone: ", style="bold")
    info.append(cfg.time_zone or "calendar default")
    info.append("\n  Token:     ", style="bold")
    info.append(str(cfg.token_file), style="dim")
    console.print(Panel(info, title="[bold]gcal-bulk — Configuration[/bold]"))

    if cfg.color_rules:
        console.print(
            Panel(_rules_table(cfg.color_rules, True), title="[bold]Color rules[/bold]")
        )
    else:
        console.print("[yellow]No color rules configured.[/]")

    if cfg.delete_rules:
        console.print(
            Panel(_rules_table(cfg.delete_rules, False), title="[bold]Delete rules[/bold]")
        )
    else:
        console.print("[yellow]No delete rules configured.[/]")


# ---------------------------------------------------------------------------
# Subcommand: calendars
# ---------------------------------------------------------------------------


@app.command()
def calendars() -> None:
    """List calendars visible to the authorized account."""
    cfg = _load()
    store = _connect(cfg)
    try:
        entries = store.list_calendars()
    except CalendarBulkError as e:
        console.print(f"[bold red]Error:[/] {e}")
        raise typer.Exit(1) from None

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Summary", style="bold")
    table.add_column("Access")
    table.add_column("Time zone")
    table.add_column("ID", style="dim", overflow="fold")
    for entry in entries:
        name = entry.get("summary") or "(unnamed)"
        if entry.get("primary"):
            name += " (primary)"
        table.add_row(
            name, entry.get("accessRole", ""), entry.get("timeZone", ""), entry.get("id", "")
        )
    console.print(table)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    app()
