"""CLI interface for Storecast."""

import logging
import os
from datetime import datetime
from pathlib import Path
from uuid import uuid4

import typer

from .broadcast_options import ContentGroup
from .interfaces.cli_handlers import (
    check_due,
    describe_rule,
    edit_group_rule,
    open_settings,
    planned_slots,
    render_month,
    run_cleanup,
)

app = typer.Typer(help="Storecast broadcast administration")
rules_app = typer.Typer(help="Inspect and edit group frequency rules")
app.add_typer(rules_app, name="rules")

_SETTINGS_OPTION_HELP = "Path to the JSON/YAML program settings file."
_DEFAULT_SETTINGS_PATH = Path("storecast-settings.json")


@rules_app.command("show")
def rules_show_command(
    settings: Path = typer.Option(
        _DEFAULT_SETTINGS_PATH, "--settings", "-s", envvar="STORECAST_SETTINGS_PATH", help=_SETTINGS_OPTION_HELP
    ),
) -> None:
    """Print every group's frequency rule."""

    editor = open_settings(settings)
    for group, rule in editor.rules.items():
        typer.echo(describe_rule(group, rule))


@rules_app.command("set")
def rules_set_command(
    group: ContentGroup = typer.Argument(..., case_sensitive=False, help="Content group to edit."),
    enabled: bool | None = typer.Option(None, "--enable/--disable", help="Turn the group on or off."),
    frequency: str | None = typer.Option(None, "--frequency", help="Minutes between insertions (5-120)."),
    max_plays: str | None = typer.Option(None, "--max-plays", help="Maximum plays per window (1-50)."),
    start_time: str | None = typer.Option(None, "--start", help="Window start, HH:MM."),
    end_time: str | None = typer.Option(None, "--end", help="Window end, HH:MM (may wrap midnight)."),
    settings: Path = typer.Option(
        _DEFAULT_SETTINGS_PATH, "--settings", "-s", envvar="STORECAST_SETTINGS_PATH", help=_SETTINGS_OPTION_HELP
    ),
) -> None:
    """Edit one group's rule; invalid numbers fall back to defaults."""

    rule = edit_group_rule(
        settings,
        group.value,
        enabled=enabled,
        frequency=frequency,
        max_plays=max_plays,
        start_time=start_time,
        end_time=end_time,
    )
    typer.echo(describe_rule(group.value, rule))


@app.command("is-due")
def is_due_command(
    group: ContentGroup = typer.Argument(..., case_sensitive=False, help="Content group to evaluate."),
    at: datetime = typer.Option(..., "--at", help="Clock tick to evaluate."),
    last_fired: datetime | None = typer.Option(None, "--last-fired", help="Previous insertion time, if any."),
    plays: int = typer.Option(0, "--plays", min=0, help="Insertions already made today."),
    settings: Path = typer.Option(
        _DEFAULT_SETTINGS_PATH, "--settings", "-s", envvar="STORECAST_SETTINGS_PATH", help=_SETTINGS_OPTION_HELP
    ),
) -> None:
    """Exit 0 when an insertion is due, 1 otherwise."""

    due = check_due(settings, group.value, now=at, last_fired_at=last_fired, plays_so_far_today=plays)
    typer.echo("due" if due else "not due")
    if not due:
        raise typer.Exit(code=1)


@app.command("plan")
def plan_command(
    group: ContentGroup = typer.Argument(..., case_sensitive=False, help="Content group to plan."),
    settings: Path = typer.Option(
        _DEFAULT_SETTINGS_PATH, "--settings", "-s", envvar="STORECAST_SETTINGS_PATH", help=_SETTINGS_OPTION_HELP
    ),
) -> None:
    """List the HH:MM slots at which the group would be inserted."""

    slots = planned_slots(settings, group.value)
    if not slots:
        typer.echo("No insertions planned.")
        return
    typer.echo(" ".join(slots))


@app.command("calendar")
def calendar_command(
    anchor: datetime | None = typer.Option(
        None, "--anchor", formats=["%Y-%m-%d"], help="Any date in the month to display (default: today)."
    ),
    broadcast: list[datetime] = typer.Option(
        [], "--broadcast", formats=["%Y-%m-%d"], help="Day with an aired broadcast (repeatable)."
    ),
    scheduled: list[datetime] = typer.Option(
        [], "--scheduled", formats=["%Y-%m-%d"], help="Day with a planned broadcast (repeatable)."
    ),
) -> None:
    """Print a month calendar marking broadcast (*) and scheduled (+) days."""

    anchor_day = (anchor or datetime.now()).date()
    for line in render_month(anchor_day, [day.date() for day in broadcast], [day.date() for day in scheduled]):
        typer.echo(line)


@app.command("clean")
def clean_command(
    playlist_id: int = typer.Argument(..., help="Playlist to clean."),
    missing: list[int] = typer.Option([], "--missing", "-m", help="Audio id reported missing (repeatable)."),
    api_url: str | None = typer.Option(None, "--api-url", help="Playlist API base URL."),
    timeout: float | None = typer.Option(None, "--timeout", min=0.1, help="Request timeout in seconds."),
) -> None:
    """Remove entries referencing missing audio files from a playlist."""

    correlation_id = str(uuid4())
    outcome = run_cleanup(
        playlist_id,
        missing,
        api_base_url=api_url,
        timeout_seconds=timeout,
        correlation_id=correlation_id,
    )
    typer.echo(f"{outcome.notification.title}: {outcome.notification.description}")
    typer.echo(f"Correlation ID: {correlation_id}")
    if not outcome.succeeded:
        raise typer.Exit(code=1)


def main() -> None:
    logging.basicConfig(level=os.getenv("STORECAST_LOG_LEVEL", "WARNING").upper())
    app()


if __name__ == "__main__":
    main()
