"""CLI-facing handlers that delegate to application services."""

from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from typing import Iterable

from storecast.application.reconciliation_service import CleanupOutcome, CleanupSession, ReconcilePlaylist
from storecast.application.settings_service import EditFrequencySettings
from storecast.domain.calendar import DayClassification, classify, leading_blank_days, month_grid
from storecast.domain.frequency import FrequencyRule, is_due, plan_insertions
from storecast.infrastructure.http_playlist_client import HttpPlaylistCleanTransport, load_api_client_config
from storecast.infrastructure.logging_event_publisher import LoggingEventPublisher
from storecast.infrastructure.settings_repositories import FileSettingsRepository

_event_publisher = LoggingEventPublisher()

_DAY_MARKERS = {
    DayClassification.BROADCAST: "*",
    DayClassification.SCHEDULED: "+",
    DayClassification.PLAIN: " ",
}
WEEKDAY_HEADER = ("CN", "T2", "T3", "T4", "T5", "T6", "T7")


def open_settings(settings_path: Path) -> EditFrequencySettings:
    return EditFrequencySettings(
        repository=FileSettingsRepository(settings_path),
        event_publisher=_event_publisher,
    )


def describe_rule(group: str, rule: FrequencyRule) -> str:
    state = "on " if rule.enabled else "off"
    return (
        f"{group:<14} {state} every {rule.frequency_minutes:>3} min, "
        f"max {rule.max_plays:>2} plays, {rule.start_time}-{rule.end_time}"
    )


def edit_group_rule(
    settings_path: Path,
    group: str,
    *,
    enabled: bool | None = None,
    frequency: str | None = None,
    max_plays: str | None = None,
    start_time: str | None = None,
    end_time: str | None = None,
) -> FrequencyRule:
    editor = open_settings(settings_path)
    if enabled is not None:
        editor.set_enabled(group, enabled)
    if frequency is not None:
        editor.set_frequency(group, frequency)
    if max_plays is not None:
        editor.set_max_plays(group, max_plays)
    if start_time is not None:
        editor.set_start_time(group, start_time)
    if end_time is not None:
        editor.set_end_time(group, end_time)
    editor.save()
    return editor.rule(group)


def check_due(
    settings_path: Path,
    group: str,
    *,
    now: datetime,
    last_fired_at: datetime | None,
    plays_so_far_today: int,
) -> bool:
    rule = open_settings(settings_path).rule(group)
    return is_due(rule, now, last_fired_at, plays_so_far_today)


def planned_slots(settings_path: Path, group: str) -> list[str]:
    return plan_insertions(open_settings(settings_path).rule(group))


def render_month(anchor: date, broadcast_dates: Iterable[date], scheduled_dates: Iterable[date]) -> list[str]:
    """Render the anchor's month as text rows, Sunday first.

    ``*`` marks a broadcast day, ``+`` a scheduled day.
    """

    broadcast = list(broadcast_dates)
    scheduled = list(scheduled_dates)
    grid = month_grid(anchor)
    cells = ["    "] * leading_blank_days(grid)
    for day in grid:
        cells.append(f"{day.day:>3}{_DAY_MARKERS[classify(day, broadcast, scheduled)]}")

    lines = [anchor.strftime("%m/%Y").center(28).rstrip(), "".join(f"{name:>4}" for name in WEEKDAY_HEADER)]
    for start in range(0, len(cells), 7):
        lines.append("".join(cells[start : start + 7]).rstrip())
    return lines


def run_cleanup(
    playlist_id: int | None,
    missing_ids: Iterable[int],
    *,
    api_base_url: str | None = None,
    timeout_seconds: float | None = None,
    correlation_id: str | None = None,
) -> CleanupOutcome:
    config = load_api_client_config()
    transport = HttpPlaylistCleanTransport(
        base_url=api_base_url or config.base_url,
        timeout_seconds=timeout_seconds if timeout_seconds is not None else config.timeout_seconds,
    )
    session = CleanupSession(
        reconciler=ReconcilePlaylist(transport=transport, event_publisher=_event_publisher),
        playlist_id=playlist_id,
    )
    return session.run(missing_ids, correlation_id=correlation_id)
