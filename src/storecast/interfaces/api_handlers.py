"""API-facing handlers that delegate to application services."""

from __future__ import annotations

from datetime import date

from storecast.application.reconciliation_service import ReconcilePlaylist
from storecast.application.settings_service import EditFrequencySettings
from storecast.domain.calendar import classify, month_grid
from storecast.domain.frequency import FrequencyRule
from storecast.domain.integrity import PlaylistIntegrityReport
from storecast.domain.models import AudioFile, BroadcastProgram, Playlist
from storecast.infrastructure.logging_event_publisher import LoggingEventPublisher
from storecast.infrastructure.memory_store import (
    InMemoryBroadcastStore,
    InProcessPlaylistCleanTransport,
    PlaylistNotFoundError,
)
from storecast.infrastructure.minio_audio_oracle import MinIOAudioExistenceOracle
from storecast.infrastructure.settings_repositories import InMemorySettingsRepository
from storecast.storage import load_storage_config

_event_publisher = LoggingEventPublisher()
broadcast_store = InMemoryBroadcastStore()
settings_repository = InMemorySettingsRepository()
storage_oracle = MinIOAudioExistenceOracle()


def audio_exists(audio_id: int) -> bool:
    if load_storage_config().enabled:
        return storage_oracle(audio_id)
    return broadcast_store.audio_file_exists(audio_id)


def _reconciler() -> ReconcilePlaylist:
    return ReconcilePlaylist(
        transport=InProcessPlaylistCleanTransport(store=broadcast_store, exists_fn=audio_exists),
        event_publisher=_event_publisher,
    )


def missing_audio_ids(playlist_id: int, correlation_id: str) -> list[int]:
    playlist = broadcast_store.get_playlist(playlist_id)
    return _reconciler().detect(playlist.entries, audio_exists, playlist_id=playlist_id, correlation_id=correlation_id)


def clean_playlist(playlist_id: int, correlation_id: str) -> PlaylistIntegrityReport:
    playlist = broadcast_store.get_playlist(playlist_id)
    reconciler = _reconciler()
    missing = reconciler.detect(playlist.entries, audio_exists, playlist_id=playlist_id, correlation_id=correlation_id)
    return reconciler.clean(playlist_id, missing, correlation_id=correlation_id)


def settings_editor() -> EditFrequencySettings:
    return EditFrequencySettings(repository=settings_repository, event_publisher=_event_publisher)


def update_group_rule(group: str, rule: FrequencyRule, correlation_id: str) -> dict[str, FrequencyRule]:
    editor = settings_editor()
    editor.replace_rule(group, rule)
    editor.save(correlation_id=correlation_id)
    return dict(editor.rules)


def create_program(name: str, program_date: date, aired: bool) -> BroadcastProgram:
    program = BroadcastProgram(id=broadcast_store.next_program_id(), name=name, date=program_date, aired=aired)
    return broadcast_store.put_program(program)


def calendar_view(anchor: date) -> dict[str, object]:
    aired, scheduled = broadcast_store.program_dates(anchor)
    return {
        "anchor": anchor.isoformat(),
        "broadcastDates": [day.isoformat() for day in aired],
        "scheduledDates": [day.isoformat() for day in scheduled],
        "days": [
            {"date": day.isoformat(), "classification": classify(day, aired, scheduled).value}
            for day in month_grid(anchor)
        ],
    }


def put_audio_file(audio_id: int, name: str, group: str) -> AudioFile:
    return broadcast_store.put_audio_file(AudioFile(id=audio_id, name=name, group=group))


def put_playlist(playlist: Playlist) -> Playlist:
    return broadcast_store.put_playlist(playlist)


__all__ = [
    "PlaylistNotFoundError",
    "audio_exists",
    "broadcast_store",
    "calendar_view",
    "clean_playlist",
    "create_program",
    "missing_audio_ids",
    "put_audio_file",
    "put_playlist",
    "settings_editor",
    "settings_repository",
    "update_group_rule",
]
