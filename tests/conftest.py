import pytest

from storecast.domain.integrity import PlaylistEntry
from storecast.domain.models import AudioFile
from storecast.infrastructure.memory_store import InMemoryBroadcastStore, playlist_from_entries
from storecast.infrastructure.settings_repositories import InMemorySettingsRepository
from storecast.interfaces import api_handlers


class RecordingPublisher:
    def __init__(self) -> None:
        self.events = []

    def publish(self, event) -> None:
        self.events.append(event)


class RecordingInvalidator:
    def __init__(self) -> None:
        self.keys: list[str] = []

    def invalidate(self, key: str) -> None:
        self.keys.append(key)


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def invalidator() -> RecordingInvalidator:
    return RecordingInvalidator()


@pytest.fixture
def playlist_42_store() -> InMemoryBroadcastStore:
    """Playlist 42 references audio 1, 2 and 3; audio 2 was deleted from storage."""

    store = InMemoryBroadcastStore()
    store.put_audio_file(AudioFile(id=1, name="chao-mung.mp3", group="greetings"))
    store.put_audio_file(AudioFile(id=3, name="khuyen-mai.mp3", group="promotions"))
    store.put_playlist(
        playlist_from_entries(
            42,
            7,
            [
                PlaylistEntry(audio_file_id=1, play_time="08:00"),
                PlaylistEntry(audio_file_id=2, play_time="09:00"),
                PlaylistEntry(audio_file_id=3, play_time="10:00"),
            ],
        )
    )
    return store


@pytest.fixture
def api_state(monkeypatch, playlist_42_store):
    monkeypatch.setattr(api_handlers, "broadcast_store", playlist_42_store)
    monkeypatch.setattr(api_handlers, "settings_repository", InMemorySettingsRepository())
    monkeypatch.setenv("STORECAST_STORAGE_ENABLED", "false")
    from storecast import storage

    storage.load_storage_config.cache_clear()
    yield playlist_42_store
    storage.load_storage_config.cache_clear()
