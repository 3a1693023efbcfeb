from types import SimpleNamespace

from fastapi.testclient import TestClient
from minio.error import S3Error

from storecast import storage
from storecast.api import app
from storecast.storage import StorageLookupError


client = TestClient(app)


class _NoSuchKey(S3Error):
    def __init__(self) -> None:
        Exception.__init__(self, "NoSuchKey")

    @property
    def code(self) -> str:
        return "NoSuchKey"


class _BucketClient:
    def __init__(self, object_names: set[str]) -> None:
        self.object_names = object_names

    def stat_object(self, bucket_name: str, object_name: str):
        if object_name not in self.object_names:
            raise _NoSuchKey()
        return SimpleNamespace(object_name=object_name)


def test_health() -> None:
    assert client.get("/health").json() == {"status": "ok"}


def test_clean_removes_missing_entries_then_is_idempotent(api_state) -> None:
    first = client.post("/api/playlists/42/clean", headers={"X-Correlation-Id": "corr-api"})
    second = client.post("/api/playlists/42/clean")

    assert first.status_code == 200
    assert first.json() == {"removedItems": 1}
    assert second.json() == {"removedItems": 0}

    playlist = client.get("/api/playlists/42").json()
    assert [item["audioFileId"] for item in playlist["items"]] == [1, 3]


def test_integrity_lists_missing_audio_ids(api_state) -> None:
    response = client.get("/api/playlists/42/integrity")

    assert response.status_code == 200
    assert response.json() == {"playlistId": 42, "missingAudioIds": [2]}


def test_unknown_playlist_returns_404(api_state) -> None:
    response = client.post("/api/playlists/999/clean")

    assert response.status_code == 404
    assert response.json()["detail"]["code"] == "playlist_not_found"


def test_storage_outage_returns_503_and_keeps_entries(monkeypatch, api_state) -> None:
    def failing_lookup(audio_id: int) -> bool:
        raise StorageLookupError("Audio lookup failed")

    monkeypatch.setattr("storecast.interfaces.api_handlers.audio_exists", failing_lookup)

    response = client.post("/api/playlists/42/clean")

    assert response.status_code == 503
    assert response.json()["detail"]["code"] == "storage_unavailable"
    assert len(api_state.get_playlist(42).entries) == 3


def test_deleting_audio_file_makes_entry_missing(api_state) -> None:
    assert client.delete("/api/audio-files/3").json() == {"deleted": True}

    response = client.get("/api/playlists/42/integrity")

    assert response.json()["missingAudioIds"] == [2, 3]


def test_put_playlist_and_audio_file(api_state) -> None:
    client.put("/api/audio-files/9", json={"name": "meo-hay.mp3", "group": "tips"})
    response = client.put(
        "/api/playlists/50",
        json={"broadcastProgramId": 3, "items": [{"audioFileId": 9, "playTime": "11:00"}]},
    )

    assert response.status_code == 200
    assert response.json() == {"id": 50, "broadcastProgramId": 3, "items": [{"audioFileId": 9, "playTime": "11:00"}]}
    assert client.post("/api/playlists/50/clean").json() == {"removedItems": 0}


def test_settings_put_clamps_values(api_state) -> None:
    response = client.put(
        "/api/settings/Promotions",
        json={"enabled": True, "frequencyMinutes": 1, "maxPlays": 99, "startTime": "09:00", "endTime": "18:00"},
    )

    assert response.status_code == 200
    promotions = response.json()["groups"]["promotions"]
    assert promotions["frequencyMinutes"] == 5
    assert promotions["maxPlays"] == 50
    assert client.get("/api/settings").json()["groups"]["promotions"]["startTime"] == "09:00"


def test_settings_put_rejects_unknown_group(api_state) -> None:
    response = client.put("/api/settings/weather", json={"enabled": True})

    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["code"] == "invalid_group"
    assert "promotions" in detail["allowed_values"]


def test_calendar_classifies_program_dates(api_state) -> None:
    client.post("/api/programs", json={"name": "Khai trương", "date": "2024-03-05", "aired": True})
    created = client.post("/api/programs", json={"name": "Cuối tuần", "date": "2024-03-09"})

    assert created.status_code == 201
    assert created.json()["aired"] is False

    response = client.get("/api/calendar", params={"anchor": "2024-03-15"})
    payload = response.json()

    assert payload["broadcastDates"] == ["2024-03-05"]
    assert payload["scheduledDates"] == ["2024-03-09"]
    assert len(payload["days"]) == 31
    by_date = {day["date"]: day["classification"] for day in payload["days"]}
    assert by_date["2024-03-05"] == "broadcast"
    assert by_date["2024-03-09"] == "scheduled"
    assert by_date["2024-03-10"] == "plain"


def test_integrity_asks_bucket_when_storage_enabled(monkeypatch, api_state) -> None:
    monkeypatch.setenv("STORECAST_STORAGE_ENABLED", "true")
    monkeypatch.setenv("STORECAST_AUDIO_PREFIX", "audio/")
    storage.load_storage_config.cache_clear()
    # Catalog still lists 1 and 3; the bucket only holds audio 1.
    monkeypatch.setattr(storage, "get_storage_client", lambda: _BucketClient({"audio/1"}))

    response = client.get("/api/playlists/42/integrity")

    assert response.json()["missingAudioIds"] == [2, 3]


def test_settings_put_accepts_non_finite_numbers(api_state) -> None:
    response = client.put(
        "/api/settings/tips",
        content='{"enabled": true, "frequencyMinutes": Infinity, "maxPlays": NaN}',
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 200
    tips = response.json()["groups"]["tips"]
    assert (tips["frequencyMinutes"], tips["maxPlays"]) == (30, 10)
