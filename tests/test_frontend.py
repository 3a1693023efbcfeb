from __future__ import annotations

import importlib
from types import SimpleNamespace

from storecast.application.errors import TransportFailureError
from storecast.application.reconciliation_service import CleanupState
from storecast.infrastructure.view_cache import InMemoryViewCache

frontend_module = importlib.import_module("storecast_frontend.app")


class _FakeTransport:
    def __init__(self, removed: int = 0, error: Exception | None = None) -> None:
        self.removed = removed
        self.error = error
        self.calls: list[int] = []

    def request_clean(self, playlist_id: int) -> int:
        self.calls.append(playlist_id)
        if self.error is not None:
            raise self.error
        return self.removed


def _ok(payload):
    return SimpleNamespace(ok=True, status_code=200, json=lambda: payload, text="")


def _install_api(monkeypatch, missing: list[int]) -> list[str]:
    requested: list[str] = []
    responses = {
        "/api/playlists/42": {
            "id": 42,
            "broadcastProgramId": 7,
            "items": [{"audioFileId": 1, "playTime": "08:00"}, {"audioFileId": 2, "playTime": "09:00"}],
        },
        "/api/audio-files": [{"id": 1, "name": "chao-mung.mp3", "group": "greetings"}],
        "/api/playlists/42/integrity": {"playlistId": 42, "missingAudioIds": missing},
    }

    def fake_get(url, params=None, timeout=None):
        path = url.split("127.0.0.1:8000", 1)[1]
        requested.append(path)
        return _ok(responses[path])

    monkeypatch.delenv("STORECAST_API_BASE_URL", raising=False)
    monkeypatch.setattr(frontend_module.requests, "get", fake_get)
    monkeypatch.setattr(frontend_module, "view_cache", InMemoryViewCache())
    monkeypatch.setattr(frontend_module, "_sessions", {})
    return requested


def test_index_renders_month_with_classified_days(monkeypatch) -> None:
    captured = {}

    def fake_get(url, params=None, timeout=None):
        captured["url"] = url
        captured["params"] = params
        return _ok({"broadcastDates": ["2024-03-05"], "scheduledDates": ["2024-03-09"]})

    monkeypatch.setattr(frontend_module.requests, "get", fake_get)

    response = frontend_module.app.test_client().get("/?anchor=2024-03-15")

    assert response.status_code == 200
    body = response.get_data(as_text=True)
    assert captured["url"].endswith("/api/calendar")
    assert captured["params"] == {"anchor": "2024-03-15"}
    assert '<td class="day broadcast">5</td>' in body
    assert '<td class="day scheduled">9</td>' in body
    assert '<td class="day plain">10</td>' in body
    assert 'href="/?anchor=2024-02-15"' in body
    assert 'href="/?anchor=2024-04-15"' in body


def test_index_shows_error_page_when_api_unreachable(monkeypatch) -> None:
    def fake_get(url, params=None, timeout=None):
        raise frontend_module.requests.ConnectionError("refused")

    monkeypatch.setattr(frontend_module.requests, "get", fake_get)

    response = frontend_module.app.test_client().get("/")

    assert response.status_code == 502
    assert "Failed to contact API" in response.get_data(as_text=True)


def test_playlist_page_warns_about_missing_audio(monkeypatch) -> None:
    _install_api(monkeypatch, missing=[2])

    response = frontend_module.app.test_client().get("/playlists/42")

    body = response.get_data(as_text=True)
    assert response.status_code == 200
    assert "Có 1 file âm thanh trong danh sách phát không tồn tại" in body
    assert '<input type="hidden" name="missing" value="2">' in body
    assert "chao-mung.mp3" in body


def test_clean_success_invalidates_cached_views(monkeypatch) -> None:
    requested = _install_api(monkeypatch, missing=[2])
    transport = _FakeTransport(removed=1)
    monkeypatch.setattr(frontend_module, "HttpPlaylistCleanTransport", lambda **kwargs: transport)
    client = frontend_module.app.test_client()

    client.get("/playlists/42")
    response = client.post("/playlists/42/clean", data={"missing": ["2"]})

    body = response.get_data(as_text=True)
    assert response.status_code == 200
    assert transport.calls == [42]
    assert "Đã chuẩn hóa danh sách phát" in body
    assert "Đã loại bỏ 1 file âm thanh không hợp lệ khỏi danh sách phát." in body
    assert requested.count("/api/playlists/42") == 2
    assert requested.count("/api/audio-files") == 2
    assert frontend_module._sessions == {}


def test_clean_failure_shows_destructive_notification(monkeypatch) -> None:
    _install_api(monkeypatch, missing=[2])
    transport = _FakeTransport(error=TransportFailureError("HTTP error 500: Internal Server Error", status_code=500))
    monkeypatch.setattr(frontend_module, "HttpPlaylistCleanTransport", lambda **kwargs: transport)

    response = frontend_module.app.test_client().post("/playlists/42/clean", data={"missing": ["2"]})

    body = response.get_data(as_text=True)
    assert response.status_code == 502
    assert 'class="notification destructive"' in body
    assert "Lỗi chuẩn hóa danh sách phát" in body
    assert "HTTP error 500: Internal Server Error" in body
    assert frontend_module._sessions == {}


def test_clean_rejected_while_request_in_flight(monkeypatch) -> None:
    _install_api(monkeypatch, missing=[2])
    transport = _FakeTransport(removed=1)
    monkeypatch.setattr(frontend_module, "HttpPlaylistCleanTransport", lambda **kwargs: transport)
    frontend_module.cleanup_session(42).state = CleanupState.REQUESTING

    client = frontend_module.app.test_client()
    page = client.get("/playlists/42").get_data(as_text=True)
    response = client.post("/playlists/42/clean", data={"missing": ["2"]})

    assert "disabled" in page
    assert "Đang xử lý..." in page
    assert response.status_code == 409
    assert transport.calls == []
    assert frontend_module._sessions[42].in_flight


def test_viewing_playlists_does_not_create_sessions(monkeypatch) -> None:
    _install_api(monkeypatch, missing=[])
    client = frontend_module.app.test_client()

    for _ in range(3):
        assert client.get("/playlists/42").status_code == 200

    assert frontend_module._sessions == {}
