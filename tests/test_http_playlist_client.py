from __future__ import annotations

from types import SimpleNamespace

import pytest
import requests

from storecast.application.errors import TransportFailureError
from storecast.infrastructure.http_playlist_client import (
    INVALID_JSON_MESSAGE,
    HttpPlaylistCleanTransport,
    load_api_client_config,
)


class _FakeSession:
    def __init__(self, response=None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: list[dict] = []

    def post(self, url: str, **kwargs):
        self.calls.append({"url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return self.response


def _response(status_code: int = 200, reason: str = "OK", payload=None, json_error: bool = False):
    def json():
        if json_error:
            raise ValueError("Expecting value")
        return payload

    return SimpleNamespace(ok=200 <= status_code < 400, status_code=status_code, reason=reason, json=json)


def test_posts_to_clean_endpoint_and_reads_removed_items() -> None:
    session = _FakeSession(response=_response(payload={"removedItems": 1}))
    transport = HttpPlaylistCleanTransport(base_url="http://api.local/", timeout_seconds=5, session=session)

    assert transport.request_clean(42) == 1
    assert session.calls == [
        {
            "url": "http://api.local/api/playlists/42/clean",
            "headers": {"Content-Type": "application/json"},
            "timeout": 5,
        }
    ]


def test_missing_removed_items_counts_as_zero() -> None:
    session = _FakeSession(response=_response(payload={}))
    transport = HttpPlaylistCleanTransport(base_url="http://api.local", timeout_seconds=5, session=session)

    assert transport.request_clean(42) == 0


def test_error_status_becomes_transport_failure() -> None:
    session = _FakeSession(response=_response(status_code=500, reason="Internal Server Error"))
    transport = HttpPlaylistCleanTransport(base_url="http://api.local", timeout_seconds=5, session=session)

    with pytest.raises(TransportFailureError) as exc_info:
        transport.request_clean(42)

    assert str(exc_info.value) == "HTTP error 500: Internal Server Error"
    assert exc_info.value.status_code == 500


def test_connection_error_becomes_transport_failure() -> None:
    session = _FakeSession(error=requests.ConnectionError("connection refused"))
    transport = HttpPlaylistCleanTransport(base_url="http://api.local", timeout_seconds=5, session=session)

    with pytest.raises(TransportFailureError, match="connection refused"):
        transport.request_clean(42)
    assert len(session.calls) == 1


def test_invalid_json_becomes_transport_failure() -> None:
    session = _FakeSession(response=_response(json_error=True))
    transport = HttpPlaylistCleanTransport(base_url="http://api.local", timeout_seconds=5, session=session)

    with pytest.raises(TransportFailureError) as exc_info:
        transport.request_clean(42)

    assert str(exc_info.value) == INVALID_JSON_MESSAGE
    assert exc_info.value.status_code == 200


def test_client_config_reads_environment(monkeypatch) -> None:
    load_api_client_config.cache_clear()
    monkeypatch.setenv("STORECAST_API_BASE_URL", "https://radio.example/")
    monkeypatch.setenv("STORECAST_API_TIMEOUT_SECONDS", "12.5")

    config = load_api_client_config()

    assert config.base_url == "https://radio.example"
    assert config.timeout_seconds == 12.5
    load_api_client_config.cache_clear()


def test_non_numeric_removed_items_becomes_transport_failure() -> None:
    session = _FakeSession(response=_response(payload={"removedItems": "nhiều"}))
    transport = HttpPlaylistCleanTransport(base_url="http://api.local", timeout_seconds=5, session=session)

    with pytest.raises(TransportFailureError, match="Giá trị removedItems không hợp lệ"):
        transport.request_clean(42)
