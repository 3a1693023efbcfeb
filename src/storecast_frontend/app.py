import os
import threading
from datetime import date
from typing import Any

import requests
from flask import Flask, render_template_string, request

from storecast.application.errors import CleanupInProgressError
from storecast.application.reconciliation_service import CleanupSession, ReconcilePlaylist
from storecast.domain.calendar import classify, leading_blank_days, month_grid, next_month, previous_month
from storecast.infrastructure.http_playlist_client import HttpPlaylistCleanTransport
from storecast.infrastructure.logging_event_publisher import LoggingEventPublisher
from storecast.infrastructure.view_cache import InMemoryViewCache

app = Flask(__name__)

view_cache = InMemoryViewCache()
_event_publisher = LoggingEventPublisher()
_sessions: dict[int, CleanupSession] = {}
_sessions_lock = threading.Lock()


CALENDAR_TEMPLATE = """
<!doctype html>
<html lang="vi">
  <head>
    <meta charset="utf-8">
    <title>Lịch phát sóng</title>
  </head>
  <body>
    <h1>Lịch phát sóng {{ anchor.strftime("%m/%Y") }}</h1>
    <p>
      <a href="/?anchor={{ previous.isoformat() }}">&larr;</a>
      |
      <a href="/?anchor={{ following.isoformat() }}">&rarr;</a>
    </p>
    <table>
      <tr>{% for name in weekdays %}<th>{{ name }}</th>{% endfor %}</tr>
      {% for week in weeks %}
      <tr>
        {% for cell in week %}
        {% if cell %}
        <td class="day {{ cell.classification }}">{{ cell.day.day }}</td>
        {% else %}
        <td></td>
        {% endif %}
        {% endfor %}
      </tr>
      {% endfor %}
    </table>
  </body>
</html>
"""


PLAYLIST_TEMPLATE = """
<!doctype html>
<html lang="vi">
  <head>
    <meta charset="utf-8">
    <title>Danh sách phát {{ playlist.id }}</title>
  </head>
  <body>
    <h1>Danh sách phát {{ playlist.id }}</h1>
    {% if notification %}
    <div class="notification {{ notification.variant }}">
      <strong>{{ notification.title }}</strong>
      <p>{{ notification.description }}</p>
    </div>
    {% endif %}
    {% if missing %}
    <div class="alert">
      <strong>Cảnh báo:</strong> Có {{ missing|length }} file âm thanh trong danh sách phát không tồn tại hoặc đã bị xóa
      (ID: {{ missing|join(", ") }}).
      <form action="/playlists/{{ playlist.id }}/clean" method="post">
        {% for audio_id in missing %}
        <input type="hidden" name="missing" value="{{ audio_id }}">
        {% endfor %}
        <button type="submit" {% if in_flight %}disabled{% endif %}>
          {% if in_flight %}Đang xử lý...{% else %}Chuẩn hóa danh sách phát{% endif %}
        </button>
      </form>
    </div>
    {% endif %}
    <ul>
      {% for item in playlist["items"] %}
      <li>{{ item.playTime }} - {{ audio_names.get(item.audioFileId, "#" ~ item.audioFileId) }}</li>
      {% endfor %}
    </ul>
  </body>
</html>
"""


ERROR_TEMPLATE = """
<!doctype html>
<html lang="vi">
  <head>
    <meta charset="utf-8">
    <title>Lỗi</title>
  </head>
  <body>
    <h1>Request failed (status {{ status }})</h1>
    <pre>{{ payload }}</pre>
    <p><a href="/">Back</a></p>
  </body>
</html>
"""

WEEKDAYS = ("CN", "T2", "T3", "T4", "T5", "T6", "T7")


class UpstreamError(Exception):
    def __init__(self, status: int, payload: Any) -> None:
        super().__init__(status, payload)
        self.status = status
        self.payload = payload


def _api_base_url() -> str:
    return os.getenv("STORECAST_API_BASE_URL", "http://127.0.0.1:8000").rstrip("/")


def _api_timeout() -> float:
    return float(os.getenv("STORECAST_API_TIMEOUT_SECONDS", "30"))


def _frontend_host() -> str:
    return os.getenv("STORECAST_FRONTEND_HOST", "0.0.0.0")


def _frontend_port() -> int:
    return int(os.getenv("STORECAST_FRONTEND_PORT", "5000"))


def _api_get(path: str, params: dict[str, str] | None = None) -> Any:
    try:
        upstream = requests.get(f"{_api_base_url()}{path}", params=params, timeout=_api_timeout())
    except requests.RequestException as exc:
        raise UpstreamError(502, {"error": "Failed to contact API", "detail": str(exc)}) from exc

    if not upstream.ok:
        try:
            payload = upstream.json()
        except ValueError:
            payload = {"error": "Upstream returned non-JSON error", "body": upstream.text}
        raise UpstreamError(upstream.status_code, payload)
    return upstream.json()


def _error_page(error: UpstreamError) -> tuple[str, int]:
    return render_template_string(ERROR_TEMPLATE, status=error.status, payload=error.payload), error.status


def cleanup_session(playlist_id: int) -> CleanupSession:
    """Return the per-playlist session acting as the in-flight guard.

    A session lives only while its request is outstanding; :func:`clean_playlist`
    releases it once the request settles.
    """

    with _sessions_lock:
        session = _sessions.get(playlist_id)
        if session is None:
            transport = HttpPlaylistCleanTransport(base_url=_api_base_url(), timeout_seconds=_api_timeout())
            session = CleanupSession(
                reconciler=ReconcilePlaylist(
                    transport=transport,
                    cache_invalidator=view_cache,
                    event_publisher=_event_publisher,
                ),
                playlist_id=playlist_id,
            )
            _sessions[playlist_id] = session
        return session


def _release_session(playlist_id: int, session: CleanupSession) -> None:
    with _sessions_lock:
        if _sessions.get(playlist_id) is session and not session.in_flight:
            del _sessions[playlist_id]


def _cleanup_in_flight(playlist_id: int) -> bool:
    with _sessions_lock:
        session = _sessions.get(playlist_id)
    return session is not None and session.in_flight


def _parse_anchor(raw_value: str | None) -> date:
    if not raw_value:
        return date.today()
    try:
        return date.fromisoformat(raw_value)
    except ValueError:
        return date.today()


@app.get("/")
def index() -> str | tuple[str, int]:
    anchor = _parse_anchor(request.args.get("anchor"))
    try:
        payload = _api_get("/api/calendar", params={"anchor": anchor.isoformat()})
    except UpstreamError as error:
        return _error_page(error)

    broadcast_dates = [date.fromisoformat(value) for value in payload.get("broadcastDates", [])]
    scheduled_dates = [date.fromisoformat(value) for value in payload.get("scheduledDates", [])]
    grid = month_grid(anchor)
    cells: list[dict[str, Any] | None] = [None] * leading_blank_days(grid)
    cells.extend(
        {"day": day, "classification": classify(day, broadcast_dates, scheduled_dates).value} for day in grid
    )
    weeks = [cells[start : start + 7] for start in range(0, len(cells), 7)]
    return render_template_string(
        CALENDAR_TEMPLATE,
        anchor=anchor,
        previous=previous_month(anchor),
        following=next_month(anchor),
        weekdays=WEEKDAYS,
        weeks=weeks,
    )


def _render_playlist(playlist_id: int, notification: dict[str, str] | None = None) -> str:
    playlist = view_cache.get_or_load(f"playlist:{playlist_id}", lambda: _api_get(f"/api/playlists/{playlist_id}"))
    audio_files = view_cache.get_or_load("audio-files:all", lambda: _api_get("/api/audio-files"))
    integrity = _api_get(f"/api/playlists/{playlist_id}/integrity")
    return render_template_string(
        PLAYLIST_TEMPLATE,
        playlist=playlist,
        audio_names={audio_file["id"]: audio_file["name"] for audio_file in audio_files},
        missing=integrity.get("missingAudioIds", []),
        in_flight=_cleanup_in_flight(playlist_id),
        notification=notification,
    )


@app.get("/playlists/<int:playlist_id>")
def playlist_page(playlist_id: int) -> str | tuple[str, int]:
    try:
        return _render_playlist(playlist_id)
    except UpstreamError as error:
        return _error_page(error)


@app.post("/playlists/<int:playlist_id>/clean")
def clean_playlist(playlist_id: int) -> str | tuple[str, int]:
    missing = [int(value) for value in request.form.getlist("missing") if value.strip().isdigit()]
    session = cleanup_session(playlist_id)
    try:
        outcome = session.run(missing)
    except CleanupInProgressError as error:
        payload = {"error": "Cleanup already in progress", "detail": str(error)}
        return render_template_string(ERROR_TEMPLATE, status=409, payload=payload), 409
    finally:
        _release_session(playlist_id, session)

    status = 200 if outcome.succeeded else 502
    try:
        return _render_playlist(playlist_id, notification=outcome.notification.as_dict()), status
    except UpstreamError:
        payload = {"notification": outcome.notification.as_dict()}
        return render_template_string(ERROR_TEMPLATE, status=status, payload=payload), status


if __name__ == "__main__":
    app.run(host=_frontend_host(), port=_frontend_port())
