"""HTTP adapter for the playlist clean endpoint, backed by requests."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any

import requests

from storecast.application.errors import TransportFailureError

logger = logging.getLogger(__name__)

CLEAN_PATH_TEMPLATE = "/api/playlists/{playlist_id}/clean"
INVALID_JSON_MESSAGE = "Phản hồi từ máy chủ không phải JSON hợp lệ"
INVALID_REMOVED_ITEMS_MESSAGE = "Giá trị removedItems không hợp lệ: {value!r}"


@dataclass(frozen=True, slots=True)
class ApiClientConfig:
    """Runtime configuration for calls to the playlist API."""

    base_url: str
    timeout_seconds: float


@lru_cache(maxsize=1)
def load_api_client_config() -> ApiClientConfig:
    """Load API client configuration from environment."""

    return ApiClientConfig(
        base_url=os.getenv("STORECAST_API_BASE_URL", "http://127.0.0.1:8000").rstrip("/"),
        timeout_seconds=float(os.getenv("STORECAST_API_TIMEOUT_SECONDS", "30")),
    )


@dataclass(slots=True)
class HttpPlaylistCleanTransport:
    """Issue ``POST /api/playlists/{id}/clean`` and read ``removedItems``."""

    base_url: str = field(default_factory=lambda: load_api_client_config().base_url)
    timeout_seconds: float = field(default_factory=lambda: load_api_client_config().timeout_seconds)
    session: Any = field(default_factory=requests.Session, repr=False)

    def clean_url(self, playlist_id: int) -> str:
        return f"{self.base_url.rstrip('/')}{CLEAN_PATH_TEMPLATE.format(playlist_id=playlist_id)}"

    def request_clean(self, playlist_id: int) -> int:
        url = self.clean_url(playlist_id)
        try:
            response = self.session.post(
                url,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout_seconds,
            )
        except requests.RequestException as exc:
            raise TransportFailureError(str(exc)) from exc

        if not response.ok:
            raise TransportFailureError(
                f"HTTP error {response.status_code}: {response.reason}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise TransportFailureError(INVALID_JSON_MESSAGE, status_code=response.status_code) from exc

        removed = payload.get("removedItems") if isinstance(payload, dict) else None
        logger.debug("Clean response for playlist %s: %s", playlist_id, payload)
        try:
            return int(removed or 0)
        except (TypeError, ValueError) as exc:
            raise TransportFailureError(INVALID_REMOVED_ITEMS_MESSAGE.format(value=removed)) from exc
