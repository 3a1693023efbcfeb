"""Ports the application services depend on; adapters live in ``storecast.infrastructure``."""

from __future__ import annotations

from typing import Protocol

from storecast.domain.events import DomainEvent

PLAYLIST_CACHE_KEY = "playlist:{playlist_id}"
AUDIO_FILES_CACHE_KEY = "audio-files:*"


class EventPublisher(Protocol):
    def publish(self, event: DomainEvent) -> None:
        ...


class PlaylistCleanTransport(Protocol):
    """Port issuing the single clean request against the playlist store."""

    def request_clean(self, playlist_id: int) -> int:
        """Remove entries referencing missing audio and return how many were removed."""


class CacheInvalidator(Protocol):
    """Port notified when a cached view becomes stale."""

    def invalidate(self, key: str) -> None:
        """Drop the cached view stored under ``key`` (``*`` suffix matches a prefix)."""


class NullEventPublisher:
    """Discards events; the default when a service is built without a publisher."""

    def publish(self, event: DomainEvent) -> None:  # noqa: ARG002
        return


class NullCacheInvalidator:
    """No-op invalidator used when no cached views exist."""

    def invalidate(self, key: str) -> None:  # noqa: ARG002
        return
