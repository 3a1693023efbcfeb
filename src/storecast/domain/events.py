"""Domain event contracts for settings and playlist reconciliation workflows."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


@dataclass(frozen=True, slots=True)
class DomainEvent:
    """Base domain event emitted by application services."""

    correlation_id: str
    payload_summary: dict[str, Any]
    occurred_at: datetime = field(default_factory=lambda: datetime.now(tz=timezone.utc))


@dataclass(frozen=True, slots=True)
class FrequencyRulesSaved(DomainEvent):
    """Group frequency rules were handed to the persistence collaborator."""


@dataclass(frozen=True, slots=True)
class PlaylistIntegrityChecked(DomainEvent):
    """A playlist was scanned for references to missing audio files."""


@dataclass(frozen=True, slots=True)
class PlaylistCleanRequested(DomainEvent):
    """A clean request was issued against the playlist store."""


@dataclass(frozen=True, slots=True)
class PlaylistCleaned(DomainEvent):
    """The playlist store confirmed removal of missing entries."""


@dataclass(frozen=True, slots=True)
class PlaylistCleanFailed(DomainEvent):
    """A clean request failed or was rejected before being issued."""


@dataclass(frozen=True, slots=True)
class CacheInvalidated(DomainEvent):
    """A cached view became stale and must be re-read."""
