"""Event publisher writing one structured log record per domain event."""

from __future__ import annotations

import logging

from storecast.domain.events import DomainEvent, PlaylistCleanFailed

EVENTS_LOGGER = logging.getLogger("storecast.events")

_WARNING_EVENTS = (PlaylistCleanFailed,)


class LoggingEventPublisher:
    """Log events on ``storecast.events``; failed cleanups are logged at WARNING."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or EVENTS_LOGGER

    def publish(self, event: DomainEvent) -> None:
        event_name = type(event).__name__
        level = logging.WARNING if isinstance(event, _WARNING_EVENTS) else logging.INFO
        self._logger.log(
            level,
            "domain_event_emitted %s",
            event_name,
            extra={
                "event_name": event_name,
                "correlation_id": event.correlation_id,
                "payload_summary": event.payload_summary,
                "occurred_at": event.occurred_at.isoformat(),
            },
        )
