"""Application services reconciling playlists with the audio file store."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable
from uuid import uuid4

from storecast.application.errors import CleanupInProgressError, InvalidTargetError, TransportFailureError
from storecast.application.ports import (
    AUDIO_FILES_CACHE_KEY,
    PLAYLIST_CACHE_KEY,
    CacheInvalidator,
    EventPublisher,
    NullCacheInvalidator,
    NullEventPublisher,
    PlaylistCleanTransport,
)
from storecast.broadcast_options import NotificationVariant
from storecast.domain.events import (
    CacheInvalidated,
    PlaylistCleaned,
    PlaylistCleanFailed,
    PlaylistCleanRequested,
    PlaylistIntegrityChecked,
)
from storecast.domain.integrity import (
    PlaylistEntry,
    PlaylistIntegrityReport,
    detect_missing,
    is_resolvable_playlist_id,
)
from storecast.domain.models import Notification

logger = logging.getLogger(__name__)

UNKNOWN_ERROR_MESSAGE = "Lỗi không xác định"


class CleanupState(str, Enum):
    """Lifecycle of one cleanup invocation at the call site."""

    IDLE = "idle"
    REQUESTING = "requesting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class CleanupOutcome:
    """Terminal state of a cleanup invocation with its user-facing summary."""

    state: CleanupState
    notification: Notification
    report: PlaylistIntegrityReport | None = None
    error: Exception | None = None

    @property
    def succeeded(self) -> bool:
        return self.state is CleanupState.SUCCEEDED


def success_notification(removed_count: int) -> Notification:
    return Notification(
        title="Đã chuẩn hóa danh sách phát",
        description=f"Đã loại bỏ {removed_count} file âm thanh không hợp lệ khỏi danh sách phát.",
        variant=NotificationVariant.SUCCESS,
    )


def invalid_target_notification() -> Notification:
    return Notification(
        title="Không thể chuẩn hóa",
        description="Không xác định được ID của danh sách phát",
        variant=NotificationVariant.DESTRUCTIVE,
    )


def failure_notification(error: Exception) -> Notification:
    return Notification(
        title="Lỗi chuẩn hóa danh sách phát",
        description=str(error) or UNKNOWN_ERROR_MESSAGE,
        variant=NotificationVariant.DESTRUCTIVE,
    )


@dataclass(slots=True)
class ReconcilePlaylist:
    """Use case that detects and removes references to missing audio files.

    Holds no playlist state; every call is a function of its arguments plus
    one request through the transport port.
    """

    transport: PlaylistCleanTransport
    cache_invalidator: CacheInvalidator = NullCacheInvalidator()
    event_publisher: EventPublisher = NullEventPublisher()

    def detect(
        self,
        entries: Iterable[PlaylistEntry],
        exists_fn: Callable[[int], bool],
        playlist_id: int | None = None,
        correlation_id: str | None = None,
    ) -> list[int]:
        entry_list = list(entries)
        missing = detect_missing(entry_list, exists_fn)
        self.event_publisher.publish(
            PlaylistIntegrityChecked(
                correlation_id=correlation_id or str(uuid4()),
                payload_summary={
                    "playlist_id": playlist_id,
                    "entry_count": len(entry_list),
                    "missing_count": len(missing),
                },
            )
        )
        return missing

    def clean(
        self,
        playlist_id: int | None,
        missing_ids: Iterable[int],
        correlation_id: str | None = None,
    ) -> PlaylistIntegrityReport:
        run_correlation_id = correlation_id or str(uuid4())
        missing = tuple(missing_ids)

        if not is_resolvable_playlist_id(playlist_id):
            error = InvalidTargetError(f"Playlist id is not resolvable: {playlist_id!r}")
            self.event_publisher.publish(
                PlaylistCleanFailed(
                    correlation_id=run_correlation_id,
                    payload_summary={"stage": "target", "playlist_id": playlist_id, "error": str(error)},
                )
            )
            raise error

        self.event_publisher.publish(
            PlaylistCleanRequested(
                correlation_id=run_correlation_id,
                payload_summary={"playlist_id": playlist_id, "missing_count": len(missing)},
            )
        )
        logger.info(
            "Cleaning playlist %s, %d missing audio reference(s) reported.",
            playlist_id,
            len(missing),
        )

        try:
            removed = self.transport.request_clean(playlist_id)
        except TransportFailureError as error:
            self._publish_transport_failure(run_correlation_id, playlist_id, error)
            raise
        except Exception as error:  # noqa: BLE001
            wrapped = TransportFailureError(str(error) or UNKNOWN_ERROR_MESSAGE)
            self._publish_transport_failure(run_correlation_id, playlist_id, wrapped)
            raise wrapped from error

        report = PlaylistIntegrityReport(
            missing_reference_ids=missing,
            removed_count=max(0, int(removed)),
            playlist_id=playlist_id,
        )

        for key in (PLAYLIST_CACHE_KEY.format(playlist_id=playlist_id), AUDIO_FILES_CACHE_KEY):
            self.cache_invalidator.invalidate(key)
            self.event_publisher.publish(
                CacheInvalidated(correlation_id=run_correlation_id, payload_summary={"key": key})
            )

        self.event_publisher.publish(
            PlaylistCleaned(
                correlation_id=run_correlation_id,
                payload_summary={"playlist_id": playlist_id, "removed_count": report.removed_count},
            )
        )
        return report

    def _publish_transport_failure(self, correlation_id: str, playlist_id: int, error: Exception) -> None:
        logger.warning("Playlist %s clean request failed: %s", playlist_id, error)
        self.event_publisher.publish(
            PlaylistCleanFailed(
                correlation_id=correlation_id,
                payload_summary={"stage": "transport", "playlist_id": playlist_id, "error": str(error)},
            )
        )


@dataclass(slots=True)
class CleanupSession:
    """Call-site state machine guarding one playlist's cleanup trigger.

    ``IDLE -> REQUESTING -> {SUCCEEDED, FAILED}``; a second trigger while
    ``REQUESTING`` raises :class:`CleanupInProgressError`. Terminal states
    may be re-triggered manually.
    """

    reconciler: ReconcilePlaylist
    playlist_id: int | None
    state: CleanupState = CleanupState.IDLE
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @property
    def in_flight(self) -> bool:
        return self.state is CleanupState.REQUESTING

    def run(self, missing_ids: Iterable[int], correlation_id: str | None = None) -> CleanupOutcome:
        with self._lock:
            if self.state is CleanupState.REQUESTING:
                raise CleanupInProgressError(f"Cleanup already in progress for playlist {self.playlist_id!r}")
            self.state = CleanupState.REQUESTING

        try:
            report = self.reconciler.clean(self.playlist_id, missing_ids, correlation_id=correlation_id)
        except InvalidTargetError as error:
            self.state = CleanupState.FAILED
            return CleanupOutcome(state=self.state, notification=invalid_target_notification(), error=error)
        except TransportFailureError as error:
            self.state = CleanupState.FAILED
            return CleanupOutcome(state=self.state, notification=failure_notification(error), error=error)
        except BaseException:
            self.state = CleanupState.FAILED
            raise

        self.state = CleanupState.SUCCEEDED
        return CleanupOutcome(
            state=self.state,
            notification=success_notification(report.removed_count),
            report=report,
        )
