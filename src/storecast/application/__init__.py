"""DDD application layer."""

from .ports import EventPublisher, NullEventPublisher
from .reconciliation_service import CleanupOutcome, CleanupSession, CleanupState, ReconcilePlaylist
from .settings_service import EditFrequencySettings

__all__ = [
    "EventPublisher",
    "NullEventPublisher",
    "CleanupOutcome",
    "CleanupSession",
    "CleanupState",
    "ReconcilePlaylist",
    "EditFrequencySettings",
]
