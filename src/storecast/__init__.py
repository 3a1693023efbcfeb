"""Public package exports for Storecast with lazy imports."""

from __future__ import annotations

from importlib import import_module
from typing import Any

__all__ = [
    "FrequencyRule",
    "is_due",
    "plan_insertions",
    "DayClassification",
    "classify",
    "month_grid",
    "PlaylistEntry",
    "PlaylistIntegrityReport",
    "detect_missing",
    "ReconcilePlaylist",
    "CleanupSession",
    "CleanupState",
    "InvalidTargetError",
    "TransportFailureError",
]

_EXPORT_MODULES: dict[str, str] = {
    "FrequencyRule": "storecast.domain.frequency",
    "is_due": "storecast.domain.frequency",
    "plan_insertions": "storecast.domain.frequency",
    "DayClassification": "storecast.domain.calendar",
    "classify": "storecast.domain.calendar",
    "month_grid": "storecast.domain.calendar",
    "PlaylistEntry": "storecast.domain.integrity",
    "PlaylistIntegrityReport": "storecast.domain.integrity",
    "detect_missing": "storecast.domain.integrity",
    "ReconcilePlaylist": "storecast.application.reconciliation_service",
    "CleanupSession": "storecast.application.reconciliation_service",
    "CleanupState": "storecast.application.reconciliation_service",
    "InvalidTargetError": "storecast.application.errors",
    "TransportFailureError": "storecast.application.errors",
}


def __getattr__(name: str) -> Any:
    if name not in _EXPORT_MODULES:
        raise AttributeError(f"module 'storecast' has no attribute {name!r}")

    module = import_module(_EXPORT_MODULES[name])
    value = getattr(module, name)
    globals()[name] = value
    return value
