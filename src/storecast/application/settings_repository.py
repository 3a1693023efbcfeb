"""Application port for persisting group frequency rules."""

from __future__ import annotations

from typing import Protocol

from storecast.domain.frequency import FrequencyRule


class SettingsRepository(Protocol):
    """Port implemented by infrastructure adapters owning the durable rule copy."""

    def load_rules(self) -> dict[str, FrequencyRule]:
        """Return every persisted rule keyed by group name."""

    def save_rule(self, group: str, rule: FrequencyRule) -> None:
        """Persist ``rule`` under ``group``."""


class SettingsPersistenceError(RuntimeError):
    """Raised when the durable settings copy cannot be read or written."""
