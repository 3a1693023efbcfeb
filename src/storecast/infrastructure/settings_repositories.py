"""Infrastructure adapters for frequency rule persistence."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import ValidationError

from storecast.application.settings_repository import SettingsPersistenceError, SettingsRepository
from storecast.domain.frequency import FrequencyRule
from storecast.utils.config import ProgramSettingsConfig, load_program_settings, write_program_settings

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class FileSettingsRepository(SettingsRepository):
    """Adapter storing rules in a JSON or YAML settings file."""

    path: Path

    def load_rules(self) -> dict[str, FrequencyRule]:
        if not self.path.exists():
            return {}
        try:
            return load_program_settings(self.path).to_rules()
        except (OSError, ValueError, ValidationError) as error:
            raise SettingsPersistenceError(f"Cannot read settings file {self.path}: {error}") from error

    def save_rule(self, group: str, rule: FrequencyRule) -> None:
        rules = self.load_rules()
        rules[group] = rule
        try:
            write_program_settings(self.path, ProgramSettingsConfig.from_rules(rules))
        except OSError as error:
            raise SettingsPersistenceError(f"Cannot write settings file {self.path}: {error}") from error
        logger.info("Persisted frequency rule", extra={"group": group, "settings_path": str(self.path)})


@dataclass(slots=True)
class InMemorySettingsRepository(SettingsRepository):
    """Adapter keeping rules in process memory."""

    rules: dict[str, FrequencyRule] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def load_rules(self) -> dict[str, FrequencyRule]:
        with self._lock:
            return dict(self.rules)

    def save_rule(self, group: str, rule: FrequencyRule) -> None:
        with self._lock:
            self.rules[group] = rule
