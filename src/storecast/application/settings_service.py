"""Editing session for broadcast program frequency settings."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from uuid import uuid4

from storecast.application.ports import EventPublisher, NullEventPublisher
from storecast.application.settings_repository import SettingsRepository
from storecast.domain import frequency
from storecast.domain.events import FrequencyRulesSaved
from storecast.domain.frequency import FrequencyRule
from storecast.domain.policies import DEFAULT_FREQUENCY_RULE, default_program_settings

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class EditFrequencySettings:
    """Use case owning the in-memory copy of each group's rule while editing.

    The repository stays the source of truth: :meth:`reload` discards local
    edits, :meth:`save` hands every rule back keyed by group name.
    """

    repository: SettingsRepository
    event_publisher: EventPublisher = NullEventPublisher()
    rules: dict[str, FrequencyRule] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.rules:
            self.reload()

    def reload(self) -> dict[str, FrequencyRule]:
        persisted = self.repository.load_rules()
        self.rules = {**default_program_settings(), **persisted}
        return dict(self.rules)

    def rule(self, group: str) -> FrequencyRule:
        # Groups seen for the first time start from the default rule.
        return self.rules.setdefault(group, DEFAULT_FREQUENCY_RULE)

    def set_enabled(self, group: str, enabled: bool) -> FrequencyRule:
        return self._update(group, frequency.set_enabled(self.rule(group), enabled))

    def set_frequency(self, group: str, raw_input: str) -> FrequencyRule:
        return self._update(group, frequency.set_frequency(self.rule(group), raw_input))

    def set_max_plays(self, group: str, raw_input: str) -> FrequencyRule:
        return self._update(group, frequency.set_max_plays(self.rule(group), raw_input))

    def set_start_time(self, group: str, value: str) -> FrequencyRule:
        return self._update(group, frequency.set_start_time(self.rule(group), value))

    def set_end_time(self, group: str, value: str) -> FrequencyRule:
        return self._update(group, frequency.set_end_time(self.rule(group), value))

    def replace_rule(self, group: str, rule: FrequencyRule) -> FrequencyRule:
        return self._update(group, rule)

    def save(self, correlation_id: str | None = None) -> None:
        for group, rule in self.rules.items():
            self.repository.save_rule(group, rule)
        self.event_publisher.publish(
            FrequencyRulesSaved(
                correlation_id=correlation_id or str(uuid4()),
                payload_summary={
                    "groups": sorted(self.rules),
                    "enabled_groups": sorted(group for group, rule in self.rules.items() if rule.enabled),
                },
            )
        )

    def _update(self, group: str, rule: FrequencyRule) -> FrequencyRule:
        self.rules[group] = rule
        logger.debug("Frequency rule for %s updated: %s", group, rule)
        return rule
