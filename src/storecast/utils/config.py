from __future__ import annotations

from pathlib import Path
from typing import Any

import json

from pydantic import BaseModel, ConfigDict, Field, field_validator

from storecast.domain.frequency import FrequencyRule, coerce_frequency_minutes, coerce_max_plays


class FrequencyRuleConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    enabled: bool = False
    frequency_minutes: int = Field(60, alias="frequencyMinutes")
    max_plays: int = Field(10, alias="maxPlays")
    start_time: str = Field("08:00", alias="startTime")
    end_time: str = Field("20:00", alias="endTime")

    @field_validator("frequency_minutes", mode="before")
    @classmethod
    def _clamp_frequency(cls, value: Any) -> int:
        return coerce_frequency_minutes(value)

    @field_validator("max_plays", mode="before")
    @classmethod
    def _clamp_max_plays(cls, value: Any) -> int:
        return coerce_max_plays(value)

    def to_rule(self) -> FrequencyRule:
        return FrequencyRule(
            enabled=self.enabled,
            frequency_minutes=self.frequency_minutes,
            max_plays=self.max_plays,
            start_time=self.start_time,
            end_time=self.end_time,
        )

    @classmethod
    def from_rule(cls, rule: FrequencyRule) -> "FrequencyRuleConfig":
        return cls(
            enabled=rule.enabled,
            frequency_minutes=rule.frequency_minutes,
            max_plays=rule.max_plays,
            start_time=rule.start_time,
            end_time=rule.end_time,
        )


class ProgramSettingsConfig(BaseModel):
    groups: dict[str, FrequencyRuleConfig] = Field(default_factory=dict)

    def to_rules(self) -> dict[str, FrequencyRule]:
        return {group: config.to_rule() for group, config in self.groups.items()}

    @classmethod
    def from_rules(cls, rules: dict[str, FrequencyRule]) -> "ProgramSettingsConfig":
        return cls(groups={group: FrequencyRuleConfig.from_rule(rule) for group, rule in rules.items()})

    def to_wire(self) -> dict[str, Any]:
        return {"groups": {group: config.model_dump(by_alias=True) for group, config in self.groups.items()}}


def load_program_settings(path: Path) -> ProgramSettingsConfig:
    data = _load_config_data(path)
    return ProgramSettingsConfig.model_validate(data)


def write_program_settings(path: Path, settings: ProgramSettingsConfig) -> None:
    payload = settings.to_wire()
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix.lower() in {".yaml", ".yml"}:
        yaml = _import_yaml()
        with path.open("w", encoding="utf-8") as handle:
            yaml.safe_dump(payload, handle, allow_unicode=True, sort_keys=True)
        return

    with path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, ensure_ascii=False, indent=2, sort_keys=True)
        handle.write("\n")


def _import_yaml():
    try:
        import yaml
    except ImportError as exc:
        raise ImportError("PyYAML is required to load YAML configs.") from exc
    return yaml


def _load_config_data(path: Path) -> dict:
    if path.suffix.lower() in {".yaml", ".yml"}:
        yaml = _import_yaml()
        with path.open("r", encoding="utf-8") as handle:
            return yaml.safe_load(handle) or {}

    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)
