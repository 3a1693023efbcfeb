from .config import (
    FrequencyRuleConfig,
    ProgramSettingsConfig,
    load_program_settings,
    write_program_settings,
)

__all__ = [
    "FrequencyRuleConfig",
    "ProgramSettingsConfig",
    "load_program_settings",
    "write_program_settings",
]
