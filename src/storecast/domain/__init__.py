"""DDD domain layer."""

from .calendar import DayClassification, classify, leading_blank_days, month_grid, next_month, previous_month
from .events import (
    CacheInvalidated,
    DomainEvent,
    FrequencyRulesSaved,
    PlaylistCleaned,
    PlaylistCleanFailed,
    PlaylistCleanRequested,
    PlaylistIntegrityChecked,
)
from .frequency import (
    FrequencyRule,
    in_active_window,
    is_due,
    plan_insertions,
    set_enabled,
    set_end_time,
    set_frequency,
    set_max_plays,
    set_start_time,
)
from .integrity import PlaylistEntry, PlaylistIntegrityReport, detect_missing, is_resolvable_playlist_id
from .models import AudioFile, BroadcastProgram, Notification, Playlist
from .policies import DEFAULT_FREQUENCY_RULE, default_program_settings
from .services import generate_playlist

__all__ = [
    "DomainEvent",
    "FrequencyRulesSaved",
    "PlaylistIntegrityChecked",
    "PlaylistCleanRequested",
    "PlaylistCleaned",
    "PlaylistCleanFailed",
    "CacheInvalidated",
    "FrequencyRule",
    "set_enabled",
    "set_frequency",
    "set_max_plays",
    "set_start_time",
    "set_end_time",
    "in_active_window",
    "is_due",
    "plan_insertions",
    "DayClassification",
    "classify",
    "month_grid",
    "leading_blank_days",
    "previous_month",
    "next_month",
    "PlaylistEntry",
    "PlaylistIntegrityReport",
    "detect_missing",
    "is_resolvable_playlist_id",
    "AudioFile",
    "BroadcastProgram",
    "Notification",
    "Playlist",
    "DEFAULT_FREQUENCY_RULE",
    "default_program_settings",
    "generate_playlist",
]
