"""Default frequency rules for broadcast programs."""

from __future__ import annotations

from dataclasses import replace

from storecast.broadcast_options import ContentGroup
from storecast.domain.frequency import FrequencyRule

DEFAULT_FREQUENCY_RULE = FrequencyRule(
    enabled=False,
    frequency_minutes=60,
    max_plays=10,
    start_time="08:00",
    end_time="20:00",
)


def default_program_settings() -> dict[str, FrequencyRule]:
    """Fresh group -> rule mapping used when a program is first configured."""

    return {
        ContentGroup.GREETINGS.value: replace(DEFAULT_FREQUENCY_RULE, enabled=True),
        ContentGroup.PROMOTIONS.value: replace(
            DEFAULT_FREQUENCY_RULE,
            enabled=True,
            frequency_minutes=30,
            max_plays=20,
            start_time="10:00",
            end_time="21:00",
        ),
        ContentGroup.TIPS.value: DEFAULT_FREQUENCY_RULE,
        ContentGroup.ANNOUNCEMENTS.value: DEFAULT_FREQUENCY_RULE,
    }
