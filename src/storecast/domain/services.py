"""Domain services that contain pure business rules."""

from __future__ import annotations

import random
from typing import Callable, Mapping, Sequence

from storecast.domain.frequency import MINUTES_PER_DAY, FrequencyRule, parse_time_of_day, plan_insertions
from storecast.domain.integrity import PlaylistEntry
from storecast.domain.models import AudioFile

Chooser = Callable[[Sequence[AudioFile]], AudioFile]


def generate_playlist(
    settings: Mapping[str, FrequencyRule],
    audio_files_by_group: Mapping[str, Sequence[AudioFile]],
    choose: Chooser = random.choice,
) -> list[PlaylistEntry]:
    """Build a playlist from each enabled group's planned insertion slots.

    Groups without audio files are skipped. Entries are ordered by broadcast
    time: slots of an overnight window that fall after midnight follow the
    slots before it.
    """

    timed_entries: list[tuple[int, PlaylistEntry]] = []
    for group, rule in settings.items():
        files = audio_files_by_group.get(group) or ()
        if not files:
            continue
        start = parse_time_of_day(rule.start_time) or 0
        for slot in plan_insertions(rule):
            offset = ((parse_time_of_day(slot) or 0) - start) % MINUTES_PER_DAY
            timed_entries.append((start + offset, PlaylistEntry(audio_file_id=choose(files).id, play_time=slot)))

    timed_entries.sort(key=lambda timed: timed[0])
    return [entry for _, entry in timed_entries]
