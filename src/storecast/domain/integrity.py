"""Detection of playlist entries whose audio file no longer exists."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable


@dataclass(frozen=True, slots=True)
class PlaylistEntry:
    """One scheduled play of an audio file."""

    audio_file_id: int
    play_time: str = ""


@dataclass(frozen=True, slots=True)
class PlaylistIntegrityReport:
    """Result of a reconciliation pass."""

    missing_reference_ids: tuple[int, ...]
    removed_count: int
    playlist_id: int | None

    @property
    def is_clean(self) -> bool:
        return not self.missing_reference_ids


def is_resolvable_playlist_id(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def detect_missing(
    entries: Iterable[PlaylistEntry],
    exists_fn: Callable[[int], bool],
) -> list[int]:
    """Return the audio ids of ``entries`` that ``exists_fn`` rejects.

    Order follows the playlist and repeated references are reported once per
    entry. The oracle is consulted at most once per distinct id.
    """

    seen: dict[int, bool] = {}
    missing: list[int] = []
    for entry in entries:
        audio_id = entry.audio_file_id
        if audio_id not in seen:
            seen[audio_id] = bool(exists_fn(audio_id))
        if not seen[audio_id]:
            missing.append(audio_id)
    return missing
