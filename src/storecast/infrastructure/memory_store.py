"""In-memory broadcast store backing the playlist API."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Callable, Iterable

from storecast.domain.calendar import month_grid
from storecast.domain.integrity import PlaylistEntry
from storecast.domain.models import AudioFile, BroadcastProgram, Playlist

logger = logging.getLogger(__name__)


class PlaylistNotFoundError(KeyError):
    """Raised when a playlist id is unknown to the store."""


@dataclass(slots=True)
class InMemoryBroadcastStore:
    """Thread-safe store of audio files, playlists and broadcast programs."""

    audio_files: dict[int, AudioFile] = field(default_factory=dict)
    playlists: dict[int, Playlist] = field(default_factory=dict)
    programs: dict[int, BroadcastProgram] = field(default_factory=dict)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def put_audio_file(self, audio_file: AudioFile) -> AudioFile:
        with self._lock:
            self.audio_files[audio_file.id] = audio_file
        return audio_file

    def delete_audio_file(self, audio_id: int) -> bool:
        with self._lock:
            return self.audio_files.pop(audio_id, None) is not None

    def audio_file_exists(self, audio_id: int) -> bool:
        with self._lock:
            return audio_id in self.audio_files

    def list_audio_files(self) -> list[AudioFile]:
        with self._lock:
            return sorted(self.audio_files.values(), key=lambda audio_file: audio_file.id)

    def put_playlist(self, playlist: Playlist) -> Playlist:
        with self._lock:
            self.playlists[playlist.id] = playlist
        return playlist

    def get_playlist(self, playlist_id: int) -> Playlist:
        with self._lock:
            try:
                return self.playlists[playlist_id]
            except KeyError:
                raise PlaylistNotFoundError(playlist_id) from None

    def remove_entries(self, playlist_id: int, audio_ids: Iterable[int]) -> int:
        """Drop every entry referencing one of ``audio_ids``; return how many went."""

        doomed = set(audio_ids)
        with self._lock:
            playlist = self.get_playlist(playlist_id)
            kept = tuple(entry for entry in playlist.entries if entry.audio_file_id not in doomed)
            removed = len(playlist.entries) - len(kept)
            if removed:
                self.playlists[playlist_id] = replace(playlist, entries=kept)
        if removed:
            logger.info("Removed %d entries from playlist %s", removed, playlist_id)
        return removed

    def put_program(self, program: BroadcastProgram) -> BroadcastProgram:
        with self._lock:
            self.programs[program.id] = program
        return program

    def next_program_id(self) -> int:
        with self._lock:
            return max(self.programs, default=0) + 1

    def program_dates(self, anchor: date) -> tuple[list[date], list[date]]:
        """Split the anchor month's program dates into (aired, scheduled)."""

        days = set(month_grid(anchor))
        with self._lock:
            programs = list(self.programs.values())
        aired = sorted({program.date for program in programs if program.aired and program.date in days})
        scheduled = sorted({program.date for program in programs if not program.aired and program.date in days})
        return aired, scheduled


@dataclass(slots=True)
class InProcessPlaylistCleanTransport:
    """Clean transport applying the removal directly to an in-memory store.

    Missing ids are re-detected against ``exists_fn`` at request time, so a
    second request against an already-clean playlist removes nothing.
    """

    store: InMemoryBroadcastStore
    exists_fn: Callable[[int], bool]

    def request_clean(self, playlist_id: int) -> int:
        playlist = self.store.get_playlist(playlist_id)
        missing = {entry.audio_file_id for entry in playlist.entries if not self.exists_fn(entry.audio_file_id)}
        if not missing:
            return 0
        return self.store.remove_entries(playlist_id, missing)


def playlist_from_entries(playlist_id: int, program_id: int, entries: Iterable[PlaylistEntry]) -> Playlist:
    return Playlist(id=playlist_id, broadcast_program_id=program_id, entries=tuple(entries))
