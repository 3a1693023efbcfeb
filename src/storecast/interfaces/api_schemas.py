"""Request/response bodies of the playlist API."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from storecast.domain.integrity import PlaylistEntry
from storecast.domain.models import AudioFile, BroadcastProgram, Playlist


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class AudioFilePayload(_CamelModel):
    name: str
    group: str


class PlaylistItemPayload(_CamelModel):
    audio_file_id: int = Field(..., alias="audioFileId")
    play_time: str = Field("", alias="playTime")


class PlaylistPayload(_CamelModel):
    broadcast_program_id: int = Field(..., alias="broadcastProgramId")
    items: list[PlaylistItemPayload] = Field(default_factory=list)

    def to_entries(self) -> tuple[PlaylistEntry, ...]:
        return tuple(PlaylistEntry(audio_file_id=item.audio_file_id, play_time=item.play_time) for item in self.items)


class ProgramPayload(_CamelModel):
    name: str = Field(..., min_length=1)
    program_date: date = Field(..., alias="date")
    aired: bool = False


def audio_file_to_dict(audio_file: AudioFile) -> dict[str, object]:
    return {"id": audio_file.id, "name": audio_file.name, "group": audio_file.group}


def playlist_to_dict(playlist: Playlist) -> dict[str, object]:
    return {
        "id": playlist.id,
        "broadcastProgramId": playlist.broadcast_program_id,
        "items": [{"audioFileId": entry.audio_file_id, "playTime": entry.play_time} for entry in playlist.entries],
    }


def program_to_dict(program: BroadcastProgram) -> dict[str, object]:
    return {"id": program.id, "name": program.name, "date": program.date.isoformat(), "aired": program.aired}
