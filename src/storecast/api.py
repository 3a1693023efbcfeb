"""FastAPI interface for Storecast."""

from datetime import date
from uuid import uuid4

from fastapi import FastAPI, Header, HTTPException, Query

from .application.errors import TransportFailureError
from .broadcast_options import ContentGroup, enum_values, parse_case_insensitive_enum
from .interfaces.api_handlers import (
    PlaylistNotFoundError,
    calendar_view,
    clean_playlist,
    create_program,
    missing_audio_ids,
    put_audio_file,
    put_playlist,
    settings_editor,
    update_group_rule,
)
from .interfaces.api_schemas import (
    AudioFilePayload,
    PlaylistPayload,
    ProgramPayload,
    audio_file_to_dict,
    playlist_to_dict,
    program_to_dict,
)
from .infrastructure.memory_store import playlist_from_entries
from .interfaces import api_handlers
from .storage import StorageLookupError
from .utils.config import FrequencyRuleConfig, ProgramSettingsConfig

app = FastAPI(title="Storecast API", version="0.1.0")


def _playlist_not_found(playlist_id: int) -> HTTPException:
    return HTTPException(
        status_code=404,
        detail={"code": "playlist_not_found", "message": f"Playlist {playlist_id} does not exist."},
    )


def _storage_unavailable(error: Exception) -> HTTPException:
    return HTTPException(
        status_code=503,
        detail={"code": "storage_unavailable", "message": str(error)},
    )


@app.get("/health")
def health() -> dict[str, str]:
    """Health check endpoint."""

    return {"status": "ok"}


@app.get("/api/audio-files")
def list_audio_files() -> list[dict[str, object]]:
    return [audio_file_to_dict(audio_file) for audio_file in api_handlers.broadcast_store.list_audio_files()]


@app.put("/api/audio-files/{audio_id}")
def upsert_audio_file(audio_id: int, payload: AudioFilePayload) -> dict[str, object]:
    return audio_file_to_dict(put_audio_file(audio_id, payload.name, payload.group))


@app.delete("/api/audio-files/{audio_id}")
def delete_audio_file(audio_id: int) -> dict[str, bool]:
    return {"deleted": api_handlers.broadcast_store.delete_audio_file(audio_id)}


@app.put("/api/playlists/{playlist_id}")
def upsert_playlist(playlist_id: int, payload: PlaylistPayload) -> dict[str, object]:
    playlist = playlist_from_entries(playlist_id, payload.broadcast_program_id, payload.to_entries())
    return playlist_to_dict(put_playlist(playlist))


@app.get("/api/playlists/{playlist_id}")
def get_playlist(playlist_id: int) -> dict[str, object]:
    try:
        playlist = api_handlers.broadcast_store.get_playlist(playlist_id)
    except PlaylistNotFoundError as error:
        raise _playlist_not_found(playlist_id) from error
    return playlist_to_dict(playlist)


@app.get("/api/playlists/{playlist_id}/integrity")
def get_playlist_integrity(
    playlist_id: int,
    x_correlation_id: str | None = Header(default=None, alias="X-Correlation-Id"),
) -> dict[str, object]:
    try:
        missing = missing_audio_ids(playlist_id, correlation_id=x_correlation_id or str(uuid4()))
    except PlaylistNotFoundError as error:
        raise _playlist_not_found(playlist_id) from error
    except StorageLookupError as error:
        raise _storage_unavailable(error) from error
    return {"playlistId": playlist_id, "missingAudioIds": missing}


@app.post("/api/playlists/{playlist_id}/clean")
def clean(
    playlist_id: int,
    x_correlation_id: str | None = Header(default=None, alias="X-Correlation-Id"),
) -> dict[str, int]:
    """Remove entries referencing missing audio files from the playlist."""

    try:
        report = clean_playlist(playlist_id, correlation_id=x_correlation_id or str(uuid4()))
    except PlaylistNotFoundError as error:
        raise _playlist_not_found(playlist_id) from error
    except StorageLookupError as error:
        raise _storage_unavailable(error) from error
    except TransportFailureError as error:
        raise HTTPException(
            status_code=500,
            detail={"code": "clean_failed", "message": str(error)},
        ) from error
    return {"removedItems": report.removed_count}


@app.get("/api/settings")
def get_settings() -> dict[str, object]:
    return ProgramSettingsConfig.from_rules(settings_editor().rules).to_wire()


@app.put("/api/settings/{group}")
def put_group_settings(
    group: str,
    payload: FrequencyRuleConfig,
    x_correlation_id: str | None = Header(default=None, alias="X-Correlation-Id"),
) -> dict[str, object]:
    try:
        parsed_group = parse_case_insensitive_enum(group, ContentGroup)
    except ValueError as error:
        raise HTTPException(
            status_code=400,
            detail={
                "code": "invalid_group",
                "message": str(error),
                "allowed_values": list(enum_values(ContentGroup)),
            },
        ) from error

    rules = update_group_rule(parsed_group.value, payload.to_rule(), correlation_id=x_correlation_id or str(uuid4()))
    return ProgramSettingsConfig.from_rules(rules).to_wire()


@app.post("/api/programs", status_code=201)
def post_program(payload: ProgramPayload) -> dict[str, object]:
    return program_to_dict(create_program(payload.name, payload.program_date, payload.aired))


@app.get("/api/calendar")
def get_calendar(anchor: date | None = Query(None, description="Any date inside the month to show.")) -> dict[str, object]:
    return calendar_view(anchor or date.today())
