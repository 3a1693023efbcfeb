from __future__ import annotations

from storecast.domain.integrity import (
    PlaylistEntry,
    PlaylistIntegrityReport,
    detect_missing,
    is_resolvable_playlist_id,
)


def _entries(*audio_ids: int) -> list[PlaylistEntry]:
    return [PlaylistEntry(audio_file_id=audio_id, play_time=f"{8 + index:02d}:00") for index, audio_id in enumerate(audio_ids)]


def test_detect_missing_preserves_order_and_duplicates() -> None:
    stored = {1, 3}

    missing = detect_missing(_entries(7, 1, 2, 7, 3), lambda audio_id: audio_id in stored)

    assert missing == [7, 2, 7]


def test_detect_missing_reports_repeated_missing_reference_twice() -> None:
    assert detect_missing(_entries(7, 7), lambda audio_id: audio_id != 7) == [7, 7]


def test_detect_missing_consults_oracle_once_per_id() -> None:
    calls: list[int] = []

    def exists(audio_id: int) -> bool:
        calls.append(audio_id)
        return False

    detect_missing(_entries(5, 5, 6, 5), exists)

    assert calls == [5, 6]


def test_clean_playlist_has_no_missing_references() -> None:
    assert detect_missing(_entries(1, 2), lambda audio_id: True) == []
    assert detect_missing([], lambda audio_id: False) == []
    assert PlaylistIntegrityReport(missing_reference_ids=(), removed_count=0, playlist_id=4).is_clean


def test_resolvable_playlist_ids() -> None:
    assert is_resolvable_playlist_id(42)
    assert not is_resolvable_playlist_id(None)
    assert not is_resolvable_playlist_id(0)
    assert not is_resolvable_playlist_id(-3)
    assert not is_resolvable_playlist_id(True)
    assert not is_resolvable_playlist_id("42")
