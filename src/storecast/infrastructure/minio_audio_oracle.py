"""MinIO-backed audio existence oracle exposed as infrastructure."""

from __future__ import annotations

from dataclasses import dataclass

from storecast.storage import StorageLookupError, audio_file_exists

__all__ = ["MinIOAudioExistenceOracle", "StorageLookupError"]


@dataclass(frozen=True, slots=True)
class MinIOAudioExistenceOracle:
    """Callable ``audio_id -> bool`` answering from the audio bucket."""

    def __call__(self, audio_id: int) -> bool:
        return audio_file_exists(audio_id)
