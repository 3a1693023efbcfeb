"""S3-compatible audio file lookups backed by MinIO client."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING

logger = logging.getLogger(__name__)


if TYPE_CHECKING:
    from minio import Minio

_MISSING_OBJECT_CODES = frozenset({"NoSuchKey", "NoSuchObject", "ResourceNotFound"})


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """Runtime configuration for S3-compatible object storage."""

    enabled: bool
    endpoint: str
    access_key: str
    secret_key: str
    bucket: str
    secure: bool
    region: str | None
    audio_prefix: str


@lru_cache(maxsize=1)
def load_storage_config() -> StorageConfig:
    """Load storage configuration from environment."""

    return StorageConfig(
        enabled=os.getenv("STORECAST_STORAGE_ENABLED", "false").lower() in {"1", "true", "yes", "on"},
        endpoint=os.getenv("STORECAST_S3_ENDPOINT", "minio:9000"),
        access_key=os.getenv("STORECAST_S3_ACCESS_KEY", "minioadmin"),
        secret_key=os.getenv("STORECAST_S3_SECRET_KEY", "minioadmin"),
        bucket=os.getenv("STORECAST_S3_BUCKET", "storecast-audio"),
        secure=os.getenv("STORECAST_S3_SECURE", "false").lower() in {"1", "true", "yes", "on"},
        region=os.getenv("STORECAST_S3_REGION"),
        audio_prefix=os.getenv("STORECAST_AUDIO_PREFIX", "audio/"),
    )


class StorageLookupError(RuntimeError):
    """Raised when object storage cannot answer an existence lookup."""


@lru_cache(maxsize=1)
def get_storage_client() -> "Minio":
    """Build and cache a MinIO client for object storage."""

    from minio import Minio

    config = load_storage_config()
    return Minio(
        endpoint=config.endpoint,
        access_key=config.access_key,
        secret_key=config.secret_key,
        secure=config.secure,
        region=config.region,
    )


def audio_object_name(audio_id: int) -> str:
    return f"{load_storage_config().audio_prefix}{audio_id}"


def audio_file_exists(audio_id: int) -> bool:
    """Check whether the stored object for ``audio_id`` is present in the bucket.

    A missing object is a normal ``False``; any other storage failure raises
    :class:`StorageLookupError` so callers never mistake an outage for
    deleted audio.
    """

    from minio.error import S3Error

    config = load_storage_config()
    client = get_storage_client()
    try:
        client.stat_object(config.bucket, audio_object_name(audio_id))
    except S3Error as error:
        if error.code in _MISSING_OBJECT_CODES:
            return False
        raise StorageLookupError(f"Audio lookup failed for id {audio_id}: {error.code}") from error
    except Exception as error:  # noqa: BLE001
        logger.warning("Audio storage lookup failed.", exc_info=error)
        raise StorageLookupError(f"Audio lookup failed for id {audio_id}") from error
    return True

