"""Domain models shared by the admin workflows."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from storecast.broadcast_options import NotificationVariant
from storecast.domain.integrity import PlaylistEntry


@dataclass(frozen=True, slots=True)
class Playlist:
    """Ordered entries generated for a broadcast program."""

    id: int
    broadcast_program_id: int
    entries: tuple[PlaylistEntry, ...] = ()


@dataclass(frozen=True, slots=True)
class AudioFile:
    """Stored audio file referenced by playlist entries."""

    id: int
    name: str
    group: str


@dataclass(frozen=True, slots=True)
class BroadcastProgram:
    """A broadcast program planned for a calendar day."""

    id: int
    name: str
    date: date
    aired: bool = False


@dataclass(frozen=True, slots=True)
class Notification:
    """User-facing summary of an operation outcome."""

    title: str
    description: str
    variant: NotificationVariant = NotificationVariant.SUCCESS

    def as_dict(self) -> dict[str, str]:
        return {"title": self.title, "description": self.description, "variant": self.variant.value}
