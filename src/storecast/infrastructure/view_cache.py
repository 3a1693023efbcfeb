"""In-process cache of rendered playlist and audio listing views."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Callable


@dataclass(slots=True)
class InMemoryViewCache:
    """Key/value cache honouring ``prefix*`` invalidation keys."""

    _entries: dict[str, Any] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def get_or_load(self, key: str, loader: Callable[[], Any]) -> Any:
        with self._lock:
            if key in self._entries:
                return self._entries[key]
        value = loader()
        with self._lock:
            self._entries[key] = value
        return value

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def invalidate(self, key: str) -> None:
        with self._lock:
            if key.endswith("*"):
                prefix = key[:-1]
                for cached_key in [cached for cached in self._entries if cached.startswith(prefix)]:
                    del self._entries[cached_key]
            else:
                self._entries.pop(key, None)
