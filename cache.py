# cache.py
"""
Process-wide key -> value store with a per-entry expiry.

Entries expire lazily: a read past the expiry deletes the entry and misses.
Nothing here is correctness-critical; losing an entry only means another call
to the external API. Access is serialized with a lock because sync helpers may
touch the same cache from worker threads.
"""
import threading
import time
from typing import Any, Callable, Dict, Optional, Tuple


class TtlCache:
    def __init__(self, default_ttl_s: float, clock: Callable[[], float] = time.monotonic):
        self.default_ttl_s = default_ttl_s
        self._clock = clock
        self._entries: Dict[str, Tuple[Any, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if self._clock() > expires_at:
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: Any, ttl_s: Optional[float] = None) -> None:
        expires_at = self._clock() + (self.default_ttl_s if ttl_s is None else ttl_s)
        with self._lock:
            self._entries[key] = (value, expires_at)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
