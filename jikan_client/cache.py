"""
In-memory response cache keyed by request URL.

Expiration is checked lazily on read; there is no background sweep.
"""
from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional


logger = logging.getLogger(__name__)

DEFAULT_TTL = 5 * 60.0


@dataclass(frozen=True)
class _CacheEntry:
    value: Any
    expires_at: float


class ResponseCache:
    """TTL cache for decoded JSON documents.

    Attributes:
        default_ttl: Lifetime in seconds applied when `set` gets no ttl.
    """

    def __init__(
        self,
        default_ttl: float = DEFAULT_TTL,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.default_ttl = default_ttl
        self._clock = clock
        self._store: Dict[str, _CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        """Return the live value for `key`, evicting it if it has expired."""
        now = self._clock()
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            if entry.expires_at > now:
                return entry.value
            logger.debug("Cache expired for %s", key)
            del self._store[key]
        return None

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        lifetime = self.default_ttl if ttl is None else ttl
        with self._lock:
            self._store[key] = _CacheEntry(value=value, expires_at=self._clock() + lifetime)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
