"""Verdict cache capability and an in-process implementation."""

from __future__ import annotations

import hashlib
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple


def cache_key(endpoint_template: str, email: str) -> str:
    """Stable key for one (provider, address) pair."""
    raw = f"{endpoint_template}\x00{email}".encode("utf-8")
    return hashlib.sha256(raw).hexdigest()


@dataclass
class CacheItem:
    key: str
    value: Any = None
    is_hit: bool = False
    expires_after_seconds: Optional[int] = None

    def set(self, value: Any) -> "CacheItem":
        self.value = value
        return self

    def expires_after(self, seconds: int) -> "CacheItem":
        self.expires_after_seconds = seconds
        return self


class VerdictCache(ABC):
    """get-by-key / save-with-expiry capability.

    Implementations are responsible for their own thread safety and may raise
    CacheError; callers treat such failures as a miss.
    """

    @abstractmethod
    def get_item(self, key: str) -> CacheItem:
        ...

    @abstractmethod
    def save(self, item: CacheItem) -> bool:
        ...


class InMemoryVerdictCache(VerdictCache):
    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Dict[str, Tuple[Any, Optional[float]]] = {}

    def get_item(self, key: str) -> CacheItem:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return CacheItem(key)
            value, expires_at = entry
            if expires_at is not None and expires_at <= self._clock():
                del self._entries[key]
                return CacheItem(key)
            return CacheItem(key, value=value, is_hit=True)

    def save(self, item: CacheItem) -> bool:
        """Store *item*; entries that have already expired are dropped first."""
        now = self._clock()
        expires_at = None
        if item.expires_after_seconds is not None:
            expires_at = now + item.expires_after_seconds
        with self._lock:
            self._sweep(now)
            self._entries[item.key] = (item.value, expires_at)
        return True

    def _sweep(self, now: float) -> None:
        expired = [
            key
            for key, (_, expires_at) in self._entries.items()
            if expires_at is not None and expires_at <= now
        ]
        for key in expired:
            del self._entries[key]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
