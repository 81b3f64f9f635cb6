"""Test doubles shared across the suite: HTTP, cache and clock fakes."""

from __future__ import annotations

import json
import threading
from typing import Any, Callable, Dict, List, Tuple, Union

from mailgate.cache import CacheItem, InMemoryVerdictCache
from mailgate.models import HttpResponse

Responder = Union[str, dict, BaseException, Callable[[str], Any]]


class FakeHttpClient:
    """Answers GET requests by URL prefix; records every call."""

    def __init__(self, responses: Dict[str, Responder]) -> None:
        self.responses = responses
        self.calls: List[Tuple[str, Dict[str, str]]] = []
        self._lock = threading.Lock()

    def get(self, url: str, headers=None) -> HttpResponse:
        with self._lock:
            self.calls.append((url, dict(headers or {})))
        for prefix, responder in self.responses.items():
            if url.startswith(prefix):
                break
        else:
            raise AssertionError(f"unexpected URL {url}")

        if callable(responder) and not isinstance(responder, BaseException):
            responder = responder(url)
        if isinstance(responder, BaseException):
            raise responder
        if isinstance(responder, HttpResponse):
            return responder
        if isinstance(responder, (dict, list)):
            responder = json.dumps(responder)
        return HttpResponse(200, responder)


class RecordingCache(InMemoryVerdictCache):
    """In-memory cache that remembers every saved item."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self.saved: List[CacheItem] = []
        self.reads = 0

    def get_item(self, key: str) -> CacheItem:
        self.reads += 1
        return super().get_item(key)

    def save(self, item: CacheItem) -> bool:
        self.saved.append(
            CacheItem(item.key, item.value, item.is_hit, item.expires_after_seconds)
        )
        return super().save(item)


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds
