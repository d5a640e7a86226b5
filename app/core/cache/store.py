"""
In-memory cache for read-heavy endpoints.

Cache Configuration:
- No TTL and no eviction; an entry lives until it is explicitly deleted
- Values are UTF-8 encoded JSON payloads
- Consistency is kept by the InvalidationCoordinator, which purges keys after
  every committed mutation ("invalidate, don't update")

Concurrent requests for the same cold key may both recompute and both write.
The payload is identical either way, so the race only costs duplicated work.
"""

import json
import logging
from threading import RLock
from typing import Any, Awaitable, Callable, Iterable

from app.core.exceptions import CacheMiss

logger = logging.getLogger(__name__)


class CacheStore:
    """Mutable mapping of cache key -> serialized payload, guarded by a lock."""

    def __init__(self) -> None:
        self._entries: dict[str, bytes] = {}
        self._lock = RLock()

    def has(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def get(self, key: str) -> bytes:
        with self._lock:
            try:
                return self._entries[key]
            except KeyError:
                raise CacheMiss(key) from None

    def set(self, key: str, value: bytes) -> None:
        with self._lock:
            self._entries[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def delete_many(self, keys: Iterable[str]) -> None:
        """Remove every key in one critical section; absent keys are ignored."""
        keys = list(keys)
        with self._lock:
            for key in keys:
                self._entries.pop(key, None)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def encode(payload: Any) -> bytes:
    return json.dumps(payload, separators=(",", ":")).encode("utf-8")


def decode(raw: bytes) -> Any:
    return json.loads(raw.decode("utf-8"))


async def read_through(
    cache: CacheStore, key: str, loader: Callable[[], Awaitable[Any]]
) -> Any:
    """
    Serve `key` from the cache, computing and storing it on a miss.

    `loader` must return a JSON-compatible value. If it raises, nothing is
    cached and the error propagates to the caller.
    """
    try:
        raw = cache.get(key)
    except CacheMiss:
        logger.debug("cache miss: %s", key)
    else:
        logger.debug("cache hit: %s", key)
        return decode(raw)

    payload = await loader()
    cache.set(key, encode(payload))
    return payload
