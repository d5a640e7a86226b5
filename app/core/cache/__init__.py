"""
Cache package.

Re-exports the store, key vocabulary and invalidation coordinator.
"""

from app.core.cache import keys
from app.core.cache.store import CacheStore, read_through, encode, decode
from app.core.cache.invalidation import (
    InvalidationCoordinator,
    InvalidationEvent,
    derive_keys,
)

__all__ = [
    "keys",
    "CacheStore",
    "read_through",
    "encode",
    "decode",
    "InvalidationCoordinator",
    "InvalidationEvent",
    "derive_keys",
]
