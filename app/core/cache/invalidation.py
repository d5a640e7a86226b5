"""
Event-driven cache invalidation.

Write-path routes build exactly one InvalidationEvent after their store write
commits and hand it to InvalidationCoordinator.invalidate(). The coordinator
derives the full purge set up front and deletes it in one critical section,
so a purge either happens completely or raises before touching the cache.
It never repopulates; the next read recomputes lazily.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from app.core.cache import keys
from app.core.cache.store import CacheStore
from app.core.exceptions import InvalidationEventError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InvalidationEvent:
    """Which resource kinds (and identities) a committed mutation touched."""

    product_affected: bool = False
    order_affected: bool = False
    admin_affected: bool = False
    user_id: Optional[str] = None
    product_ids: Optional[Sequence[str]] = field(default=None)
    order_id: Optional[str] = None

    def validate(self) -> None:
        """
        Reject events whose identities would be silently dropped.

        An identity without its flag means the caller meant to purge an
        entity key but the rules would skip it.
        """
        if self.product_ids is not None and not self.product_affected:
            raise InvalidationEventError("product_ids given without product_affected")
        if (self.order_id is not None or self.user_id is not None) and not self.order_affected:
            raise InvalidationEventError("order_id/user_id given without order_affected")

        if isinstance(self.product_ids, str):
            raise InvalidationEventError("product_ids must be a sequence of ids, not a string")

        identities = list(self.product_ids or [])
        identities += [i for i in (self.order_id, self.user_id) if i is not None]
        for identity in identities:
            if not isinstance(identity, str) or not identity.strip():
                raise InvalidationEventError(f"blank or non-string identity: {identity!r}")


def derive_keys(event: InvalidationEvent) -> list[str]:
    """Exact, ordered, de-duplicated set of keys the event must purge."""
    event.validate()

    derived: list[str] = []
    if event.product_affected:
        derived.extend(keys.PRODUCT_LISTING_KEYS)
        derived.extend(keys.product_key(pid) for pid in event.product_ids or ())

    if event.order_affected:
        derived.append(keys.ALL_ORDERS)
        if event.order_id is not None:
            derived.append(keys.order_key(event.order_id))
        if event.user_id is not None:
            derived.append(keys.my_orders_key(event.user_id))

    if event.admin_affected:
        derived.extend(keys.ADMIN_KEYS)

    return list(dict.fromkeys(derived))


class InvalidationCoordinator:
    """Sole writer of deletions against a CacheStore."""

    def __init__(self, cache: CacheStore) -> None:
        self.cache = cache

    def invalidate(self, event: InvalidationEvent) -> list[str]:
        purge = derive_keys(event)
        if purge:
            self.cache.delete_many(purge)
        logger.debug("invalidated %d cache keys: %s", len(purge), purge)
        return purge
