"""
Unit tests for event-driven cache invalidation.
"""

import pytest

from app.core.cache import CacheStore, InvalidationCoordinator, InvalidationEvent, derive_keys
from app.core.exceptions import InvalidationEventError

ALL_KEYS = [
    "latest-products",
    "categories",
    "all-products",
    "product-p1",
    "product-p2",
    "product-p3",
    "all-orders",
    "order-o1",
    "my-orders-u1",
    "my-orders-u2",
    "admin-stats",
    "admin-pie-charts",
    "admin-bar-charts",
    "admin-line-charts",
]


@pytest.fixture
def warm_cache() -> CacheStore:
    cache = CacheStore()
    for key in ALL_KEYS:
        cache.set(key, b"{}")
    return cache


class TestProductEvents:
    def test_purges_listings_and_each_product(self, warm_cache):
        coordinator = InvalidationCoordinator(warm_cache)

        coordinator.invalidate(
            InvalidationEvent(product_affected=True, product_ids=["p1", "p2"])
        )

        for key in ("product-p1", "product-p2", "all-products", "latest-products", "categories"):
            assert not warm_cache.has(key)
        assert warm_cache.has("product-p3")
        assert warm_cache.has("admin-stats")
        assert warm_cache.has("all-orders")

    def test_new_product_without_ids_purges_listings_only(self, warm_cache):
        InvalidationCoordinator(warm_cache).invalidate(InvalidationEvent(product_affected=True))

        assert not warm_cache.has("all-products")
        assert warm_cache.has("product-p1")


class TestOrderEvents:
    def test_purges_all_orders_and_user_orders(self, warm_cache):
        InvalidationCoordinator(warm_cache).invalidate(
            InvalidationEvent(order_affected=True, user_id="u1")
        )

        assert not warm_cache.has("my-orders-u1")
        assert not warm_cache.has("all-orders")
        assert warm_cache.has("my-orders-u2")
        assert warm_cache.has("order-o1")

    def test_order_id_purges_order_detail(self, warm_cache):
        InvalidationCoordinator(warm_cache).invalidate(
            InvalidationEvent(order_affected=True, order_id="o1")
        )

        assert not warm_cache.has("order-o1")


class TestCombinedEvents:
    def test_order_placement_purges_every_affected_key_in_one_call(self, warm_cache):
        purged = InvalidationCoordinator(warm_cache).invalidate(
            InvalidationEvent(
                product_affected=True,
                product_ids=["p1"],
                order_affected=True,
                user_id="u1",
                admin_affected=True,
            )
        )

        assert set(purged) == {
            "latest-products",
            "categories",
            "all-products",
            "product-p1",
            "all-orders",
            "my-orders-u1",
            "admin-stats",
            "admin-pie-charts",
            "admin-bar-charts",
            "admin-line-charts",
        }
        assert sorted(warm_cache.keys()) == sorted(
            ["product-p2", "product-p3", "order-o1", "my-orders-u2"]
        )

    def test_empty_event_purges_nothing(self, warm_cache):
        purged = InvalidationCoordinator(warm_cache).invalidate(InvalidationEvent())

        assert purged == []
        assert len(warm_cache) == len(ALL_KEYS)

    def test_derived_keys_are_deduplicated(self):
        keys = derive_keys(
            InvalidationEvent(product_affected=True, product_ids=["p1", "p1"])
        )

        assert keys.count("product-p1") == 1


class TestMalformedEvents:
    """Malformed events fail loudly and leave the cache untouched."""

    @pytest.mark.parametrize(
        "event",
        [
            InvalidationEvent(product_ids=["p1"]),
            InvalidationEvent(order_id="o1"),
            InvalidationEvent(user_id="u1", admin_affected=True),
            InvalidationEvent(product_affected=True, product_ids=["p1", " "]),
            InvalidationEvent(product_affected=True, product_ids="p1"),
            InvalidationEvent(order_affected=True, user_id=""),
        ],
    )
    def test_raises_before_any_delete(self, warm_cache, event):
        with pytest.raises(InvalidationEventError):
            InvalidationCoordinator(warm_cache).invalidate(event)

        assert len(warm_cache) == len(ALL_KEYS)
