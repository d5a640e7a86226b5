"""
HTTP-level tests: read paths populate the cache, write paths purge it.
"""

from datetime import date

import pytest

from tests.factories import make_order, make_product, make_user

pytestmark = pytest.mark.asyncio

ADMIN_KEYS = ("admin-stats", "admin-pie-charts", "admin-bar-charts", "admin-line-charts")
LISTING_KEYS = ("latest-products", "categories", "all-products")


async def warm_admin(client, admin_id: str) -> None:
    for chart in ("stats", "pie", "bar", "line"):
        await client.get(f"/api/v1/dashboard/{chart}", params={"id": admin_id})


async def warm_order_keys(client, admin_id: str, user_id: str, order_id: str) -> None:
    await client.get(f"/api/v1/order/{order_id}")
    await client.get("/api/v1/order/my", params={"id": user_id})
    await client.get("/api/v1/order/all", params={"id": admin_id})
    await warm_admin(client, admin_id)


def order_keys(user_id: str, order_id: str) -> tuple:
    return (f"order-{order_id}", f"my-orders-{user_id}", "all-orders") + ADMIN_KEYS


@pytest.fixture
async def admin(store):
    return await make_user(store, id="admin-1", role="admin", dob=date(1985, 1, 1))


@pytest.fixture
async def customer(store):
    return await make_user(store, id="cust-1", gender="female", dob=date(2001, 7, 7))


def order_body(user_id: str, product_id: str, quantity: int = 2) -> dict:
    return {
        "shipping_info": {
            "address": "221B Baker Street",
            "city": "London",
            "state": "LDN",
            "country": "UK",
            "pincode": 12345,
        },
        "user": user_id,
        "sub_total": 200,
        "tax": 18,
        "shipping_charges": 5,
        "discount": 0,
        "total": 223,
        "order_items": [
            {
                "name": "Widget",
                "photo": "https://img.example.com/w.png",
                "price": 100,
                "quantity": quantity,
                "product_id": product_id,
            }
        ],
    }


class TestAdminGuard:
    async def test_missing_id_is_unauthorized(self, client):
        response = await client.get("/api/v1/dashboard/stats")

        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "You are not logged in"}

    async def test_customer_is_forbidden(self, client, customer):
        response = await client.get("/api/v1/dashboard/stats", params={"id": customer.id})

        assert response.status_code == 403
        assert response.json()["success"] is False


class TestProducts:
    async def test_details_are_cached_and_404_is_not(self, client, cache, store):
        product = await make_product(store, name="Lamp")

        response = await client.get(f"/api/v1/product/{product.id}")
        assert response.status_code == 200
        assert response.json()["product"]["name"] == "Lamp"
        assert cache.has(f"product-{product.id}")

        missing = await client.get("/api/v1/product/nope")
        assert missing.status_code == 404
        assert not cache.has("product-nope")

    async def test_create_purges_listings_and_dashboard(self, client, cache, admin):
        await client.get("/api/v1/product/latest")
        await client.get("/api/v1/product/categories")
        await client.get("/api/v1/dashboard/stats", params={"id": admin.id})
        assert cache.has("latest-products") and cache.has("admin-stats")

        response = await client.post(
            "/api/v1/product/new",
            params={"id": admin.id},
            json={
                "name": "Desk",
                "photo": "https://img.example.com/d.png",
                "price": 250,
                "stock": 4,
                "category": "  Furniture ",
            },
        )

        assert response.status_code == 201
        assert not cache.has("latest-products")
        assert not cache.has("categories")
        assert not cache.has("admin-stats")

        categories = await client.get("/api/v1/product/categories")
        assert categories.json()["categories"] == ["furniture"]

    async def test_update_purges_product_detail(self, client, cache, store, admin):
        product = await make_product(store, price=10)
        await client.get(f"/api/v1/product/{product.id}")

        response = await client.put(
            f"/api/v1/product/{product.id}", params={"id": admin.id}, json={"price": 12.5}
        )

        assert response.status_code == 200
        assert not cache.has(f"product-{product.id}")
        details = await client.get(f"/api/v1/product/{product.id}")
        assert details.json()["product"]["price"] == 12.5

    async def test_delete_purges_product_listing_and_dashboard(
        self, client, cache, store, admin
    ):
        product = await make_product(store)
        await client.get(f"/api/v1/product/{product.id}")
        await client.get("/api/v1/product/latest")
        await client.get("/api/v1/product/categories")
        await client.get("/api/v1/product/admin-products", params={"id": admin.id})
        await warm_admin(client, admin.id)

        response = await client.delete(f"/api/v1/product/{product.id}", params={"id": admin.id})

        assert response.status_code == 200
        for key in (f"product-{product.id}",) + LISTING_KEYS + ADMIN_KEYS:
            assert not cache.has(key)
        missing = await client.get(f"/api/v1/product/{product.id}")
        assert missing.status_code == 404

    async def test_search_filters_and_paginates(self, client, store):
        await make_product(store, name="Blue Mug", price=5, category="kitchen")
        await make_product(store, name="Red Mug", price=15, category="kitchen")
        await make_product(store, name="Chair", price=50, category="furniture")

        response = await client.get(
            "/api/v1/product/all", params={"search": "mug", "sort": "desc"}
        )

        body = response.json()
        assert [p["name"] for p in body["products"]] == ["Red Mug", "Blue Mug"]
        assert body["total_page"] == 1


class TestOrders:
    async def test_placement_reduces_stock_and_purges_keys(
        self, client, cache, store, admin, customer
    ):
        product = await make_product(store, stock=10)
        await client.get(f"/api/v1/product/{product.id}")
        await client.get("/api/v1/order/my", params={"id": customer.id})
        await client.get("/api/v1/order/all", params={"id": admin.id})
        await client.get("/api/v1/dashboard/stats", params={"id": admin.id})

        response = await client.post("/api/v1/order/new", json=order_body(customer.id, product.id))

        assert response.status_code == 201
        for key in (
            f"product-{product.id}",
            f"my-orders-{customer.id}",
            "all-orders",
            "admin-stats",
        ):
            assert not cache.has(key)

        refreshed = await client.get(f"/api/v1/product/{product.id}")
        assert refreshed.json()["product"]["stock"] == 8

        mine = await client.get("/api/v1/order/my", params={"id": customer.id})
        assert len(mine.json()["orders"]) == 1

        stats = await client.get("/api/v1/dashboard/stats", params={"id": admin.id})
        assert stats.json()["stats"]["count"]["order"] == 1
        assert stats.json()["stats"]["count"]["revenue"] == 223

    async def test_insufficient_stock_rejects_order_and_keeps_cache(
        self, client, cache, store, admin, customer
    ):
        product = await make_product(store, stock=1)
        await client.get("/api/v1/dashboard/stats", params={"id": admin.id})

        response = await client.post(
            "/api/v1/order/new", json=order_body(customer.id, product.id, quantity=3)
        )

        assert response.status_code == 400
        assert cache.has("admin-stats")
        assert (await store.products.get(product.id)).stock == 1
        assert await store.orders.count() == 0

    async def test_unknown_product_is_404(self, client, customer):
        response = await client.post("/api/v1/order/new", json=order_body(customer.id, "ghost"))

        assert response.status_code == 404

    async def test_processing_advances_status_and_purges_keys(
        self, client, cache, store, admin, customer
    ):
        order = await make_order(store, customer.id)
        details = await client.get(f"/api/v1/order/{order.id}")
        assert details.json()["order"]["user_name"] == customer.name

        statuses = []
        for _ in range(3):
            await warm_order_keys(client, admin.id, customer.id, order.id)
            response = await client.put(f"/api/v1/order/{order.id}", params={"id": admin.id})
            statuses.append(response.json()["status"])
            for key in order_keys(customer.id, order.id):
                assert not cache.has(key)

        assert statuses == ["Shipped", "Delivered", "Delivered"]
        stored = await store.orders.get(order.id)
        assert stored.status.value == "Delivered"

    async def test_processing_unknown_order_is_404(self, client, cache, admin):
        await warm_admin(client, admin.id)

        response = await client.put("/api/v1/order/ghost", params={"id": admin.id})

        assert response.status_code == 404
        assert cache.has("admin-stats")

    async def test_delete_purges_order_keys(self, client, cache, store, admin, customer):
        order = await make_order(store, customer.id)
        await warm_order_keys(client, admin.id, customer.id, order.id)

        response = await client.delete(f"/api/v1/order/{order.id}", params={"id": admin.id})

        assert response.status_code == 200
        for key in order_keys(customer.id, order.id):
            assert not cache.has(key)
        missing = await client.get(f"/api/v1/order/{order.id}")
        assert missing.status_code == 404


class TestUsersAndCoupons:
    async def test_list_users_is_admin_only(self, client, admin, customer):
        forbidden = await client.get("/api/v1/user/all", params={"id": customer.id})
        assert forbidden.status_code == 403

        response = await client.get("/api/v1/user/all", params={"id": admin.id})

        assert response.status_code == 200
        assert {u["id"] for u in response.json()["users"]} == {admin.id, customer.id}

    async def test_delete_user_purges_dashboard(self, client, cache, store, admin):
        user = await make_user(store, id="leaving-1")
        await warm_admin(client, admin.id)

        response = await client.delete(f"/api/v1/user/{user.id}", params={"id": admin.id})

        assert response.status_code == 200
        assert await store.users.get(user.id) is None
        for key in ADMIN_KEYS:
            assert not cache.has(key)

    async def test_delete_user_with_orders_is_refused(
        self, client, cache, store, admin, customer
    ):
        order = await make_order(store, customer.id)
        await warm_order_keys(client, admin.id, customer.id, order.id)

        response = await client.delete(f"/api/v1/user/{customer.id}", params={"id": admin.id})

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "User has orders"}
        assert await store.users.get(customer.id) is not None
        for key in order_keys(customer.id, order.id):
            assert cache.has(key)
        listing = await client.get("/api/v1/order/all", params={"id": admin.id})
        assert listing.json()["orders"][0]["user_name"] == customer.name

    async def test_new_user_purges_dashboard(self, client, cache, admin):
        await client.get("/api/v1/dashboard/pie", params={"id": admin.id})
        assert cache.has("admin-pie-charts")

        response = await client.post(
            "/api/v1/user/new",
            json={
                "id": "firebase-uid-1",
                "name": "Asha",
                "email": "asha@example.com",
                "photo": "https://img.example.com/a.png",
                "gender": "female",
                "dob": "1999-09-09",
            },
        )

        assert response.status_code == 201
        assert response.json()["message"] == "Welcome, Asha"
        assert not cache.has("admin-pie-charts")

    async def test_coupon_lifecycle(self, client, admin):
        created = await client.post(
            "/api/v1/payment/coupon/new",
            params={"id": admin.id},
            json={"coupon": "SAVE10", "amount": 10},
        )
        assert created.status_code == 201

        discount = await client.get("/api/v1/payment/discount", params={"coupon": "SAVE10"})
        assert discount.json() == {"success": True, "discount": 10}

        invalid = await client.get("/api/v1/payment/discount", params={"coupon": "NOPE"})
        assert invalid.status_code == 400

        listing = await client.get("/api/v1/payment/coupon/all", params={"id": admin.id})
        coupon_id = listing.json()["coupons"][0]["id"]

        deleted = await client.delete(
            f"/api/v1/payment/coupon/{coupon_id}", params={"id": admin.id}
        )
        assert deleted.json()["message"] == "Coupon SAVE10 deleted successfully"


class TestHealth:
    async def test_reports_database_up(self, client):
        response = await client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["components"]["database"] == "up"
