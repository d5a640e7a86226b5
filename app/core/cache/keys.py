"""Cache key vocabulary. Keys are case-sensitive and matched exactly."""

LATEST_PRODUCTS = "latest-products"
CATEGORIES = "categories"
ALL_PRODUCTS = "all-products"
ALL_ORDERS = "all-orders"

ADMIN_STATS = "admin-stats"
ADMIN_PIE_CHARTS = "admin-pie-charts"
ADMIN_BAR_CHARTS = "admin-bar-charts"
ADMIN_LINE_CHARTS = "admin-line-charts"

PRODUCT_LISTING_KEYS = (LATEST_PRODUCTS, CATEGORIES, ALL_PRODUCTS)
ADMIN_KEYS = (ADMIN_STATS, ADMIN_PIE_CHARTS, ADMIN_BAR_CHARTS, ADMIN_LINE_CHARTS)


def product_key(product_id: str) -> str:
    return f"product-{product_id}"


def order_key(order_id: str) -> str:
    return f"order-{order_id}"


def my_orders_key(user_id: str) -> str:
    return f"my-orders-{user_id}"
