"""
Admin dashboard read-models.

Builds the four composite payloads behind /dashboard/{stats,pie,bar,line}.
Each payload is cached as one unit under its admin-* key and is only ever
rebuilt after an InvalidationEvent with admin_affected purged it.

Composition:
    1. Fan out every store query the payload needs with asyncio.gather
       (no ordering between them; each runs in its own session)
    2. Join; if any query failed the whole composition fails and nothing
       is cached
    3. Apply the chart/percent/distribution calculators synchronously
    4. Validate through the pydantic response model and cache the JSON form
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable

from app.api.stats_utils.category_distribution import distribute, round_half_up
from app.api.stats_utils.chart_data import bucket, month_start, month_window_start
from app.api.stats_utils.percent_change import percent_change
from app.core.cache import CacheStore, keys, read_through
from app.core.config import MARKETING_COST_RATIO
from app.core.store import Store
from app.models.db.Order import Order
from app.models.db.Product import Product
from app.models.db.User import User, age_on
from app.models.order.OrderStatus import OrderStatus
from app.models.stats.StatsResponse import (
    AdminCustomer,
    BarCharts,
    DashboardStats,
    EntityCount,
    LatestTransaction,
    LineCharts,
    OrderChart,
    OrderFulfillment,
    PercentChange,
    PieCharts,
    RevenueDistribution,
    StockAvailability,
    UserAgeGroup,
    UserRatio,
)

logger = logging.getLogger(__name__)

LATEST_TRANSACTIONS_LIMIT = 4


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class StatsComposer:
    def __init__(
        self,
        store: Store,
        cache: CacheStore,
        marketing_cost_ratio: float = MARKETING_COST_RATIO,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.store = store
        self.cache = cache
        self.marketing_cost_ratio = marketing_cost_ratio
        self.clock = clock

    async def dashboard_summary(self) -> dict:
        return await read_through(self.cache, keys.ADMIN_STATS, self._dashboard_summary)

    async def pie_chart_data(self) -> dict:
        return await read_through(self.cache, keys.ADMIN_PIE_CHARTS, self._pie_chart_data)

    async def bar_chart_data(self) -> dict:
        return await read_through(self.cache, keys.ADMIN_BAR_CHARTS, self._bar_chart_data)

    async def line_chart_data(self) -> dict:
        return await read_through(self.cache, keys.ADMIN_LINE_CHARTS, self._line_chart_data)

    # ------------------------------------------------------------------
    # Payload builders (cache misses only)
    # ------------------------------------------------------------------

    async def _dashboard_summary(self) -> dict:
        today = self.clock()
        current_start = month_start(today.year, today.month)
        previous_start = month_start(today.year, today.month - 1)
        six_month_start = month_window_start(today, 6)

        users, products, orders = self.store.users, self.store.products, self.store.orders
        in_current = Order.created_at >= current_start
        in_previous = (Order.created_at >= previous_start, Order.created_at < current_start)

        (
            current_products,
            previous_products,
            current_users,
            previous_users,
            current_orders,
            previous_orders,
            current_revenue,
            previous_revenue,
            product_count,
            user_count,
            order_count,
            revenue,
            six_month_orders,
            category_counts,
            female_user_count,
            latest_orders,
        ) = await asyncio.gather(
            products.count(Product.created_at >= current_start),
            products.count(Product.created_at >= previous_start, Product.created_at < current_start),
            users.count(User.created_at >= current_start),
            users.count(User.created_at >= previous_start, User.created_at < current_start),
            orders.count(in_current),
            orders.count(*in_previous),
            orders.total(Order.total, in_current),
            orders.total(Order.total, *in_previous),
            products.count(),
            users.count(),
            orders.count(),
            orders.total(Order.total),
            orders.find(Order.created_at >= six_month_start),
            products.count_by(Product.category),
            users.count(User.gender == "female"),
            orders.find(order_by=Order.created_at.desc(), limit=LATEST_TRANSACTIONS_LIMIT),
        )

        stats = DashboardStats(
            count=EntityCount(
                user=user_count, product=product_count, order=order_count, revenue=revenue
            ),
            category_count=distribute(category_counts, product_count),
            percent_change=PercentChange(
                revenue=round(percent_change(current_revenue, previous_revenue), 2),
                product=round(percent_change(current_products, previous_products), 2),
                user=round(percent_change(current_users, previous_users), 2),
                order=round(percent_change(current_orders, previous_orders), 2),
            ),
            chart=OrderChart(
                order=bucket(six_month_orders, 6, today),
                revenue=bucket(six_month_orders, 6, today, value_field="total"),
            ),
            user_ratio=UserRatio(male=user_count - female_user_count, female=female_user_count),
            latest_transactions=[
                LatestTransaction(
                    id=order.id,
                    discount=order.discount,
                    amount=order.total,
                    quantity=len(order.order_items),
                    status=order.status.value,
                )
                for order in latest_orders
            ],
        )
        logger.info("rebuilt %s", keys.ADMIN_STATS)
        return stats.model_dump(mode="json")

    async def _pie_chart_data(self) -> dict:
        today = self.clock().date()
        users, products, orders = self.store.users, self.store.products, self.store.orders

        (
            processing,
            shipped,
            delivered,
            category_counts,
            product_count,
            out_of_stock,
            gross_income,
            total_discount,
            shipping_cost,
            tax,
            all_users,
            admin_count,
            customer_count,
        ) = await asyncio.gather(
            orders.count(Order.status == OrderStatus.PROCESSING),
            orders.count(Order.status == OrderStatus.SHIPPED),
            orders.count(Order.status == OrderStatus.DELIVERED),
            products.count_by(Product.category),
            products.count(),
            products.count(Product.stock == 0),
            orders.total(Order.total),
            orders.total(Order.discount),
            orders.total(Order.shipping_charges),
            orders.total(Order.tax),
            users.find(),
            users.count(User.role == "admin"),
            users.count(User.role == "user"),
        )

        marketing_cost = round_half_up(gross_income * self.marketing_cost_ratio)
        net_margin = gross_income - total_discount - shipping_cost - tax - marketing_cost

        ages = [age_on(user.dob, today) for user in all_users]

        charts = PieCharts(
            order_fulfillment=OrderFulfillment(
                processing=processing, shipped=shipped, delivered=delivered
            ),
            product_categories=distribute(category_counts, product_count),
            stock_availability=StockAvailability(
                in_stock=product_count - out_of_stock, out_of_stock=out_of_stock
            ),
            revenue_distribution=RevenueDistribution(
                net_margin=net_margin,
                discount=total_discount,
                production_cost=shipping_cost,
                burnt=tax,
                marketing_cost=marketing_cost,
            ),
            admin_customer=AdminCustomer(admin=admin_count, customer=customer_count),
            user_age_group=UserAgeGroup(
                teen=sum(1 for age in ages if age < 20),
                adult=sum(1 for age in ages if 20 <= age < 40),
                old=sum(1 for age in ages if age >= 40),
            ),
        )
        logger.info("rebuilt %s", keys.ADMIN_PIE_CHARTS)
        return charts.model_dump(mode="json")

    async def _bar_chart_data(self) -> dict:
        today = self.clock()
        six_month_start = month_window_start(today, 6)
        twelve_month_start = month_window_start(today, 12)

        products, users, orders = await asyncio.gather(
            self.store.products.find(Product.created_at >= six_month_start),
            self.store.users.find(User.created_at >= six_month_start),
            self.store.orders.find(Order.created_at >= twelve_month_start),
        )

        charts = BarCharts(
            users=bucket(users, 6, today),
            products=bucket(products, 6, today),
            orders=bucket(orders, 12, today),
        )
        logger.info("rebuilt %s", keys.ADMIN_BAR_CHARTS)
        return charts.model_dump(mode="json")

    async def _line_chart_data(self) -> dict:
        today = self.clock()
        twelve_month_start = month_window_start(today, 12)

        products, users, orders = await asyncio.gather(
            self.store.products.find(Product.created_at >= twelve_month_start),
            self.store.users.find(User.created_at >= twelve_month_start),
            self.store.orders.find(Order.created_at >= twelve_month_start),
        )

        charts = LineCharts(
            products=bucket(products, 12, today),
            users=bucket(users, 12, today),
            discount=bucket(orders, 12, today, value_field="discount"),
            revenue=bucket(orders, 12, today, value_field="total"),
        )
        logger.info("rebuilt %s", keys.ADMIN_LINE_CHARTS)
        return charts.model_dump(mode="json")
