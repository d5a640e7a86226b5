from typing import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import InsufficientStockError, NotFoundError
from app.models.db.Product import Product
from app.models.order.OrderModels import OrderItem


async def reduce_stock(session: AsyncSession, order_items: Iterable[OrderItem]) -> None:
    """
    Decrement each ordered product's stock, in item order.

    Runs inside the caller's transaction, so a missing product or short
    stock aborts the whole order before any cache invalidation fires.
    """
    for item in order_items:
        product = await session.get(Product, item.product_id, with_for_update=True)
        if product is None:
            raise NotFoundError(f"Product {item.product_id} not found")

        if product.stock < item.quantity:
            raise InsufficientStockError(
                f"Only {product.stock} of {product.name} left in stock"
            )

        product.stock -= item.quantity
