from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from app.api.deps import admin_only, get_cache, get_invalidator, get_store
from app.api.order_utils.stock import reduce_stock
from app.core.cache import CacheStore, InvalidationCoordinator, InvalidationEvent, keys, read_through
from app.core.exceptions import NotFoundError
from app.core.store import Store
from app.models.db.Order import Order
from app.models.order.OrderModels import NewOrderModel, OrderOut, OrderWithUserOut

router = APIRouter()


def dump_order(order: Order, user_name: str | None = None) -> dict:
    payload = OrderWithUserOut.model_validate(order)
    payload.user_name = user_name
    return payload.model_dump(mode="json")


@router.post("/new", status_code=status.HTTP_201_CREATED)
async def new_order(
    order_data: NewOrderModel,
    store: Store = Depends(get_store),
    invalidator: InvalidationCoordinator = Depends(get_invalidator),
):
    await store.users.get_or_404(order_data.user)

    # stock reduction and the order insert commit together
    async with store.transaction() as session:
        await reduce_stock(session, order_data.order_items)
        order = Order(
            user_id=order_data.user,
            shipping_info=order_data.shipping_info.model_dump(),
            order_items=[item.model_dump() for item in order_data.order_items],
            sub_total=order_data.sub_total,
            tax=order_data.tax,
            shipping_charges=order_data.shipping_charges,
            discount=order_data.discount,
            total=order_data.total,
        )
        session.add(order)

    invalidator.invalidate(
        InvalidationEvent(
            product_affected=True,
            product_ids=[item.product_id for item in order_data.order_items],
            order_affected=True,
            user_id=order_data.user,
            admin_affected=True,
        )
    )

    return JSONResponse(
        content={"success": True, "message": "Order placed successfully", "order_id": order.id},
        status_code=status.HTTP_201_CREATED,
    )


@router.get("/my", status_code=status.HTTP_200_OK)
async def my_orders(
    id: str = Query(..., min_length=1, description="Id of the ordering user"),
    store: Store = Depends(get_store),
    cache: CacheStore = Depends(get_cache),
):
    async def load():
        orders = await store.orders.find(
            Order.user_id == id, order_by=Order.created_at.desc()
        )
        return [OrderOut.model_validate(o).model_dump(mode="json") for o in orders]

    orders = await read_through(cache, keys.my_orders_key(id), load)
    return JSONResponse(content={"success": True, "orders": orders})


@router.get("/all", status_code=status.HTTP_200_OK)
async def all_orders(
    store: Store = Depends(get_store),
    cache: CacheStore = Depends(get_cache),
    admin=Depends(admin_only),
):
    async def load():
        rows = await store.find_orders_with_user_names(order_by=[Order.created_at.desc()])
        return [dump_order(order, user_name) for order, user_name in rows]

    orders = await read_through(cache, keys.ALL_ORDERS, load)
    return JSONResponse(content={"success": True, "orders": orders})


@router.get("/{order_id}", status_code=status.HTTP_200_OK)
async def get_order_details(
    order_id: str,
    store: Store = Depends(get_store),
    cache: CacheStore = Depends(get_cache),
):
    async def load():
        rows = await store.find_orders_with_user_names(Order.id == order_id)
        if not rows:
            raise NotFoundError("Order not found")
        return dump_order(*rows[0])

    order = await read_through(cache, keys.order_key(order_id), load)
    return JSONResponse(content={"success": True, "order": order})


@router.put("/{order_id}", status_code=status.HTTP_200_OK)
async def process_order(
    order_id: str,
    store: Store = Depends(get_store),
    invalidator: InvalidationCoordinator = Depends(get_invalidator),
    admin=Depends(admin_only),
):
    """Advance the order one step: Processing -> Shipped -> Delivered."""
    async with store.transaction() as session:
        order = await session.get(Order, order_id, with_for_update=True)
        if order is None:
            raise NotFoundError("Order not found")
        order.status = order.status.next()

    invalidator.invalidate(
        InvalidationEvent(
            order_affected=True,
            order_id=order.id,
            user_id=order.user_id,
            admin_affected=True,
        )
    )

    return JSONResponse(
        content={
            "success": True,
            "message": "Order processed successfully",
            "status": order.status.value,
        }
    )


@router.delete("/{order_id}", status_code=status.HTTP_200_OK)
async def delete_order(
    order_id: str,
    store: Store = Depends(get_store),
    invalidator: InvalidationCoordinator = Depends(get_invalidator),
    admin=Depends(admin_only),
):
    order = await store.orders.delete(order_id)

    invalidator.invalidate(
        InvalidationEvent(
            order_affected=True,
            order_id=order.id,
            user_id=order.user_id,
            admin_affected=True,
        )
    )

    return JSONResponse(
        content={"success": True, "message": "Order deleted successfully"}
    )
