from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from app.api.deps import admin_only, get_invalidator, get_store
from app.core.cache import InvalidationCoordinator, InvalidationEvent
from app.core.exceptions import NotFoundError, ValidationError
from app.core.store import Store
from app.models.db.Coupon import Coupon
from app.models.payment.CouponModels import CouponOut, NewCouponModel

router = APIRouter()


@router.post("/coupon/new", status_code=status.HTTP_201_CREATED)
async def create_coupon(
    coupon_data: NewCouponModel,
    store: Store = Depends(get_store),
    invalidator: InvalidationCoordinator = Depends(get_invalidator),
    admin=Depends(admin_only),
):
    await store.coupons.create(code=coupon_data.coupon, amount=coupon_data.amount)

    # no cached read-model depends on coupons; the event purges nothing
    invalidator.invalidate(InvalidationEvent())

    return JSONResponse(
        content={
            "success": True,
            "message": f"Coupon {coupon_data.coupon} created successfully",
        },
        status_code=status.HTTP_201_CREATED,
    )


@router.get("/discount", status_code=status.HTTP_200_OK)
async def apply_discount(
    coupon: str = Query(..., min_length=1), store: Store = Depends(get_store)
):
    matches = await store.coupons.find(Coupon.code == coupon, limit=1)
    if not matches:
        raise ValidationError("Coupon code invalid")

    return JSONResponse(content={"success": True, "discount": matches[0].amount})


@router.get("/coupon/all", status_code=status.HTTP_200_OK)
async def get_all_coupons(store: Store = Depends(get_store), admin=Depends(admin_only)):
    coupons = await store.coupons.find(order_by=Coupon.created_at.desc())
    if not coupons:
        raise NotFoundError("No coupons added")

    return JSONResponse(
        content={
            "success": True,
            "coupons": [CouponOut.model_validate(c).model_dump(mode="json") for c in coupons],
        }
    )


@router.delete("/coupon/{coupon_id}", status_code=status.HTTP_200_OK)
async def delete_coupon(
    coupon_id: str,
    store: Store = Depends(get_store),
    invalidator: InvalidationCoordinator = Depends(get_invalidator),
    admin=Depends(admin_only),
):
    coupon = await store.coupons.delete(coupon_id)

    invalidator.invalidate(InvalidationEvent())

    return JSONResponse(
        content={"success": True, "message": f"Coupon {coupon.code} deleted successfully"}
    )
