from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from app.models.order.OrderStatus import OrderStatus


class ShippingInfo(BaseModel):
    address: str
    city: str
    state: str
    country: str
    pincode: int


class OrderItem(BaseModel):
    name: str
    photo: str
    price: float = Field(ge=0)
    quantity: int = Field(gt=0)
    product_id: str


class NewOrderModel(BaseModel):
    shipping_info: ShippingInfo
    user: str = Field(min_length=1, description="Id of the ordering user")
    sub_total: float = Field(gt=0)
    tax: float = Field(gt=0)
    shipping_charges: float = Field(default=0, ge=0)
    discount: float = Field(default=0, ge=0)
    total: float = Field(gt=0)
    order_items: List[OrderItem] = Field(min_length=1)


class OrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    shipping_info: ShippingInfo
    order_items: List[OrderItem]
    sub_total: float
    tax: float
    shipping_charges: float
    discount: float
    total: float
    status: OrderStatus
    created_at: datetime
    updated_at: datetime


class OrderWithUserOut(OrderOut):
    """Order payload with the ordering user's display name joined in."""

    user_name: str | None = None
