from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class NewCouponModel(BaseModel):
    coupon: str = Field(min_length=1, description="Coupon code")
    amount: float = Field(gt=0)


class CouponOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    code: str
    amount: float
    created_at: datetime
