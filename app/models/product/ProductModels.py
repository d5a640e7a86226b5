from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class NewProductModel(BaseModel):
    name: str = Field(min_length=1)
    photo: str = Field(min_length=1, description="URL of the product image")
    price: float = Field(gt=0)
    stock: int = Field(ge=0)
    category: str = Field(min_length=1)

    @field_validator("category")
    @classmethod
    def normalize_category(cls, value: str) -> str:
        return value.strip().lower()


class UpdateProductModel(BaseModel):
    name: Optional[str] = None
    photo: Optional[str] = None
    price: Optional[float] = Field(default=None, gt=0)
    stock: Optional[int] = Field(default=None, ge=0)
    category: Optional[str] = None

    @field_validator("category")
    @classmethod
    def normalize_category(cls, value: Optional[str]) -> Optional[str]:
        return value.strip().lower() if value else value


class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    photo: str
    price: float
    stock: int
    category: str
    created_at: datetime
    updated_at: datetime
