from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class BrandSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    image_url: str


class Product(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    brand: BrandSummary
    model_number: str
    price: float
    currency: str
    created_by_id: int
    created_at: datetime
    updated_at: datetime


class ProductCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    brand_id: int
    model_number: str = Field(..., min_length=2, max_length=50)
    price: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)


class ProductUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    brand_id: int | None = None
    model_number: str | None = Field(None, min_length=2, max_length=50)
    price: Decimal | None = Field(None, gt=0, max_digits=12, decimal_places=2)
