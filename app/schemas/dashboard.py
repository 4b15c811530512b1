from datetime import datetime

from pydantic import BaseModel


class RecentProduct(BaseModel):
    id: int
    brand: str
    model_number: str
    price: str
    image: str
    created_at: datetime


class DashboardStats(BaseModel):
    brand_count: int
    product_count: int
    recent_products: list[RecentProduct]
