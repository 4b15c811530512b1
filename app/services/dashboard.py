from decimal import Decimal

from sqlalchemy.orm import Session

import app.repositories.brand as brand_repo
import app.repositories.product as product_repo
from app.schemas.dashboard import DashboardStats, RecentProduct

RECENT_PRODUCTS_LIMIT = 5
PLACEHOLDER_IMAGE = "/api/placeholder/60/60"


def format_price(price: Decimal | float) -> str:
    """Render a price the way the shop displays it, e.g. ``Rs. 12,500``."""
    value = Decimal(price)
    if value == value.to_integral_value():
        return f"Rs. {value:,.0f}"
    return f"Rs. {value:,.2f}"


def get_dashboard_stats(db: Session) -> DashboardStats:
    recent = product_repo.get_recent_products(db, limit=RECENT_PRODUCTS_LIMIT)
    return DashboardStats(
        brand_count=brand_repo.count_brands(db),
        product_count=product_repo.count_products(db),
        recent_products=[
            RecentProduct(
                id=product.id,
                brand=product.brand.name,
                model_number=product.model_number,
                price=format_price(product.price),
                image=product.brand.image_url or PLACEHOLDER_IMAGE,
                created_at=product.created_at,
            )
            for product in recent
        ],
    )
