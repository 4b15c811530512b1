from app.db.models.user import User
from app.db.models.brand import Brand
from app.db.models.product import Product

__all__ = ["User", "Brand", "Product"]
