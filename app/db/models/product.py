from sqlalchemy import Column, ForeignKey, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.db.models.mixins import TimestampMixin

DEFAULT_CURRENCY = "LKR"


class Product(TimestampMixin, Base):
    __tablename__ = "products"
    __table_args__ = (
        UniqueConstraint("brand_id", "model_number", name="uq_products_brand_model_number"),
    )

    id = Column(Integer, primary_key=True, index=True)
    brand_id = Column(Integer, ForeignKey("brands.id"), nullable=False, index=True)
    model_number = Column(String(50), nullable=False)
    price = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False, default=DEFAULT_CURRENCY)
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    # Relationships
    brand = relationship("Brand", back_populates="products")
    created_by = relationship("User")
