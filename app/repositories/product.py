from decimal import Decimal

from sqlalchemy.orm import Session, joinedload

from app.db.base import contains_ignore_case
from app.db.models.product import Product as ProductModel
from app.errors import NotFoundError

SORTABLE_COLUMNS = {
    "created_at": ProductModel.created_at,
    "price": ProductModel.price,
    "model_number": ProductModel.model_number,
}


def get_product_by_id(db: Session, product_id: int) -> ProductModel | None:
    """Get a product by ID."""
    return (
        db.query(ProductModel)
        .options(joinedload(ProductModel.brand))
        .filter(ProductModel.id == product_id)
        .first()
    )


def get_product_by_brand_model(
    db: Session, brand_id: int, model_number: str, exclude_id: int | None = None
) -> ProductModel | None:
    """Get a product by its (brand, model number) combination."""
    query = db.query(ProductModel).filter(
        ProductModel.brand_id == brand_id, ProductModel.model_number == model_number
    )
    if exclude_id is not None:
        query = query.filter(ProductModel.id != exclude_id)
    return query.first()


def get_products_paginated(
    db: Session,
    page: int = 1,
    page_size: int = 10,
    model_number: str | None = None,
    brand_id: int | None = None,
    sort_by: str = "created_at",
    sort_order: str = "desc",
) -> tuple[list[ProductModel], int]:
    """
    Get products with optional filters, sorting and pagination.

    Args:
        model_number: Case-insensitive partial match, wildcards matched literally
        brand_id: Only products of this brand
        sort_by: One of SORTABLE_COLUMNS
        sort_order: "asc" or "desc"

    Returns:
        Tuple of (list of products, total count)
    """
    query = db.query(ProductModel)
    if model_number:
        query = query.filter(contains_ignore_case(ProductModel.model_number, model_number))
    if brand_id is not None:
        query = query.filter(ProductModel.brand_id == brand_id)

    total = query.count()

    column = SORTABLE_COLUMNS[sort_by]
    ordering = column.desc() if sort_order == "desc" else column.asc()
    tiebreak = ProductModel.id.desc() if sort_order == "desc" else ProductModel.id.asc()
    skip = (page - 1) * page_size
    products = (
        query.options(joinedload(ProductModel.brand))
        .order_by(ordering, tiebreak)
        .offset(skip)
        .limit(page_size)
        .all()
    )
    return products, total


def get_recent_products(db: Session, limit: int = 5) -> list[ProductModel]:
    """Newest products first."""
    return (
        db.query(ProductModel)
        .options(joinedload(ProductModel.brand))
        .order_by(ProductModel.created_at.desc(), ProductModel.id.desc())
        .limit(limit)
        .all()
    )


def count_products(db: Session) -> int:
    return db.query(ProductModel).count()


def create_product(
    db: Session,
    brand_id: int,
    model_number: str,
    price: Decimal,
    created_by_id: int,
    currency: str = "LKR",
) -> ProductModel:
    """Create a new product in the database. Pure data access - no business logic."""
    db_product = ProductModel(
        brand_id=brand_id,
        model_number=model_number,
        price=price,
        currency=currency,
        created_by_id=created_by_id,
    )
    db.add(db_product)
    db.commit()
    db.refresh(db_product)
    return db_product


def update_product(
    db: Session,
    product_id: int,
    brand_id: int | None = None,
    model_number: str | None = None,
    price: Decimal | None = None,
) -> ProductModel:
    """Update a product. Only provided fields will be updated."""
    product = get_product_by_id(db, product_id)
    if not product:
        raise NotFoundError("Product not found")

    if brand_id is not None:
        product.brand_id = brand_id
    if model_number is not None:
        product.model_number = model_number
    if price is not None:
        product.price = price

    db.commit()
    db.refresh(product)
    return product


def delete_product(db: Session, product_id: int) -> None:
    """Delete a product."""
    product = get_product_by_id(db, product_id)
    if not product:
        raise NotFoundError("Product not found")
    db.delete(product)
    db.commit()
