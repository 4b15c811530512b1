from sqlalchemy.orm import Session

from app.db.base import contains_ignore_case
from app.db.models.brand import Brand as BrandModel
from app.db.models.product import Product as ProductModel
from app.errors import NotFoundError


def get_brand_by_id(db: Session, brand_id: int) -> BrandModel | None:
    """Get a brand by ID."""
    return db.query(BrandModel).filter(BrandModel.id == brand_id).first()


def get_brand_by_name(
    db: Session, name: str, exclude_id: int | None = None
) -> BrandModel | None:
    """Get a brand by exact name, optionally ignoring one brand."""
    query = db.query(BrandModel).filter(BrandModel.name == name)
    if exclude_id is not None:
        query = query.filter(BrandModel.id != exclude_id)
    return query.first()


def get_all_brands_paginated(
    db: Session, page: int = 1, page_size: int = 10, search: str | None = None
) -> tuple[list[BrandModel], int]:
    """Get brands sorted by name, optionally filtered by a case-insensitive name match."""
    query = db.query(BrandModel)
    if search:
        query = query.filter(contains_ignore_case(BrandModel.name, search))
    total = query.count()
    skip = (page - 1) * page_size
    brands = query.order_by(BrandModel.name).offset(skip).limit(page_size).all()
    return brands, total


def count_brands(db: Session) -> int:
    return db.query(BrandModel).count()


def count_products_for_brand(db: Session, brand_id: int) -> int:
    return db.query(ProductModel).filter(ProductModel.brand_id == brand_id).count()


def create_brand(
    db: Session,
    name: str,
    image_url: str,
    created_by_id: int,
    image_public_id: str | None = None,
) -> BrandModel:
    """Create a new brand in the database. Pure data access - no business logic."""
    db_brand = BrandModel(
        name=name,
        image_url=image_url,
        image_public_id=image_public_id,
        created_by_id=created_by_id,
    )
    db.add(db_brand)
    db.commit()
    db.refresh(db_brand)
    return db_brand


def update_brand(
    db: Session,
    brand_id: int,
    name: str | None = None,
    image_url: str | None = None,
    image_public_id: str | None = None,
) -> BrandModel:
    """Update a brand. Only provided fields will be updated."""
    brand = get_brand_by_id(db, brand_id)
    if not brand:
        raise NotFoundError("Brand not found")

    if name is not None:
        brand.name = name
    if image_url is not None:
        brand.image_url = image_url
    if image_public_id is not None:
        brand.image_public_id = image_public_id

    db.commit()
    db.refresh(brand)
    return brand


def delete_brand(db: Session, brand_id: int) -> None:
    """Delete a brand."""
    brand = get_brand_by_id(db, brand_id)
    if not brand:
        raise NotFoundError("Brand not found")
    db.delete(brand)
    db.commit()
