from sqlalchemy.orm import Session

import app.repositories.brand as brand_repo
from app.db.models.brand import Brand as BrandModel
from app.errors import ConflictError, NotFoundError, ValidationError
from app.schemas.brand import BrandCreate, BrandUpdate


def get_brand(db: Session, brand_id: int) -> BrandModel:
    """
    Raises:
        NotFoundError: If brand doesn't exist
    """
    brand = brand_repo.get_brand_by_id(db, brand_id)
    if not brand:
        raise NotFoundError("Brand not found")
    return brand


def create_brand(db: Session, brand_data: BrandCreate, created_by_id: int) -> BrandModel:
    """
    Create a brand. Brand names are unique.

    Raises:
        ConflictError: If a brand with this name already exists
    """
    if brand_repo.get_brand_by_name(db, brand_data.name):
        raise ConflictError("Brand with this name already exists")
    return brand_repo.create_brand(
        db,
        name=brand_data.name,
        image_url=brand_data.image_url,
        image_public_id=brand_data.image_public_id,
        created_by_id=created_by_id,
    )


def update_brand(db: Session, brand_id: int, brand_data: BrandUpdate) -> BrandModel:
    """
    Update a brand's name and/or image reference.

    Raises:
        NotFoundError: If brand doesn't exist
        ConflictError: If the new name is taken by another brand
    """
    brand = get_brand(db, brand_id)

    if brand_data.name is not None and brand_data.name != brand.name:
        if brand_repo.get_brand_by_name(db, brand_data.name, exclude_id=brand_id):
            raise ConflictError("Brand with this name already exists")

    return brand_repo.update_brand(
        db,
        brand_id=brand_id,
        name=brand_data.name,
        image_url=brand_data.image_url,
        image_public_id=brand_data.image_public_id,
    )


def delete_brand(db: Session, brand_id: int) -> None:
    """
    Delete a brand that has no products.

    Raises:
        NotFoundError: If brand doesn't exist
        ValidationError: If products still reference the brand
    """
    get_brand(db, brand_id)

    product_count = brand_repo.count_products_for_brand(db, brand_id)
    if product_count > 0:
        raise ValidationError(
            f"Cannot delete brand. {product_count} products are associated with this brand."
        )

    brand_repo.delete_brand(db, brand_id)
