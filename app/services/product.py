from sqlalchemy.orm import Session

import app.repositories.brand as brand_repo
import app.repositories.product as product_repo
from app.db.models.product import Product as ProductModel
from app.errors import ConflictError, NotFoundError, ValidationError
from app.schemas.product import ProductCreate, ProductUpdate

DUPLICATE_PRODUCT_MESSAGE = "Product with this brand and model number already exists"


def get_product(db: Session, product_id: int) -> ProductModel:
    """
    Raises:
        NotFoundError: If product doesn't exist
    """
    product = product_repo.get_product_by_id(db, product_id)
    if not product:
        raise NotFoundError("Product not found")
    return product


def _ensure_brand_exists(db: Session, brand_id: int) -> None:
    # A dangling brand reference in the payload is a bad request, not a 404.
    if not brand_repo.get_brand_by_id(db, brand_id):
        raise ValidationError("Brand not found")


def create_product(
    db: Session, product_data: ProductCreate, created_by_id: int
) -> ProductModel:
    """
    Create a product.

    Raises:
        ValidationError: If the brand doesn't exist
        ConflictError: If (brand, model number) already exists
    """
    _ensure_brand_exists(db, product_data.brand_id)

    if product_repo.get_product_by_brand_model(
        db, product_data.brand_id, product_data.model_number
    ):
        raise ConflictError(DUPLICATE_PRODUCT_MESSAGE)

    return product_repo.create_product(
        db,
        brand_id=product_data.brand_id,
        model_number=product_data.model_number,
        price=product_data.price,
        created_by_id=created_by_id,
    )


def update_product(
    db: Session, product_id: int, product_data: ProductUpdate
) -> ProductModel:
    """
    Update a product.

    Raises:
        NotFoundError: If product doesn't exist
        ValidationError: If the new brand doesn't exist
        ConflictError: If the resulting (brand, model number) is taken
    """
    product = get_product(db, product_id)

    if product_data.brand_id is not None and product_data.brand_id != product.brand_id:
        _ensure_brand_exists(db, product_data.brand_id)

    final_brand_id = (
        product_data.brand_id if product_data.brand_id is not None else product.brand_id
    )
    final_model_number = (
        product_data.model_number
        if product_data.model_number is not None
        else product.model_number
    )
    if (final_brand_id, final_model_number) != (product.brand_id, product.model_number):
        if product_repo.get_product_by_brand_model(
            db, final_brand_id, final_model_number, exclude_id=product_id
        ):
            raise ConflictError(DUPLICATE_PRODUCT_MESSAGE)

    return product_repo.update_product(
        db,
        product_id=product_id,
        brand_id=product_data.brand_id,
        model_number=product_data.model_number,
        price=product_data.price,
    )


def list_products(
    db: Session,
    page: int = 1,
    page_size: int = 10,
    search: str | None = None,
    model_number: str | None = None,
    brand_id: int | None = None,
    sort_by: str = "created_at",
    sort_order: str = "desc",
) -> tuple[list[ProductModel], int]:
    """List products. ``search`` and ``model_number`` both match the model number."""
    return product_repo.get_products_paginated(
        db,
        page=page,
        page_size=page_size,
        model_number=model_number or search,
        brand_id=brand_id,
        sort_by=sort_by,
        sort_order=sort_order,
    )


def delete_product(db: Session, product_id: int) -> None:
    """
    Raises:
        NotFoundError: If product doesn't exist
    """
    get_product(db, product_id)
    product_repo.delete_product(db, product_id)
