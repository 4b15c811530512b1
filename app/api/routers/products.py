from typing import Literal

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import admin_only, admin_or_sale, get_db
from app.domain.access import AuthContext
from app.schemas.pagination import PaginatedResponse
from app.schemas.product import Product, ProductCreate, ProductUpdate
from app.schemas.response import ApiResponse
from app.services.brand import get_brand
from app.services.product import (
    create_product,
    delete_product,
    get_product,
    list_products,
    update_product,
)

router = APIRouter(prefix="/products", tags=["products"])

SortBy = Literal["created_at", "price", "model_number"]
SortOrder = Literal["asc", "desc"]


def _page(products, total: int, page: int, page_size: int) -> ApiResponse[PaginatedResponse[Product]]:
    return ApiResponse[PaginatedResponse[Product]](
        data=PaginatedResponse[Product](
            items=[Product.model_validate(product) for product in products],
            total=total,
            page=page,
            page_size=page_size,
        )
    )


@router.get("", response_model=ApiResponse[PaginatedResponse[Product]])
def get_all_products(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    page_size: int = Query(10, ge=1, le=1000, description="Number of items per page"),
    search: str | None = Query(None, description="Search in model number"),
    model_number: str | None = Query(None, description="Filter by model number (partial match)"),
    brand_id: int | None = Query(None, description="Only products of this brand"),
    sort_by: SortBy = Query("created_at"),
    sort_order: SortOrder = Query("desc"),
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(admin_or_sale),
):
    """Search, filter and page through products."""
    products, total = list_products(
        db,
        page=page,
        page_size=page_size,
        search=search,
        model_number=model_number,
        brand_id=brand_id,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return _page(products, total, page, page_size)


@router.get("/brand/{brand_id}", response_model=ApiResponse[PaginatedResponse[Product]])
def get_products_by_brand(
    brand_id: int,
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=1000),
    sort_by: SortBy = Query("created_at"),
    sort_order: SortOrder = Query("desc"),
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(admin_or_sale),
):
    """Products of one brand."""
    get_brand(db, brand_id)
    products, total = list_products(
        db,
        page=page,
        page_size=page_size,
        brand_id=brand_id,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return _page(products, total, page, page_size)


@router.get("/{product_id}", response_model=ApiResponse[Product])
def get_product_by_id(
    product_id: int,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(admin_or_sale),
):
    product = get_product(db, product_id)
    return ApiResponse[Product](data=Product.model_validate(product))


@router.post("", response_model=ApiResponse[Product], status_code=status.HTTP_201_CREATED)
def create_new_product(
    product_data: ProductCreate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(admin_only),
):
    """Create a product. Only admin users can create products."""
    product = create_product(db, product_data, created_by_id=auth.user_id)
    return ApiResponse[Product](
        message="Product created successfully", data=Product.model_validate(product)
    )


@router.put("/{product_id}", response_model=ApiResponse[Product])
def update_product_by_id(
    product_id: int,
    product_data: ProductUpdate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(admin_only),
):
    """Update a product. Only admin users can update products."""
    product = update_product(db, product_id, product_data)
    return ApiResponse[Product](
        message="Product updated successfully", data=Product.model_validate(product)
    )


@router.delete("/{product_id}", response_model=ApiResponse[None])
def delete_product_by_id(
    product_id: int,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(admin_only),
):
    """Delete a product. Only admin users can delete products."""
    delete_product(db, product_id)
    return ApiResponse[None](message="Product deleted successfully")
