from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

import app.repositories.brand as brand_repo
from app.api.deps import admin_only, admin_or_sale, get_db
from app.domain.access import AuthContext
from app.schemas.brand import Brand, BrandCreate, BrandUpdate
from app.schemas.pagination import PaginatedResponse
from app.schemas.response import ApiResponse
from app.services.brand import create_brand, delete_brand, get_brand, update_brand

router = APIRouter(prefix="/brands", tags=["brands"])


@router.get("", response_model=ApiResponse[PaginatedResponse[Brand]])
def get_all_brands(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    page_size: int = Query(10, ge=1, le=1000, description="Number of items per page"),
    search: str | None = Query(None, description="Filter brands by name (partial match)"),
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(admin_or_sale),
):
    """Get brands sorted by name."""
    brands, total = brand_repo.get_all_brands_paginated(
        db, page=page, page_size=page_size, search=search
    )
    return ApiResponse[PaginatedResponse[Brand]](
        data=PaginatedResponse[Brand](
            items=[Brand.model_validate(brand) for brand in brands],
            total=total,
            page=page,
            page_size=page_size,
        )
    )


@router.get("/{brand_id}", response_model=ApiResponse[Brand])
def get_brand_by_id(
    brand_id: int,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(admin_or_sale),
):
    brand = get_brand(db, brand_id)
    return ApiResponse[Brand](data=Brand.model_validate(brand))


@router.post("", response_model=ApiResponse[Brand], status_code=status.HTTP_201_CREATED)
def create_new_brand(
    brand_data: BrandCreate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(admin_only),
):
    """
    Create a brand. Only admin users can create brands.

    The image is uploaded by the client beforehand; only its URL is stored.
    """
    brand = create_brand(db, brand_data, created_by_id=auth.user_id)
    return ApiResponse[Brand](message="Brand created successfully", data=Brand.model_validate(brand))


@router.put("/{brand_id}", response_model=ApiResponse[Brand])
def update_brand_by_id(
    brand_id: int,
    brand_data: BrandUpdate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(admin_only),
):
    """Update a brand. Only admin users can update brands."""
    brand = update_brand(db, brand_id, brand_data)
    return ApiResponse[Brand](message="Brand updated successfully", data=Brand.model_validate(brand))


@router.delete("/{brand_id}", response_model=ApiResponse[None])
def delete_brand_by_id(
    brand_id: int,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(admin_only),
):
    """
    Delete a brand by ID. Only admin users can delete brands.

    A brand can only be deleted if no products reference it.
    """
    delete_brand(db, brand_id)
    return ApiResponse[None](message="Brand deleted successfully")
