from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import admin_only, get_db, get_password_hasher
from app.core.security import PasswordHasher
from app.domain.access import AuthContext
from app.schemas.pagination import PaginatedResponse
from app.schemas.response import ApiResponse
from app.schemas.user import User, UserCreate, UserUpdate
from app.services.user import create_user, get_all_users, get_user, update_user

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=ApiResponse[User], status_code=status.HTTP_201_CREATED)
def create_new_user(
    user_data: UserCreate,
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    auth: AuthContext = Depends(admin_only),
):
    """
    Create a new staff user. Only admin users can create users.

    If role is not provided, the user gets the "Sale" role.
    """
    user = create_user(db, user_data, hasher=hasher)
    return ApiResponse[User](message="User created successfully", data=User.model_validate(user))


@router.get("", response_model=ApiResponse[PaginatedResponse[User]])
def get_all_users_paginated(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    page_size: int = Query(100, ge=1, le=1000, description="Number of items per page"),
    name: str | None = Query(None, description="Filter users by name (partial match)"),
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(admin_only),
):
    """Get all users with pagination. Only admin users can access this endpoint."""
    users, total = get_all_users(db, page=page, page_size=page_size, name=name)
    return ApiResponse[PaginatedResponse[User]](
        data=PaginatedResponse[User](
            items=[User.model_validate(user) for user in users],
            total=total,
            page=page,
            page_size=page_size,
        )
    )


@router.get("/{user_id}", response_model=ApiResponse[User])
def get_user_by_id(
    user_id: int,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(admin_only),
):
    """Get a user by ID. Only admin users can access this endpoint."""
    user = get_user(db, user_id)
    return ApiResponse[User](data=User.model_validate(user))


@router.put("/{user_id}", response_model=ApiResponse[User])
def update_user_by_id(
    user_id: int,
    user_data: UserUpdate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(admin_only),
):
    """
    Update a user by ID. Only admin users can update users.

    Setting is_active to false deactivates the account; accounts are never deleted.
    An admin cannot change their own role or deactivate themselves.
    """
    user = update_user(db, user_id, user_data, auth.user)
    return ApiResponse[User](message="User updated successfully", data=User.model_validate(user))
