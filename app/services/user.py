from sqlalchemy.orm import Session

import app.repositories.user as user_repo
from app.core.security import PasswordHasher, validate_password
from app.db.models.user import User as UserModel
from app.errors import ConflictError, NotFoundError, ValidationError
from app.schemas.user import UserCreate, UserUpdate


def create_user(db: Session, user_data: UserCreate, *, hasher: PasswordHasher) -> UserModel:
    """
    Provision a new staff account.

    - Validates email uniqueness (case-insensitive)
    - Validates password requirements
    - Defaults to the "Sale" role

    Raises:
        ConflictError: If the email is already registered
        ValidationError: If the password is too weak
    """
    if user_repo.get_user_by_email(db, user_data.email):
        raise ConflictError("Email already registered")

    is_valid, error_message = validate_password(user_data.password)
    if not is_valid:
        raise ValidationError(error_message)

    return user_repo.create_user(
        db,
        email=user_data.email,
        name=user_data.name,
        password_hash=hasher.hash(user_data.password),
        role=user_data.role,
    )


def get_user(db: Session, user_id: int) -> UserModel:
    """
    Get a user by ID.

    Raises:
        NotFoundError: If user doesn't exist
    """
    user = user_repo.get_user_by_id(db, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def update_user(
    db: Session,
    user_id: int,
    user_data: UserUpdate,
    current_user: UserModel,
) -> UserModel:
    """
    Update a user (admin action).

    - No admin can change their own role
    - No admin can deactivate their own account
    - Accounts are never deleted; setting is_active to false deactivates them

    Raises:
        NotFoundError: If user doesn't exist
        ConflictError: If email is already taken by another user
        ValidationError: On a self role change or self deactivation
    """
    user = get_user(db, user_id)

    if current_user.id == user_id and user_data.role is not None and user_data.role != user.role:
        raise ValidationError("You cannot change your own role")

    if current_user.id == user_id and user_data.is_active is False:
        raise ValidationError("You cannot deactivate your own account")

    if user_data.email is not None and user_repo.normalize_email(user_data.email) != user.email:
        existing_user = user_repo.get_user_by_email(db, user_data.email)
        if existing_user:
            raise ConflictError("Email already registered")

    return user_repo.update_user(
        db,
        user_id=user_id,
        email=user_data.email,
        name=user_data.name,
        role=user_data.role,
        is_active=user_data.is_active,
    )


def get_all_users(
    db: Session, page: int = 1, page_size: int = 100, name: str | None = None
) -> tuple[list[UserModel], int]:
    """
    Get all users with pagination.

    This is admin-only functionality, so no authorization checks are needed here
    (authorization is handled at the router level).
    """
    return user_repo.get_all_users_paginated(
        db, page=page, page_size=page_size, name=name
    )
