from datetime import datetime, timezone

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.db.base import contains_ignore_case
from app.db.models.user import User as UserModel
from app.domain.access import Role
from app.errors import NotFoundError


def normalize_email(email: str) -> str:
    """Emails are stored trimmed and lower-cased."""
    return email.strip().lower()


def get_user_by_email(db: Session, email: str) -> UserModel | None:
    """Get a user by email (case-insensitive)."""
    return (
        db.query(UserModel)
        .filter(func.lower(UserModel.email) == normalize_email(email))
        .first()
    )


def get_user_by_id(db: Session, user_id: int) -> UserModel | None:
    """Get a user by ID."""
    return db.query(UserModel).filter(UserModel.id == user_id).first()


def get_active_user_by_role(db: Session, role: Role) -> UserModel | None:
    """Get the first active user holding ``role``."""
    return (
        db.query(UserModel)
        .filter(UserModel.role == role, UserModel.is_active.is_(True))
        .order_by(UserModel.id)
        .first()
    )


def get_first_user_by_role(db: Session, role: Role) -> UserModel | None:
    """Get the first user holding ``role``, active or not."""
    return (
        db.query(UserModel).filter(UserModel.role == role).order_by(UserModel.id).first()
    )


def create_user(
    db: Session,
    email: str,
    name: str,
    password_hash: str,
    role: Role = Role.SALE,
    is_active: bool = True,
) -> UserModel:
    """Create a new user in the database. Pure data access - no business logic."""
    db_user = UserModel(
        email=normalize_email(email),
        name=name.strip(),
        password_hash=password_hash,
        role=role,
        is_active=is_active,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def _get_or_raise(db: Session, user_id: int) -> UserModel:
    user = get_user_by_id(db, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def update_user_password(db: Session, user_id: int, password_hash: str) -> UserModel:
    """Update a user's password hash. Any pending reset token is cleared."""
    user = _get_or_raise(db, user_id)

    user.password_hash = password_hash
    user.reset_token_hash = None
    user.reset_token_expires = None
    db.commit()
    db.refresh(user)
    return user


def set_password_reset_token(
    db: Session, user_id: int, token_hash: str, expires: datetime
) -> UserModel:
    """Store the digest and expiry of a password reset token, replacing any previous one."""
    user = _get_or_raise(db, user_id)

    user.reset_token_hash = token_hash
    user.reset_token_expires = expires
    db.commit()
    db.refresh(user)
    return user


def clear_password_reset_token(db: Session, user_id: int) -> UserModel:
    """Remove a pending password reset token."""
    user = _get_or_raise(db, user_id)

    user.reset_token_hash = None
    user.reset_token_expires = None
    db.commit()
    db.refresh(user)
    return user


def update_last_login(db: Session, user_id: int, when: datetime | None = None) -> UserModel:
    """Record a successful login. Concurrent logins simply overwrite each other."""
    user = _get_or_raise(db, user_id)

    user.last_login = when or datetime.now(timezone.utc)
    db.commit()
    db.refresh(user)
    return user


def update_user(
    db: Session,
    user_id: int,
    email: str | None = None,
    name: str | None = None,
    role: Role | None = None,
    is_active: bool | None = None,
) -> UserModel:
    """Update user fields. Only provided fields will be updated."""
    user = _get_or_raise(db, user_id)

    if email is not None:
        user.email = normalize_email(email)
    if name is not None:
        user.name = name.strip()
    if role is not None:
        user.role = role
    if is_active is not None:
        user.is_active = is_active

    db.commit()
    db.refresh(user)
    return user


def get_all_users_paginated(
    db: Session, page: int = 1, page_size: int = 100, name: str | None = None
) -> tuple[list[UserModel], int]:
    """
    Get all users with pagination, sorted by name for stable pagination.

    Args:
        page: Page number (1-indexed)
        page_size: Number of items per page
        name: Optional case-insensitive partial match on the name

    Returns:
        Tuple of (list of users, total count)
    """
    query = db.query(UserModel)
    if name:
        query = query.filter(contains_ignore_case(UserModel.name, name))
    total = query.count()
    skip = (page - 1) * page_size
    users = (
        query.order_by(UserModel.name, UserModel.id).offset(skip).limit(page_size).all()
    )
    return users, total


def delete_all_users(db: Session) -> int:
    """Delete every user. Only used by the seed command with an explicit purge."""
    deleted = db.query(UserModel).delete()
    db.commit()
    return deleted
