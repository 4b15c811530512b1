"""Seed the default staff accounts.

Usage:
    python -m app.db.seed [--purge]

Existing accounts (matched by email) are left untouched. ``--purge`` deletes
every user first and is refused in production.
"""

import argparse
import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

import app.repositories.user as user_repo
from app.core.config import Settings
from app.core.logging import configure_logging
from app.core.security import PasswordHasher
from app.db.base import create_session_factory
from app.domain.access import Role

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeedAccount:
    email: str
    password: str
    name: str
    role: Role


def default_accounts(settings: Settings) -> list[SeedAccount]:
    accounts = [
        SeedAccount(
            email=settings.first_admin_email,
            password=settings.first_admin_password,
            name=settings.first_admin_name,
            role=Role.ADMIN,
        )
    ]
    if settings.first_sale_email and settings.first_sale_password:
        accounts.append(
            SeedAccount(
                email=settings.first_sale_email,
                password=settings.first_sale_password,
                name=settings.first_sale_name,
                role=Role.SALE,
            )
        )
    return accounts


def seed_users(
    db: Session,
    accounts: list[SeedAccount],
    *,
    hasher: PasswordHasher,
    purge: bool = False,
    environment: str = "development",
) -> list[str]:
    """
    Create missing seed accounts.

    Returns:
        Emails of the accounts that were created.

    Raises:
        RuntimeError: If a purge is requested in production.
    """
    if purge:
        if environment == "production":
            raise RuntimeError("Refusing to purge users in production")
        deleted = user_repo.delete_all_users(db)
        logger.warning("Purged %d existing users", deleted)

    created = []
    for account in accounts:
        if user_repo.get_user_by_email(db, account.email):
            logger.info("User already exists: %s", account.email)
            continue
        user_repo.create_user(
            db,
            email=account.email,
            name=account.name,
            password_hash=hasher.hash(account.password),
            role=account.role,
        )
        created.append(user_repo.normalize_email(account.email))
        logger.info("Created user %s with role %s", account.email, account.role.value)
    return created


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Seed default staff accounts")
    parser.add_argument(
        "--purge",
        action="store_true",
        help="delete all users before seeding (not allowed in production)",
    )
    args = parser.parse_args(argv)

    settings = Settings()
    configure_logging(settings.log_level)
    session_factory = create_session_factory(settings.database_url)
    with session_factory() as db:
        seed_users(
            db,
            default_accounts(settings),
            hasher=PasswordHasher(rounds=settings.bcrypt_rounds),
            purge=args.purge,
            environment=settings.environment,
        )


if __name__ == "__main__":
    main()
