"""Auth service: login, profile, password change, and the admin-approved password reset flow."""

import logging

from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.security import PasswordHasher, TokenService, validate_password
from app.db.models.user import User as UserModel
from app.domain.access import Role
from app.domain.password_reset import ResetTokenPolicy
from app.errors import (
    AuthenticationError,
    AuthFailure,
    DeliveryError,
    NotFoundError,
    ValidationError,
)
from app.repositories.user import (
    clear_password_reset_token,
    get_active_user_by_role,
    get_first_user_by_role,
    get_user_by_email,
    get_user_by_id,
    set_password_reset_token,
    update_last_login,
    update_user,
    update_user_password,
)
from app.schemas.user import Token, User
from app.services.email import EmailSender, build_reset_url, render_password_reset_email

logger = logging.getLogger(__name__)

FORGOT_PASSWORD_MESSAGE = (
    "If an account with that email exists, a password reset request "
    "has been sent to the administrator."
)
INVALID_RESET_TOKEN_MESSAGE = "Invalid or expired password reset token."
NO_APPROVER_MESSAGE = "Unable to process password reset request. Please contact support."
DELIVERY_FAILED_MESSAGE = "Failed to send password reset email. Please try again later."


def _ensure_valid_password(password: str) -> None:
    is_valid, error_message = validate_password(password)
    if not is_valid:
        raise ValidationError(error_message)


def login(
    db: Session,
    email: str,
    password: str,
    *,
    hasher: PasswordHasher,
    tokens: TokenService,
) -> Token:
    """
    Authenticate user by email and password, return a bearer token.

    Unknown email, inactive account and wrong password are indistinguishable.

    Raises:
        AuthenticationError: INVALID_CREDENTIALS for every failure.
    """
    user = get_user_by_email(db, email)
    if not user or not user.is_active or not hasher.verify(password, user.password_hash):
        logger.info("Failed login attempt")
        raise AuthenticationError(AuthFailure.INVALID_CREDENTIALS)

    user = update_last_login(db, user.id)
    logger.info("User %s logged in", user.id)
    return Token(
        token=tokens.issue(user.id),
        token_type="bearer",
        user=User.model_validate(user),
    )


def update_profile(db: Session, current_user: UserModel, name: str) -> UserModel:
    """Let a user rename themselves."""
    return update_user(db, current_user.id, name=name)


def change_password(
    db: Session,
    current_user: UserModel,
    current_password: str,
    new_password: str,
    *,
    hasher: PasswordHasher,
) -> None:
    """
    Change the caller's password after confirming the current one.

    Raises:
        ValidationError: If the current password is wrong or the new one is weak.
    """
    if not hasher.verify(current_password, current_user.password_hash):
        raise ValidationError("Current password is incorrect")
    _ensure_valid_password(new_password)

    update_user_password(db, current_user.id, hasher.hash(new_password))
    logger.info("User %s changed their password", current_user.id)


def admin_change_user_password(
    db: Session, user_id: int, new_password: str, *, hasher: PasswordHasher
) -> UserModel:
    """
    Set another user's password (admin action).

    Raises:
        NotFoundError: If the user doesn't exist
        ValidationError: If the new password is weak
    """
    user = get_user_by_id(db, user_id)
    if not user:
        raise NotFoundError("User not found")
    _ensure_valid_password(new_password)

    user = update_user_password(db, user.id, hasher.hash(new_password))
    logger.info("Password of user %s changed by an administrator", user.id)
    return user


def get_sales_user(db: Session) -> UserModel:
    """Return the first Sale account."""
    user = get_first_user_by_role(db, Role.SALE)
    if not user:
        raise NotFoundError("Sales user not found")
    return user


async def forgot_password(
    db: Session,
    email: str,
    *,
    reset_policy: ResetTokenPolicy,
    email_sender: EmailSender,
    settings: Settings,
) -> str:
    """
    Request a password reset that an administrator approves.

    The reset link goes to an active admin, not to the user. Unknown and
    inactive accounts get the same answer as a successful request and
    nothing is sent.

    Raises:
        DeliveryError: If no admin can approve or the email cannot be sent;
            in the latter case the stored token is cleared again.
    """
    user = get_user_by_email(db, email)
    if not user or not user.is_active:
        return FORGOT_PASSWORD_MESSAGE

    approver = get_active_user_by_role(db, Role.ADMIN)
    if not approver:
        logger.error("Password reset requested for user %s but no active admin exists", user.id)
        raise DeliveryError(NO_APPROVER_MESSAGE)

    issued = reset_policy.generate()
    set_password_reset_token(db, user.id, issued.token_hash, issued.expires_at)

    subject, html_body = render_password_reset_email(
        app_name=settings.app_name,
        reset_url=build_reset_url(settings.frontend_url, issued.plain_token, user.email),
        user_name=user.name,
        user_email=user.email,
        user_role=user.role.value,
        expire_minutes=settings.password_reset_token_expire_minutes,
    )
    try:
        await email_sender.send(approver.email, subject, html_body)
    except DeliveryError as e:
        clear_password_reset_token(db, user.id)
        logger.error("Password reset email for user %s failed: %s", user.id, e)
        raise DeliveryError(DELIVERY_FAILED_MESSAGE) from e

    logger.info("Password reset for user %s sent to admin %s", user.id, approver.id)
    return FORGOT_PASSWORD_MESSAGE


def reset_password(
    db: Session,
    email: str,
    token: str,
    new_password: str,
    *,
    reset_policy: ResetTokenPolicy,
    hasher: PasswordHasher,
) -> str:
    """
    Complete a password reset with the token from the approval email.

    Raises:
        ValidationError: Same message for unknown email, wrong token and
            expired token; a specific message only for a weak new password.
    """
    user = get_user_by_email(db, email)
    if not user or not reset_policy.verify(
        token_hash=user.reset_token_hash,
        expires_at=user.reset_token_expires,
        presented=token,
    ):
        raise ValidationError(INVALID_RESET_TOKEN_MESSAGE)

    _ensure_valid_password(new_password)

    # Also consumes the reset token
    update_user_password(db, user.id, hasher.hash(new_password))
    logger.info("Password reset completed for user %s", user.id)
    return "Password has been reset successfully. You can now login with your new password."
