from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import app.services.auth as auth_service
from app.api.deps import (
    admin_only,
    get_auth_context,
    get_db,
    get_email_sender,
    get_password_hasher,
    get_reset_policy,
    get_settings,
    get_token_service,
)
from app.core.config import Settings
from app.core.security import PasswordHasher, TokenService
from app.domain.access import AuthContext
from app.domain.password_reset import ResetTokenPolicy
from app.schemas.response import ApiResponse
from app.schemas.user import (
    AdminChangePassword,
    ChangePassword,
    LoginRequest,
    PasswordReset,
    PasswordResetRequest,
    ProfileUpdate,
    Token,
    User,
)
from app.services.email import EmailSender

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=ApiResponse[Token])
def login(
    credentials: LoginRequest,
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
):
    """Login endpoint - returns a bearer token and the public user profile."""
    token = auth_service.login(
        db, credentials.email, credentials.password, hasher=hasher, tokens=tokens
    )
    return ApiResponse[Token](message="Login successful", data=token)


@router.get("/me", response_model=ApiResponse[User])
def get_current_user_info(auth: AuthContext = Depends(get_auth_context)):
    """Get current authenticated user information."""
    return ApiResponse[User](
        message="User profile retrieved successfully",
        data=User.model_validate(auth.user),
    )


@router.put("/profile", response_model=ApiResponse[User])
def update_profile(
    profile: ProfileUpdate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
):
    """Update the caller's display name."""
    user = auth_service.update_profile(db, auth.user, profile.name)
    return ApiResponse[User](
        message="Profile updated successfully", data=User.model_validate(user)
    )


@router.put("/change-password", response_model=ApiResponse[None])
def change_password(
    passwords: ChangePassword,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    """Change the caller's password. The current password must be supplied."""
    auth_service.change_password(
        db,
        auth.user,
        passwords.current_password,
        passwords.new_password,
        hasher=hasher,
    )
    return ApiResponse[None](message="Password changed successfully")


@router.post("/forgot-password", response_model=ApiResponse[None])
async def forgot_password(
    request: PasswordResetRequest,
    db: Session = Depends(get_db),
    reset_policy: ResetTokenPolicy = Depends(get_reset_policy),
    email_sender: EmailSender = Depends(get_email_sender),
    settings: Settings = Depends(get_settings),
):
    """Request password reset - an administrator receives the reset link for approval."""
    message = await auth_service.forgot_password(
        db,
        request.email,
        reset_policy=reset_policy,
        email_sender=email_sender,
        settings=settings,
    )
    return ApiResponse[None](message=message)


@router.post("/reset-password", response_model=ApiResponse[None])
def reset_password(
    reset_data: PasswordReset,
    db: Session = Depends(get_db),
    reset_policy: ResetTokenPolicy = Depends(get_reset_policy),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    """Reset password using the token from the approval email."""
    message = auth_service.reset_password(
        db,
        reset_data.email,
        reset_data.token,
        reset_data.new_password,
        reset_policy=reset_policy,
        hasher=hasher,
    )
    return ApiResponse[None](message=message)


@router.put("/admin/change-user-password", response_model=ApiResponse[None])
def admin_change_user_password(
    payload: AdminChangePassword,
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    auth: AuthContext = Depends(admin_only),
):
    """Set another user's password. Only admin users can do this."""
    user = auth_service.admin_change_user_password(
        db, payload.user_id, payload.new_password, hasher=hasher
    )
    return ApiResponse[None](
        message=f"Password changed successfully for {user.name} ({user.email})"
    )


@router.get("/admin/sales-user", response_model=ApiResponse[User])
def get_sales_user(
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(admin_only),
):
    """Get the sales account. Only admin users can access this endpoint."""
    user = auth_service.get_sales_user(db)
    return ApiResponse[User](
        message="Sales user retrieved successfully", data=User.model_validate(user)
    )
