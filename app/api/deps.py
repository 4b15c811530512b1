from collections.abc import Iterator

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.security import PasswordHasher, TokenService
from app.domain.access import AuthContext, Role, authorize
from app.domain.password_reset import ResetTokenPolicy
from app.errors import AuthenticationError, AuthFailure
from app.repositories.user import get_user_by_id
from app.services.email import EmailSender

bearer_scheme = HTTPBearer(auto_error=False)


def get_db(request: Request) -> Iterator[Session]:
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_reset_policy(request: Request) -> ResetTokenPolicy:
    return request.app.state.reset_policy


def get_email_sender(request: Request) -> EmailSender:
    return request.app.state.email_sender


def get_auth_context(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    tokens: TokenService = Depends(get_token_service),
    db: Session = Depends(get_db),
) -> AuthContext:
    """
    Resolve the bearer token of the request to an active user.

    Checks run in order and the first failure rejects the request with 401:
    missing token, invalid/expired token, unknown user, deactivated account.
    Deactivation is checked here on every request since tokens are never revoked.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError(AuthFailure.NO_TOKEN)

    user_id = tokens.verify(credentials.credentials)

    user = get_user_by_id(db, user_id)
    if user is None:
        raise AuthenticationError(AuthFailure.USER_NOT_FOUND)

    if not user.is_active:
        raise AuthenticationError(AuthFailure.ACCOUNT_DEACTIVATED)

    return AuthContext(user=user)


def require_roles(*roles: Role):
    """
    Create a dependency that requires the current user to have one of the specified roles.

    Args:
        *roles: Roles allowed through

    Returns:
        A dependency returning the AuthContext when the role matches

    Example:
        Depends(require_roles(Role.ADMIN))
        Depends(require_roles(Role.ADMIN, Role.SALE))
    """
    allowed = frozenset(roles)

    def role_checker(auth: AuthContext = Depends(get_auth_context)) -> AuthContext:
        authorize(auth.user.role, allowed)
        return auth

    return role_checker


admin_only = require_roles(Role.ADMIN)
sale_only = require_roles(Role.SALE)
admin_or_sale = require_roles(Role.ADMIN, Role.SALE)
