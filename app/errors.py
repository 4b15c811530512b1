"""Custom domain exceptions for the application."""

from enum import Enum

# Stable, machine-readable error codes for API consumers.
NOT_FOUND = "NOT_FOUND"
DUPLICATE_RESOURCE = "DUPLICATE_RESOURCE"
VALIDATION_ERROR = "VALIDATION_ERROR"
INSUFFICIENT_PRIVILEGES = "INSUFFICIENT_PRIVILEGES"
DELIVERY_FAILED = "DELIVERY_FAILED"
HTTP_ERROR = "HTTP_ERROR"
INTERNAL_ERROR = "INTERNAL_ERROR"


class AuthFailure(str, Enum):
    """Reasons an authentication attempt is rejected. The value is the error code."""

    NO_TOKEN = "NO_TOKEN"
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    ACCOUNT_DEACTIVATED = "ACCOUNT_DEACTIVATED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"


_AUTH_FAILURE_MESSAGES = {
    AuthFailure.NO_TOKEN: "Access denied. No token provided.",
    AuthFailure.INVALID_TOKEN: "Token is not valid.",
    AuthFailure.TOKEN_EXPIRED: "Token has expired.",
    AuthFailure.USER_NOT_FOUND: "Token is not valid. User not found.",
    AuthFailure.ACCOUNT_DEACTIVATED: "Account is deactivated.",
    AuthFailure.INVALID_CREDENTIALS: "Invalid email or password",
}


class DomainError(Exception):
    """Base exception for domain/business logic errors."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource does not exist."""

    pass


class ConflictError(DomainError):
    """Raised when attempting to create or update a resource that would violate a uniqueness constraint."""

    pass


class ValidationError(DomainError):
    """Raised when business rules or domain validation fail (e.g. weak password, wrong current password)."""

    pass


class AuthenticationError(DomainError):
    """Raised when the caller cannot be authenticated.

    ``reason`` tells which check failed; the message defaults to a fixed text
    per reason so callers cannot leak more detail than intended.
    """

    def __init__(self, reason: AuthFailure, message: str | None = None):
        self.reason = reason
        super().__init__(message or _AUTH_FAILURE_MESSAGES[reason])


class AuthorizationError(DomainError):
    """Raised when an authenticated user lacks the role required for an action."""

    def __init__(self, message: str = "Access denied. Insufficient privileges."):
        super().__init__(message)


class DeliveryError(DomainError):
    """Raised when an outbound email cannot be delivered."""

    pass
