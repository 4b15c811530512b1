import re
from datetime import datetime, timedelta, timezone

import jwt
from passlib.context import CryptContext

from app.errors import AuthenticationError, AuthFailure

# bcrypt only looks at the first 72 bytes of a secret.
MAX_PASSWORD_BYTES = 72

ACCESS_TOKEN_TYPE = "access"


class PasswordHasher:
    """Salted one-way password hashing backed by bcrypt."""

    def __init__(self, rounds: int = 12):
        self._context = CryptContext(
            schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds
        )

    def hash(self, password: str) -> str:
        """Hash a password."""
        return self._context.hash(password)

    def verify(self, plain_password: str, hashed_password: str | None) -> bool:
        """Verify a plain password against a hashed password. Never raises on mismatch."""
        if not hashed_password:
            return False
        try:
            return self._context.verify(plain_password, hashed_password)
        except (ValueError, TypeError):
            # Unknown or malformed hash format.
            return False


def validate_password(password: str) -> tuple[bool, str | None]:
    """
    Validate password meets requirements:
    - Between 8 characters and 72 bytes
    - At least one uppercase letter
    - At least one lowercase letter
    - At least one number
    - At least one symbol

    Returns: (is_valid, error_message)
    """
    if len(password) < 8:
        return False, "Password must be at least 8 characters long"

    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return False, f"Password must be at most {MAX_PASSWORD_BYTES} bytes long"

    if not re.search(r"[A-Z]", password):
        return False, "Password must contain at least one uppercase letter"

    if not re.search(r"[a-z]", password):
        return False, "Password must contain at least one lowercase letter"

    if not re.search(r"\d", password):
        return False, "Password must contain at least one number"

    if not re.search(r"[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>/?~`]", password):
        return False, "Password must contain at least one symbol"

    return True, None


class TokenService:
    """Issues and verifies signed, time-bound access tokens (JWT)."""

    def __init__(self, secret_key: str, algorithm: str, expire_minutes: int):
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._default_ttl = timedelta(minutes=expire_minutes)

    def issue(self, user_id: int, expires_delta: timedelta | None = None) -> str:
        """Create a JWT access token for ``user_id``."""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "type": ACCESS_TOKEN_TYPE,
            "iat": now,
            "exp": now + (expires_delta if expires_delta is not None else self._default_ttl),
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: str) -> int:
        """
        Decode and verify an access token, returning the embedded user id.

        Raises:
            AuthenticationError: TOKEN_EXPIRED past expiry, INVALID_TOKEN for
                anything else (bad signature, malformed, wrong type or subject).
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            raise AuthenticationError(AuthFailure.TOKEN_EXPIRED)
        except jwt.InvalidTokenError:
            raise AuthenticationError(AuthFailure.INVALID_TOKEN)

        # Only access tokens authenticate requests
        if payload.get("type") != ACCESS_TOKEN_TYPE:
            raise AuthenticationError(AuthFailure.INVALID_TOKEN)

        try:
            return int(payload["sub"])
        except (TypeError, ValueError):
            raise AuthenticationError(AuthFailure.INVALID_TOKEN)
