from __future__ import annotations

import hashlib
import hmac
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

# 32 bytes of entropy, hex encoded to 64 characters.
RESET_TOKEN_BYTES = 32


@dataclass(frozen=True, slots=True)
class IssuedResetToken:
    """A freshly generated reset token.

    ``plain_token`` leaves the system out-of-band and is never stored;
    only ``token_hash`` and ``expires_at`` are persisted on the user.
    """

    plain_token: str
    token_hash: str
    expires_at: datetime


def hash_reset_token(token: str) -> str:
    """Fast deterministic digest used to store and look up reset tokens."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; stored values are always UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@dataclass(frozen=True, slots=True)
class ResetTokenPolicy:
    """Defines how password reset tokens are issued and checked.

    Semantics:
    - a token is valid only if its digest matches the stored digest
    - AND the check happens strictly before the stored expiry.

    A missing stored digest or expiry never verifies.
    """

    ttl: timedelta = timedelta(minutes=15)

    def generate(self, now: datetime | None = None) -> IssuedResetToken:
        now = now or datetime.now(timezone.utc)
        plain_token = secrets.token_hex(RESET_TOKEN_BYTES)
        return IssuedResetToken(
            plain_token=plain_token,
            token_hash=hash_reset_token(plain_token),
            expires_at=now + self.ttl,
        )

    def verify(
        self,
        *,
        token_hash: str | None,
        expires_at: datetime | None,
        presented: str,
        now: datetime | None = None,
    ) -> bool:
        if not token_hash or expires_at is None or not presented:
            return False
        now = now or datetime.now(timezone.utc)
        digest_matches = hmac.compare_digest(hash_reset_token(presented), token_hash)
        return digest_matches and _as_utc(now) < _as_utc(expires_at)
