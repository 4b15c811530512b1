from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from app.errors import AuthorizationError

if TYPE_CHECKING:
    from app.db.models.user import User


class Role(str, Enum):
    """Coarse-grained staff permission classes."""

    ADMIN = "Admin"
    SALE = "Sale"


@dataclass(frozen=True, slots=True)
class AuthContext:
    """The authenticated caller of a request.

    Produced once per request by the access-control dependency and passed
    explicitly to handlers; nothing mutates the request to carry it.
    """

    user: User

    @property
    def user_id(self) -> int:
        return self.user.id

    @property
    def role(self) -> Role:
        return Role(self.user.role)


def authorize(role: Role | str, allowed: Iterable[Role]) -> None:
    """Allow the call only when ``role`` is one of ``allowed``.

    Pure check with no I/O. An empty ``allowed`` set denies everyone.

    Raises:
        AuthorizationError: If the role is not permitted.
    """
    try:
        role = Role(role)
    except ValueError:
        raise AuthorizationError()
    if role not in frozenset(allowed):
        raise AuthorizationError()
