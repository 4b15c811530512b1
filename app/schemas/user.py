from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints

from app.domain.access import Role

# Stripped before the length check; passwords keep their whitespace
UserName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]


class User(BaseModel):
    """Public view of a user. Never carries the password hash or reset fields."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str
    role: Role
    is_active: bool
    last_login: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UserCreate(BaseModel):
    email: EmailStr
    name: UserName
    password: str = Field(..., min_length=8)
    role: Role = Role.SALE


class UserUpdate(BaseModel):
    email: EmailStr | None = None
    name: UserName | None = None
    role: Role | None = None
    is_active: bool | None = None


class ProfileUpdate(BaseModel):
    name: UserName


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class ChangePassword(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8)


class AdminChangePassword(BaseModel):
    user_id: int
    new_password: str = Field(..., min_length=8)


class PasswordResetRequest(BaseModel):
    email: EmailStr


class PasswordReset(BaseModel):
    email: EmailStr
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8)


class Token(BaseModel):
    token: str
    token_type: str = "bearer"
    user: User
