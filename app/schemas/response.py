"""Standardized JSON envelopes for every API response."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope: ``{success, message, data}``."""

    success: bool = True
    message: str | None = None
    data: T | None = None


class ErrorResponse(BaseModel):
    """Standard error body for every non-2xx response."""

    success: bool = False
    message: str = Field(..., description="Human-readable error message")
    code: str = Field(..., description="Machine-readable error code")
    errors: list[dict[str, Any]] | None = Field(
        default=None, description="Field-level problems for validation errors"
    )
