"""Uniform JSON envelopes returned by every endpoint."""

from math import ceil
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

from app.utils.helpers import today_str

DataT = TypeVar("DataT")


class Pagination(BaseModel):
    """Pagination metadata for list responses."""

    page: int = Field(ge=1)
    limit: int = Field(ge=1)
    total: int = Field(ge=0)
    pages: int = Field(ge=0)

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        """Compute ``pages = ceil(total / limit)``."""
        return cls(page=page, limit=limit, total=total, pages=ceil(total / limit))


class FieldError(BaseModel):
    """A single field-level validation failure."""

    field: str
    message: str
    type: str = "value_error"


class ApiResponse(BaseModel, Generic[DataT]):
    """Success envelope."""

    success: bool = True
    message: str | None = None
    data: DataT | None = None
    timestamp: str = Field(default_factory=today_str)


class PaginatedResponse(ApiResponse[list[DataT]], Generic[DataT]):
    """Success envelope carrying a page of results."""

    pagination: Pagination


class ErrorResponse(BaseModel):
    """Error envelope."""

    success: bool = False
    message: str
    errors: list[FieldError] | None = None
    timestamp: str = Field(default_factory=today_str)
