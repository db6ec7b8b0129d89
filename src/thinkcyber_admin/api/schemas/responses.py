"""API response envelope schemas."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ErrorCode(str, Enum):
    """Standardized error codes for API responses.

    Each code maps to the HTTP status the envelope is returned with.

    4xx Client Errors:
        VALIDATION_ERROR: Payload failed a validation rule (400)
        NOT_FOUND: Backend reports the entity does not exist (404)
        CONFLICT: Backend reports a uniqueness or reference conflict (409)

    5xx Server Errors:
        INTERNAL_ERROR: Unexpected gateway error (500)
        UPSTREAM_ERROR: Backend failure, transport error or timeout (500)
        MALFORMED_RESPONSE: Backend payload could not be interpreted (500)
    """

    # 4xx Client Errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"

    # 5xx Server Errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"


GENERIC_ERROR_MESSAGE = "Internal server error"
"""Message shown to callers for every 5xx envelope."""


class PaginationMeta(BaseModel):
    """Pagination metadata synthesized when the backend supplies none."""

    model_config = ConfigDict(populate_by_name=True)

    total: int  # Items in the result
    page: int  # Current page (1-based)
    limit: int  # Items per page
    total_pages: int = Field(..., alias="totalPages")


class Envelope(BaseModel):
    """Uniform response shape returned by every route.

    Attributes
    ----------
    success : bool
        Whether the operation succeeded.
    data : Any
        Mapped camelCase entity, list of entities, or action payload.
    message : str | None
        Human-readable success message.
    error : str | None
        Human-readable failure message.
    errors : dict[str, list[str]] | None
        Per-field validation messages, when the route reports them.
    meta : dict[str, Any] | None
        Pagination metadata (``total``, ``page``, ``limit``, ``totalPages``).
    stats : dict[str, Any] | None
        Aggregates grouped by entity status.
    categories : list[Any] | None
        Category options passed through from the backend on subcategory
        lists.
    """

    success: bool
    data: Any = None
    message: str | None = None
    error: str | None = None
    errors: dict[str, list[str]] | None = None
    meta: dict[str, Any] | None = None
    stats: dict[str, Any] | None = None
    categories: list[Any] | None = None

    def to_content(self) -> dict[str, Any]:
        """Serialize for a JSON response, dropping unset members.

        ``data`` is kept whenever the route set it, including an explicit
        empty list.
        """
        content = self.model_dump(exclude_none=True)
        if "data" in self.model_fields_set and "data" not in content:
            content["data"] = None
        return content


class ErrorEnvelope(BaseModel):
    """Failure envelope documented in OpenAPI responses."""

    success: bool = False
    error: str
    errors: dict[str, list[str]] | None = None
