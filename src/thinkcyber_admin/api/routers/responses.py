"""Shared OpenAPI response definitions for the failure envelope."""

from __future__ import annotations

from typing import Any

from thinkcyber_admin.api.schemas.responses import ErrorEnvelope

# Type alias for FastAPI responses parameter
ResponsesType = dict[int | str, dict[str, Any]]

BAD_REQUEST_RESPONSE: ResponsesType = {
    400: {"model": ErrorEnvelope, "description": "Validation failed"}
}

NOT_FOUND_RESPONSE: ResponsesType = {
    404: {"model": ErrorEnvelope, "description": "Resource not found"}
}

CONFLICT_RESPONSE: ResponsesType = {
    409: {"model": ErrorEnvelope, "description": "Resource conflict"}
}

INTERNAL_ERROR_RESPONSE: ResponsesType = {
    500: {"model": ErrorEnvelope, "description": "Internal server error"}
}

# Combined response sets for common endpoint patterns

LIST_ERRORS: ResponsesType = {
    **BAD_REQUEST_RESPONSE,
    **INTERNAL_ERROR_RESPONSE,
}
"""Errors for list endpoints (400, 500)."""

GET_ITEM_ERRORS: ResponsesType = {
    **BAD_REQUEST_RESPONSE,
    **NOT_FOUND_RESPONSE,
    **INTERNAL_ERROR_RESPONSE,
}
"""Errors for single-item and action endpoints (400, 404, 500)."""

CREATE_ERRORS: ResponsesType = {
    **BAD_REQUEST_RESPONSE,
    **CONFLICT_RESPONSE,
    **INTERNAL_ERROR_RESPONSE,
}
"""Errors for create endpoints (400, 409, 500)."""

WRITE_ERRORS: ResponsesType = {
    **BAD_REQUEST_RESPONSE,
    **NOT_FOUND_RESPONSE,
    **CONFLICT_RESPONSE,
    **INTERNAL_ERROR_RESPONSE,
}
"""Errors for update and delete endpoints (400, 404, 409, 500)."""
