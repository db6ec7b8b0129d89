"""API schema exports."""

from thinkcyber_admin.api.schemas.responses import (
    GENERIC_ERROR_MESSAGE,
    Envelope,
    ErrorCode,
    ErrorEnvelope,
    PaginationMeta,
)

__all__ = [
    "GENERIC_ERROR_MESSAGE",
    "Envelope",
    "ErrorCode",
    "ErrorEnvelope",
    "PaginationMeta",
]
