"""
Custom exceptions for the thinkcyber-admin gateway.

This module defines the error taxonomy used between the validation layer,
the field mapper, the backend forwarder and the API exception handlers.
Every API-facing exception carries the HTTP status it is surfaced with.
"""

from __future__ import annotations

from typing import Any

from thinkcyber_admin.api.schemas.responses import (
    GENERIC_ERROR_MESSAGE,
    Envelope,
    ErrorCode,
)


class AdminGatewayError(Exception):
    """Base exception for all thinkcyber-admin errors."""

    def __init__(self, message: str) -> None:
        """
        Initialize AdminGatewayError.

        Parameters
        ----------
        message : str
            Human-readable error message.
        """
        self.message = message
        super().__init__(message)


class APIError(AdminGatewayError):
    """Base exception for API layer errors.

    Attributes
    ----------
    status_code : int
        HTTP status code for the error response (default: 500).
    error_code : ErrorCode
        Machine-readable error code.
    message : str
        Human-readable error message.
    details : dict[str, Any] | None
        Additional error context (e.g., field, entity).

    Examples
    --------
    >>> raise APIError(message="Something went wrong", details={"context": "example"})
    """

    status_code: int = 500
    _error_code_value: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize APIError.

        Parameters
        ----------
        message : str
            Human-readable error message.
        details : dict[str, Any] | None, optional
            Additional error context (default: None).
        """
        self.details = details
        super().__init__(message)

    @property
    def error_code(self) -> ErrorCode:
        """Get the error code as an ErrorCode enum."""
        return ErrorCode(self._error_code_value)

    @property
    def public_message(self) -> str:
        """Message that is safe to show to the caller."""
        return self.message

    def to_envelope(self) -> Envelope:
        """Convert to the uniform failure envelope.

        Returns
        -------
        Envelope
            ``success=False`` envelope carrying the public message.
        """
        return Envelope(success=False, error=self.public_message)


class ValidationError(APIError):
    """Payload failed a validation rule (400).

    Raised before any outbound call is made. The message is the first
    violated rule; ``errors`` optionally maps fields to messages.

    Examples
    --------
    >>> raise ValidationError(
    ...     "Category name must be at least 3 characters long",
    ...     field="name",
    ... )
    """

    status_code: int = 400
    _error_code_value: str = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str,
        field: str | None = None,
        errors: dict[str, list[str]] | None = None,
    ) -> None:
        """
        Initialize ValidationError.

        Parameters
        ----------
        message : str
            First-violated-rule message.
        field : str | None, optional
            Logical (camelCase) field that failed (default: None).
        errors : dict[str, list[str]] | None, optional
            Per-field messages for routes that report them (default: None).
        """
        self.field = field
        self.errors = errors
        super().__init__(message=message, details={"field": field} if field else None)

    def to_envelope(self) -> Envelope:
        """Convert to a failure envelope including per-field errors."""
        return Envelope(success=False, error=self.message, errors=self.errors)


class NotFoundError(APIError):
    """Backend reports that the target entity does not exist (404).

    Examples
    --------
    >>> raise NotFoundError("Category not found")
    """

    status_code: int = 404
    _error_code_value: str = "NOT_FOUND"


class ConflictError(APIError):
    """Backend reports a uniqueness or state conflict (409).

    Examples
    --------
    >>> raise ConflictError("Cannot delete category with existing topics")
    """

    status_code: int = 409
    _error_code_value: str = "CONFLICT"


class UpstreamError(APIError):
    """Any other backend, transport or timeout failure (500).

    The detail is logged by the exception handler; callers only ever see
    a generic message.
    """

    status_code: int = 500
    _error_code_value: str = "UPSTREAM_ERROR"

    @property
    def public_message(self) -> str:
        """Hide backend detail from the caller."""
        return GENERIC_ERROR_MESSAGE


class MalformedResponseError(UpstreamError):
    """Backend returned a payload that cannot be interpreted (500)."""

    _error_code_value: str = "MALFORMED_RESPONSE"


class InvalidPayloadError(MalformedResponseError):
    """Field mapper was given ``None`` or a non-object where an entity was required.

    Attributes
    ----------
    entity : str
        Name of the entity being mapped.

    Examples
    --------
    >>> raise InvalidPayloadError(entity="subcategory")
    """

    def __init__(self, entity: str, reason: str = "data is null or undefined") -> None:
        """
        Initialize InvalidPayloadError.

        Parameters
        ----------
        entity : str
            Name of the entity being mapped.
        reason : str, optional
            Why the payload was rejected.
        """
        self.entity = entity
        super().__init__(
            message=f"Invalid {entity} data: {reason}",
            details={"entity": entity},
        )


# Exit codes for CLI integration
EXIT_CODE_SUCCESS = 0
EXIT_CODE_GENERAL_ERROR = 1
EXIT_CODE_INVALID_ARGS = 2
EXIT_CODE_VALIDATION_FAILED = 3
EXIT_CODE_BACKEND_UNREACHABLE = 4
