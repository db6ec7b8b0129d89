"""Centralized exception handlers for the admin gateway.

Every error leaving the API is rendered as the uniform envelope
``{"success": false, "error": ...}`` so that dashboard clients only ever
parse one shape. 5xx details are logged and never returned to the caller.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from thinkcyber_admin.api.schemas.responses import GENERIC_ERROR_MESSAGE, Envelope
from thinkcyber_admin.exceptions import APIError, UpstreamError

logger = logging.getLogger(__name__)

MAX_ERROR_LENGTH = 4096
"""Maximum length of an error message returned to the caller."""

TRUNCATION_SUFFIX = "... (truncated)"


def _truncate(message: str) -> str:
    """Truncate an error message that exceeds ``MAX_ERROR_LENGTH``."""
    if len(message) <= MAX_ERROR_LENGTH:
        return message
    return message[: MAX_ERROR_LENGTH - len(TRUNCATION_SUFFIX)] + TRUNCATION_SUFFIX


def _envelope_response(envelope: Envelope, status_code: int) -> JSONResponse:
    if envelope.error:
        envelope.error = _truncate(envelope.error)
    return JSONResponse(content=envelope.to_content(), status_code=status_code)


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError subclasses.

    ``UpstreamError`` (and its malformed-payload subclasses) is logged with
    its backend detail and answered with the generic message; every other
    APIError carries a message that is safe to return as-is.

    Parameters
    ----------
    request : Request
        The incoming FastAPI request.
    exc : APIError
        The raised exception.

    Returns
    -------
    JSONResponse
        Failure envelope with the exception's status code.
    """
    if isinstance(exc, UpstreamError):
        logger.error(
            "Upstream failure on %s %s: %s (details=%s)",
            request.method,
            request.url.path,
            exc.message,
            exc.details,
        )
    return _envelope_response(exc.to_envelope(), exc.status_code)


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request parsing failures as a 400 envelope.

    Malformed JSON bodies and wrongly typed query parameters both land
    here. Field-level messages are reported under ``errors`` keyed by the
    dotted location.
    """
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query")]
        key = ".".join(loc) or "body"
        errors.setdefault(key, []).append(str(error.get("msg", "")))

    first_loc = next(iter(exc.errors()), {}).get("loc", ("body",))
    message = (
        "Invalid request body"
        if first_loc and first_loc[0] == "body"
        else "Invalid request parameters"
    )
    logger.debug("Request validation failed on %s: %s", request.url.path, errors)
    return _envelope_response(Envelope(success=False, error=message, errors=errors), 400)


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler; logs the traceback and hides the detail."""
    logger.exception("Unhandled exception on %s: %s", request.url.path, exc)
    return _envelope_response(Envelope(success=False, error=GENERIC_ERROR_MESSAGE), 500)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Parameters
    ----------
    app : FastAPI
        The FastAPI application instance.

    Examples
    --------
    >>> from fastapi import FastAPI
    >>> from thinkcyber_admin.api.exception_handlers import register_exception_handlers
    >>> app = FastAPI()
    >>> register_exception_handlers(app)
    """
    app.add_exception_handler(APIError, api_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, generic_error_handler)
