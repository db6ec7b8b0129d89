"""FastAPI dependencies for API endpoints."""

from __future__ import annotations

from typing import Optional
from urllib.parse import quote

from fastapi import Header

from thinkcyber_admin.config.settings import settings
from thinkcyber_admin.exceptions import ValidationError
from thinkcyber_admin.services.backend_client import BackendClient

_BEARER_SCHEME = "bearer"


def _extract_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    value = authorization.strip()
    scheme, _, credentials = value.partition(" ")
    if scheme.lower() == _BEARER_SCHEME:
        value = credentials.strip()
    return value or None


def get_backend_client(
    authorization: Optional[str] = Header(default=None),
) -> BackendClient:
    """
    Dependency for the backend forwarder.

    The inbound ``Authorization`` bearer token is forwarded when present;
    otherwise the configured ``API_TOKEN`` is used (possibly none).

    Parameters
    ----------
    authorization : Optional[str]
        Inbound ``Authorization`` header.

    Returns
    -------
    BackendClient
        A per-request client; it holds no connection state.
    """
    token = _extract_token(authorization) or settings.api_token or None
    return BackendClient(
        base_url=settings.api_base_url,
        token=token,
        timeout=settings.request_timeout,
        upload_timeout=settings.upload_timeout,
    )


def parse_id(raw: str, label: str) -> int:
    """
    Parse a numeric path id.

    Parameters
    ----------
    raw : str
        Path segment as received.
    label : str
        Entity label used in the message, e.g. ``"category"``.

    Raises
    ------
    ValidationError
        ``Invalid <label> ID`` when the segment is not a positive integer.
    """
    value = raw.strip()
    if not value.isdigit() or int(value) <= 0:
        raise ValidationError(f"Invalid {label} ID", field="id")
    return int(value)


def require_id(raw: str, label: str) -> str:
    """
    Return a non-blank opaque path id, escaped as one path segment.

    Raises
    ------
    ValidationError
        ``Invalid <label> ID`` when the segment is blank.
    """
    value = raw.strip()
    if not value:
        raise ValidationError(f"Invalid {label} ID", field="id")
    return quote(value, safe="")
