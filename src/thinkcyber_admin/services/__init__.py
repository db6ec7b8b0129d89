"""
Services module for thinkcyber-admin.

Contains the request forwarder, the field mapper, the validator and the
response envelope helpers shared by every route.
"""

from __future__ import annotations

from thinkcyber_admin.services.backend_client import BackendClient, ForwardResult
from thinkcyber_admin.services.field_mapper import FieldMapper
from thinkcyber_admin.services.validation import validate, validate_bulk_ids

__all__: list[str] = [
    "BackendClient",
    "FieldMapper",
    "ForwardResult",
    "validate",
    "validate_bulk_ids",
]
