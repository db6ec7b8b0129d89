"""
Data models module for thinkcyber-admin.

Defines the enumerations and the Pydantic models that describe how each
entity is read from and written to the platform backend.
"""

from __future__ import annotations

from .entities import ENTITY_MODELS, GatewayModel
from .enums import (
    CategoryStatus,
    Difficulty,
    DocumentStatus,
    LanguageCode,
    TopicStatus,
)

__all__ = [
    "CategoryStatus",
    "Difficulty",
    "DocumentStatus",
    "LanguageCode",
    "TopicStatus",
    "ENTITY_MODELS",
    "GatewayModel",
]
