"""
Enums for thinkcyber-admin models.

Defines the closed value sets that the validator enforces. Status
transitions themselves are owned by the backend; the gateway only checks
that a requested value is a member of the set.
"""

from __future__ import annotations

from enum import Enum


class CategoryStatus(str, Enum):
    """Lifecycle status shared by categories and subcategories."""

    ACTIVE = "Active"
    DRAFT = "Draft"
    INACTIVE = "Inactive"


class DocumentStatus(str, Enum):
    """Lifecycle status of terms and privacy policy documents."""

    DRAFT = "Draft"
    PUBLISHED = "Published"
    ARCHIVED = "Archived"


class TopicStatus(str, Enum):
    """Publication status of a topic."""

    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class Difficulty(str, Enum):
    """Topic difficulty levels."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


class LanguageCode(str, Enum):
    """ISO 639-1 codes accepted for legal documents."""

    EN = "en"
    ES = "es"
    FR = "fr"
    DE = "de"
    IT = "it"
    PT = "pt"
    RU = "ru"
    ZH = "zh"
    JA = "ja"
    KO = "ko"


# Homepage content is only authored in English for now
HOMEPAGE_LANGUAGES: tuple[str, ...] = (LanguageCode.EN.value,)


def enum_values(enum_cls: type[Enum]) -> tuple[str, ...]:
    """Return the string values of an enum in declaration order."""
    return tuple(member.value for member in enum_cls)
