"""
Payload validation for create and update operations.

Each (entity, operation) pair maps to a Pydantic payload model in
``RULE_SETS``. Validation runs in two phases:

1. Required fields, checked by a ``mode="before"`` model validator. A field
   that is missing, ``None``, blank or ``0`` is absent; the failure message
   names every required field.
2. Field validators in declaration order: minimum length, then format,
   then membership. The first violation is reported.

Fields without rules pass through untouched (``extra="allow"``).
``validate()`` is the single entry point used by the API routers and by the
``thinkcyber-admin validate`` CLI command, so both accept exactly the same
payloads.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any, ClassVar, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from pydantic import field_validator, model_validator
from pydantic.alias_generators import to_camel

from thinkcyber_admin.exceptions import ValidationError
from thinkcyber_admin.models.enums import (
    CategoryStatus,
    Difficulty,
    DocumentStatus,
    LanguageCode,
    TopicStatus,
    enum_values,
)

logger = logging.getLogger(__name__)

VERSION_PATTERN = re.compile(r"^\d+\.\d+$")
VERSION_MESSAGE = "Version must be in format X.Y (e.g., 1.0, 2.1)"
LANGUAGE_MESSAGE = "Invalid language code. Supported: " + ", ".join(
    enum_values(LanguageCode)
)
BODY_MESSAGE = "Request body must be a JSON object"

_CATEGORY_STATUS = enum_values(CategoryStatus)
_DOCUMENT_STATUS = enum_values(DocumentStatus)
_TOPIC_STATUS = enum_values(TopicStatus)
_DIFFICULTIES = enum_values(Difficulty)
_LANGUAGES = enum_values(LanguageCode)


class Requirement(NamedTuple):
    """
    A required field, or a group of dotted paths reported under one key.

    Attributes
    ----------
    key : str
        Name listed in the failure message and used as the ``errors`` key.
    paths : tuple[str, ...]
        Dotted paths that must all be present; defaults to ``(key,)``.
    message : Optional[str]
        Per-field message for rule sets that report ``errors``.
    """

    key: str
    paths: tuple[str, ...] = ()
    message: Optional[str] = None

    def resolved_paths(self) -> tuple[str, ...]:
        return self.paths or (self.key,)


class MissingFields(ValueError):
    """Raised by the required-field phase; carries the per-field report."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        errors: Optional[dict[str, list[str]]] = None,
    ) -> None:
        super().__init__(message)
        self.field = field
        self.errors = errors


def _lookup(payload: Mapping[str, Any], path: str) -> Any:
    value: Any = payload
    for part in path.split("."):
        if not isinstance(value, Mapping):
            return None
        value = value.get(part)
    return value


def is_absent(value: Any) -> bool:
    """Return True for values treated as not provided."""
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (int, float)) and value == 0:
        return True
    return False


# =============================================================================
# Field checks
# =============================================================================


def _min_length(value: Any, length: int, message: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str) or len(value.strip()) < length:
        raise ValueError(message)
    return value.strip()


def _one_of(
    value: Any, choices: tuple[str, ...], message: str, *, lower: bool = False
) -> Optional[str]:
    if value is None:
        return None
    candidate = value.strip() if isinstance(value, str) else value
    if lower and isinstance(candidate, str):
        candidate = candidate.lower()
    if candidate not in choices:
        raise ValueError(message)
    return candidate


def _status_message(values: tuple[str, ...]) -> str:
    return "Status must be one of: " + ", ".join(values)


# =============================================================================
# Base Configuration
# =============================================================================


class PayloadRules(BaseModel):
    """
    Base model for caller payload rules.

    Configures:
    - populate_by_name: Accept snake_case keys as well
    - alias_generator: Payload keys are camelCase
    - extra='allow': Keep fields that carry no rules
    """

    model_config = ConfigDict(
        populate_by_name=True,
        alias_generator=to_camel,
        extra="allow",
    )

    required: ClassVar[tuple[Requirement, ...]] = ()
    required_message: ClassVar[Optional[str]] = None
    report_errors: ClassVar[bool] = False
    report_passing: ClassVar[bool] = False
    require_any: ClassVar[tuple[str, ...]] = ()
    require_any_message: ClassVar[Optional[str]] = None

    @classmethod
    def missing_message(cls) -> str:
        if cls.required_message:
            return cls.required_message
        return "Missing required fields: " + ", ".join(r.key for r in cls.required)

    @model_validator(mode="before")
    @classmethod
    def check_required(cls, data: Any) -> Any:
        """Reject bodies that are not objects or lack a required field."""
        if not isinstance(data, Mapping):
            raise MissingFields(BODY_MESSAGE)

        missing = [
            r
            for r in cls.required
            if any(is_absent(_lookup(data, p)) for p in r.resolved_paths())
        ]
        if missing:
            errors: Optional[dict[str, list[str]]] = None
            if cls.report_errors:
                candidates = cls.required if cls.report_passing else missing
                errors = {
                    r.key: [r.message or f"{r.key} is required"] if r in missing else []
                    for r in candidates
                }
            raise MissingFields(
                cls.missing_message(), field=missing[0].key, errors=errors
            )

        if cls.require_any and all(is_absent(_lookup(data, f)) for f in cls.require_any):
            raise MissingFields(
                cls.require_any_message
                or "At least one of " + ", ".join(cls.require_any) + " is required",
                field=cls.require_any[0],
            )
        return data


# =============================================================================
# Categories
# =============================================================================


class CategoryPayload(PayloadRules):
    """Category create and update body."""

    required: ClassVar[tuple[Requirement, ...]] = (
        Requirement("name"),
        Requirement("description"),
        Requirement("status"),
    )

    name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v: Any) -> Optional[str]:
        return _min_length(v, 3, "Category name must be at least 3 characters long")

    @field_validator("description", mode="before")
    @classmethod
    def validate_description(cls, v: Any) -> Optional[str]:
        return _min_length(v, 10, "Description must be at least 10 characters long")

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, v: Any) -> Optional[str]:
        return _one_of(v, _CATEGORY_STATUS, _status_message(_CATEGORY_STATUS))


class SubcategoryPayload(PayloadRules):
    """Subcategory create and update body."""

    required: ClassVar[tuple[Requirement, ...]] = (
        Requirement("name"),
        Requirement("description"),
        Requirement("categoryId"),
        Requirement("status"),
    )

    name: Optional[str] = None
    description: Optional[str] = None
    category_id: Optional[int] = None
    status: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v: Any) -> Optional[str]:
        return _min_length(v, 3, "Subcategory name must be at least 3 characters long")

    @field_validator("description", mode="before")
    @classmethod
    def validate_description(cls, v: Any) -> Optional[str]:
        return _min_length(v, 10, "Description must be at least 10 characters long")

    @field_validator("category_id", mode="before")
    @classmethod
    def validate_category_id(cls, v: Any) -> Optional[int]:
        """Accept positive integers, including numeric strings."""
        if v is None:
            return None
        if isinstance(v, bool):
            raise ValueError("Invalid category ID")
        try:
            number = int(str(v).strip())
        except ValueError:
            raise ValueError("Invalid category ID") from None
        if number <= 0:
            raise ValueError("Invalid category ID")
        return number

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, v: Any) -> Optional[str]:
        return _one_of(v, _CATEGORY_STATUS, _status_message(_CATEGORY_STATUS))


# =============================================================================
# Topics
# =============================================================================


class TopicPayload(PayloadRules):
    """Topic create and update body; missing fields are reported per field."""

    required: ClassVar[tuple[Requirement, ...]] = (
        Requirement("title", message="Title is required"),
        Requirement("category", message="Category is required"),
        Requirement("difficulty", message="Difficulty is required"),
    )
    report_errors: ClassVar[bool] = True
    report_passing: ClassVar[bool] = True

    difficulty: Optional[str] = None
    status: Optional[str] = None

    @field_validator("difficulty", mode="before")
    @classmethod
    def validate_difficulty(cls, v: Any) -> Optional[str]:
        return _one_of(
            v, _DIFFICULTIES, "Difficulty must be one of: " + ", ".join(_DIFFICULTIES)
        )

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, v: Any) -> Optional[str]:
        return _one_of(v, _TOPIC_STATUS, _status_message(_TOPIC_STATUS))


# =============================================================================
# Legal documents
# =============================================================================


class DocumentPayload(PayloadRules):
    """Terms and privacy policy body."""

    required: ClassVar[tuple[Requirement, ...]] = (
        Requirement("title"),
        Requirement("content"),
        Requirement("version"),
        Requirement("language"),
        Requirement("status"),
    )
    title_message: ClassVar[str] = "Title must be at least 5 characters long"

    title: Optional[str] = None
    content: Optional[str] = None
    version: Optional[str] = None
    language: Optional[str] = None
    status: Optional[str] = None

    @field_validator("title", mode="before")
    @classmethod
    def validate_title(cls, v: Any) -> Optional[str]:
        return _min_length(v, 5, cls.title_message)

    @field_validator("content", mode="before")
    @classmethod
    def validate_content(cls, v: Any) -> Optional[str]:
        return _min_length(v, 50, "Content must be at least 50 characters long")

    @field_validator("version", mode="before")
    @classmethod
    def validate_version(cls, v: Any) -> Optional[str]:
        """Versions are ``major.minor``."""
        if v is None:
            return None
        if not isinstance(v, str) or not VERSION_PATTERN.match(v.strip()):
            raise ValueError(VERSION_MESSAGE)
        return v.strip()

    @field_validator("language", mode="before")
    @classmethod
    def validate_language(cls, v: Any) -> Optional[str]:
        return _one_of(v, _LANGUAGES, LANGUAGE_MESSAGE, lower=True)

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, v: Any) -> Optional[str]:
        return _one_of(v, _DOCUMENT_STATUS, _status_message(_DOCUMENT_STATUS))


class TermsPayload(DocumentPayload):
    pass


class PrivacyPayload(DocumentPayload):
    title_message: ClassVar[str] = "Privacy policy title must be at least 5 characters long"


# =============================================================================
# Homepage content
# =============================================================================


class FaqCreatePayload(PayloadRules):
    required: ClassVar[tuple[Requirement, ...]] = (
        Requirement("question"),
        Requirement("answer"),
    )
    required_message: ClassVar[Optional[str]] = "Question and answer are required"


class FaqUpdatePayload(PayloadRules):
    require_any: ClassVar[tuple[str, ...]] = ("question", "answer")
    require_any_message: ClassVar[Optional[str]] = (
        "At least question or answer is required for update"
    )


class HomepageCreatePayload(PayloadRules):
    """Nested paths are reported under their dotted name."""

    required: ClassVar[tuple[Requirement, ...]] = (
        Requirement("hero.title", message="Hero title is required"),
        Requirement("about.title", message="About title is required"),
        Requirement("contact.email", message="Contact email is required"),
    )
    required_message: ClassVar[Optional[str]] = "Missing required fields"
    report_errors: ClassVar[bool] = True


class HomepageUpdatePayload(PayloadRules):
    """Updates replace whole sections, so each section must be complete."""

    required: ClassVar[tuple[Requirement, ...]] = (
        Requirement(
            "hero",
            paths=("hero.title", "hero.subtitle"),
            message="Hero title and subtitle are required",
        ),
        Requirement(
            "about",
            paths=("about.title", "about.content"),
            message="About title and content are required",
        ),
        Requirement(
            "contact",
            paths=("contact.email",),
            message="Contact email is required",
        ),
    )
    required_message: ClassVar[Optional[str]] = "Missing required fields"
    report_errors: ClassVar[bool] = True


RULE_SETS: dict[tuple[str, str], type[PayloadRules]] = {
    ("category", "create"): CategoryPayload,
    ("category", "update"): CategoryPayload,
    ("subcategory", "create"): SubcategoryPayload,
    ("subcategory", "update"): SubcategoryPayload,
    ("topic", "create"): TopicPayload,
    ("topic", "update"): TopicPayload,
    ("terms", "create"): TermsPayload,
    ("terms", "update"): TermsPayload,
    ("privacy", "create"): PrivacyPayload,
    ("privacy", "update"): PrivacyPayload,
    ("faq", "create"): FaqCreatePayload,
    ("faq", "update"): FaqUpdatePayload,
    ("homepage", "create"): HomepageCreatePayload,
    ("homepage", "update"): HomepageUpdatePayload,
}
"""Payload rules keyed by (entity, operation)."""


def get_rule_set(entity: str, operation: str) -> type[PayloadRules]:
    """
    Look up the payload rules for an entity and operation.

    Raises
    ------
    KeyError
        If no rules are declared for the pair.
    """
    try:
        return RULE_SETS[(entity, operation)]
    except KeyError:
        raise KeyError(f"No validation rules for {entity}/{operation}") from None


def _to_validation_error(exc: PydanticValidationError) -> ValidationError:
    """Translate the first Pydantic error into the gateway's error."""
    error = exc.errors()[0]
    context = error.get("ctx") or {}
    location = ".".join(str(part) for part in error["loc"]) or None

    cause = context.get("error")
    if isinstance(cause, MissingFields):
        return ValidationError(str(cause), field=cause.field, errors=cause.errors)
    if isinstance(cause, ValueError):
        return ValidationError(str(cause), field=location)
    return ValidationError(f"Invalid value for {location}: {error['msg']}", field=location)


def validate(entity: str, operation: str, payload: Any) -> dict[str, Any]:
    """
    Validate a caller payload for an entity operation.

    Parameters
    ----------
    entity : str
        Short entity name (``category``, ``subcategory``, ``topic``,
        ``terms``, ``privacy``, ``faq`` or ``homepage``).
    operation : str
        ``create`` or ``update``.
    payload : Any
        Decoded JSON body in camelCase.

    Returns
    -------
    dict[str, Any]
        Copy of the payload with checked strings trimmed, language codes
        lowercased and category ids converted to integers.

    Raises
    ------
    ValidationError
        With the message of the first violated rule.
    """
    rules = get_rule_set(entity, operation)

    try:
        checked = rules.model_validate(payload)
    except PydanticValidationError as e:
        error = _to_validation_error(e)
        logger.debug(
            "Validation failed for %s/%s on %s", entity, operation, error.field
        )
        raise error from None

    normalized = dict(payload)
    for name in checked.model_fields_set & rules.model_fields.keys():
        alias = rules.model_fields[name].alias or name
        key = alias if alias in payload else name
        normalized[key] = getattr(checked, name)
    return normalized


def validate_bulk_ids(
    payload: Any,
    *,
    missing_message: str = "Missing required field: ids (must be non-empty array)",
    invalid_message: Optional[str] = "All IDs must be positive numbers",
) -> list[Any]:
    """
    Validate the ``ids`` member of a bulk request.

    Parameters
    ----------
    payload : Any
        Decoded JSON body.
    missing_message : str
        Message when ``ids`` is absent, not a list, or empty.
    invalid_message : Optional[str]
        Message when an id is not a positive integer. ``None`` accepts
        opaque ids as long as they are not blank.

    Returns
    -------
    list[Any]
        The ids, in request order.
    """
    ids = payload.get("ids") if isinstance(payload, Mapping) else None
    if not isinstance(ids, list) or not ids:
        raise ValidationError(missing_message, field="ids")

    if invalid_message is None:
        if any(is_absent(i) for i in ids):
            raise ValidationError(missing_message, field="ids")
        return list(ids)

    for item in ids:
        if isinstance(item, bool) or not isinstance(item, (int, float)) or item <= 0:
            raise ValidationError(invalid_message, field="ids")
    return list(ids)
