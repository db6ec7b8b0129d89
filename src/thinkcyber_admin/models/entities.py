"""
Pydantic models for the records the gateway proxies.

Attributes use the backend's snake_case names; the camelCase shape
returned to callers comes from Pydantic's alias_generator. The same model
reads a backend record and writes a caller payload back to the backend, and
``FieldMapper`` picks the direction through the validation context.

Reading conventions:
    - either spelling is accepted, the snake_case one first
    - ``null`` and ``""`` count as missing, so the field's default applies
    - fields defaulting to ``None`` are left out of the mapped output

Writing conventions:
    - the camelCase spelling is preferred over the snake_case one
    - read-only fields (``readOnly`` in the JSON schema) are never sent
    - ``write_defaults`` fill in omitted fields on create
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any, ClassVar, Optional, Union

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StringConstraints,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel
from pydantic.fields import FieldInfo

WRITE_CONTEXT = "write"
APPLY_DEFAULTS_CONTEXT = "apply_write_defaults"


def _is_blank(value: Any) -> bool:
    return value is None or value == ""


def _numbers_as_text(value: Any) -> Any:
    """Backend ids and durations arrive as numbers; callers get strings."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


def _objects_only(value: Any) -> list[Any]:
    """Keep the object elements of a list; anything else becomes ``[]``."""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, Mapping)]


def _object_or_none(value: Any) -> Any:
    return value if isinstance(value, Mapping) else None


def _object_or_empty(value: Any) -> Any:
    return value if isinstance(value, Mapping) else {}


def read_only(default: Any = None, **kwargs: Any) -> Any:
    """A backend-assigned field: mapped on read, never written back."""
    return Field(default, json_schema_extra={"readOnly": True}, **kwargs)


def is_read_only(field_info: FieldInfo) -> bool:
    extra = field_info.json_schema_extra
    return isinstance(extra, dict) and bool(extra.get("readOnly"))


Trimmed = Annotated[str, StringConstraints(strip_whitespace=True)]
LanguageText = Annotated[str, StringConstraints(strip_whitespace=True, to_lower=True)]
NumericText = Annotated[str, BeforeValidator(_numbers_as_text)]
RecordId = Union[int, str]


# =============================================================================
# Base Configuration
# =============================================================================


class GatewayModel(BaseModel):
    """
    Base model for every proxied record.

    Configures:
    - populate_by_name: Accept the backend's snake_case names
    - alias_generator: Expose camelCase aliases to callers
    - extra='ignore': Drop fields the gateway does not know about
    """

    model_config = ConfigDict(
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )

    entity_name: ClassVar[str] = "record"
    container_key: ClassVar[Optional[str]] = None
    write_defaults: ClassVar[dict[str, Any]] = {}

    @model_validator(mode="before")
    @classmethod
    def resolve_spellings(cls, data: Any, info: ValidationInfo) -> Any:
        """Pick each field's value from either spelling for the direction."""
        if not isinstance(data, Mapping):
            return data
        context = info.context or {}
        if context.get(WRITE_CONTEXT):
            return cls._writable_values(
                data, apply_defaults=context.get(APPLY_DEFAULTS_CONTEXT, True)
            )
        return cls._readable_values(data)

    @classmethod
    def _readable_values(cls, data: Mapping[str, Any]) -> dict[str, Any]:
        values: dict[str, Any] = {}
        for name, field_info in cls.model_fields.items():
            value = data.get(name)
            if _is_blank(value) and field_info.alias:
                value = data.get(field_info.alias)
            if not _is_blank(value):
                values[field_info.alias or name] = value
        return values

    @classmethod
    def _writable_values(
        cls, data: Mapping[str, Any], *, apply_defaults: bool
    ) -> dict[str, Any]:
        values: dict[str, Any] = {}
        for name, field_info in cls.model_fields.items():
            if is_read_only(field_info):
                continue
            alias = field_info.alias or name
            if alias in data:
                values[alias] = data[alias]
            elif name in data:
                values[alias] = data[name]
            elif apply_defaults and name in cls.write_defaults:
                values[alias] = cls.write_defaults[name]
        return values

    @classmethod
    def field_name(cls, name: str) -> str:
        """Attribute name for a camelCase or snake_case field name."""
        for attribute, field_info in cls.model_fields.items():
            if name in (attribute, field_info.alias):
                return attribute
        return name


class Timestamped(GatewayModel):
    """Records carrying backend-managed timestamps."""

    created_at: str = read_only("")
    updated_at: str = read_only("")


# =============================================================================
# Categories
# =============================================================================


class Category(Timestamped):
    """Top-level grouping of topics."""

    entity_name: ClassVar[str] = "category"
    container_key: ClassVar[Optional[str]] = "categories"

    id: Optional[RecordId] = read_only()
    name: Trimmed = ""
    description: Trimmed = ""
    status: str = "Draft"
    emoji: Optional[str] = None
    topics_count: int = read_only(0)


class Subcategory(Timestamped):
    """Second-level grouping, owned by a category."""

    entity_name: ClassVar[str] = "subcategory"
    container_key: ClassVar[Optional[str]] = "subcategories"

    id: Optional[RecordId] = read_only()
    name: Trimmed = ""
    description: Trimmed = ""
    category_id: int = 0
    category_name: str = read_only("")
    status: str = "Draft"
    emoji: Optional[str] = None
    topics_count: int = read_only(0)


# =============================================================================
# Topics
# =============================================================================


class Video(GatewayModel):
    """A video inside a topic module."""

    entity_name: ClassVar[str] = "video"

    id: Optional[NumericText] = None
    title: Trimmed = ""
    description: str = ""
    duration: NumericText = ""
    video_url: str = ""
    thumbnail: str = ""
    order: int = 0


VideoList = Annotated[list[Video], BeforeValidator(_objects_only)]


class Module(GatewayModel):
    """An ordered section of a topic."""

    entity_name: ClassVar[str] = "module"

    id: Optional[NumericText] = None
    title: Trimmed = ""
    description: str = ""
    order: int = 0
    videos: VideoList = Field(default_factory=list)


ModuleList = Annotated[list[Module], BeforeValidator(_objects_only)]


class Topic(Timestamped):
    """A course-like unit of learning content."""

    entity_name: ClassVar[str] = "topic"
    container_key: ClassVar[Optional[str]] = "topics"

    id: Optional[NumericText] = read_only()
    title: Trimmed = ""
    slug: str = ""
    emoji: Optional[str] = None
    category: NumericText = ""
    subcategory: NumericText = ""
    category_name: Optional[str] = read_only()
    subcategory_name: Optional[str] = read_only()
    difficulty: str = ""
    duration: NumericText = ""
    description: str = ""
    learning_objectives: Any = ""
    prerequisites: Any = ""
    modules: ModuleList = Field(default_factory=list)
    status: str = "draft"
    target_audience: list[Any] = Field(default_factory=list)
    tags: list[Any] = Field(default_factory=list)
    thumbnail: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    featured: bool = False
    is_free: bool = False
    price: NumericText = "0"
    enrollment_count: int = read_only(0)
    rating: Union[int, float] = read_only(0)
    review_count: int = read_only(0)


# =============================================================================
# Legal documents
# =============================================================================


class LegalDocument(Timestamped):
    """Versioned, language-specific legal text."""

    write_defaults: ClassVar[dict[str, Any]] = {
        "language": "en",
        "status": "Draft",
        "effective_date": None,
    }

    id: Optional[RecordId] = read_only()
    title: Trimmed = ""
    content: Trimmed = ""
    version: Trimmed = "1.0"
    language: LanguageText = "en"
    status: str = "Draft"
    effective_date: Optional[str] = ""
    created_by: str = read_only("")
    updated_by: str = read_only("")

    @field_validator("effective_date", mode="before")
    @classmethod
    def blank_date_is_null(cls, v: Any) -> Any:
        """An empty date is sent to the backend as ``null``."""
        return None if v == "" else v


class TermsDocument(LegalDocument):
    """Terms and conditions."""

    entity_name: ClassVar[str] = "terms"
    container_key: ClassVar[Optional[str]] = "terms"


class PrivacyPolicy(LegalDocument):
    """Privacy policy."""

    entity_name: ClassVar[str] = "privacy policy"
    container_key: ClassVar[Optional[str]] = "privacy_policies"


# =============================================================================
# Homepage content
# =============================================================================


class Faq(Timestamped):
    """A homepage question and answer."""

    entity_name: ClassVar[str] = "faq"
    container_key: ClassVar[Optional[str]] = "faqs"
    write_defaults: ClassVar[dict[str, Any]] = {"language": "en"}

    id: Optional[NumericText] = read_only()
    question: Trimmed = ""
    answer: Trimmed = ""
    order: int = 0
    is_active: bool = True
    language: LanguageText = "en"


class HeroSection(Timestamped):
    entity_name: ClassVar[str] = "hero"

    id: Optional[RecordId] = read_only()
    title: Trimmed = ""
    subtitle: Trimmed = ""
    background_image: str = ""
    cta_text: str = ""
    cta_link: str = ""


class AboutSection(Timestamped):
    entity_name: ClassVar[str] = "about"

    id: Optional[RecordId] = read_only()
    title: Trimmed = ""
    content: Trimmed = ""
    image: str = ""
    features: list[Any] = Field(default_factory=list)


class SocialLinks(GatewayModel):
    entity_name: ClassVar[str] = "social links"

    facebook: str = ""
    twitter: str = ""
    linkedin: str = ""
    instagram: str = ""


class ContactSection(Timestamped):
    entity_name: ClassVar[str] = "contact"

    id: Optional[RecordId] = read_only()
    email: Trimmed = ""
    phone: str = ""
    address: str = ""
    hours: str = ""
    description: str = ""
    support_email: str = ""
    sales_email: str = ""
    social_links: Annotated[SocialLinks, BeforeValidator(_object_or_empty)] = Field(
        default_factory=SocialLinks
    )


class HomepageContent(Timestamped):
    """Hero, about, contact and FAQ content for one language."""

    entity_name: ClassVar[str] = "homepage"

    id: Optional[RecordId] = read_only()
    language: LanguageText = "en"
    hero: Annotated[Optional[HeroSection], BeforeValidator(_object_or_none)] = None
    about: Annotated[Optional[AboutSection], BeforeValidator(_object_or_none)] = None
    contact: Annotated[Optional[ContactSection], BeforeValidator(_object_or_none)] = None
    faqs: Annotated[list[Faq], BeforeValidator(_objects_only)] = Field(
        default_factory=list
    )
    is_published: bool = read_only(False)
    version: int = read_only(1)
    created_by: str = read_only("")
    updated_by: str = read_only("")


ENTITY_MODELS: dict[str, type[GatewayModel]] = {
    "category": Category,
    "subcategory": Subcategory,
    "topic": Topic,
    "terms": TermsDocument,
    "privacy": PrivacyPolicy,
    "faq": Faq,
    "homepage": HomepageContent,
}
"""Entity models keyed by the short names used in routes and the CLI."""
