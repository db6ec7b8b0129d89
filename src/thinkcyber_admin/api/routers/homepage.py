"""Homepage content and FAQ endpoints.

Homepage content is a single nested document per language (hero, about,
contact, FAQs). Only English content is authored at the moment.

Route Order: ``/homepage/content`` and ``/homepage/faqs`` MUST be declared
before ``/homepage/{language}``.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Path, Query
from fastapi.responses import JSONResponse

from thinkcyber_admin.api.deps import get_backend_client, require_id
from thinkcyber_admin.api.routers.common import map_optional, respond
from thinkcyber_admin.api.routers.responses import (
    CREATE_ERRORS,
    GET_ITEM_ERRORS,
    WRITE_ERRORS,
)
from thinkcyber_admin.api.schemas.responses import Envelope
from thinkcyber_admin.exceptions import ValidationError
from thinkcyber_admin.models.enums import HOMEPAGE_LANGUAGES
from thinkcyber_admin.models.entities import Faq, HomepageContent
from thinkcyber_admin.services import envelope as policies
from thinkcyber_admin.services.backend_client import BackendClient
from thinkcyber_admin.services.envelope import raise_for_failure
from thinkcyber_admin.services.field_mapper import FieldMapper
from thinkcyber_admin.services.validation import validate

router = APIRouter()

CONTENT_ENDPOINT = "homepage/content"
FAQS_ENDPOINT = "homepage/faqs"


def _check_language(language: str) -> str:
    code = language.strip().lower()
    if code not in HOMEPAGE_LANGUAGES:
        raise ValidationError("Only English language is supported", field="language")
    return code


def _homepage_body(language: str, data: dict[str, Any]) -> dict[str, Any]:
    body = FieldMapper.to_backend(HomepageContent, data)
    body["language"] = language
    return body


@router.get("/homepage/content", responses=GET_ITEM_ERRORS)
async def get_homepage_content(
    language: str = Query("en"),
    client: BackendClient = Depends(get_backend_client),
) -> JSONResponse:
    """Fetch the homepage document for a language."""
    result = await client.get(CONTENT_ENDPOINT, params={"language": language})
    raise_for_failure(result, policies.READ, "Failed to fetch homepage content")

    return respond(Envelope(success=True, data=map_optional(HomepageContent, result.data)))


@router.post("/homepage/faqs", status_code=201, responses=CREATE_ERRORS)
async def create_faq(
    payload: dict[str, Any] = Body(...),
    client: BackendClient = Depends(get_backend_client),
) -> JSONResponse:
    """Create an FAQ entry; ``language`` defaults to ``en``."""
    data = validate("faq", "create", payload)

    result = await client.post(FAQS_ENDPOINT, json=FieldMapper.to_backend(Faq, data))
    raise_for_failure(result, policies.CREATE, "Failed to create FAQ")

    return respond(
        Envelope(
            success=True,
            data=map_optional(Faq, result.data),
            message="FAQ created successfully",
        ),
        status_code=201,
    )


@router.put("/homepage/faqs/{faq_id}", responses=WRITE_ERRORS)
async def update_faq(
    faq_id: str = Path(...),
    payload: dict[str, Any] = Body(...),
    client: BackendClient = Depends(get_backend_client),
) -> JSONResponse:
    """Update an FAQ's question and/or answer."""
    fid = require_id(faq_id, "FAQ")
    data = validate("faq", "update", payload)

    result = await client.put(
        f"{FAQS_ENDPOINT}/{fid}", json=FieldMapper.to_backend(Faq, data)
    )
    raise_for_failure(result, policies.UPDATE, "Failed to update FAQ")

    return respond(
        Envelope(
            success=True,
            data=map_optional(Faq, result.data),
            message="FAQ updated successfully",
        )
    )


@router.delete("/homepage/faqs/{faq_id}", responses=WRITE_ERRORS)
async def delete_faq(
    faq_id: str = Path(...),
    client: BackendClient = Depends(get_backend_client),
) -> JSONResponse:
    """Delete an FAQ entry."""
    fid = require_id(faq_id, "FAQ")

    result = await client.delete(f"{FAQS_ENDPOINT}/{fid}")
    raise_for_failure(result, policies.DELETE, "Failed to delete FAQ")

    return respond(Envelope(success=True, message="FAQ deleted successfully"))


@router.get("/homepage/{language}", responses=GET_ITEM_ERRORS)
async def get_homepage(
    language: str = Path(...),
    client: BackendClient = Depends(get_backend_client),
) -> JSONResponse:
    """Fetch homepage content by language path segment."""
    code = _check_language(language)

    result = await client.get(f"homepage/{code}")
    raise_for_failure(result, policies.READ, "Homepage content not found")

    return respond(Envelope(success=True, data=map_optional(HomepageContent, result.data)))


@router.post("/homepage/{language}", status_code=201, responses=CREATE_ERRORS)
async def create_homepage(
    language: str = Path(...),
    payload: dict[str, Any] = Body(...),
    client: BackendClient = Depends(get_backend_client),
) -> JSONResponse:
    """
    Create homepage content.

    Requires ``hero.title``, ``about.title`` and ``contact.email``. Nested
    sections are written in the backend's snake_case shape.
    """
    code = _check_language(language)
    data = validate("homepage", "create", payload)

    result = await client.post(CONTENT_ENDPOINT, json=_homepage_body(code, data))
    raise_for_failure(result, policies.CREATE, "Failed to save homepage data")

    return respond(
        Envelope(
            success=True,
            data=map_optional(HomepageContent, result.data),
            message="Homepage content created successfully",
        ),
        status_code=201,
    )


@router.put("/homepage/{language}", responses=WRITE_ERRORS)
async def update_homepage(
    language: str = Path(...),
    payload: dict[str, Any] = Body(...),
    client: BackendClient = Depends(get_backend_client),
) -> JSONResponse:
    """
    Replace homepage content.

    Also requires ``hero.subtitle`` and ``about.content``. The backend
    treats the content resource as an upsert, so the body is POSTed.
    """
    code = _check_language(language)
    data = validate("homepage", "update", payload)

    result = await client.post(CONTENT_ENDPOINT, json=_homepage_body(code, data))
    raise_for_failure(result, policies.UPDATE, "Failed to update homepage data")

    return respond(
        Envelope(
            success=True,
            data=map_optional(HomepageContent, result.data),
            message="Homepage content updated successfully",
        )
    )
