"""Category CRUD endpoints.

Proxies category operations to the backend ``categories`` resource. Every
write is validated before the outbound call; every response is mapped to
the camelCase category shape.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Path
from fastapi.responses import JSONResponse

from thinkcyber_admin.api.deps import get_backend_client, parse_id
from thinkcyber_admin.api.routers.common import (
    ListQuery,
    fetched_message,
    list_envelope,
    list_query_dependency,
    map_optional,
    respond,
)
from thinkcyber_admin.api.routers.responses import (
    CREATE_ERRORS,
    GET_ITEM_ERRORS,
    LIST_ERRORS,
    WRITE_ERRORS,
)
from thinkcyber_admin.api.schemas.responses import Envelope
from thinkcyber_admin.models.entities import Category
from thinkcyber_admin.services import envelope as policies
from thinkcyber_admin.services.backend_client import BackendClient
from thinkcyber_admin.services.envelope import CATEGORY_STATS, raise_for_failure
from thinkcyber_admin.services.field_mapper import FieldMapper
from thinkcyber_admin.services.validation import validate

router = APIRouter()

ENDPOINT = "categories"


@router.get("/categories", responses=LIST_ERRORS)
async def list_categories(
    query: ListQuery = Depends(list_query_dependency(50)),
    client: BackendClient = Depends(get_backend_client),
) -> JSONResponse:
    """
    List categories with pagination metadata and status stats.

    Returns
    -------
    JSONResponse
        Envelope with ``data`` (categories), ``meta`` and ``stats``
        (total, active, draft, inactive, totalTopics).
    """
    result = await client.get(ENDPOINT, params=query.to_backend_params())
    raise_for_failure(result, policies.LIST, "Failed to fetch categories")

    envelope = list_envelope(result, Category, query, stats_spec=CATEGORY_STATS)
    envelope.message = fetched_message("categories", len(envelope.data), query)
    return respond(envelope)


@router.post("/categories", status_code=201, responses=CREATE_ERRORS)
async def create_category(
    payload: dict[str, Any] = Body(...),
    client: BackendClient = Depends(get_backend_client),
) -> JSONResponse:
    """Create a category; answers 201 with the created category."""
    data = validate("category", "create", payload)

    result = await client.post(ENDPOINT, json=FieldMapper.to_backend(Category, data))
    raise_for_failure(result, policies.CREATE, "Failed to create category")

    return respond(
        Envelope(
            success=True,
            data=map_optional(Category, result.data),
            message="Category created successfully",
        ),
        status_code=201,
    )


@router.get("/categories/{category_id}", responses=GET_ITEM_ERRORS)
async def get_category(
    category_id: str = Path(..., description="Numeric category id"),
    client: BackendClient = Depends(get_backend_client),
) -> JSONResponse:
    """Fetch one category by id."""
    cid = parse_id(category_id, "category")

    result = await client.get(f"{ENDPOINT}/{cid}")
    raise_for_failure(result, policies.READ, "Category not found")

    return respond(Envelope(success=True, data=FieldMapper.to_domain(Category, result.data)))


@router.put("/categories/{category_id}", responses=WRITE_ERRORS)
async def update_category(
    category_id: str = Path(..., description="Numeric category id"),
    payload: dict[str, Any] = Body(...),
    client: BackendClient = Depends(get_backend_client),
) -> JSONResponse:
    """Replace a category's name, description and status."""
    cid = parse_id(category_id, "category")
    data = validate("category", "update", payload)

    result = await client.put(
        f"{ENDPOINT}/{cid}",
        json=FieldMapper.to_backend(Category, data, apply_write_defaults=False),
    )
    raise_for_failure(result, policies.UPDATE, "Failed to update category")

    return respond(
        Envelope(
            success=True,
            data=map_optional(Category, result.data),
            message="Category updated successfully",
        )
    )


@router.delete("/categories/{category_id}", responses=WRITE_ERRORS)
async def delete_category(
    category_id: str = Path(..., description="Numeric category id"),
    client: BackendClient = Depends(get_backend_client),
) -> JSONResponse:
    """
    Delete a category.

    The backend refuses to delete a category that still has topics; that
    refusal is answered with 409.
    """
    cid = parse_id(category_id, "category")

    result = await client.delete(f"{ENDPOINT}/{cid}")
    raise_for_failure(result, policies.DELETE_CATEGORY, "Failed to delete category")

    return respond(
        Envelope(
            success=True,
            data=map_optional(Category, result.data),
            message="Category deleted successfully",
        )
    )
