"""Subcategory endpoints.

Route Order: the static sub-resources (``active``, ``count``, ``search``,
``bulk-delete``, ``category/{id}``) MUST be declared before
``/subcategories/{subcategory_id}`` to avoid path matching conflicts.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Path, Query
from fastapi.responses import JSONResponse

from thinkcyber_admin.api.deps import get_backend_client, parse_id
from thinkcyber_admin.api.routers.common import (
    ListQuery,
    list_envelope,
    list_query_dependency,
    make_list_query,
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
from thinkcyber_admin.exceptions import ValidationError
from thinkcyber_admin.models.enums import CategoryStatus
from thinkcyber_admin.models.entities import Subcategory
from thinkcyber_admin.services import envelope as policies
from thinkcyber_admin.services.backend_client import BackendClient
from thinkcyber_admin.services.envelope import CATEGORY_STATS, raise_for_failure
from thinkcyber_admin.services.field_mapper import FieldMapper
from thinkcyber_admin.services.validation import validate, validate_bulk_ids

logger = logging.getLogger(__name__)

router = APIRouter()

ENDPOINT = "subcategories"
CATEGORIES_ENDPOINT = "categories"

EMPTY_COUNTS: dict[str, int] = {"total": 0, "active": 0, "draft": 0, "inactive": 0}


async def _category_options(
    client: BackendClient, subcategories: list[dict[str, Any]]
) -> list[dict[str, Any]]:
    """
    Category id and name pairs for the parent dropdown.

    Falls back to the distinct parents of ``subcategories`` when the
    categories call fails.
    """
    result = await client.get(CATEGORIES_ENDPOINT, params={"fetchAll": "true"})
    if result.success and isinstance(result.data, list):
        return [
            {"id": c.get("id"), "name": c.get("name")}
            for c in result.data
            if isinstance(c, Mapping)
        ]

    logger.warning(
        "Category options unavailable (%s); using subcategory parents", result.error
    )
    options: dict[Any, dict[str, Any]] = {}
    for item in subcategories:
        cid, name = item.get("categoryId"), item.get("categoryName")
        if cid and name and cid not in options:
            options[cid] = {"id": cid, "name": name}
    return list(options.values())


@router.get("/subcategories", responses=LIST_ERRORS)
async def list_subcategories(
    query: ListQuery = Depends(list_query_dependency(50)),
    category_id: Optional[str] = Query(None, alias="categoryId"),
    category: Optional[str] = Query(None, description="Alias of categoryId"),
    client: BackendClient = Depends(get_backend_client),
) -> JSONResponse:
    """
    List subcategories, optionally filtered by parent category.

    The response carries ``categories``, the category options for the
    parent dropdown.
    """
    params = query.to_backend_params({"categoryId": category_id or category or None})
    result = await client.get(ENDPOINT, params=params)
    raise_for_failure(result, policies.LIST, "Failed to fetch subcategories")

    envelope = list_envelope(result, Subcategory, query, stats_spec=CATEGORY_STATS)
    count = len(envelope.data)
    envelope.message = (
        f"Fetched all {count} subcategories"
        if query.fetch_all
        else f"Fetched {count} subcategories (page {query.page})"
    )
    envelope.categories = await _category_options(client, envelope.data)
    return respond(envelope)


@router.get("/subcategories/active", responses=LIST_ERRORS)
async def list_active_subcategories(
    query: ListQuery = Depends(list_query_dependency(50)),
    category_id: Optional[str] = Query(None, alias="categoryId"),
    client: BackendClient = Depends(get_backend_client),
) -> JSONResponse:
    """List subcategories with status ``Active``; a caller status filter is replaced."""
    query.status = CategoryStatus.ACTIVE.value
    params = query.to_backend_params({"categoryId": category_id})
    result = await client.get(f"{ENDPOINT}/active", params=params)
    raise_for_failure(result, policies.LIST, "Failed to fetch active subcategories")

    envelope = list_envelope(
        result,
        Subcategory,
        query,
        meta_extra={"status": CategoryStatus.ACTIVE.value},
    )
    envelope.message = f"Fetched {len(envelope.data)} active subcategory(ies)"
    return respond(envelope)


@router.get("/subcategories/count", responses=LIST_ERRORS)
async def count_subcategories(
    status: Optional[str] = Query(None),
    category_id: Optional[str] = Query(None, alias="categoryId"),
    client: BackendClient = Depends(get_backend_client),
) -> JSONResponse:
    """Counts of subcategories by status; zero counts when the backend sends none."""
    params = {
        "status": status if status != "all" else None,
        "categoryId": category_id if category_id != "all" else None,
    }
    result = await client.get(f"{ENDPOINT}/count", params=params)
    raise_for_failure(result, policies.LIST, "Failed to get subcategories count")

    counts = result.data if isinstance(result.data, dict) else dict(EMPTY_COUNTS)
    return respond(
        Envelope(
            success=True,
            data=counts,
            message="Subcategories count retrieved successfully",
        )
    )


@router.get("/subcategories/search", responses=LIST_ERRORS)
async def search_subcategories(
    q: Optional[str] = Query(None, description="Search text"),
    query_text: Optional[str] = Query(None, alias="query"),
    category_id: Optional[str] = Query(None, alias="categoryId"),
    status: Optional[str] = Query(None),
    page: int = Query(1),
    limit: int = Query(20),
    client: BackendClient = Depends(get_backend_client),
) -> JSONResponse:
    """Free-text search over subcategories (``q`` or ``query`` is required)."""
    text = (q or query_text or "").strip()
    if not text:
        raise ValidationError("Search query is required", field="q")

    list_query = make_list_query(page=page, limit=limit)
    params = {
        "q": text,
        "limit": limit,
        "page": page,
        "categoryId": category_id if category_id != "all" else None,
        "status": status if status != "all" else None,
    }
    result = await client.get(f"{ENDPOINT}/search", params=params)
    raise_for_failure(result, policies.LIST, "Failed to search subcategories")

    envelope = list_envelope(result, Subcategory, list_query, meta_extra={"query": text})
    envelope.message = f'Found {len(envelope.data)} subcategory(ies) matching "{text}"'
    return respond(envelope)


@router.post("/subcategories/bulk-delete", responses=LIST_ERRORS)
async def bulk_delete_subcategories(
    payload: Any = Body(...),
    client: BackendClient = Depends(get_backend_client),
) -> JSONResponse:
    """Delete several subcategories by id in one backend call."""
    ids = validate_bulk_ids(payload)

    result = await client.post(f"{ENDPOINT}/bulk-delete", json={"ids": ids})
    raise_for_failure(result, policies.LIST, "Failed to delete subcategories")

    return respond(
        Envelope(
            success=True,
            data=result.data,
            message=f"Successfully deleted {len(ids)} subcategory(ies)",
        )
    )


@router.get("/subcategories/category/{category_id}", responses=LIST_ERRORS)
async def list_subcategories_by_category(
    category_id: str = Path(..., description="Numeric parent category id"),
    query: ListQuery = Depends(list_query_dependency(50)),
    client: BackendClient = Depends(get_backend_client),
) -> JSONResponse:
    """List the subcategories of one category with status stats."""
    cid = parse_id(category_id, "category")

    result = await client.get(
        f"{ENDPOINT}/category/{cid}", params=query.to_backend_params()
    )
    raise_for_failure(
        result, policies.LIST, "Failed to fetch subcategories for category"
    )

    envelope = list_envelope(
        result,
        Subcategory,
        query,
        stats_spec=CATEGORY_STATS,
        meta_extra={"categoryId": cid},
    )
    envelope.message = (
        f"Fetched {len(envelope.data)} subcategory(ies) for category {cid}"
    )
    return respond(envelope)


@router.post("/subcategories", status_code=201, responses=CREATE_ERRORS)
async def create_subcategory(
    payload: dict[str, Any] = Body(...),
    client: BackendClient = Depends(get_backend_client),
) -> JSONResponse:
    """Create a subcategory under an existing category."""
    data = validate("subcategory", "create", payload)

    result = await client.post(ENDPOINT, json=FieldMapper.to_backend(Subcategory, data))
    raise_for_failure(result, policies.CREATE, "Failed to create subcategory")

    return respond(
        Envelope(
            success=True,
            data=map_optional(Subcategory, result.data),
            message="Subcategory created successfully",
        ),
        status_code=201,
    )


@router.get("/subcategories/{subcategory_id}", responses=GET_ITEM_ERRORS)
async def get_subcategory(
    subcategory_id: str = Path(..., description="Numeric subcategory id"),
    client: BackendClient = Depends(get_backend_client),
) -> JSONResponse:
    """Fetch one subcategory by id."""
    sid = parse_id(subcategory_id, "sub-category")

    result = await client.get(f"{ENDPOINT}/{sid}")
    raise_for_failure(result, policies.READ, "Sub-category not found")

    return respond(
        Envelope(success=True, data=FieldMapper.to_domain(Subcategory, result.data))
    )


@router.put("/subcategories/{subcategory_id}", responses=WRITE_ERRORS)
async def update_subcategory(
    subcategory_id: str = Path(..., description="Numeric subcategory id"),
    payload: dict[str, Any] = Body(...),
    client: BackendClient = Depends(get_backend_client),
) -> JSONResponse:
    """Replace a subcategory's fields."""
    sid = parse_id(subcategory_id, "sub-category")
    data = validate("subcategory", "update", payload)

    result = await client.put(
        f"{ENDPOINT}/{sid}",
        json=FieldMapper.to_backend(Subcategory, data, apply_write_defaults=False),
    )
    raise_for_failure(result, policies.UPDATE, "Failed to update sub-category")

    return respond(
        Envelope(
            success=True,
            data=map_optional(Subcategory, result.data),
            message="Sub-category updated successfully",
        )
    )


@router.delete("/subcategories/{subcategory_id}", responses=WRITE_ERRORS)
async def delete_subcategory(
    subcategory_id: str = Path(..., description="Numeric subcategory id"),
    client: BackendClient = Depends(get_backend_client),
) -> JSONResponse:
    """Delete one subcategory."""
    sid = parse_id(subcategory_id, "sub-category")

    result = await client.delete(f"{ENDPOINT}/{sid}")
    raise_for_failure(result, policies.DELETE, "Failed to delete sub-category")

    return respond(
        Envelope(
            success=True,
            data=map_optional(Subcategory, result.data),
            message="Sub-category deleted successfully",
        )
    )
