"""Shared CRUD and publish endpoints for versioned legal documents.

Terms and conditions and privacy policies have the same shape, rules and
lifecycle; they only differ in labels, backend resource and list wrapper.
``make_document_router`` builds the common routes for one of them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Path, Query
from fastapi.responses import JSONResponse

from thinkcyber_admin.api.deps import get_backend_client, parse_id
from thinkcyber_admin.api.routers.common import (
    ListQuery,
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
from thinkcyber_admin.models.entities import GatewayModel
from thinkcyber_admin.services import envelope as policies
from thinkcyber_admin.services.backend_client import BackendClient
from thinkcyber_admin.services.envelope import DOCUMENT_STATS, raise_for_failure
from thinkcyber_admin.services.field_mapper import FieldMapper
from thinkcyber_admin.services.validation import validate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DocumentResource:
    """
    Wiring for one legal document kind.

    Attributes
    ----------
    entity : str
        Validation rule key (``terms`` or ``privacy``).
    model : type[GatewayModel]
        Entity model.
    endpoint : str
        Backend resource and public route segment.
    label : str
        Sentence-case label used in messages.
    id_label : str
        Label used in ``Invalid <id_label> ID``.
    plural : str
        Noun used in list messages.
    """

    entity: str
    model: type[GatewayModel]
    endpoint: str
    label: str
    id_label: str
    plural: str


def today_iso() -> str:
    """Today's date as ``YYYY-MM-DD``."""
    return date.today().isoformat()


def make_document_router(resource: DocumentResource) -> APIRouter:
    """Build list, create, read, update, delete and publish routes."""
    router = APIRouter()
    base = f"/{resource.endpoint}"
    item = f"{base}/{{document_id}}"

    @router.get(base, responses=LIST_ERRORS)
    async def list_documents(
        query: ListQuery = Depends(list_query_dependency(50)),
        language: Optional[str] = Query(None),
        client: BackendClient = Depends(get_backend_client),
    ) -> JSONResponse:
        params = query.to_backend_params({"language": language})
        result = await client.get(resource.endpoint, params=params)
        raise_for_failure(result, policies.LIST, f"Failed to fetch {resource.plural}")

        envelope = list_envelope(result, resource.model, query, stats_spec=DOCUMENT_STATS)
        envelope.message = f"Fetched {len(envelope.data)} {resource.plural}"
        return respond(envelope)

    @router.post(base, status_code=201, responses=CREATE_ERRORS)
    async def create_document(
        payload: dict[str, Any] = Body(...),
        client: BackendClient = Depends(get_backend_client),
    ) -> JSONResponse:
        data = validate(resource.entity, "create", payload)

        result = await client.post(
            resource.endpoint, json=FieldMapper.to_backend(resource.model, data)
        )
        raise_for_failure(
            result, policies.CREATE, f"Failed to create {resource.label.lower()}"
        )

        return respond(
            Envelope(
                success=True,
                data=map_optional(resource.model, result.data),
                message=f"{resource.label} created successfully",
            ),
            status_code=201,
        )

    @router.get(item, responses=GET_ITEM_ERRORS)
    async def get_document(
        document_id: str = Path(...),
        client: BackendClient = Depends(get_backend_client),
    ) -> JSONResponse:
        did = parse_id(document_id, resource.id_label)

        result = await client.get(f"{resource.endpoint}/{did}")
        raise_for_failure(result, policies.READ, f"{resource.label} not found")

        return respond(
            Envelope(
                success=True,
                data=FieldMapper.to_domain(resource.model, result.data),
                message=f"{resource.label} retrieved successfully",
            )
        )

    @router.put(item, responses=WRITE_ERRORS)
    async def update_document(
        document_id: str = Path(...),
        payload: dict[str, Any] = Body(...),
        client: BackendClient = Depends(get_backend_client),
    ) -> JSONResponse:
        did = parse_id(document_id, resource.id_label)
        data = validate(resource.entity, "update", payload)

        result = await client.put(
            f"{resource.endpoint}/{did}",
            json=FieldMapper.to_backend(resource.model, data, apply_write_defaults=False),
        )
        raise_for_failure(
            result, policies.UPDATE, f"Failed to update {resource.label.lower()}"
        )

        return respond(
            Envelope(
                success=True,
                data=map_optional(resource.model, result.data),
                message=f"{resource.label} updated successfully",
            )
        )

    @router.delete(item, responses=WRITE_ERRORS)
    async def delete_document(
        document_id: str = Path(...),
        client: BackendClient = Depends(get_backend_client),
    ) -> JSONResponse:
        did = parse_id(document_id, resource.id_label)

        result = await client.delete(f"{resource.endpoint}/{did}")
        raise_for_failure(
            result, policies.DELETE, f"Failed to delete {resource.label.lower()}"
        )

        return respond(
            Envelope(
                success=True,
                data=map_optional(resource.model, result.data),
                message=f"{resource.label} deleted successfully",
            )
        )

    @router.post(f"{item}/publish", responses=GET_ITEM_ERRORS)
    async def publish_document(
        document_id: str = Path(...),
        payload: Optional[dict[str, Any]] = Body(None),
        client: BackendClient = Depends(get_backend_client),
    ) -> JSONResponse:
        """Publish a document; ``effectiveDate`` defaults to today."""
        did = parse_id(document_id, resource.id_label)
        effective_date = (payload or {}).get("effectiveDate") or today_iso()

        result = await client.post(
            f"{resource.endpoint}/{did}/publish",
            json={"effective_date": effective_date},
        )
        raise_for_failure(
            result, policies.READ, f"Failed to publish {resource.label.lower()}"
        )

        logger.info("Published %s %s effective %s", resource.entity, did, effective_date)
        return respond(
            Envelope(
                success=True,
                data=map_optional(resource.model, result.data),
                message=f"{resource.label} published successfully",
            )
        )

    return router
