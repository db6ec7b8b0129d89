"""Terms and conditions endpoints.

Route Order: ``/terms/latest`` MUST be declared before the document routes,
which include ``/terms/{document_id}``.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from thinkcyber_admin.api.deps import get_backend_client
from thinkcyber_admin.api.routers.common import map_optional, respond
from thinkcyber_admin.api.routers.documents import DocumentResource, make_document_router
from thinkcyber_admin.api.routers.responses import GET_ITEM_ERRORS
from thinkcyber_admin.api.schemas.responses import Envelope
from thinkcyber_admin.models.entities import TermsDocument
from thinkcyber_admin.services import envelope as policies
from thinkcyber_admin.services.backend_client import BackendClient
from thinkcyber_admin.services.envelope import raise_for_failure

TERMS_RESOURCE = DocumentResource(
    entity="terms",
    model=TermsDocument,
    endpoint="terms",
    label="Terms and conditions",
    id_label="terms and conditions",
    plural="terms and conditions",
)

router = APIRouter()


@router.get("/terms/latest", responses=GET_ITEM_ERRORS)
async def get_latest_terms(
    language: str = Query("en", description="ISO 639-1 language code"),
    client: BackendClient = Depends(get_backend_client),
) -> JSONResponse:
    """Latest published terms for a language (default ``en``)."""
    code = (language or "en").lower()

    result = await client.get("terms/latest", params={"language": code})
    raise_for_failure(result, policies.READ, "No published terms and conditions found")

    return respond(
        Envelope(
            success=True,
            data=map_optional(TermsDocument, result.data),
            message=f"Latest terms and conditions retrieved for language: {code}",
        )
    )


router.include_router(make_document_router(TERMS_RESOURCE))
