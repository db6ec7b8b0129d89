"""Privacy policy endpoints."""

from __future__ import annotations

from thinkcyber_admin.api.routers.documents import DocumentResource, make_document_router
from thinkcyber_admin.models.entities import PrivacyPolicy

PRIVACY_RESOURCE = DocumentResource(
    entity="privacy",
    model=PrivacyPolicy,
    endpoint="privacy",
    label="Privacy policy",
    id_label="privacy policy",
    plural="privacy policies",
)

router = make_document_router(PRIVACY_RESOURCE)
