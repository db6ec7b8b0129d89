"""Topic endpoints.

Topics carry nested modules and videos; ids are opaque strings. Sub-actions
(toggle status, toggle featured, duplicate, bulk delete, video upload) are
forwarded to the matching backend resource.

Route Order: ``/topics/bulk-delete`` MUST be declared before
``/topics/{topic_id}``.
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, File, Form, Path, Query, UploadFile
from fastapi.responses import JSONResponse

from thinkcyber_admin.api.deps import get_backend_client, require_id
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
from thinkcyber_admin.models.enums import TopicStatus
from thinkcyber_admin.models.entities import Topic, Video
from thinkcyber_admin.services import envelope as policies
from thinkcyber_admin.services.backend_client import BackendClient
from thinkcyber_admin.services.envelope import TOPIC_STATS, raise_for_failure
from thinkcyber_admin.services.field_mapper import FieldMapper
from thinkcyber_admin.services.validation import validate, validate_bulk_ids

router = APIRouter()

ENDPOINT = "topics"


def _saved_message(status: Any) -> str:
    if status == TopicStatus.PUBLISHED.value:
        return "Topic published successfully"
    return "Topic saved as draft successfully"


@router.get("/topics", responses=LIST_ERRORS)
async def list_topics(
    query: ListQuery = Depends(list_query_dependency(10, None, None)),
    category: Optional[str] = Query(None),
    difficulty: Optional[str] = Query(None),
    client: BackendClient = Depends(get_backend_client),
) -> JSONResponse:
    """
    List topics with stats.

    Stats: totalTopics, publishedTopics, draftTopics, featuredTopics,
    freeTopics, paidTopics, totalEnrollments and averageRating (over rated
    topics only).
    """
    params = query.to_backend_params({"category": category, "difficulty": difficulty})
    result = await client.get(ENDPOINT, params=params)
    raise_for_failure(result, policies.LIST, "Failed to fetch topics")

    envelope = list_envelope(result, Topic, query, stats_spec=TOPIC_STATS)
    envelope.message = f"Fetched {len(envelope.data)} topics"
    return respond(envelope)


@router.post("/topics", status_code=201, responses=CREATE_ERRORS)
async def create_topic(
    payload: dict[str, Any] = Body(...),
    client: BackendClient = Depends(get_backend_client),
) -> JSONResponse:
    """Create a topic with its modules and videos."""
    data = validate("topic", "create", payload)

    result = await client.post(ENDPOINT, json=FieldMapper.to_backend(Topic, data))
    raise_for_failure(result, policies.CREATE, "Failed to create topic")

    return respond(
        Envelope(
            success=True,
            data=map_optional(Topic, result.data),
            message=_saved_message(data.get("status")),
        ),
        status_code=201,
    )


@router.post("/topics/bulk-delete", responses=LIST_ERRORS)
async def bulk_delete_topics(
    payload: Any = Body(...),
    client: BackendClient = Depends(get_backend_client),
) -> JSONResponse:
    """Delete several topics in one backend call."""
    ids = validate_bulk_ids(
        payload, missing_message="Invalid or missing topic IDs", invalid_message=None
    )

    result = await client.post(f"{ENDPOINT}/bulk-delete", json={"ids": ids})
    raise_for_failure(result, policies.LIST, "Failed to delete topics")

    data = result.data
    if data is None:
        data = {"deletedCount": len(ids), "deletedIds": ids}
    return respond(
        Envelope(
            success=True,
            data=data,
            message=f"{len(ids)} topic(s) deleted successfully",
        )
    )


@router.get("/topics/{topic_id}", responses=GET_ITEM_ERRORS)
async def get_topic(
    topic_id: str = Path(...),
    client: BackendClient = Depends(get_backend_client),
) -> JSONResponse:
    """Fetch one topic with its modules."""
    tid = require_id(topic_id, "topic")

    result = await client.get(f"{ENDPOINT}/{tid}")
    raise_for_failure(result, policies.READ, "Topic not found")

    return respond(
        Envelope(
            success=True,
            data=FieldMapper.to_domain(Topic, result.data),
            message="Topic fetched successfully",
        )
    )


@router.put("/topics/{topic_id}", responses=WRITE_ERRORS)
async def update_topic(
    topic_id: str = Path(...),
    payload: dict[str, Any] = Body(...),
    client: BackendClient = Depends(get_backend_client),
) -> JSONResponse:
    """Replace a topic."""
    tid = require_id(topic_id, "topic")
    data = validate("topic", "update", payload)

    result = await client.put(
        f"{ENDPOINT}/{tid}",
        json=FieldMapper.to_backend(Topic, data, apply_write_defaults=False),
    )
    raise_for_failure(result, policies.UPDATE, "Failed to update topic")

    return respond(
        Envelope(
            success=True,
            data=map_optional(Topic, result.data),
            message="Topic updated successfully",
        )
    )


@router.delete("/topics/{topic_id}", responses=WRITE_ERRORS)
async def delete_topic(
    topic_id: str = Path(...),
    client: BackendClient = Depends(get_backend_client),
) -> JSONResponse:
    """Delete one topic."""
    tid = require_id(topic_id, "topic")

    result = await client.delete(f"{ENDPOINT}/{tid}")
    raise_for_failure(result, policies.DELETE, "Failed to delete topic")

    return respond(
        Envelope(success=True, data=result.data, message="Topic deleted successfully")
    )


@router.patch("/topics/{topic_id}/toggle-status", responses=GET_ITEM_ERRORS)
async def toggle_topic_status(
    topic_id: str = Path(...),
    client: BackendClient = Depends(get_backend_client),
) -> JSONResponse:
    """Flip a topic between draft and published on the backend."""
    tid = require_id(topic_id, "topic")

    result = await client.patch(f"{ENDPOINT}/{tid}/toggle-status")
    raise_for_failure(result, policies.READ, "Failed to update topic status")

    return respond(
        Envelope(
            success=True,
            data=map_optional(Topic, result.data),
            message="Topic status updated successfully",
        )
    )


@router.patch("/topics/{topic_id}/toggle-featured", responses=GET_ITEM_ERRORS)
async def toggle_topic_featured(
    topic_id: str = Path(...),
    client: BackendClient = Depends(get_backend_client),
) -> JSONResponse:
    """Flip a topic's featured flag on the backend."""
    tid = require_id(topic_id, "topic")

    result = await client.patch(f"{ENDPOINT}/{tid}/toggle-featured")
    raise_for_failure(result, policies.READ, "Failed to update featured status")

    return respond(
        Envelope(
            success=True,
            data=map_optional(Topic, result.data),
            message="Topic featured status updated successfully",
        )
    )


@router.post("/topics/{topic_id}/duplicate", status_code=201, responses=GET_ITEM_ERRORS)
async def duplicate_topic(
    topic_id: str = Path(...),
    client: BackendClient = Depends(get_backend_client),
) -> JSONResponse:
    """Ask the backend to copy a topic; answers 201 with the copy."""
    tid = require_id(topic_id, "topic")

    result = await client.post(f"{ENDPOINT}/{tid}/duplicate")
    raise_for_failure(result, policies.READ, "Failed to duplicate topic")

    return respond(
        Envelope(
            success=True,
            data=map_optional(Topic, result.data),
            message="Topic duplicated successfully",
        ),
        status_code=201,
    )


@router.post(
    "/topics/{topic_id}/modules/{module_id}/videos/upload",
    status_code=201,
    responses=GET_ITEM_ERRORS,
)
async def upload_module_video(
    topic_id: str = Path(...),
    module_id: str = Path(...),
    video: UploadFile = File(..., description="Video file"),
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    order: Optional[int] = Form(None),
    client: BackendClient = Depends(get_backend_client),
) -> JSONResponse:
    """
    Upload a video into a topic module.

    The file is streamed to the backend as multipart with the long upload
    timeout. ``title`` defaults to the file name without its extension.
    """
    tid = require_id(topic_id, "topic")
    mid = require_id(module_id, "module")

    filename = video.filename or "video"
    form = {
        "title": title or filename.rsplit(".", 1)[0],
        "description": description or "",
        "order": str(order if order is not None else 0),
    }
    content = await video.read()
    files = {
        "video": (filename, content, video.content_type or "application/octet-stream")
    }

    result = await client.upload(
        f"{ENDPOINT}/{tid}/modules/{mid}/videos/upload", files=files, data=form
    )
    raise_for_failure(result, policies.READ, "Failed to upload video")

    return respond(
        Envelope(
            success=True,
            data=map_optional(Video, result.data),
            message="Video uploaded successfully",
        ),
        status_code=201,
    )
