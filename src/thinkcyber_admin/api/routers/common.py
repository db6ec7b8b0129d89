"""Helpers shared by the entity routers.

List endpoints all accept the same query parameters and answer with the
same ``data`` / ``meta`` / ``stats`` envelope; only the default page size,
the entity model and the stats shape differ.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Optional

from fastapi import Query
from fastapi.responses import JSONResponse

from thinkcyber_admin.api.schemas.responses import Envelope
from thinkcyber_admin.config.settings import settings
from thinkcyber_admin.exceptions import ValidationError
from thinkcyber_admin.models.entities import GatewayModel
from thinkcyber_admin.services.backend_client import ForwardResult
from thinkcyber_admin.services.envelope import StatsSpec, build_meta, build_stats
from thinkcyber_admin.services.field_mapper import FieldMapper

STATUS_ALL = "all"


@dataclass
class ListQuery:
    """Inbound list parameters after defaults are applied."""

    page: int
    limit: int
    search: Optional[str] = None
    status: Optional[str] = None
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None
    fetch_all: bool = False

    def to_backend_params(
        self, extra: Optional[Mapping[str, Any]] = None
    ) -> dict[str, Any]:
        """
        Query parameters forwarded to the backend.

        ``fetch_all`` requests page 1 with the configured large limit, and a
        status of ``all`` is not forwarded.
        """
        params: dict[str, Any] = {
            "page": 1 if self.fetch_all else self.page,
            "limit": settings.fetch_all_limit if self.fetch_all else self.limit,
            "sortBy": self.sort_by,
            "sortOrder": self.sort_order,
            "search": self.search,
        }
        if self.status and self.status != STATUS_ALL:
            params["status"] = self.status
        if extra:
            params.update({k: v for k, v in extra.items() if v != STATUS_ALL})
        return params


def make_list_query(
    *,
    page: int,
    limit: int,
    search: Optional[str] = None,
    status: Optional[str] = None,
    sort_by: Optional[str] = None,
    sort_order: Optional[str] = None,
    fetch_all: bool = False,
) -> ListQuery:
    """Build a ListQuery, rejecting non-positive paging values."""
    if page < 1 or limit < 1:
        raise ValidationError("Page and limit must be positive integers")
    return ListQuery(
        page=page,
        limit=limit,
        search=search or None,
        status=status or None,
        sort_by=sort_by,
        sort_order=sort_order,
        fetch_all=fetch_all,
    )


def _nested(data: Any, key: str) -> Optional[Mapping[str, Any]]:
    if isinstance(data, Mapping):
        value = data.get(key)
        if isinstance(value, Mapping):
            return value
    return None


def list_envelope(
    result: ForwardResult,
    model: type[GatewayModel],
    query: ListQuery,
    *,
    stats_spec: Optional[StatsSpec] = None,
    meta_extra: Optional[Mapping[str, Any]] = None,
    message: Optional[str] = None,
) -> Envelope:
    """
    Build the success envelope for a list endpoint.

    Meta and stats supplied by the backend (either at the top level or
    inside ``data``) are passed through; otherwise they are computed over
    the returned page.
    """
    items = FieldMapper.to_domain_list(model, result.data)
    meta = build_meta(
        _nested(result.data, "meta") or result.meta,
        count=len(items),
        page=query.page,
        limit=query.limit,
        fetch_all=query.fetch_all,
        extra=meta_extra,
    )
    stats = None
    if stats_spec is not None:
        stats = build_stats(
            items, stats_spec, _nested(result.data, "stats") or result.stats
        )
    return Envelope(success=True, data=items, meta=meta, stats=stats, message=message)


def fetched_message(noun: str, count: int, query: ListQuery) -> str:
    """``Fetched N <noun> from backend (page P)`` or the fetch-all variant."""
    if query.fetch_all:
        return f"Fetched all {count} {noun} from backend"
    return f"Fetched {count} {noun} from backend (page {query.page})"


def respond(envelope: Envelope, status_code: int = 200) -> JSONResponse:
    """Serialize an envelope into a JSON response."""
    return JSONResponse(content=envelope.to_content(), status_code=status_code)


def map_optional(model: type[GatewayModel], data: Any) -> Optional[dict[str, Any]]:
    """Map an action payload that the backend may legitimately leave empty."""
    if data is None:
        return None
    return FieldMapper.to_domain(model, data)


def list_query_dependency(
    default_limit: int,
    default_sort_by: Optional[str] = "createdAt",
    default_sort_order: Optional[str] = "desc",
) -> Callable[..., ListQuery]:
    """
    Create a FastAPI dependency parsing the common list parameters.

    Parameters
    ----------
    default_limit : int
        Page size used when the caller sends no ``limit``; endpoints keep
        their historical defaults.
    default_sort_by : Optional[str]
        Sort field forwarded when the caller sends none.
    default_sort_order : Optional[str]
        Sort order forwarded when the caller sends none.
    """

    def dependency(
        page: int = Query(1, description="Page number (1-based)"),
        limit: int = Query(default_limit, description="Items per page"),
        search: Optional[str] = Query(None, description="Free-text filter"),
        status: Optional[str] = Query(None, description="Status filter; 'all' disables it"),
        sort_by: Optional[str] = Query(default_sort_by, alias="sortBy"),
        sort_order: Optional[str] = Query(default_sort_order, alias="sortOrder"),
        fetch_all: bool = Query(False, alias="fetchAll"),
    ) -> ListQuery:
        return make_list_query(
            page=page,
            limit=limit,
            search=search,
            status=status,
            sort_by=sort_by,
            sort_order=sort_order,
            fetch_all=fetch_all,
        )

    return dependency
