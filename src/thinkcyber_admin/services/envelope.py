"""
Response envelope helpers.

Failure classification, pagination metadata and status aggregates shared by
every router. Classification is an ordered substring match on the backend's
error text; the per-operation policies below are kept verbatim for
compatibility with existing dashboard clients.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, NoReturn, Optional

from thinkcyber_admin.exceptions import ConflictError, NotFoundError, UpstreamError
from thinkcyber_admin.models.enums import (
    CategoryStatus,
    DocumentStatus,
    TopicStatus,
)
from thinkcyber_admin.services.backend_client import ForwardResult

logger = logging.getLogger(__name__)

NOT_FOUND_MARKER = "not found"


@dataclass(frozen=True)
class StatusPolicy:
    """
    Which substrings of a backend error map to 404 and 409.

    Attributes
    ----------
    name : str
        Policy label used in logs.
    check_not_found : bool
        Map ``"not found"`` to 404. Checked first.
    conflict_markers : tuple[str, ...]
        Substrings mapped to 409 when the not-found check did not match.
    """

    name: str
    check_not_found: bool = False
    conflict_markers: tuple[str, ...] = ()


READ = StatusPolicy("read", check_not_found=True)
CREATE = StatusPolicy("create", conflict_markers=("already exists",))
UPDATE = StatusPolicy("update", check_not_found=True, conflict_markers=("already exists",))
DELETE = StatusPolicy("delete", check_not_found=True)
DELETE_CATEGORY = StatusPolicy(
    "delete_category", check_not_found=True, conflict_markers=("existing topics",)
)
LIST = StatusPolicy("list")


def classify_failure(message: Optional[str], policy: StatusPolicy) -> int:
    """
    Choose the HTTP status for a failed backend call.

    Parameters
    ----------
    message : Optional[str]
        Backend error text.
    policy : StatusPolicy
        Operation policy.

    Returns
    -------
    int
        404, 409 or 500.

    Examples
    --------
    >>> classify_failure("Category not found", UPDATE)
    404
    >>> classify_failure("Cannot delete category with existing topics", DELETE_CATEGORY)
    409
    >>> classify_failure("Category not found", LIST)
    500
    """
    text = message or ""
    if policy.check_not_found and NOT_FOUND_MARKER in text:
        return 404
    if any(marker in text for marker in policy.conflict_markers):
        return 409
    return 500


def raise_for_failure(
    result: ForwardResult, policy: StatusPolicy, fallback: str
) -> None:
    """
    Raise the classified exception for a failed result; no-op on success.

    Parameters
    ----------
    result : ForwardResult
        Outcome of the backend call.
    policy : StatusPolicy
        Operation policy.
    fallback : str
        Message used when the backend supplied none.

    Raises
    ------
    NotFoundError, ConflictError, UpstreamError
    """
    if result.success:
        return
    _raise_classified(result.error or fallback, policy)


def _raise_classified(message: str, policy: StatusPolicy) -> NoReturn:
    status = classify_failure(message, policy)
    logger.debug("Backend failure classified as %d under %s policy", status, policy.name)
    if status == 404:
        raise NotFoundError(message)
    if status == 409:
        raise ConflictError(message)
    raise UpstreamError(message, details={"policy": policy.name})


def build_meta(
    backend_meta: Optional[Mapping[str, Any]],
    *,
    count: int,
    page: int,
    limit: int,
    fetch_all: bool = False,
    extra: Optional[Mapping[str, Any]] = None,
) -> dict[str, Any]:
    """
    Pagination metadata for a list response.

    Backend meta is passed through untouched. Otherwise the meta is
    synthesized from the number of returned items; ``fetch_all`` reports a
    single page holding everything.
    """
    if backend_meta:
        return dict(backend_meta)

    if fetch_all:
        meta: dict[str, Any] = {
            "total": count,
            "page": 1,
            "limit": count,
            "totalPages": 1,
        }
    else:
        meta = {
            "total": count,
            "page": page,
            "limit": limit,
            "totalPages": math.ceil(count / limit) if limit > 0 else 0,
        }
    if extra:
        meta.update(extra)
    return meta


# =============================================================================
# Stats
# =============================================================================


@dataclass(frozen=True)
class StatsSpec:
    """
    Shape of the ``stats`` member for one entity kind.

    Attributes
    ----------
    total_key : str
        Key holding the item count.
    status_keys : Mapping[str, str]
        Status value to stats key.
    extras : Callable[[Sequence[Mapping[str, Any]]], dict[str, Any]] | None
        Additional aggregates computed over the items.
    """

    total_key: str
    status_keys: Mapping[str, str]
    extras: Optional[Callable[[Sequence[Mapping[str, Any]]], dict[str, Any]]] = None


def _number(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _category_extras(items: Sequence[Mapping[str, Any]]) -> dict[str, Any]:
    return {"totalTopics": sum(int(_number(i.get("topicsCount"))) for i in items)}


def _latest_version(versions: Iterable[Any]) -> str:
    latest = "1.0"
    for version in versions:
        try:
            if float(version) > float(latest):
                latest = str(version)
        except (TypeError, ValueError):
            continue
    return latest


def _document_extras(items: Sequence[Mapping[str, Any]]) -> dict[str, Any]:
    return {
        "languages": len({i.get("language") for i in items}),
        "latestVersion": _latest_version(i.get("version") for i in items),
    }


def _topic_extras(items: Sequence[Mapping[str, Any]]) -> dict[str, Any]:
    ratings = [_number(i.get("rating")) for i in items]
    rated = [r for r in ratings if r > 0]
    return {
        "featuredTopics": sum(1 for i in items if i.get("featured")),
        "freeTopics": sum(1 for i in items if i.get("isFree")),
        "paidTopics": sum(1 for i in items if not i.get("isFree")),
        "totalEnrollments": sum(int(_number(i.get("enrollmentCount"))) for i in items),
        "averageRating": sum(rated) / len(rated) if rated else 0,
    }


CATEGORY_STATS = StatsSpec(
    total_key="total",
    status_keys={
        CategoryStatus.ACTIVE.value: "active",
        CategoryStatus.DRAFT.value: "draft",
        CategoryStatus.INACTIVE.value: "inactive",
    },
    extras=_category_extras,
)

DOCUMENT_STATS = StatsSpec(
    total_key="total",
    status_keys={
        DocumentStatus.DRAFT.value: "draft",
        DocumentStatus.PUBLISHED.value: "published",
        DocumentStatus.ARCHIVED.value: "archived",
    },
    extras=_document_extras,
)

TOPIC_STATS = StatsSpec(
    total_key="totalTopics",
    status_keys={
        TopicStatus.PUBLISHED.value: "publishedTopics",
        TopicStatus.DRAFT.value: "draftTopics",
    },
    extras=_topic_extras,
)


def build_stats(
    items: Sequence[Mapping[str, Any]],
    stats_spec: StatsSpec,
    backend_stats: Optional[Mapping[str, Any]] = None,
) -> dict[str, Any]:
    """
    Aggregate mapped items by status.

    Parameters
    ----------
    items : Sequence[Mapping[str, Any]]
        Mapped (camelCase) items of the returned page.
    stats_spec : StatsSpec
        Entity stats shape.
    backend_stats : Optional[Mapping[str, Any]]
        Stats supplied by the backend; passed through when present.

    Returns
    -------
    dict[str, Any]
        Every key of the stats shape, zero-filled for an empty page.
    """
    if backend_stats:
        return dict(backend_stats)

    stats: dict[str, Any] = {stats_spec.total_key: len(items)}
    for status_value, key in stats_spec.status_keys.items():
        stats[key] = sum(1 for i in items if i.get("status") == status_value)
    if stats_spec.extras is not None:
        stats.update(stats_spec.extras(items))
    return stats
