"""
Tests for failure classification, meta and stats builders.
"""

from __future__ import annotations

import pytest

from thinkcyber_admin.exceptions import ConflictError, NotFoundError, UpstreamError
from thinkcyber_admin.services import envelope as policies
from thinkcyber_admin.services.backend_client import ForwardResult
from thinkcyber_admin.services.envelope import (
    CATEGORY_STATS,
    DOCUMENT_STATS,
    TOPIC_STATS,
    build_meta,
    build_stats,
    classify_failure,
    raise_for_failure,
)


class TestClassifyFailure:
    @pytest.mark.parametrize(
        ("message", "policy", "expected"),
        [
            ("Category not found", policies.READ, 404),
            ("Category not found", policies.UPDATE, 404),
            ("Category not found", policies.DELETE, 404),
            ("Category not found", policies.CREATE, 500),
            ("Category not found", policies.LIST, 500),
            ("Category already exists", policies.CREATE, 409),
            ("Category already exists", policies.UPDATE, 409),
            ("Category already exists", policies.DELETE, 500),
            ("Cannot delete category with existing topics", policies.DELETE_CATEGORY, 409),
            ("Cannot delete category with existing topics", policies.DELETE, 500),
            ("HTTP Error: 500", policies.READ, 500),
            (None, policies.READ, 500),
        ],
    )
    def test_policy_table(self, message, policy, expected) -> None:
        assert classify_failure(message, policy) == expected

    def test_not_found_checked_before_conflict(self) -> None:
        message = "Parent not found, name already exists"

        assert classify_failure(message, policies.UPDATE) == 404

    def test_match_is_case_sensitive(self) -> None:
        assert classify_failure("Category Not Found", policies.READ) == 500


class TestRaiseForFailure:
    def test_success_is_noop(self) -> None:
        raise_for_failure(ForwardResult(success=True), policies.READ, "x")

    def test_not_found(self) -> None:
        with pytest.raises(NotFoundError, match="Topic not found"):
            raise_for_failure(
                ForwardResult.failure("Topic not found"), policies.READ, "fallback"
            )

    def test_conflict(self) -> None:
        with pytest.raises(ConflictError):
            raise_for_failure(
                ForwardResult.failure("Cannot delete category with existing topics"),
                policies.DELETE_CATEGORY,
                "fallback",
            )

    def test_fallback_message(self) -> None:
        with pytest.raises(UpstreamError) as exc_info:
            raise_for_failure(ForwardResult(success=False), policies.LIST, "Failed to fetch")

        assert exc_info.value.message == "Failed to fetch"
        assert exc_info.value.details == {"policy": "list"}


class TestBuildMeta:
    def test_synthesized(self) -> None:
        assert build_meta(None, count=25, page=2, limit=10) == {
            "total": 25,
            "page": 2,
            "limit": 10,
            "totalPages": 3,
        }

    def test_empty_page(self) -> None:
        assert build_meta(None, count=0, page=1, limit=50)["totalPages"] == 0

    def test_fetch_all_is_single_page(self) -> None:
        assert build_meta(None, count=7, page=3, limit=10, fetch_all=True) == {
            "total": 7,
            "page": 1,
            "limit": 7,
            "totalPages": 1,
        }

    def test_backend_meta_passes_through(self) -> None:
        backend = {"total": 120, "page": 1, "limit": 50, "totalPages": 3}

        assert build_meta(backend, count=50, page=1, limit=50, extra={"x": 1}) == backend

    def test_extra_members(self) -> None:
        meta = build_meta(None, count=1, page=1, limit=20, extra={"query": "net"})

        assert meta["query"] == "net"


class TestBuildStats:
    def test_empty_category_stats(self) -> None:
        assert build_stats([], CATEGORY_STATS) == {
            "total": 0,
            "active": 0,
            "draft": 0,
            "inactive": 0,
            "totalTopics": 0,
        }

    def test_category_counts(self) -> None:
        items = [
            {"status": "Active", "topicsCount": 3},
            {"status": "Active", "topicsCount": 1},
            {"status": "Inactive", "topicsCount": 0},
        ]

        assert build_stats(items, CATEGORY_STATS) == {
            "total": 3,
            "active": 2,
            "draft": 0,
            "inactive": 1,
            "totalTopics": 4,
        }

    def test_backend_stats_pass_through(self) -> None:
        backend = {"total": 99}

        assert build_stats([{"status": "Active"}], CATEGORY_STATS, backend) == backend

    def test_document_stats(self) -> None:
        items = [
            {"status": "Published", "language": "en", "version": "1.0"},
            {"status": "Draft", "language": "fr", "version": "2.1"},
            {"status": "Draft", "language": "en", "version": "1.5"},
        ]

        assert build_stats(items, DOCUMENT_STATS) == {
            "total": 3,
            "draft": 2,
            "published": 1,
            "archived": 0,
            "languages": 2,
            "latestVersion": "2.1",
        }

    def test_empty_document_stats(self) -> None:
        stats = build_stats([], DOCUMENT_STATS)

        assert stats["languages"] == 0
        assert stats["latestVersion"] == "1.0"

    def test_topic_stats(self) -> None:
        items = [
            {"status": "published", "featured": True, "isFree": True, "enrollmentCount": 10, "rating": 4},
            {"status": "draft", "featured": False, "isFree": False, "enrollmentCount": 5, "rating": 0},
            {"status": "published", "featured": False, "isFree": False, "enrollmentCount": 0, "rating": 5},
        ]

        assert build_stats(items, TOPIC_STATS) == {
            "totalTopics": 3,
            "publishedTopics": 2,
            "draftTopics": 1,
            "featuredTopics": 1,
            "freeTopics": 1,
            "paidTopics": 2,
            "totalEnrollments": 15,
            "averageRating": 4.5,
        }
