"""Tests for the response envelope schemas."""

from __future__ import annotations

from thinkcyber_admin.api.schemas.responses import Envelope, PaginationMeta


class TestEnvelope:
    def test_unset_members_dropped(self) -> None:
        assert Envelope(success=True, message="ok").to_content() == {
            "success": True,
            "message": "ok",
        }

    def test_explicit_null_data_kept(self) -> None:
        assert Envelope(success=True, data=None).to_content() == {
            "success": True,
            "data": None,
        }

    def test_empty_list_kept(self) -> None:
        content = Envelope(success=True, data=[], stats={"total": 0}).to_content()

        assert content["data"] == []
        assert content["stats"] == {"total": 0}

    def test_categories_member(self) -> None:
        content = Envelope(success=True, data=[], categories=[{"id": 1}]).to_content()

        assert content["categories"] == [{"id": 1}]


class TestPaginationMeta:
    def test_alias(self) -> None:
        meta = PaginationMeta(total=3, page=1, limit=10, totalPages=1)

        assert meta.model_dump(by_alias=True) == {
            "total": 3,
            "page": 1,
            "limit": 10,
            "totalPages": 1,
        }
