"""
Tests for query-string pagination.
"""

import pytest

from app.core.config import settings
from app.core.errors import AppError
from app.core.pagination import MAX_SQL_INT, build_pagination, parse_positive_int


class TestParsing:

    @pytest.mark.parametrize("value", [None, "", "abc", "0", "-3", "5abc", "2.5"])
    def test_invalid_values_fall_back_to_default(self, value):
        assert parse_positive_int(value, 7) == 7

    def test_positive_integer_is_used(self):
        assert parse_positive_int("12", 7) == 12

    def test_defaults(self):
        pagination = build_pagination()

        assert pagination.page == 1
        assert pagination.limit == settings.PAGINATION_DEFAULT_LIMIT
        assert pagination.offset == 0

    def test_offset(self):
        assert build_pagination("3", "10").offset == 20

    def test_limit_above_maximum_is_rejected(self):
        with pytest.raises(AppError) as exc_info:
            build_pagination("1", str(settings.PAGINATION_MAX_LIMIT + 1))

        assert exc_info.value.status_code == 400

    def test_maximum_can_be_disabled(self, monkeypatch):
        monkeypatch.setattr(settings, "PAGINATION_MAX_LIMIT", None)

        assert build_pagination("1", "5000").limit == 5000

    def test_page_beyond_integer_range_is_rejected(self):
        with pytest.raises(AppError) as exc_info:
            build_pagination("99999999999999999999", "10")

        assert exc_info.value.status_code == 400
        assert "page" in exc_info.value.message

    def test_huge_limit_rejected_when_maximum_disabled(self, monkeypatch):
        monkeypatch.setattr(settings, "PAGINATION_MAX_LIMIT", None)

        with pytest.raises(AppError):
            build_pagination("1", str(MAX_SQL_INT + 1))

    def test_last_representable_page(self):
        pagination = build_pagination(str(MAX_SQL_INT // 10), "10")

        assert pagination.offset + pagination.limit <= MAX_SQL_INT


class TestPaginatedEndpoints:

    def test_second_page(self, client, make_job):
        for i in range(12):
            make_job(title=f"Job {i:02d}")

        response = client.get("/api/v1/jobs/", params={"page": 2, "limit": 10})

        assert response.status_code == 200
        data = response.json()["data"]
        assert len(data["jobs"]) == 2
        assert data["totalRecords"] == 12

    def test_garbage_page_means_first_page(self, client, make_job):
        make_job()

        response = client.get("/api/v1/jobs/", params={"page": "abc", "limit": "-1"})

        assert response.status_code == 200
        assert len(response.json()["data"]["jobs"]) == 1

    def test_limit_above_maximum(self, client):
        response = client.get("/api/v1/jobs/", params={"limit": settings.PAGINATION_MAX_LIMIT + 1})

        assert response.status_code == 400
        body = response.json()
        assert body["status"] == "fail"
        assert "limit" in body["message"]

    def test_page_out_of_range_over_http(self, client, make_job):
        make_job()

        response = client.get("/api/v1/jobs/", params={"page": "99999999999999999999"})

        assert response.status_code == 400
        assert response.json()["status"] == "fail"
