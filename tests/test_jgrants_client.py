"""Tests for the J-Grants API client."""

import httpx
import pytest

from jgrants_finder.connectors.jgrants import (
    JGrantsAPIError,
    JGrantsClient,
    build_search_query,
    normalize_keyword,
)
from jgrants_finder.models.subsidy import SearchParams

BASE_URL = "https://api.example.test/exp/v1/public"


def _client(handler) -> JGrantsClient:
    return JGrantsClient(BASE_URL, client=httpx.Client(transport=httpx.MockTransport(handler)))


class TestBuildSearchQuery:
    """Tests for query defaults."""

    def test_applies_defaults(self) -> None:
        query = build_search_query(SearchParams())
        assert query == {
            "keyword": "事業",
            "sort": "created_date",
            "order": "DESC",
            "acceptance": "1",
        }

    def test_normalizes_short_keyword(self) -> None:
        assert build_search_query(SearchParams(keyword="a"))["keyword"] == "事業"
        assert normalize_keyword("  a  ") == "事業"

    def test_keeps_valid_keyword(self) -> None:
        assert build_search_query(SearchParams(keyword=" IT "))["keyword"] == "IT"

    def test_explicit_values_and_optional_fields(self) -> None:
        params = SearchParams(
            keyword="補助金",
            sort="acceptance_end_datetime",
            order="ASC",
            acceptance=0,
            industry="製造業",
            target_area_search="東京都",
        )
        query = build_search_query(params)
        assert query["sort"] == "acceptance_end_datetime"
        assert query["order"] == "ASC"
        assert query["acceptance"] == "0"
        assert query["industry"] == "製造業"
        assert query["target_area_search"] == "東京都"
        assert "use_purpose" not in query
        assert "target_number_of_employees" not in query


class TestJGrantsClient:
    """Tests for HTTP calls with a mock transport."""

    def test_search_sends_query(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"result": [{"id": "a0W1"}]})

        data = _client(handler).search(SearchParams(keyword="IT"))
        assert data == {"result": [{"id": "a0W1"}]}
        assert seen[0].url.path == "/exp/v1/public/subsidies"
        assert seen[0].url.params["keyword"] == "IT"
        assert seen[0].url.params["acceptance"] == "1"

    def test_fetch_detail_quotes_id(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={"result": {"id": "a/b", "name": "Test", "attachments": [{"name": "x.txt", "data": "eA=="}]}},
            )

        detail = _client(handler).fetch_detail("a/b")
        assert seen[0].url.raw_path.decode() == "/exp/v1/public/subsidies/id/a%2Fb"
        assert detail.result is not None
        assert detail.result.name == "Test"
        assert detail.result.attachments[0].name == "x.txt"

    def test_fetch_detail_unwraps_list_result(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"result": [{"id": "a0W1", "title": "extra field"}]})

        detail = _client(handler).fetch_detail("a0W1")
        assert detail.result.id == "a0W1"
        assert detail.result.model_dump()["title"] == "extra field"

    def test_error_status_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, text="not found")

        with pytest.raises(JGrantsAPIError, match="J-Grants API error 404: not found") as exc_info:
            _client(handler).fetch_detail("missing")
        assert exc_info.value.status_code == 404
