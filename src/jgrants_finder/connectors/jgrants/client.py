"""HTTP client for the J-Grants subsidy listing and detail endpoints."""

import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx

from jgrants_finder.config import DEFAULT_API_BASE_URL
from jgrants_finder.models.subsidy import SearchParams, SubsidyDetailResponse

from .constants import (
    DEFAULT_ACCEPTANCE,
    DEFAULT_KEYWORD,
    DEFAULT_ORDER,
    DEFAULT_SORT,
    MIN_KEYWORD_LENGTH,
    OPTIONAL_QUERY_FIELDS,
    SUBSIDIES_PATH,
    SUBSIDY_DETAIL_PATH,
)

logger = logging.getLogger(__name__)


class JGrantsAPIError(RuntimeError):
    """Non-success response from the J-Grants API."""

    def __init__(self, status_code: int, body: str):
        super().__init__(f"J-Grants API error {status_code}: {body}")
        self.status_code = status_code
        self.body = body


def normalize_keyword(keyword: Optional[str]) -> str:
    """Trimmed keyword, or the default when missing or too short."""
    if not keyword:
        return DEFAULT_KEYWORD
    trimmed = keyword.strip()
    if len(trimmed) < MIN_KEYWORD_LENGTH:
        return DEFAULT_KEYWORD
    return trimmed


def build_search_query(params: SearchParams) -> dict[str, str]:
    """Listing query with defaults for keyword, sort, order, and acceptance."""
    query = {
        "keyword": normalize_keyword(params.keyword),
        "sort": params.sort or DEFAULT_SORT,
        "order": params.order or DEFAULT_ORDER,
        "acceptance": str(params.acceptance if params.acceptance is not None else DEFAULT_ACCEPTANCE),
    }
    for field in OPTIONAL_QUERY_FIELDS:
        value = getattr(params, field)
        if value:
            query[field] = value
    return query


class JGrantsClient:
    """
    Client for the J-Grants public API.
    Listing responses are returned as raw JSON; detail responses are validated.
    """

    DEFAULT_HEADERS = {
        "User-Agent": "jgrants-finder/0.1",
        "Accept": "application/json",
    }

    def __init__(
        self,
        base_url: str = DEFAULT_API_BASE_URL,
        client: Optional[httpx.Client] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(
            timeout=60.0,
            follow_redirects=True,
            headers=self.DEFAULT_HEADERS,
        )

    def _get_json(self, path: str, params: Optional[dict[str, str]] = None) -> Any:
        url = f"{self._base_url}{path}"
        logger.debug("GET %s params=%s", url, params)
        response = self._client.get(url, params=params)
        if not response.is_success:
            raise JGrantsAPIError(response.status_code, response.text)
        return response.json()

    def search(self, params: Optional[SearchParams] = None) -> dict[str, Any]:
        """Search subsidies. Returns the listing payload as-is."""
        query = build_search_query(params or SearchParams())
        return self._get_json(SUBSIDIES_PATH, query)

    def fetch_detail(self, subsidy_id: str) -> SubsidyDetailResponse:
        """Fetch one subsidy, including base64 attachments."""
        path = SUBSIDY_DETAIL_PATH.format(id=quote(subsidy_id, safe=""))
        return SubsidyDetailResponse.model_validate(self._get_json(path))

    def close(self) -> None:
        self._client.close()
