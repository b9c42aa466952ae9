"""J-Grants (jgrants-portal.go.jp) public subsidy API client."""

from .client import JGrantsAPIError, JGrantsClient, build_search_query, normalize_keyword

__all__ = ["JGrantsAPIError", "JGrantsClient", "build_search_query", "normalize_keyword"]
