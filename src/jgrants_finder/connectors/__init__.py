"""Source connectors for subsidy listings."""

from jgrants_finder.connectors.jgrants import JGrantsAPIError, JGrantsClient

__all__ = ["JGrantsAPIError", "JGrantsClient"]
