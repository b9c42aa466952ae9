"""Data models for J-Grants listing and detail payloads."""

from jgrants_finder.models.subsidy import (
    SearchParams,
    SubsidiesResponse,
    SubsidyAttachment,
    SubsidyDetail,
    SubsidyDetailResponse,
)

__all__ = [
    "SearchParams",
    "SubsidiesResponse",
    "SubsidyAttachment",
    "SubsidyDetail",
    "SubsidyDetailResponse",
]
