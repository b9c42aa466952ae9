"""J-Grants listing and detail payloads."""

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class SearchParams(BaseModel):
    """Query for the subsidy listing endpoint."""

    keyword: Optional[str] = None
    sort: Optional[
        Literal["created_date", "acceptance_start_datetime", "acceptance_end_datetime"]
    ] = None
    order: Optional[Literal["ASC", "DESC"]] = None
    acceptance: Optional[Literal[0, 1]] = None
    use_purpose: Optional[str] = None
    industry: Optional[str] = None
    target_number_of_employees: Optional[str] = None
    target_area_search: Optional[str] = None


class SubsidyAttachment(BaseModel):
    """Attachment as returned inline by the detail endpoint (base64 content)."""

    model_config = ConfigDict(extra="allow")

    name: str = ""
    data: str = ""
    category: Optional[str] = None


class SubsidyDetail(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    name: Optional[str] = None
    attachments: Optional[list[SubsidyAttachment]] = None


class SubsidyDetailResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    status: Optional[int] = None
    message: Optional[str] = None
    result: Optional[SubsidyDetail] = None

    @field_validator("result", mode="before")
    @classmethod
    def _unwrap_single_result(cls, value: Any) -> Any:
        """Some responses wrap the detail in a one-element list."""
        if isinstance(value, list):
            return value[0] if value else None
        return value


class SubsidiesResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    status: Optional[int] = None
    message: Optional[str] = None
    result: Any = None
