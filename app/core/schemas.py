"""Common API response envelopes

Usage::

    from app.core.schemas import APIResponse, create_response
    return create_response(data=profile, message="Preferences loaded")

    from app.core.schemas import ListAPIResponse, create_list_response
    return create_list_response(data=items, total=100, page=1, size=20)

Note:
    Generic classmethods are awkward with Pydantic, so use the factory
    functions or call the constructors directly.
"""

import math
from datetime import datetime
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

DataT = TypeVar("DataT")

DEFAULT_SUCCESS_MESSAGE = "Request processed successfully."


class BaseSchema(BaseModel):
    """Base schema for ORM conversion"""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )


class TimestampMixin(BaseModel):
    created_at: datetime
    updated_at: Optional[datetime] = None


class APIResponse(BaseModel, Generic[DataT]):
    """Single-object response envelope"""

    success: bool = True
    message: str = DEFAULT_SUCCESS_MESSAGE
    data: Optional[DataT] = None


class PageMeta(BaseModel):
    """Pagination metadata"""

    total: int = Field(..., description="Total number of items")
    page: int = Field(..., description="Current page")
    size: int = Field(..., description="Page size")
    total_pages: int = Field(..., description="Total number of pages")
    has_next: bool = Field(..., description="Whether a next page exists")
    has_prev: bool = Field(..., description="Whether a previous page exists")


class ListAPIResponse(BaseModel, Generic[DataT]):
    """Paginated list response envelope

    Example::

        @router.get("", response_model=ListAPIResponse[FeedbackResponse])
        async def list_feedback(page_params: PageParams = Depends()):
            items, total = await service.list_feedback(
                skip=page_params.skip, limit=page_params.limit
            )
            return create_list_response(
                data=[FeedbackResponse.model_validate(i) for i in items],
                total=total,
                page=page_params.page,
                size=page_params.size,
            )
    """

    success: bool = True
    message: str = DEFAULT_SUCCESS_MESSAGE
    data: list[DataT] = Field(default_factory=list)
    meta: PageMeta


def create_response(
    data: Optional[DataT] = None,
    message: str = DEFAULT_SUCCESS_MESSAGE,
    success: bool = True,
) -> APIResponse[DataT]:
    """Build an ``APIResponse``

    Args:
        data: payload
        message: human readable message
        success: success flag

    Returns:
        APIResponse instance
    """
    return APIResponse(success=success, message=message, data=data)


def create_list_response(
    data: list[DataT],
    total: int,
    page: int,
    size: int,
    message: str = DEFAULT_SUCCESS_MESSAGE,
) -> ListAPIResponse[DataT]:
    """Build a ``ListAPIResponse`` with pagination metadata

    Args:
        data: items of the current page
        total: total number of items
        page: current page (1-based)
        size: page size
        message: human readable message

    Returns:
        ListAPIResponse instance
    """
    total_pages = math.ceil(total / size) if size > 0 else 0
    return ListAPIResponse(
        success=True,
        message=message,
        data=data,
        meta=PageMeta(
            total=total,
            page=page,
            size=size,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        ),
    )


class ErrorDetail(BaseModel):
    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Error message")
    detail: Optional[dict[str, Any]] = Field(
        default=None, description="Additional information"
    )


class ErrorResponse(BaseModel):
    """Error response envelope

    Example::

        {
            "success": false,
            "message": "Recommendation not found.",
            "error": {
                "code": "RECOMMENDATION_NOT_FOUND",
                "message": "Recommendation not found.",
                "detail": {"recommendation_id": "rec_abc"}
            }
        }
    """

    success: bool = False
    message: str
    error: ErrorDetail
