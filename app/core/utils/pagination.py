"""Pagination helpers"""

from fastapi import Query


class PageParams:
    """Pagination query parameters, used as ``Depends()``

    Example::

        @router.get("", response_model=ListAPIResponse[FeedbackResponse])
        async def list_feedback(page_params: PageParams = Depends()):
            items, total = await service.list_feedback(
                skip=page_params.skip,
                limit=page_params.limit,
            )
            return create_list_response(
                data=items,
                total=total,
                page=page_params.page,
                size=page_params.size,
            )
    """

    def __init__(
        self,
        page: int = Query(1, ge=1, description="Page number"),
        size: int = Query(20, ge=1, le=100, description="Page size"),
    ):
        self.page = page
        self.size = size

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.size

    @property
    def limit(self) -> int:
        return self.size
