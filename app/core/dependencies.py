"""Shared FastAPI dependencies"""

from fastapi import Header

from app.core.config import settings
from app.core.exceptions import ErrorCode, UnauthorizedException


async def verify_internal_api_key(
    x_internal_api_key: str = Header(..., alias="X-Internal-Api-Key")
) -> None:
    """Check the internal API key sent by the CMS front-end

    Args:
        x_internal_api_key: value of the ``X-Internal-Api-Key`` header

    Raises:
        UnauthorizedException: the key does not match the configured one

    Example:
        @router.get("/feedback", dependencies=[Depends(verify_internal_api_key)])
        async def list_feedback():
            ...
    """
    if x_internal_api_key != settings.internal_api_key:
        raise UnauthorizedException(
            message="Invalid API key.",
            error_code=ErrorCode.INVALID_API_KEY,
        )
