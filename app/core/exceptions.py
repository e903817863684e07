from enum import Enum
from typing import Any, Dict, Optional

from fastapi import HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


class ErrorCode(str, Enum):
    """Global error codes"""

    # Common
    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    BAD_REQUEST = "BAD_REQUEST"
    CONFLICT = "CONFLICT"

    # Auth
    INVALID_API_KEY = "INVALID_API_KEY"

    # LLM
    LLM_PROVIDER_ERROR = "LLM_PROVIDER_ERROR"
    ALL_PROVIDERS_FAILED = "ALL_PROVIDERS_FAILED"
    INVALID_MODEL_TIER = "INVALID_MODEL_TIER"


class BaseAPIException(HTTPException):
    """Base class for API errors rendered by ``base_exception_handler``"""

    def __init__(
        self,
        status_code: int,
        error_code: str,
        message: str,
        detail: Optional[Dict[str, Any]] = None,
    ):
        self.error_code = error_code
        self.message = message
        self.detail_info = detail or {}
        super().__init__(status_code=status_code, detail=message)


class BadRequestException(BaseAPIException):
    """400 Bad Request"""

    def __init__(
        self,
        message: str = "The request is invalid.",
        error_code: str = ErrorCode.BAD_REQUEST,
        detail: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code=error_code,
            message=message,
            detail=detail,
        )


class UnauthorizedException(BaseAPIException):
    """401 Unauthorized"""

    def __init__(
        self,
        message: str = "Authentication is required.",
        error_code: str = ErrorCode.UNAUTHORIZED,
        detail: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code=error_code,
            message=message,
            detail=detail,
        )


class ForbiddenException(BaseAPIException):
    """403 Forbidden"""

    def __init__(
        self,
        message: str = "You do not have access to this resource.",
        error_code: str = ErrorCode.FORBIDDEN,
        detail: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            error_code=error_code,
            message=message,
            detail=detail,
        )


class NotFoundException(BaseAPIException):
    """404 Not Found"""

    def __init__(
        self,
        message: str = "The requested resource was not found.",
        error_code: str = ErrorCode.NOT_FOUND,
        detail: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            error_code=error_code,
            message=message,
            detail=detail,
        )


class ConflictException(BaseAPIException):
    """409 Conflict"""

    def __init__(
        self,
        message: str = "The request conflicts with the current state.",
        error_code: str = ErrorCode.CONFLICT,
        detail: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            error_code=error_code,
            message=message,
            detail=detail,
        )


class InternalServerException(BaseAPIException):
    """500 Internal Server Error"""

    def __init__(
        self,
        message: str = "An internal server error occurred.",
        error_code: str = ErrorCode.INTERNAL_ERROR,
        detail: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code=error_code,
            message=message,
            detail=detail,
        )


def _error_body(
    message: str, code: str, detail: Optional[Dict[str, Any]]
) -> Dict[str, Any]:
    return {
        "success": False,
        "message": message,
        "error": {
            "code": code,
            "message": message,
            "detail": detail,
        },
    }


async def base_exception_handler(
    request: Request, exc: BaseAPIException
) -> JSONResponse:
    """BaseAPIException handler"""
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.message, exc.error_code, exc.detail_info),
    )


_STATUS_CODES = {
    status.HTTP_400_BAD_REQUEST: ErrorCode.BAD_REQUEST,
    status.HTTP_401_UNAUTHORIZED: ErrorCode.UNAUTHORIZED,
    status.HTTP_403_FORBIDDEN: ErrorCode.FORBIDDEN,
    status.HTTP_404_NOT_FOUND: ErrorCode.NOT_FOUND,
    status.HTTP_409_CONFLICT: ErrorCode.CONFLICT,
}


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """HTTPException handler (routing errors and framework-raised 4xx)"""
    code = _STATUS_CODES.get(exc.status_code, ErrorCode.INTERNAL_ERROR)
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(str(exc.detail), code, None),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Request validation handler

    Keeps the error envelope for 422 responses; field errors are listed under
    ``error.detail.errors``.
    """
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=_error_body(
            "The request failed validation.",
            ErrorCode.VALIDATION_ERROR,
            {"errors": jsonable_encoder(exc.errors())},
        ),
    )


async def generic_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """Fallback handler for unexpected errors"""
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(
            "An internal server error occurred.",
            ErrorCode.INTERNAL_ERROR,
            None,
        ),
    )
