"""
API errors and the handlers that render them as JSON.

Generation errors are converted in the routes with `to_http_exception()`;
this module covers errors that originate in the API layer itself.
"""
import logging
from typing import Any, Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class ErrorResponse(BaseModel):
    """Body returned for every handled API error."""
    error: str
    code: str
    status_code: int
    detail: Optional[Any] = None


class APIError(Exception):
    """Error raised by a route and rendered as an ErrorResponse."""

    code = "API_ERROR"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, detail: Optional[Any] = None):
        self.message = message
        self.detail = detail
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            error=self.message,
            code=self.code,
            status_code=self.status_code,
            detail=self.detail,
        )


class ReviewNotFoundError(APIError):
    """No review is stored under the requested id."""

    code = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, review_id: str):
        self.review_id = review_id
        super().__init__(f"Review not found: {review_id}", detail={"review_id": review_id})


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.code}")
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler; exception text is only exposed in debug mode."""
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    body = ErrorResponse(
        error="Internal server error",
        code="INTERNAL_ERROR",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=str(exc) if request.app.debug else None,
    )
    return JSONResponse(status_code=body.status_code, content=body.model_dump())
