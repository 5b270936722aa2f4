"""
Generation-related exceptions.
"""
from typing import List, Optional, Union

from fastapi import HTTPException, status

from .models import AngleFailure


class GenerationError(Exception):
    """Base generation error."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, code: str = "GENERATION_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "error": self.message,
                "code": self.code,
            },
        )


class InvalidInput(GenerationError):
    """Raised when a review cannot be used as generation input."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message=message, code="INVALID_INPUT")

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "error": "Invalid input",
                "code": self.code,
                "field": self.field,
                "message": self.message,
            },
        )


class PermissionDenied(GenerationError):
    """Raised when a review has no approved consent record."""

    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, review_id: Union[int, str], current_status: str):
        self.review_id = review_id
        self.current_status = current_status
        super().__init__(
            message=f"No approved permission for review {review_id} (status: {current_status})",
            code="PERMISSION_DENIED",
        )

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "error": "Permission denied",
                "code": self.code,
                "review_id": str(self.review_id),
                "current_status": self.current_status,
                "message": "Customer consent is required before generating videos",
            },
        )


class AllGenerationsFailed(GenerationError):
    """Raised when a batch produced no video at all."""

    status_code = status.HTTP_502_BAD_GATEWAY

    def __init__(
        self,
        review_id: Union[int, str],
        failures: List[AngleFailure],
        attempted: Optional[int] = None,
    ):
        self.review_id = review_id
        self.failures = list(failures)
        self.attempted = len(self.failures) if attempted is None else attempted
        summary = "; ".join(f"{f.angle.value}: {f.message}" for f in self.failures)
        super().__init__(
            message=(
                f"All video generations failed for review {review_id} "
                f"({self.attempted} attempted): {summary}"
            ),
            code="ALL_GENERATIONS_FAILED",
        )

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "error": "All video generations failed",
                "code": self.code,
                "review_id": str(self.review_id),
                "attempted": self.attempted,
                "failures": [f.model_dump(mode="json") for f in self.failures],
            },
        )
