"""
Testimonial video endpoints.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, status

from proofreel.generation import (
    GenerationBatchResult,
    GenerationCoordinator,
    GenerationError,
    GenerationOptions,
    Review,
)
from proofreel.narrative import NarrativeTemplateEngine
from proofreel.persistence import SQLiteReviewRepository

from ..dependencies import get_coordinator, get_narrative_engine, get_review_repository
from ..exceptions import ReviewNotFoundError
from ..schemas import AngleInfo, AnglesResponse, PrerequisitesResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Videos"])


@router.get(
    "/angles",
    response_model=AnglesResponse,
    summary="Narrative Angles",
    description="List the narrative angles a review can be scripted with.",
)
async def list_angles(
    engine: NarrativeTemplateEngine = Depends(get_narrative_engine),
) -> AnglesResponse:
    angles = [AngleInfo(**info) for info in engine.available_angles()]
    return AnglesResponse(
        angles=angles,
        base_count=sum(1 for a in angles if not a.extended),
        extended_count=sum(1 for a in angles if a.extended),
    )


@router.get(
    "/prerequisites",
    response_model=PrerequisitesResponse,
    summary="Generation Prerequisites",
    description="Check storage and API credentials needed for video generation.",
)
async def prerequisites(
    coordinator: GenerationCoordinator = Depends(get_coordinator),
) -> PrerequisitesResponse:
    result = await coordinator.validate_prerequisites()
    return PrerequisitesResponse(**result)


@router.post(
    "/reviews/{review_id}/videos",
    response_model=GenerationBatchResult,
    status_code=status.HTTP_201_CREATED,
    summary="Generate Testimonial Videos",
    description=(
        "Generate one video per narrative angle for an approved review. "
        "Runs to completion before responding."
    ),
)
async def generate_videos(
    review_id: str,
    options: Optional[GenerationOptions] = None,
    coordinator: GenerationCoordinator = Depends(get_coordinator),
    reviews: SQLiteReviewRepository = Depends(get_review_repository),
) -> GenerationBatchResult:
    record = reviews.get_review(review_id)
    if record is None:
        raise ReviewNotFoundError(review_id)

    try:
        return await coordinator.generate_batch(Review.from_record(record), options)
    except GenerationError as e:
        logger.warning(f"[GEN] Batch for review {review_id} rejected: {e.code}")
        raise e.to_http_exception()
