"""
Data models for testimonial video generation.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional, Union

from pydantic import BaseModel, Field, computed_field, field_validator

from proofreel.narrative import MAX_VARIATIONS, MIN_VARIATIONS, NarrativeAngle, clamp_variation_count

logger = logging.getLogger(__name__)

ALLOWED_DURATIONS = (15, 30, 60)
DEFAULT_DURATION = 30


class Review(BaseModel):
    """
    Customer review the videos are generated from.

    Empty id/text are accepted here and rejected by the coordinator,
    before any external call is made.
    """
    id: Optional[Union[int, str]] = None
    text: Optional[str] = None
    author: Optional[str] = None
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    platform: Optional[str] = None

    @classmethod
    def from_record(cls, record) -> "Review":
        """Build from a persisted ReviewRecord."""
        return cls(
            id=record.id,
            text=record.text,
            author=record.author,
            rating=record.rating,
            platform=record.platform,
        )


class GenerationOptions(BaseModel):
    """Batch generation options."""
    duration_seconds: int = Field(default=DEFAULT_DURATION, description="Video length: 15, 30 or 60")
    voice_id: Optional[str] = Field(default=None, description="TTS voice (configured default if omitted)")
    variation_count: int = Field(
        default=MIN_VARIATIONS,
        description=f"Number of angle variants, clamped to [{MIN_VARIATIONS}, {MAX_VARIATIONS}]",
    )
    include_extended_angles: bool = Field(default=False)

    @field_validator("duration_seconds")
    @classmethod
    def validate_duration(cls, v: int) -> int:
        if v not in ALLOWED_DURATIONS:
            logger.warning(f"[GEN] Invalid duration {v}s, using default {DEFAULT_DURATION}s")
            return DEFAULT_DURATION
        return v

    @field_validator("variation_count")
    @classmethod
    def validate_variation_count(cls, v: int) -> int:
        return clamp_variation_count(v)


class VideoArtifact(BaseModel):
    """Generated and persisted video for one angle."""
    id: Optional[int] = None
    review_id: str
    angle: NarrativeAngle
    angle_name: str
    file_path: str
    duration_seconds: float
    file_size_bytes: int
    script_text: str
    status: str = "completed"
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class AngleFailure(BaseModel):
    """Why one angle produced no video."""
    angle: NarrativeAngle
    error_type: str
    message: str

    @classmethod
    def from_exception(cls, angle: NarrativeAngle, error: BaseException) -> "AngleFailure":
        return cls(angle=angle, error_type=type(error).__name__, message=str(error))


class GenerationBatchResult(BaseModel):
    """
    Outcome of one batch.

    Always holds at least one artifact; a batch with none raises
    AllGenerationsFailed instead.
    """
    review_id: str
    artifacts: List[VideoArtifact]
    failures: List[AngleFailure] = Field(default_factory=list)
    attempted: int = 0
    skipped: List[NarrativeAngle] = Field(default_factory=list)

    @computed_field
    @property
    def success_count(self) -> int:
        return len(self.artifacts)

    @computed_field
    @property
    def failed_count(self) -> int:
        return len(self.failures)
