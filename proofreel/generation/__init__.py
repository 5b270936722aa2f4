"""
Testimonial video generation.

GenerationCoordinator is the entry point: one approved review in,
one video per narrative angle out.
"""
from .models import (
    ALLOWED_DURATIONS,
    DEFAULT_DURATION,
    AngleFailure,
    GenerationBatchResult,
    GenerationOptions,
    Review,
    VideoArtifact,
)
from .exceptions import (
    AllGenerationsFailed,
    GenerationError,
    InvalidInput,
    PermissionDenied,
)
from .permissions import PermissionGate
from .storage import MediaStorage, ReconcileReport
from .coordinator import AngleRun, AngleState, GenerationCoordinator

__all__ = [
    "ALLOWED_DURATIONS",
    "DEFAULT_DURATION",
    "AngleFailure",
    "GenerationBatchResult",
    "GenerationOptions",
    "Review",
    "VideoArtifact",
    "AllGenerationsFailed",
    "GenerationError",
    "InvalidInput",
    "PermissionDenied",
    "PermissionGate",
    "MediaStorage",
    "ReconcileReport",
    "AngleRun",
    "AngleState",
    "GenerationCoordinator",
]
