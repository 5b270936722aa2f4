"""
Narrative scripting for testimonial videos.
"""
from .angles import (
    ANGLE_TABLE,
    BASE_ANGLES,
    EXTENDED_ANGLES,
    AngleProfile,
    NarrativeAngle,
)
from .engine import (
    IMPACT_WORDS,
    MAX_VARIATIONS,
    MIN_VARIATIONS,
    NarrativeScript,
    NarrativeTemplateEngine,
    clamp_variation_count,
    split_sentences,
)

__all__ = [
    "ANGLE_TABLE",
    "BASE_ANGLES",
    "EXTENDED_ANGLES",
    "AngleProfile",
    "NarrativeAngle",
    "IMPACT_WORDS",
    "MAX_VARIATIONS",
    "MIN_VARIATIONS",
    "NarrativeScript",
    "NarrativeTemplateEngine",
    "clamp_variation_count",
    "split_sentences",
]
