"""
Narrative angle catalogue.

Each angle is a fixed framing strategy for one testimonial variant. The
base angles are always generated; the extended ones only on request.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple


class NarrativeAngle(str, Enum):
    """
    Narrative framings a testimonial script can take.

    - PROBLEM: the customer's situation before the product
    - SOLUTION: how the product solved it
    - TRANSFORMATION: before/after, with the rating
    - EMOTIONAL: how the experience felt (extended)
    - TRUST: authenticity of the review source (extended)
    """
    PROBLEM = "problem"
    SOLUTION = "solution"
    TRANSFORMATION = "transformation"
    EMOTIONAL = "emotional"
    TRUST = "trust"

    @classmethod
    def from_string(cls, value: str) -> "NarrativeAngle":
        """Get angle from string value."""
        value_lower = value.strip().lower()
        for angle in cls:
            if angle.value == value_lower:
                return angle
        raise ValueError(f"Unknown narrative angle: {value}")

    @property
    def profile(self) -> "AngleProfile":
        return ANGLE_TABLE[self]

    @property
    def display_name(self) -> str:
        return ANGLE_TABLE[self].name

    @property
    def is_extended(self) -> bool:
        return ANGLE_TABLE[self].extended


@dataclass(frozen=True)
class AngleProfile:
    """Static definition of one narrative angle."""
    name: str
    description: str
    extended: bool
    indicators: Tuple[str, ...]
    fallback_context: str
    default_author: str
    template: str


ANGLE_TABLE: Dict[NarrativeAngle, AngleProfile] = {
    NarrativeAngle.PROBLEM: AngleProfile(
        name="Problem Focus",
        description="Highlights the problem the customer faced",
        extended=False,
        indicators=(
            "before", "used to", "struggled", "struggling", "problem", "issue",
            "frustrated", "difficult", "couldn't", "wasn't",
        ),
        fallback_context="They faced challenges that many can relate to.",
        default_author="A valued customer",
        template=(
            "Before discovering this solution, {author} was struggling. {context} "
            "Like many others, they felt frustrated and were looking for answers. "
            "Here's their story of what they were going through...\n\n"
            "\"{quote}\"\n\n"
            "If you're facing similar challenges, you're not alone."
        ),
    ),
    NarrativeAngle.SOLUTION: AngleProfile(
        name="Solution Focus",
        description="Emphasizes how the product solved their problem",
        extended=False,
        indicators=(
            "solved", "fixed", "helped", "works", "solution", "now", "finally",
            "perfect", "exactly",
        ),
        fallback_context="The solution exceeded all expectations.",
        default_author="A satisfied customer",
        template=(
            "{author} found exactly what they needed. {context} "
            "The difference was immediate and noticeable.\n\n"
            "\"{quote}\"\n\n"
            "This is how the right solution can change everything."
        ),
    ),
    NarrativeAngle.TRANSFORMATION: AngleProfile(
        name="Transformation Story",
        description="Shows the before and after transformation",
        extended=False,
        indicators=(
            "changed", "transformed", "different", "now", "before and after",
            "improvement", "better",
        ),
        fallback_context="The results speak for themselves.",
        default_author="Our customer",
        template=(
            "From struggle to success - {author}'s transformation is remarkable. {context}\n\n"
            "\"{quote}\"\n\n"
            "Rated {rating}. This could be your transformation too."
        ),
    ),
    NarrativeAngle.EMOTIONAL: AngleProfile(
        name="Emotional Journey",
        description="Focuses on the emotional impact and feelings",
        extended=True,
        indicators=(
            "feel", "felt", "love", "happy", "relieved", "grateful", "excited",
            "thrilled", "amazed",
        ),
        fallback_context="The experience left a lasting impression.",
        default_author="A customer",
        template=(
            "{author}'s experience was more than just a transaction - "
            "it was an emotional journey. {context}\n\n"
            "\"{quote}\"\n\n"
            "Real experiences. Real emotions. Real results."
        ),
    ),
    NarrativeAngle.TRUST: AngleProfile(
        name="Trust & Credibility",
        description="Emphasizes authenticity and social proof",
        extended=True,
        indicators=(),
        fallback_context="Their words speak for themselves.",
        default_author="A verified customer",
        template=(
            "Hear it directly {source}. {author} shares their honest experience. {context}\n\n"
            "\"{quote}\"\n\n"
            "Authentic reviews from real customers who've been there."
        ),
    ),
}

# Priority order, also the order artifacts are returned in
BASE_ANGLES: Tuple[NarrativeAngle, ...] = (
    NarrativeAngle.PROBLEM,
    NarrativeAngle.SOLUTION,
    NarrativeAngle.TRANSFORMATION,
)
EXTENDED_ANGLES: Tuple[NarrativeAngle, ...] = (
    NarrativeAngle.EMOTIONAL,
    NarrativeAngle.TRUST,
)
