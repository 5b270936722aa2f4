"""
Narrative Template Engine.

Turns a review into an angle-specific voiceover script. Pure and
deterministic: the same review always renders to the same text.
"""
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from .angles import ANGLE_TABLE, BASE_ANGLES, EXTENDED_ANGLES, NarrativeAngle

if TYPE_CHECKING:
    from proofreel.generation.models import Review

MIN_VARIATIONS = 3
MAX_VARIATIONS = 5

EMPTY_QUOTE = "Great experience!"

IMPACT_WORDS = (
    "amazing", "incredible", "best", "love", "perfect", "excellent",
    "fantastic", "wonderful", "great", "highly", "recommend", "changed",
    "transformed", "solved", "finally", "exactly", "everything",
)

_SENTENCE_RE = re.compile(r"[^.!?]+[.!?]+")


@dataclass(frozen=True)
class NarrativeScript:
    """Rendered script for one angle."""
    angle: NarrativeAngle
    text: str


def split_sentences(text: str, keep_unterminated: bool = True) -> List[str]:
    """
    Split text into trimmed sentences.

    Text without any terminator is returned as one sentence, or dropped
    when keep_unterminated is False.
    """
    sentences = _SENTENCE_RE.findall(text)
    if not sentences and keep_unterminated:
        sentences = [text]
    return [s.strip() for s in sentences if s.strip()]


def clamp_variation_count(variation_count: int) -> int:
    return max(MIN_VARIATIONS, min(MAX_VARIATIONS, variation_count))


class NarrativeTemplateEngine:
    """Renders review text into narrative scripts, one per angle."""

    def extract_key_quote(self, text: Optional[str]) -> str:
        """
        Pick the most impactful sentence of the review.

        Each sentence scores one point per impact word it contains, plus one
        when its length is between 30 and 200 characters. Ties keep the
        earlier sentence.
        """
        sentences = split_sentences(text or "")
        if not sentences:
            return EMPTY_QUOTE

        best_sentence = sentences[0]
        best_score = 0

        for sentence in sentences:
            lowered = sentence.lower()
            score = sum(1 for word in IMPACT_WORDS if word in lowered)
            if 30 < len(sentence) < 200:
                score += 1

            if score > best_score:
                best_score = score
                best_sentence = sentence

        return best_sentence

    def extract_context(self, text: Optional[str], angle: NarrativeAngle) -> str:
        """First sentence mentioning one of the angle's indicators, else its fallback."""
        profile = ANGLE_TABLE[angle]

        for sentence in split_sentences(text or "", keep_unterminated=False):
            lowered = sentence.lower()
            if any(indicator in lowered for indicator in profile.indicators):
                return sentence

        return profile.fallback_context

    def render(self, angle: NarrativeAngle, review: "Review") -> NarrativeScript:
        """Fill the angle's template from the review."""
        profile = ANGLE_TABLE[angle]
        text = review.text or ""

        script = profile.template.format(
            author=(review.author or "").strip() or profile.default_author,
            context=self.extract_context(text, angle),
            quote=self.extract_key_quote(text),
            rating=_format_rating(review.rating),
            source=f"from {review.platform}" if review.platform else "from a real customer",
        )

        return NarrativeScript(angle=angle, text=script)

    def select_angles(
        self,
        include_extended: bool = False,
        variation_count: int = MIN_VARIATIONS,
    ) -> List[NarrativeAngle]:
        """
        Angles to generate, in priority order.

        The base angles come first, the extended ones only when requested;
        the list is cut to the clamped variation count.
        """
        pool = list(BASE_ANGLES)
        if include_extended:
            pool.extend(EXTENDED_ANGLES)
        return pool[:clamp_variation_count(variation_count)]

    def available_angles(self) -> List[Dict[str, Any]]:
        return [
            {
                "angle": angle.value,
                "name": profile.name,
                "description": profile.description,
                "extended": profile.extended,
            }
            for angle, profile in ANGLE_TABLE.items()
        ]


def _format_rating(rating: Optional[float]) -> str:
    if not rating:
        return "highly rated"
    if isinstance(rating, float) and rating.is_integer():
        rating = int(rating)
    return f"{rating} out of 5 stars"
