"""
Base class for voice/TTS providers.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

# Average speaking rate used for duration estimates.
WORDS_PER_MINUTE = 150


@dataclass(frozen=True)
class VoiceConfig:
    """Voice selection and delivery settings for one synthesis call."""
    voice_id: str
    model_id: str = "eleven_monolingual_v1"
    stability: float = 0.75
    similarity_boost: float = 0.75
    style: float = 0.5
    use_speaker_boost: bool = True

    def voice_settings(self) -> Dict[str, Any]:
        return {
            "stability": self.stability,
            "similarity_boost": self.similarity_boost,
            "style": self.style,
            "use_speaker_boost": self.use_speaker_boost,
        }


@dataclass
class AudioAsset:
    """Synthesized voiceover on disk. Temporary: the caller deletes it."""
    path: Path
    estimated_duration_seconds: float


def estimate_speech_duration(text: str) -> float:
    """
    Estimate spoken duration of `text` in seconds from its word count.

    This is an approximation at WORDS_PER_MINUTE, not the measured length of
    the synthesized audio. Pauses, voice speed and punctuation all shift the
    real duration.
    """
    word_count = len(text.split())
    return (word_count / WORDS_PER_MINUTE) * 60


class BaseVoiceProvider(ABC):
    """Abstract base class for voice/TTS providers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name."""
        pass

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """Check if provider is available."""
        pass

    @abstractmethod
    async def synthesize(
        self,
        script_text: str,
        voice: Optional[VoiceConfig],
        output_path: Union[str, Path],
    ) -> AudioAsset:
        """
        Synthesize speech from text.

        Args:
            script_text: Text to synthesize
            voice: Voice settings (provider default when None)
            output_path: Where to write the audio bytes

        Returns:
            AudioAsset pointing at output_path
        """
        pass

    async def aclose(self) -> None:
        """Release network resources."""
        return None
