"""
Voice/TTS providers.
"""
from .base import (
    AudioAsset,
    BaseVoiceProvider,
    VoiceConfig,
    WORDS_PER_MINUTE,
    estimate_speech_duration,
)
from .elevenlabs import ElevenLabsClient

__all__ = [
    "AudioAsset",
    "BaseVoiceProvider",
    "VoiceConfig",
    "WORDS_PER_MINUTE",
    "estimate_speech_duration",
    "ElevenLabsClient",
]
