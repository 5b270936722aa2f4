"""
Providers Layer.

Clients for the external services a testimonial video is built from:
- Voice/TTS (ElevenLabs)
- Video generation jobs (Grok)

Every outbound call goes through RetryPolicy.
"""
from .exceptions import (
    ProviderError,
    ProviderUnavailable,
    SynthesisError,
    VideoGenerationError,
    VideoGenerationTimeout,
    is_retryable_status,
)
from .clock import Clock, SYSTEM_CLOCK
from .retry import RetryPolicy, is_retryable

from .voice import (
    AudioAsset,
    BaseVoiceProvider,
    VoiceConfig,
    ElevenLabsClient,
    estimate_speech_duration,
)

from .video import (
    BaseVideoJobClient,
    DownloadedVideo,
    GeneratedVideo,
    VideoJob,
    VideoJobStatus,
    GrokVideoClient,
)

__all__ = [
    # Exceptions
    "ProviderError",
    "ProviderUnavailable",
    "SynthesisError",
    "VideoGenerationError",
    "VideoGenerationTimeout",
    "is_retryable_status",

    # Retry
    "Clock",
    "SYSTEM_CLOCK",
    "RetryPolicy",
    "is_retryable",

    # Voice
    "AudioAsset",
    "BaseVoiceProvider",
    "VoiceConfig",
    "ElevenLabsClient",
    "estimate_speech_duration",

    # Video
    "BaseVideoJobClient",
    "DownloadedVideo",
    "GeneratedVideo",
    "VideoJob",
    "VideoJobStatus",
    "GrokVideoClient",
]
