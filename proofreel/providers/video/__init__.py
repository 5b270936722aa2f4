"""
Video generation job providers.
"""
from .base import (
    BaseVideoJobClient,
    DownloadedVideo,
    GeneratedVideo,
    VideoJob,
    VideoJobStatus,
    audio_file_uri,
)
from .grok import GrokVideoClient

__all__ = [
    "BaseVideoJobClient",
    "DownloadedVideo",
    "GeneratedVideo",
    "VideoJob",
    "VideoJobStatus",
    "audio_file_uri",
    "GrokVideoClient",
]
