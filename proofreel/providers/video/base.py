"""
Video Job Client Base Interface
===============================
Abstract base class for asynchronous video generation services.

A job moves through the remote states
submitted -> queued/processing -> completed/failed,
with a client-side timed_out when the polling ceiling is exceeded.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union

import httpx

from ..clock import Clock, SYSTEM_CLOCK
from ..exceptions import ProviderError, VideoGenerationError, VideoGenerationTimeout
from ..retry import is_retryable

logger = logging.getLogger(__name__)


class VideoJobStatus(str, Enum):
    """Status of a video generation job."""
    SUBMITTED = "submitted"
    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"

    @classmethod
    def from_api(cls, value: Optional[str]) -> "VideoJobStatus":
        """Map a provider status string to a job status."""
        status_map = {
            "submitted": cls.SUBMITTED,
            "pending": cls.SUBMITTED,
            "created": cls.SUBMITTED,
            "queued": cls.QUEUED,
            "processing": cls.PROCESSING,
            "in_progress": cls.PROCESSING,
            "running": cls.PROCESSING,
            "completed": cls.COMPLETED,
            "succeeded": cls.COMPLETED,
            "success": cls.COMPLETED,
            "failed": cls.FAILED,
            "error": cls.FAILED,
            "canceled": cls.FAILED,
            "cancelled": cls.FAILED,
        }
        return status_map.get((value or "").lower(), cls.QUEUED)

    @property
    def is_terminal(self) -> bool:
        return self in (VideoJobStatus.COMPLETED, VideoJobStatus.FAILED, VideoJobStatus.TIMED_OUT)


@dataclass
class VideoJob:
    """Snapshot of a remote job as last observed."""
    id: str
    status: VideoJobStatus
    progress: Optional[float] = None
    result_url: Optional[str] = None
    duration_seconds: Optional[float] = None
    error: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)


@dataclass
class DownloadedVideo:
    """Video file written to local storage."""
    path: Path
    file_size_bytes: int


@dataclass
class GeneratedVideo:
    """Result of submit -> poll -> download."""
    job_id: str
    path: Path
    duration_seconds: float
    file_size_bytes: int


class BaseVideoJobClient(ABC):
    """
    Abstract base class for video generation job services.

    Subclasses implement the three network calls; polling and the
    submit/poll/download composition live here.
    """

    def __init__(
        self,
        poll_interval: float = 10.0,
        timeout: float = 300.0,
        clock: Optional[Clock] = None,
    ):
        self.poll_interval = poll_interval
        self.timeout = timeout
        self.clock = clock or SYSTEM_CLOCK

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name identifier."""
        pass

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """Check if provider is configured."""
        pass

    @abstractmethod
    async def submit(
        self,
        prompt: str,
        audio_ref: Optional[str],
        duration_seconds: int,
        style: str,
    ) -> VideoJob:
        """Create a generation job and return it with its initial status."""
        pass

    @abstractmethod
    async def get_job(self, job_id: str) -> VideoJob:
        """Query the current status of a job once."""
        pass

    @abstractmethod
    async def download(self, result_url: str, output_path: Union[str, Path]) -> DownloadedVideo:
        """Download a finished video to output_path."""
        pass

    async def poll(
        self,
        job_id: str,
        interval: Optional[float] = None,
        timeout: Optional[float] = None,
    ) -> VideoJob:
        """
        Poll until the job reaches a terminal status.

        Args:
            job_id: Provider's job ID
            interval: Seconds between status checks
            timeout: Maximum seconds to wait

        Returns:
            The completed VideoJob (with result_url)

        Raises:
            VideoGenerationError: job failed, or a non-retryable query error
            VideoGenerationTimeout: still running when the ceiling was exceeded
        """
        interval = self.poll_interval if interval is None else interval
        timeout = self.timeout if timeout is None else timeout
        start_time = self.clock.monotonic()
        checks = 0

        logger.info(f"[VIDEO] Polling job {job_id} every {interval:g}s (timeout {timeout:g}s)")

        while True:
            elapsed = self.clock.monotonic() - start_time
            if elapsed > timeout:
                logger.warning(f"[VIDEO] Job {job_id} timed out after {elapsed:.0f}s ({checks} checks)")
                raise VideoGenerationTimeout(job_id, timeout, provider=self.name)

            checks += 1
            try:
                job = await self.get_job(job_id)
            except (ProviderError, httpx.TransportError) as e:
                if not is_retryable(e):
                    raise
                logger.warning(f"[VIDEO] Polling error for job {job_id}, will retry: {e}")
            else:
                if job.status is VideoJobStatus.COMPLETED:
                    if not job.result_url:
                        raise VideoGenerationError(
                            f"Job {job_id} completed but no result URL found",
                            retryable=False,
                            response=job.raw,
                            provider=self.name,
                        )
                    logger.info(f"[VIDEO] Job {job_id} completed after {elapsed:.0f}s")
                    return job

                if job.status is VideoJobStatus.FAILED:
                    raise VideoGenerationError(
                        f"Video generation failed: {job.error or 'Unknown error'}",
                        retryable=False,
                        response=job.raw,
                        provider=self.name,
                    )

                logger.debug(
                    f"[VIDEO] Job {job_id}: {job.status.value} "
                    f"(progress={job.progress}, check {checks}, {elapsed:.0f}s elapsed)"
                )

            await self.clock.sleep(interval)

    async def generate(
        self,
        prompt: str,
        output_path: Union[str, Path],
        audio_path: Optional[Union[str, Path]] = None,
        duration_seconds: int = 30,
        style: str = "testimonial",
    ) -> GeneratedVideo:
        """Submit a job, wait for it, and download the result."""
        audio_ref = audio_file_uri(audio_path) if audio_path else None

        job = await self.submit(prompt, audio_ref, duration_seconds, style)
        job = await self.poll(job.id)
        downloaded = await self.download(job.result_url, output_path)

        return GeneratedVideo(
            job_id=job.id,
            path=downloaded.path,
            duration_seconds=job.duration_seconds or duration_seconds,
            file_size_bytes=downloaded.file_size_bytes,
        )

    async def aclose(self) -> None:
        """Release network resources."""
        return None


def audio_file_uri(audio_path: Union[str, Path]) -> str:
    """Reference a local audio file the way the job API expects (file:// URI)."""
    return Path(audio_path).resolve().as_uri()
