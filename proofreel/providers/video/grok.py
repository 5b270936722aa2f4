"""
Grok Video Provider
===================
xAI video generation API adapter.

Uses the async job API:
1. Create generation -> get id
2. Poll for completion
3. Download video
"""
import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional, Union

import aiofiles
import httpx

from proofreel.config import VideoServiceConfig

from .base import BaseVideoJobClient, DownloadedVideo, VideoJob, VideoJobStatus
from ..clock import Clock
from ..exceptions import ProviderUnavailable, VideoGenerationError
from ..retry import RetryPolicy, is_retryable

logger = logging.getLogger(__name__)


class GrokVideoClient(BaseVideoJobClient):
    """
    Grok (xAI) video generation client.

    Submission and download go through the retry policy; individual status
    checks do not, the poll loop tolerates transient errors itself.
    """

    ENV_KEY = "GROK_API_KEY"

    def __init__(
        self,
        config: VideoServiceConfig,
        retry_policy: Optional[RetryPolicy] = None,
        client: Optional[httpx.AsyncClient] = None,
        clock: Optional[Clock] = None,
    ):
        super().__init__(
            poll_interval=config.poll_interval,
            timeout=config.timeout,
            clock=clock,
        )
        self.config = config
        self._retry = retry_policy or RetryPolicy(clock=clock)
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(config.request_timeout, connect=10.0)
        )

    @property
    def name(self) -> str:
        return "grok"

    @property
    def is_available(self) -> bool:
        return self.config.has_api_key

    @property
    def _generations_url(self) -> str:
        return f"{self.config.base_url.rstrip('/')}/v1/video/generations"

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.api_key or ''}",
            "Content-Type": "application/json",
        }

    def _require_key(self) -> None:
        if not self.is_available:
            raise ProviderUnavailable(self.name, f"Missing {self.ENV_KEY}")

    async def submit(
        self,
        prompt: str,
        audio_ref: Optional[str],
        duration_seconds: int,
        style: str,
    ) -> VideoJob:
        self._require_key()

        payload: Dict[str, Any] = {
            "prompt": prompt,
            "duration": duration_seconds,
            "style": style,
        }
        if audio_ref:
            payload["audio_url"] = audio_ref

        logger.info(
            f"[VIDEO] Submitting job: {len(prompt)} char prompt, {duration_seconds}s, "
            f"style={style}, audio={'yes' if audio_ref else 'no'}"
        )

        async def _request() -> httpx.Response:
            response = await self.client.post(
                self._generations_url, headers=self._get_headers(), json=payload
            )
            if not response.is_success:
                raise VideoGenerationError(
                    f"Video generation API error: {response.status_code} {response.reason_phrase}",
                    status_code=response.status_code,
                    response=_error_body(response),
                )
            return response

        try:
            response = await self._retry.execute(_request, "submit_video_job")
        except httpx.HTTPError as e:
            raise VideoGenerationError(
                f"Failed to submit video generation: {e}",
                retryable=is_retryable(e),
            ) from e

        data = _json_body(response)
        job_id = data.get("id") or data.get("generation_id")
        if not job_id:
            raise VideoGenerationError(
                f"No job id in submission response: {data}",
                retryable=False,
                response=data,
            )

        job = VideoJob(
            id=str(job_id),
            status=VideoJobStatus.from_api(data.get("status") or "submitted"),
            raw=data,
        )
        logger.info(f"[VIDEO] Job created: {job.id} ({job.status.value})")
        return job

    async def get_job(self, job_id: str) -> VideoJob:
        self._require_key()

        response = await self.client.get(
            f"{self._generations_url}/{job_id}",
            headers={"Authorization": f"Bearer {self.config.api_key or ''}"},
        )
        if not response.is_success:
            raise VideoGenerationError(
                f"Status check error for job {job_id}: {response.status_code}",
                status_code=response.status_code,
                response=_error_body(response),
            )

        return self._parse_job(job_id, _json_body(response, retryable=True))

    def _parse_job(self, job_id: str, data: Dict[str, Any]) -> VideoJob:
        """Parse a status response into a VideoJob."""
        output = data.get("output") if isinstance(data.get("output"), dict) else {}
        result = data.get("result") if isinstance(data.get("result"), dict) else {}

        result_url = data.get("video_url") or output.get("url") or result.get("url")
        duration = data.get("duration") or output.get("duration")

        error = data.get("error") or data.get("message")
        if isinstance(error, dict):
            error = error.get("message") or str(error)

        return VideoJob(
            id=str(data.get("id") or job_id),
            status=VideoJobStatus.from_api(data.get("status") or data.get("state")),
            progress=data.get("progress"),
            result_url=result_url,
            duration_seconds=float(duration) if duration else None,
            error=error,
            raw=data,
        )

    async def download(self, result_url: str, output_path: Union[str, Path]) -> DownloadedVideo:
        output_path = Path(output_path)
        logger.info(f"[VIDEO] Downloading {result_url[:80]} -> {output_path}")

        async def _request() -> int:
            async with self.client.stream("GET", result_url) as response:
                if not response.is_success:
                    raise VideoGenerationError(
                        f"Failed to download video: {response.status_code} {response.reason_phrase}",
                        status_code=response.status_code,
                    )

                output_path.parent.mkdir(parents=True, exist_ok=True)
                size = 0
                async with aiofiles.open(output_path, "wb") as f:
                    async for chunk in response.aiter_bytes():
                        await f.write(chunk)
                        size += len(chunk)
                return size

        started = time.monotonic()
        try:
            file_size = await self._retry.execute(_request, "download_video")
        except httpx.HTTPError as e:
            raise VideoGenerationError(
                f"Failed to download video: {e}",
                retryable=is_retryable(e),
            ) from e

        logger.info(
            f"[VIDEO] Video downloaded: {output_path} ({file_size} bytes, "
            f"{(time.monotonic() - started) * 1000:.0f}ms)"
        )
        return DownloadedVideo(path=output_path, file_size_bytes=file_size)

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()


def _json_body(response: httpx.Response, retryable: bool = False) -> Dict[str, Any]:
    try:
        data = response.json()
    except ValueError as e:
        raise VideoGenerationError(
            f"Invalid JSON from video API: {response.text[:200]}",
            retryable=retryable,
        ) from e
    if not isinstance(data, dict):
        raise VideoGenerationError(f"Unexpected video API response: {data!r}", retryable=retryable)
    return data


def _error_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text
