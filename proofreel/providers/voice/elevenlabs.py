"""
ElevenLabs voice provider.
"""
import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional, Union

import aiofiles
import httpx

from proofreel.config import ElevenLabsConfig

from .base import AudioAsset, BaseVoiceProvider, VoiceConfig, estimate_speech_duration
from ..exceptions import ProviderUnavailable, SynthesisError
from ..retry import RetryPolicy, is_retryable

logger = logging.getLogger(__name__)


class ElevenLabsClient(BaseVoiceProvider):
    """
    ElevenLabs text-to-speech API client.

    One POST per script, wrapped in the retry policy. Audio bytes are written
    to the requested path; deleting the file is the caller's job.
    """

    ENV_KEY = "ELEVENLABS_API_KEY"

    def __init__(
        self,
        config: ElevenLabsConfig,
        retry_policy: Optional[RetryPolicy] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config
        self._retry = retry_policy or RetryPolicy()
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(config.request_timeout, connect=10.0)
        )

    @property
    def name(self) -> str:
        return "elevenlabs"

    @property
    def is_available(self) -> bool:
        return self.config.has_api_key

    def default_voice(self) -> VoiceConfig:
        return VoiceConfig(voice_id=self.config.voice_id, model_id=self.config.model_id)

    def _get_headers(self) -> Dict[str, str]:
        return {
            "xi-api-key": self.config.api_key or "",
            "Content-Type": "application/json",
            "Accept": "audio/mpeg",
        }

    async def synthesize(
        self,
        script_text: str,
        voice: Optional[VoiceConfig],
        output_path: Union[str, Path],
    ) -> AudioAsset:
        if not self.is_available:
            raise ProviderUnavailable(self.name, f"Missing {self.ENV_KEY}")

        voice = voice or self.default_voice()
        output_path = Path(output_path)
        url = f"{self.config.base_url.rstrip('/')}/v1/text-to-speech/{voice.voice_id}"
        payload = {
            "text": script_text,
            "model_id": voice.model_id,
            "voice_settings": voice.voice_settings(),
        }

        logger.info(
            f"[TTS] Generating voiceover: {len(script_text)} chars, "
            f"voice={voice.voice_id}, model={voice.model_id}"
        )

        async def _request() -> httpx.Response:
            response = await self.client.post(url, headers=self._get_headers(), json=payload)
            if not response.is_success:
                raise SynthesisError(
                    f"TTS API error: {response.status_code} {response.reason_phrase}",
                    status_code=response.status_code,
                    response=_error_body(response),
                )
            return response

        started = time.monotonic()
        try:
            response = await self._retry.execute(_request, "synthesize")
        except httpx.HTTPError as e:
            raise SynthesisError(
                f"Failed to generate voiceover: {e}",
                retryable=is_retryable(e),
            ) from e

        audio = response.content
        output_path.parent.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(output_path, "wb") as f:
            await f.write(audio)

        estimated = estimate_speech_duration(script_text)
        elapsed_ms = (time.monotonic() - started) * 1000

        logger.info(
            f"[TTS] Voiceover saved: {output_path} ({len(audio)} bytes, "
            f"~{estimated:.1f}s estimated, {elapsed_ms:.0f}ms)"
        )

        return AudioAsset(path=output_path, estimated_duration_seconds=estimated)

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()


def _error_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text
