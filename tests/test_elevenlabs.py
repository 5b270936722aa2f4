"""
Tests for the ElevenLabs TTS client against a mock transport.
"""
import json

import httpx
import pytest

from proofreel.config import ElevenLabsConfig
from proofreel.providers import (
    ElevenLabsClient,
    ProviderUnavailable,
    SynthesisError,
    VoiceConfig,
    estimate_speech_duration,
)

AUDIO_BYTES = b"ID3\x03\x00fake-mpeg-frames"


def make_client(config, retry_policy, handler):
    transport = httpx.MockTransport(handler)
    return ElevenLabsClient(
        config,
        retry_policy=retry_policy,
        client=httpx.AsyncClient(transport=transport),
    )


class TestSynthesize:
    """Tests for ElevenLabsClient.synthesize."""

    @pytest.mark.asyncio
    async def test_writes_audio(self, elevenlabs_config, retry_policy, temp_dir):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, content=AUDIO_BYTES)

        client = make_client(elevenlabs_config, retry_policy, handler)
        output_path = temp_dir / "nested" / "voice.mp3"
        voice = VoiceConfig(voice_id="voice-123", model_id="eleven_monolingual_v1")

        asset = await client.synthesize("one two three four five", voice, output_path)

        assert asset.path == output_path
        assert output_path.read_bytes() == AUDIO_BYTES
        assert asset.estimated_duration_seconds == pytest.approx(2.0)

        [request] = requests
        assert request.method == "POST"
        assert str(request.url) == "https://tts.test/v1/text-to-speech/voice-123"
        assert request.headers["xi-api-key"] == "test-elevenlabs-key"
        body = json.loads(request.content)
        assert body["text"] == "one two three four five"
        assert body["model_id"] == "eleven_monolingual_v1"
        assert body["voice_settings"] == {
            "stability": 0.75,
            "similarity_boost": 0.75,
            "style": 0.5,
            "use_speaker_boost": True,
        }

    @pytest.mark.asyncio
    async def test_default_voice(self, elevenlabs_config, retry_policy, temp_dir):
        seen = []

        def handler(request):
            seen.append(request.url.path)
            return httpx.Response(200, content=AUDIO_BYTES)

        client = make_client(elevenlabs_config, retry_policy, handler)
        await client.synthesize("hello", None, temp_dir / "a.mp3")

        assert seen == ["/v1/text-to-speech/voice-default"]

    @pytest.mark.asyncio
    async def test_retries_server_errors(self, elevenlabs_config, retry_policy, temp_dir):
        responses = [
            httpx.Response(503, json={"detail": "overloaded"}),
            httpx.Response(500, text="oops"),
            httpx.Response(200, content=AUDIO_BYTES),
        ]
        calls = []

        def handler(request):
            calls.append(request)
            return responses[len(calls) - 1]

        client = make_client(elevenlabs_config, retry_policy, handler)
        asset = await client.synthesize("hello", None, temp_dir / "a.mp3")

        assert len(calls) == 3
        assert asset.path.exists()

    @pytest.mark.asyncio
    async def test_client_error_is_fatal(self, elevenlabs_config, retry_policy, temp_dir):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(401, json={"detail": "invalid api key"})

        client = make_client(elevenlabs_config, retry_policy, handler)
        output_path = temp_dir / "a.mp3"

        with pytest.raises(SynthesisError) as exc_info:
            await client.synthesize("hello", None, output_path)

        assert len(calls) == 1
        assert exc_info.value.status_code == 401
        assert exc_info.value.retryable is False
        assert exc_info.value.response == {"detail": "invalid api key"}
        assert not output_path.exists()

    @pytest.mark.asyncio
    async def test_rate_limit_exhausted(self, elevenlabs_config, retry_policy, temp_dir):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(429, text="slow down")

        client = make_client(elevenlabs_config, retry_policy, handler)

        with pytest.raises(SynthesisError) as exc_info:
            await client.synthesize("hello", None, temp_dir / "a.mp3")

        assert len(calls) == 3
        assert exc_info.value.retryable is True
        assert exc_info.value.attempts == 3

    @pytest.mark.asyncio
    async def test_network_error_becomes_synthesis_error(self, elevenlabs_config, retry_policy, temp_dir):
        calls = []

        def handler(request):
            calls.append(request)
            raise httpx.ConnectError("connection reset", request=request)

        client = make_client(elevenlabs_config, retry_policy, handler)

        with pytest.raises(SynthesisError) as exc_info:
            await client.synthesize("hello", None, temp_dir / "a.mp3")

        assert len(calls) == 3
        assert exc_info.value.retryable is True
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_non_transient_http_error_is_fatal(self, elevenlabs_config, retry_policy, temp_dir):
        calls = []

        def handler(request):
            calls.append(request)
            raise httpx.UnsupportedProtocol("unsupported scheme", request=request)

        client = make_client(elevenlabs_config, retry_policy, handler)

        with pytest.raises(SynthesisError) as exc_info:
            await client.synthesize("hello", None, temp_dir / "a.mp3")

        assert len(calls) == 1
        assert exc_info.value.retryable is False

    @pytest.mark.asyncio
    async def test_missing_key(self, retry_policy, temp_dir):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, content=AUDIO_BYTES)

        client = make_client(ElevenLabsConfig(api_key=None), retry_policy, handler)

        with pytest.raises(ProviderUnavailable):
            await client.synthesize("hello", None, temp_dir / "a.mp3")

        assert calls == []
        assert not client.is_available


class TestDurationEstimate:

    def test_150_words_is_one_minute(self):
        assert estimate_speech_duration("word " * 150) == pytest.approx(60.0)

    def test_empty_text(self):
        assert estimate_speech_duration("") == 0
