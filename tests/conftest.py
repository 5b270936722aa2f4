"""
Pytest configuration and fixtures for ProofReel tests.
"""
import os
import pytest
import tempfile
from pathlib import Path
from unittest.mock import MagicMock, AsyncMock

# Set test environment before importing proofreel modules
os.environ["ELEVENLABS_API_KEY"] = "test-elevenlabs-key"
os.environ["GROK_API_KEY"] = "test-grok-key"
os.environ["DATABASE_PATH"] = ":memory:"
os.environ["STORAGE_DIR"] = tempfile.mkdtemp(prefix="proofreel-test-")
os.environ["DEBUG"] = "true"

from proofreel.config import ElevenLabsConfig, VideoServiceConfig
from proofreel.providers import (
    Clock,
    DownloadedVideo,
    RetryPolicy,
    VideoJob,
    VideoJobStatus,
    VoiceConfig,
    AudioAsset,
)


class FakeClock(Clock):
    """Clock that advances only when slept on."""

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps = []

    def monotonic(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def retry_policy(fake_clock):
    """Three attempts, backoff recorded on the fake clock."""
    return RetryPolicy(max_attempts=3, initial_delay=1.0, clock=fake_clock)


@pytest.fixture
def db_conn():
    """Fresh in-memory database with the schema applied."""
    from proofreel.persistence import open_connection

    conn = open_connection(":memory:")
    yield conn
    conn.close()


@pytest.fixture
def storage(temp_dir):
    from proofreel.generation import MediaStorage

    return MediaStorage(
        video_dir=temp_dir / "videos",
        temp_audio_dir=temp_dir / "temp" / "audio",
    )


@pytest.fixture
def elevenlabs_config():
    return ElevenLabsConfig(
        api_key="test-elevenlabs-key",
        base_url="https://tts.test",
        voice_id="voice-default",
    )


@pytest.fixture
def video_config():
    return VideoServiceConfig(
        api_key="test-grok-key",
        base_url="https://video.test",
        poll_interval=10.0,
        timeout=300.0,
    )


@pytest.fixture
def sample_review():
    """Review with sentences for every base angle."""
    from proofreel.generation import Review

    return Review(
        id="rev-1",
        author="Jane D.",
        rating=5,
        platform="Google",
        text=(
            "I struggled with slow shipping from other stores for years. "
            "This shop finally solved it and delivery is now next day. "
            "Absolutely amazing service, I highly recommend them to everyone!"
        ),
    )


@pytest.fixture
def seed_review(db_conn):
    """Insert a review and an optional consent record; returns the review id."""
    from proofreel.persistence import (
        PermissionStatus,
        ReviewRecord,
        SQLitePermissionRepository,
        SQLiteReviewRepository,
    )

    def _seed(review, status=PermissionStatus.APPROVED):
        SQLiteReviewRepository(db_conn).save_review(
            ReviewRecord(
                id=str(review.id),
                text=review.text or "",
                author=review.author,
                rating=review.rating,
                platform=review.platform,
            )
        )
        if status is not None:
            SQLitePermissionRepository(db_conn).record_permission(str(review.id), status)
        return str(review.id)

    return _seed


@pytest.fixture
def mock_tts():
    """TTS client double that writes a small audio file per call."""
    tts = MagicMock()
    tts.name = "fake-tts"
    tts.is_available = True

    async def _synthesize(script_text, voice, output_path):
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"ID3-fake-audio")
        return AudioAsset(path=path, estimated_duration_seconds=12.0)

    tts.synthesize = AsyncMock(side_effect=_synthesize)
    tts.aclose = AsyncMock()
    return tts


@pytest.fixture
def mock_video():
    """
    Video client double. Set `failing_polls` to the 1-based poll calls
    that should fail.
    """
    from proofreel.providers import VideoGenerationError

    video = MagicMock()
    video.name = "fake-video"
    video.is_available = True
    video.failing_polls = set()

    async def _submit(prompt, audio_ref, duration_seconds, style):
        n = video.submit.await_count
        return VideoJob(id=f"job-{n}", status=VideoJobStatus.SUBMITTED)

    async def _poll(job_id, interval=None, timeout=None):
        if video.poll.await_count in video.failing_polls:
            raise VideoGenerationError(f"Video generation failed: render error on {job_id}", retryable=False)
        return VideoJob(
            id=job_id,
            status=VideoJobStatus.COMPLETED,
            result_url=f"https://cdn.test/{job_id}.mp4",
            duration_seconds=30.0,
        )

    async def _download(result_url, output_path):
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"fake-mp4-bytes")
        return DownloadedVideo(path=path, file_size_bytes=14)

    video.submit = AsyncMock(side_effect=_submit)
    video.poll = AsyncMock(side_effect=_poll)
    video.download = AsyncMock(side_effect=_download)
    video.aclose = AsyncMock()
    return video


@pytest.fixture
def coordinator(mock_tts, mock_video, db_conn, storage):
    from proofreel.generation import GenerationCoordinator, PermissionGate
    from proofreel.persistence import SQLitePermissionRepository, SQLiteVideoRepository

    return GenerationCoordinator(
        tts=mock_tts,
        video=mock_video,
        permission_gate=PermissionGate(SQLitePermissionRepository(db_conn)),
        videos=SQLiteVideoRepository(db_conn),
        storage=storage,
        default_voice=VoiceConfig(voice_id="voice-default"),
    )
