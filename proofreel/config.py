"""
Application Configuration - Environment Variable Management.
Loads configuration from .env and builds explicit config objects
that are injected into each client.
"""
import os
import logging
from pathlib import Path
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Load .env from project root
PROJECT_ROOT = Path(__file__).parent.parent
ENV_FILE = PROJECT_ROOT / ".env"

if ENV_FILE.exists():
    load_dotenv(ENV_FILE)
    logger.info(f"Loaded environment from {ENV_FILE}")
else:
    logger.debug(f".env file not found at {ENV_FILE}")


def _is_configured(key: Optional[str]) -> bool:
    return bool(key and key.strip() and not key.startswith("PASTE_"))


@dataclass
class ElevenLabsConfig:
    """Speech synthesis service configuration."""
    api_key: Optional[str] = None
    base_url: str = "https://api.elevenlabs.io"
    voice_id: str = "21m00Tcm4TlvDq8ikWAM"  # "Rachel"
    model_id: str = "eleven_monolingual_v1"
    request_timeout: float = 60.0

    @property
    def has_api_key(self) -> bool:
        return _is_configured(self.api_key)


@dataclass
class VideoServiceConfig:
    """Video generation job service configuration."""
    api_key: Optional[str] = None
    base_url: str = "https://api.x.ai"
    poll_interval: float = 10.0  # seconds between status checks
    timeout: float = 300.0  # polling ceiling per job
    style: str = "testimonial"
    request_timeout: float = 60.0

    @property
    def has_api_key(self) -> bool:
        return _is_configured(self.api_key)


@dataclass
class RetryConfig:
    """Backoff settings shared by every outbound call."""
    max_attempts: int = 3
    initial_delay: float = 1.0


@dataclass
class StorageConfig:
    """File system layout for generated media."""
    video_dir: Path = field(default_factory=lambda: PROJECT_ROOT / "storage" / "videos")
    temp_audio_dir: Path = field(default_factory=lambda: PROJECT_ROOT / "storage" / "temp" / "audio")

    @classmethod
    def detect(cls) -> "StorageConfig":
        """Resolve storage directories from the environment. Directories are created on demand."""
        storage_dir = Path(os.getenv("STORAGE_DIR", str(PROJECT_ROOT / "storage")))
        video_dir = Path(os.getenv("VIDEO_STORAGE_DIR", str(storage_dir / "videos")))
        temp_audio_dir = Path(os.getenv("TEMP_AUDIO_DIR", str(storage_dir / "temp" / "audio")))
        return cls(video_dir=video_dir, temp_audio_dir=temp_audio_dir)


@dataclass
class AppConfig:
    """Main Application Configuration."""
    elevenlabs: ElevenLabsConfig
    video: VideoServiceConfig
    retry: RetryConfig
    storage: StorageConfig
    database_path: str = "data/proof.db"
    debug: bool = False

    def validate(self) -> dict:
        """Validate configuration and return status."""
        return {
            "services": {
                "elevenlabs_configured": self.elevenlabs.has_api_key,
                "video_configured": self.video.has_api_key,
            },
            "database": {
                "path": self.database_path,
            },
            "storage": {
                "video_dir": str(self.storage.video_dir),
                "temp_audio_dir": str(self.storage.temp_audio_dir),
            },
            "ready_for_generation": self.elevenlabs.has_api_key and self.video.has_api_key,
        }

    def log_status(self):
        """Log configuration status (without exposing keys)."""
        status = self.validate()

        logger.info("=" * 50)
        logger.info("Configuration Status:")
        logger.info(f"  ElevenLabs API: {'OK' if status['services']['elevenlabs_configured'] else 'NOT CONFIGURED'}")
        logger.info(f"  Video API: {'OK' if status['services']['video_configured'] else 'NOT CONFIGURED'}")
        logger.info(f"  Database: {self.database_path}")
        logger.info(f"  Video Dir: {self.storage.video_dir}")
        logger.info(f"  Temp Audio Dir: {self.storage.temp_audio_dir}")
        logger.info(f"  Retry: {self.retry.max_attempts} attempts, {self.retry.initial_delay}s initial delay")
        logger.info("=" * 50)

        if not status["ready_for_generation"]:
            logger.warning("Speech or video API key missing - video generation will fail")


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Invalid value for {name}: {raw!r}, using {default}")
        return default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Invalid value for {name}: {raw!r}, using {default}")
        return default


def load_config() -> AppConfig:
    """Load configuration from environment variables."""
    elevenlabs = ElevenLabsConfig(
        api_key=os.getenv("ELEVENLABS_API_KEY"),
        base_url=os.getenv("ELEVENLABS_BASE_URL", ElevenLabsConfig.base_url),
        voice_id=os.getenv("ELEVENLABS_VOICE_ID", ElevenLabsConfig.voice_id),
        model_id=os.getenv("ELEVENLABS_MODEL_ID", ElevenLabsConfig.model_id),
    )

    video = VideoServiceConfig(
        api_key=os.getenv("GROK_API_KEY"),
        base_url=os.getenv("GROK_BASE_URL", VideoServiceConfig.base_url),
        poll_interval=_float_env("VIDEO_POLL_INTERVAL", VideoServiceConfig.poll_interval),
        timeout=_float_env("VIDEO_TIMEOUT", VideoServiceConfig.timeout),
        style=os.getenv("VIDEO_STYLE", VideoServiceConfig.style),
    )

    retry = RetryConfig(
        max_attempts=_int_env("RETRY_MAX_ATTEMPTS", RetryConfig.max_attempts),
        initial_delay=_float_env("RETRY_INITIAL_DELAY", RetryConfig.initial_delay),
    )

    return AppConfig(
        elevenlabs=elevenlabs,
        video=video,
        retry=retry,
        storage=StorageConfig.detect(),
        database_path=os.getenv("DATABASE_PATH", "data/proof.db"),
        debug=os.getenv("DEBUG", "false").lower() == "true",
    )


@lru_cache()
def get_config() -> AppConfig:
    """Process-wide config for entry points. Library code takes config explicitly."""
    return load_config()
