"""
Tests for configuration management.
"""
from pathlib import Path

import pytest


class TestServiceConfig:
    """Tests for API key handling."""

    def test_placeholder_key_counts_as_unset(self):
        from proofreel.config import ElevenLabsConfig

        assert not ElevenLabsConfig(api_key="PASTE_YOUR_KEY_HERE").has_api_key
        assert not ElevenLabsConfig(api_key="   ").has_api_key
        assert not ElevenLabsConfig().has_api_key
        assert ElevenLabsConfig(api_key="sk-real").has_api_key

    def test_defaults(self):
        from proofreel.config import ElevenLabsConfig, RetryConfig, VideoServiceConfig

        assert ElevenLabsConfig().base_url == "https://api.elevenlabs.io"
        assert VideoServiceConfig().base_url == "https://api.x.ai"
        assert VideoServiceConfig().poll_interval == 10.0
        assert VideoServiceConfig().timeout == 300.0
        assert RetryConfig().max_attempts == 3


class TestStorageConfig:
    """Tests for StorageConfig.detect."""

    def test_storage_dir_from_env(self, temp_dir, monkeypatch):
        """STORAGE_DIR env var should move both media directories."""
        monkeypatch.setenv("STORAGE_DIR", str(temp_dir))
        monkeypatch.delenv("VIDEO_STORAGE_DIR", raising=False)
        monkeypatch.delenv("TEMP_AUDIO_DIR", raising=False)

        from proofreel.config import StorageConfig

        config = StorageConfig.detect()
        assert config.video_dir == temp_dir / "videos"
        assert config.temp_audio_dir == temp_dir / "temp" / "audio"

    def test_explicit_dirs_win(self, temp_dir, monkeypatch):
        monkeypatch.setenv("VIDEO_STORAGE_DIR", str(temp_dir / "out"))
        monkeypatch.setenv("TEMP_AUDIO_DIR", str(temp_dir / "scratch"))

        from proofreel.config import StorageConfig

        config = StorageConfig.detect()
        assert config.video_dir == Path(temp_dir / "out")
        assert config.temp_audio_dir == Path(temp_dir / "scratch")


class TestLoadConfig:
    """Tests for load_config."""

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("ELEVENLABS_API_KEY", "el-key")
        monkeypatch.setenv("ELEVENLABS_VOICE_ID", "voice-42")
        monkeypatch.setenv("GROK_API_KEY", "grok-key")
        monkeypatch.setenv("GROK_BASE_URL", "https://grok.example")
        monkeypatch.setenv("VIDEO_POLL_INTERVAL", "2.5")
        monkeypatch.setenv("VIDEO_TIMEOUT", "60")
        monkeypatch.setenv("RETRY_MAX_ATTEMPTS", "5")
        monkeypatch.setenv("DATABASE_PATH", "/tmp/proof-test.db")

        from proofreel.config import load_config

        config = load_config()
        assert config.elevenlabs.api_key == "el-key"
        assert config.elevenlabs.voice_id == "voice-42"
        assert config.video.base_url == "https://grok.example"
        assert config.video.poll_interval == 2.5
        assert config.video.timeout == 60.0
        assert config.retry.max_attempts == 5
        assert config.database_path == "/tmp/proof-test.db"

    def test_invalid_number_uses_default(self, monkeypatch, caplog):
        monkeypatch.setenv("VIDEO_POLL_INTERVAL", "soon")

        from proofreel.config import load_config

        config = load_config()
        assert config.video.poll_interval == 10.0
        assert "VIDEO_POLL_INTERVAL" in caplog.text

    @pytest.mark.parametrize("el_key,grok_key,ready", [
        ("el-key", "grok-key", True),
        ("el-key", "", False),
        ("", "grok-key", False),
    ])
    def test_validate(self, monkeypatch, el_key, grok_key, ready):
        monkeypatch.setenv("ELEVENLABS_API_KEY", el_key)
        monkeypatch.setenv("GROK_API_KEY", grok_key)

        from proofreel.config import load_config

        status = load_config().validate()
        assert status["ready_for_generation"] is ready
        assert status["services"]["elevenlabs_configured"] is bool(el_key)
