"""
Media storage layout.

Temporary voiceovers live in the temp audio directory and are deleted once
their video exists; finished videos live in the video directory. Filenames
embed review id, angle, a millisecond timestamp and a random suffix so
concurrent batches never collide.
"""
import logging
import os
import re
import secrets
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Union

from proofreel.config import StorageConfig

logger = logging.getLogger(__name__)

AUDIO_EXTENSION = ".mp3"
VIDEO_EXTENSION = ".mp4"
DEFAULT_ORPHAN_GRACE_PERIOD = 3600.0

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_-]")


@dataclass
class ReconcileReport:
    """Files removed by an orphan sweep."""
    removed_audio: List[Path] = field(default_factory=list)
    removed_videos: List[Path] = field(default_factory=list)

    @property
    def total_removed(self) -> int:
        return len(self.removed_audio) + len(self.removed_videos)


class MediaStorage:
    """Directory layout and file lifecycle for generated media."""

    def __init__(self, video_dir: Union[str, Path], temp_audio_dir: Union[str, Path]):
        self.video_dir = Path(video_dir)
        self.temp_audio_dir = Path(temp_audio_dir)

    @classmethod
    def from_config(cls, config: StorageConfig) -> "MediaStorage":
        return cls(video_dir=config.video_dir, temp_audio_dir=config.temp_audio_dir)

    def ensure_directories(self) -> None:
        self.video_dir.mkdir(parents=True, exist_ok=True)
        self.temp_audio_dir.mkdir(parents=True, exist_ok=True)

    def audio_path(self, review_id: Union[int, str], angle: str) -> Path:
        return self.temp_audio_dir / unique_filename(review_id, angle, AUDIO_EXTENSION)

    def video_path(self, review_id: Union[int, str], angle: str) -> Path:
        return self.video_dir / unique_filename(review_id, angle, VIDEO_EXTENSION)

    def remove(self, path: Optional[Union[str, Path]], kind: str = "file") -> bool:
        """Delete a file. Failures are logged, never raised."""
        if path is None:
            return False

        path = Path(path)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.warning(f"[GEN] Failed to clean up {kind} {path}: {e}")
            return False

        logger.debug(f"[GEN] Removed {kind}: {path}")
        return True

    def check_writable(self) -> List[str]:
        """Problems with the storage directories, empty when both are usable."""
        issues = []
        for label, directory in (
            ("Video storage", self.video_dir),
            ("Temp audio storage", self.temp_audio_dir),
        ):
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                issues.append(f"{label} directory cannot be created: {directory} ({e})")
                continue
            if not os.access(directory, os.W_OK):
                issues.append(f"{label} directory is not writable: {directory}")
        return issues

    def reconcile_orphans(
        self,
        referenced_paths: Iterable[Union[str, Path]],
        grace_period: float = DEFAULT_ORPHAN_GRACE_PERIOD,
        now: Optional[float] = None,
    ) -> ReconcileReport:
        """
        Remove media left behind by interrupted batches.

        Temp audio is never referenced after a batch, so any audio file older
        than the grace period goes. Videos go only when no record points at
        them. Files younger than the grace period may belong to a batch that
        is still running and are kept.
        """
        now = time.time() if now is None else now
        cutoff = now - grace_period
        referenced = {Path(p).resolve() for p in referenced_paths}
        report = ReconcileReport()

        for path in _files(self.temp_audio_dir, AUDIO_EXTENSION):
            if _mtime(path) < cutoff and self.remove(path, "orphaned audio"):
                report.removed_audio.append(path)

        for path in _files(self.video_dir, VIDEO_EXTENSION):
            if path.resolve() in referenced:
                continue
            if _mtime(path) < cutoff and self.remove(path, "orphaned video"):
                report.removed_videos.append(path)

        if report.total_removed:
            logger.info(
                f"[GEN] Orphan sweep removed {len(report.removed_audio)} audio and "
                f"{len(report.removed_videos)} video file(s)"
            )
        return report


def unique_filename(review_id: Union[int, str], angle: str, extension: str) -> str:
    """{review_id}_{angle}_{epoch_ms}_{8 hex chars}{extension}"""
    safe_id = _UNSAFE_CHARS.sub("_", str(review_id))
    timestamp = int(time.time() * 1000)
    return f"{safe_id}_{angle}_{timestamp}_{secrets.token_hex(4)}{extension}"


def _files(directory: Path, extension: str) -> List[Path]:
    if not directory.is_dir():
        return []
    return sorted(p for p in directory.iterdir() if p.is_file() and p.suffix == extension)


def _mtime(path: Path) -> float:
    try:
        return path.stat().st_mtime
    except OSError:
        return float("inf")
