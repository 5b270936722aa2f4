"""
Tests for media storage layout and orphan reconciliation.
"""
import os
import re
import time

from proofreel.generation.storage import unique_filename

AUDIO_NAME = re.compile(r"^rev-1_problem_\d{13}_[0-9a-f]{8}\.mp3$")


class TestFilenames:

    def test_audio_path_format(self, storage):
        path = storage.audio_path("rev-1", "problem")

        assert path.parent == storage.temp_audio_dir
        assert AUDIO_NAME.match(path.name)

    def test_video_path_in_video_dir(self, storage):
        path = storage.video_path(7, "trust")

        assert path.parent == storage.video_dir
        assert path.name.startswith("7_trust_")
        assert path.suffix == ".mp4"

    def test_names_never_repeat(self):
        names = {unique_filename("rev-1", "problem", ".mp4") for _ in range(200)}
        assert len(names) == 200

    def test_unsafe_characters_replaced(self):
        name = unique_filename("../etc/passwd", "problem", ".mp3")
        assert "/" not in name
        assert name.startswith("___etc_passwd_problem_")


class TestFileLifecycle:

    def test_ensure_directories(self, storage):
        storage.ensure_directories()

        assert storage.video_dir.is_dir()
        assert storage.temp_audio_dir.is_dir()

    def test_remove(self, storage):
        storage.ensure_directories()
        path = storage.audio_path("rev-1", "problem")
        path.write_bytes(b"audio")

        assert storage.remove(path, "temp audio")
        assert not path.exists()
        assert not storage.remove(path, "temp audio")
        assert not storage.remove(None)

    def test_check_writable(self, storage):
        assert storage.check_writable() == []


class TestReconcileOrphans:

    def _make(self, path, age_seconds):
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"x")
        stamp = time.time() - age_seconds
        os.utime(path, (stamp, stamp))
        return path

    def test_sweep(self, storage):
        old_audio = self._make(storage.audio_path("rev-1", "problem"), 7200)
        fresh_audio = self._make(storage.audio_path("rev-1", "solution"), 10)
        kept_video = self._make(storage.video_path("rev-1", "problem"), 7200)
        orphan_video = self._make(storage.video_path("rev-1", "solution"), 7200)
        fresh_video = self._make(storage.video_path("rev-1", "trust"), 10)

        report = storage.reconcile_orphans([str(kept_video)], grace_period=3600)

        assert report.removed_audio == [old_audio]
        assert report.removed_videos == [orphan_video]
        assert report.total_removed == 2
        assert fresh_audio.exists()
        assert kept_video.exists()
        assert fresh_video.exists()

    def test_missing_directories(self, storage):
        report = storage.reconcile_orphans([])
        assert report.total_removed == 0
