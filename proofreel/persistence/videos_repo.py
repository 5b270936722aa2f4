"""
Generated Videos Repository.
"""
import logging
import sqlite3
from datetime import datetime, timezone
from dataclasses import dataclass
from typing import Optional, List, Union

from .database import get_connection

logger = logging.getLogger(__name__)


@dataclass
class VideoRecord:
    """Persisted video artifact."""
    id: int
    script_ref: str
    file_path: str
    duration: Optional[float]
    status: str
    created_at: datetime
    review_id: Optional[str] = None
    angle: Optional[str] = None
    file_size_bytes: Optional[int] = None


class SQLiteVideoRepository:
    """SQLite-backed video artifact records."""

    def __init__(self, conn: Optional[sqlite3.Connection] = None):
        self._conn = conn

    def _connection(self) -> sqlite3.Connection:
        return self._conn or get_connection()

    def save_video_artifact(
        self,
        script_ref: str,
        file_path: str,
        duration: Optional[float],
        status: str = "completed",
        review_id: Optional[Union[int, str]] = None,
        angle: Optional[str] = None,
        file_size_bytes: Optional[int] = None,
    ) -> int:
        """Persist a generated video. Returns the new record id."""
        conn = self._connection()
        now = datetime.now(timezone.utc).isoformat()

        cursor = conn.execute(
            """
            INSERT INTO videos (script_ref, review_id, angle, file_path, duration, file_size_bytes, status, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                script_ref,
                str(review_id) if review_id is not None else None,
                angle,
                str(file_path),
                duration,
                file_size_bytes,
                status,
                now,
            )
        )

        logger.debug(f"Saved video: id={cursor.lastrowid}, script_ref={script_ref}, path={file_path}")
        return cursor.lastrowid

    def get_video(self, video_id: int) -> Optional[VideoRecord]:
        conn = self._connection()
        cursor = conn.execute("SELECT * FROM videos WHERE id = ?", (video_id,))
        row = cursor.fetchone()
        return self._row_to_record(row) if row else None

    def get_review_videos(self, review_id: Union[int, str]) -> List[VideoRecord]:
        """Get all videos generated for a review."""
        conn = self._connection()
        cursor = conn.execute(
            """
            SELECT * FROM videos
            WHERE review_id = ?
            ORDER BY created_at ASC, id ASC
            """,
            (str(review_id),)
        )
        return [self._row_to_record(row) for row in cursor.fetchall()]

    def list_video_paths(self) -> List[str]:
        """File paths referenced by any video record."""
        conn = self._connection()
        cursor = conn.execute("SELECT file_path FROM videos")
        return [row["file_path"] for row in cursor.fetchall()]

    def _row_to_record(self, row) -> VideoRecord:
        """Convert database row to VideoRecord."""
        return VideoRecord(
            id=row["id"],
            script_ref=row["script_ref"],
            file_path=row["file_path"],
            duration=row["duration"],
            status=row["status"],
            created_at=datetime.fromisoformat(row["created_at"]),
            review_id=row["review_id"],
            angle=row["angle"],
            file_size_bytes=row["file_size_bytes"],
        )
