"""
SQLite Reviews Repository.
"""
import logging
import sqlite3
from datetime import datetime, timezone
from dataclasses import dataclass
from typing import Optional, Union

from .database import get_connection

logger = logging.getLogger(__name__)


@dataclass
class ReviewRecord:
    """Stored customer review."""
    id: str
    text: str
    platform: Optional[str] = None
    author: Optional[str] = None
    rating: Optional[float] = None
    review_date: Optional[str] = None
    created_at: Optional[datetime] = None


class SQLiteReviewRepository:
    """Read access to reviews, plus the insert used for seeding."""

    def __init__(self, conn: Optional[sqlite3.Connection] = None):
        self._conn = conn

    def _connection(self) -> sqlite3.Connection:
        return self._conn or get_connection()

    def save_review(self, review: ReviewRecord) -> ReviewRecord:
        """Insert a review, or update it in place when the id exists."""
        conn = self._connection()
        now = datetime.now(timezone.utc).isoformat()

        conn.execute(
            """
            INSERT INTO reviews (id, platform, author, rating, text, review_date, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                platform = excluded.platform,
                author = excluded.author,
                rating = excluded.rating,
                text = excluded.text,
                review_date = excluded.review_date
            """,
            (
                str(review.id),
                review.platform,
                review.author,
                review.rating,
                review.text,
                review.review_date,
                now,
            )
        )

        logger.debug(f"Saved review: id={review.id}, platform={review.platform}")
        review.created_at = datetime.fromisoformat(now)
        return review

    def get_review(self, review_id: Union[int, str]) -> Optional[ReviewRecord]:
        """Get a review by id."""
        conn = self._connection()
        cursor = conn.execute(
            "SELECT * FROM reviews WHERE id = ?",
            (str(review_id),)
        )
        row = cursor.fetchone()

        if not row:
            return None

        return self._row_to_record(row)

    def _row_to_record(self, row) -> ReviewRecord:
        """Convert database row to ReviewRecord."""
        return ReviewRecord(
            id=row["id"],
            text=row["text"],
            platform=row["platform"],
            author=row["author"],
            rating=row["rating"],
            review_date=row["review_date"],
            created_at=datetime.fromisoformat(row["created_at"]) if row["created_at"] else None,
        )
