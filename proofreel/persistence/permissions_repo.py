"""
Consent Permissions Repository.
Read by the permission gate; written by the consent collection side.
"""
import logging
import sqlite3
from datetime import datetime, timezone
from dataclasses import dataclass
from enum import Enum
from typing import Optional, List, Union

from .database import get_connection

logger = logging.getLogger(__name__)


class PermissionStatus(str, Enum):
    """Consent request states."""
    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"
    EXPIRED = "expired"


@dataclass
class PermissionRecord:
    """Consent record for one review."""
    id: int
    review_id: str
    status: str
    sent_at: datetime
    responded_at: Optional[datetime] = None
    consent_token: Optional[str] = None
    phone_number: Optional[str] = None

    @property
    def is_approved(self) -> bool:
        return self.status == PermissionStatus.APPROVED.value


class SQLitePermissionRepository:
    """SQLite-backed consent records."""

    def __init__(self, conn: Optional[sqlite3.Connection] = None):
        self._conn = conn

    def _connection(self) -> sqlite3.Connection:
        return self._conn or get_connection()

    def get_permissions(self, review_id: Union[int, str]) -> List[PermissionRecord]:
        """All consent records for a review, most recently sent first."""
        conn = self._connection()
        cursor = conn.execute(
            """
            SELECT * FROM permissions
            WHERE review_id = ?
            ORDER BY sent_at DESC, id DESC
            """,
            (str(review_id),)
        )
        rows = cursor.fetchall()

        return [self._row_to_record(row) for row in rows]

    def record_permission(
        self,
        review_id: Union[int, str],
        status: PermissionStatus = PermissionStatus.PENDING,
        consent_token: Optional[str] = None,
        phone_number: Optional[str] = None,
        sent_at: Optional[datetime] = None,
        responded_at: Optional[datetime] = None,
    ) -> PermissionRecord:
        """Insert a consent record."""
        conn = self._connection()
        sent_at = sent_at or datetime.now(timezone.utc)
        status = PermissionStatus(status)

        if responded_at is None and status is not PermissionStatus.PENDING:
            responded_at = sent_at

        cursor = conn.execute(
            """
            INSERT INTO permissions (review_id, consent_token, phone_number, status, sent_at, responded_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                str(review_id),
                consent_token,
                phone_number,
                status.value,
                sent_at.isoformat(),
                responded_at.isoformat() if responded_at else None,
            )
        )

        logger.info(f"Permission recorded: review={review_id}, status={status.value}")

        return PermissionRecord(
            id=cursor.lastrowid,
            review_id=str(review_id),
            status=status.value,
            sent_at=sent_at,
            responded_at=responded_at,
            consent_token=consent_token,
            phone_number=phone_number,
        )

    def _row_to_record(self, row) -> PermissionRecord:
        """Convert database row to PermissionRecord."""
        return PermissionRecord(
            id=row["id"],
            review_id=row["review_id"],
            status=row["status"],
            sent_at=datetime.fromisoformat(row["sent_at"]),
            responded_at=datetime.fromisoformat(row["responded_at"]) if row["responded_at"] else None,
            consent_token=row["consent_token"],
            phone_number=row["phone_number"],
        )
