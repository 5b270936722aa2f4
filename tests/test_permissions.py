"""
Tests for the permission gate.
"""
import sqlite3
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from proofreel.generation import PermissionDenied, PermissionGate
from proofreel.persistence import (
    PermissionStatus,
    ReviewRecord,
    SQLitePermissionRepository,
    SQLiteReviewRepository,
)

T0 = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def permissions(db_conn):
    SQLiteReviewRepository(db_conn).save_review(ReviewRecord(id="rev-1", text="Great."))
    return SQLitePermissionRepository(db_conn)


@pytest.fixture
def gate(permissions):
    return PermissionGate(permissions)


class TestPermissionGate:
    """Tests for PermissionGate.validate."""

    def test_approved_record_passes(self, gate, permissions):
        record = permissions.record_permission("rev-1", PermissionStatus.APPROVED)

        approved = gate.validate("rev-1")

        assert approved.id == record.id
        assert approved.is_approved

    def test_no_record(self, gate):
        with pytest.raises(PermissionDenied) as exc_info:
            gate.validate("rev-1")

        assert exc_info.value.current_status == "no_record"
        assert exc_info.value.review_id == "rev-1"

    @pytest.mark.parametrize("status", [
        PermissionStatus.PENDING,
        PermissionStatus.DENIED,
        PermissionStatus.EXPIRED,
    ])
    def test_not_approved(self, gate, permissions, status):
        permissions.record_permission("rev-1", status)

        with pytest.raises(PermissionDenied) as exc_info:
            gate.validate("rev-1")

        assert exc_info.value.current_status == status.value

    def test_any_approved_record_is_enough(self, gate, permissions):
        approved = permissions.record_permission(
            "rev-1", PermissionStatus.APPROVED, sent_at=T0, responded_at=T0 + timedelta(hours=1)
        )
        permissions.record_permission(
            "rev-1", PermissionStatus.EXPIRED, sent_at=T0 + timedelta(days=1)
        )

        assert gate.validate("rev-1").id == approved.id

    def test_prefers_most_recently_responded_approval(self, gate, permissions):
        permissions.record_permission(
            "rev-1", PermissionStatus.APPROVED, sent_at=T0, responded_at=T0 + timedelta(days=2)
        )
        permissions.record_permission(
            "rev-1", PermissionStatus.APPROVED, sent_at=T0 + timedelta(days=1), responded_at=T0 + timedelta(days=1)
        )

        assert gate.validate("rev-1").responded_at == T0 + timedelta(days=2)

    def test_resent_request_after_denial_reports_pending(self, gate, permissions):
        permissions.record_permission(
            "rev-1", PermissionStatus.DENIED, sent_at=T0, responded_at=T0 + timedelta(hours=1)
        )
        permissions.record_permission("rev-1", PermissionStatus.PENDING, sent_at=T0 + timedelta(days=2))

        with pytest.raises(PermissionDenied) as exc_info:
            gate.validate("rev-1")

        assert exc_info.value.current_status == "pending"

    def test_reports_most_recently_sent_status(self, gate, permissions):
        permissions.record_permission(
            "rev-1", PermissionStatus.EXPIRED, sent_at=T0, responded_at=T0 + timedelta(days=5)
        )
        permissions.record_permission(
            "rev-1", PermissionStatus.DENIED, sent_at=T0 + timedelta(days=1), responded_at=T0 + timedelta(days=1)
        )

        with pytest.raises(PermissionDenied) as exc_info:
            gate.validate("rev-1")

        assert exc_info.value.current_status == "denied"

    def test_lookup_failure(self):
        source = MagicMock()
        source.get_permissions.side_effect = sqlite3.OperationalError("database is locked")

        with pytest.raises(PermissionDenied) as exc_info:
            PermissionGate(source).validate("rev-1")

        assert exc_info.value.current_status == "lookup_failed"
        assert isinstance(exc_info.value.__cause__, sqlite3.OperationalError)

    def test_gate_does_not_write(self, db_conn, gate, permissions):
        permissions.record_permission("rev-1", PermissionStatus.PENDING)
        before = db_conn.total_changes

        with pytest.raises(PermissionDenied):
            gate.validate("rev-1")

        assert db_conn.total_changes == before

    def test_http_mapping(self):
        error = PermissionDenied("rev-1", "pending")

        http_error = error.to_http_exception()

        assert http_error.status_code == 403
        assert http_error.detail["current_status"] == "pending"
        assert http_error.detail["code"] == "PERMISSION_DENIED"
