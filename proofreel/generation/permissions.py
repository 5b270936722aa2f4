"""
Permission gate.

A review may only be turned into videos once the customer has approved it.
"""
import logging
from datetime import datetime, timezone
from typing import List, Protocol, Union

from proofreel.persistence import PermissionRecord, PermissionStatus

from .exceptions import PermissionDenied

logger = logging.getLogger(__name__)

NO_RECORD = "no_record"
LOOKUP_FAILED = "lookup_failed"

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class PermissionSource(Protocol):
    def get_permissions(self, review_id: Union[int, str]) -> List[PermissionRecord]:
        ...


def _answered(record: PermissionRecord):
    return (_aware(record.responded_at), _aware(record.sent_at), record.id or 0)


def _sent(record: PermissionRecord):
    return (_aware(record.sent_at), record.id or 0)


def _aware(value):
    if value is None:
        return _EPOCH
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class PermissionGate:
    """Read-only consent check in front of every batch."""

    def __init__(self, permissions: PermissionSource):
        self.permissions = permissions

    def validate(self, review_id: Union[int, str]) -> PermissionRecord:
        """
        Return the most recently answered approved record for the review.

        Raises:
            PermissionDenied: nothing approved; carries the status of the
                most recently sent request,
                "no_record" when there are no records at all, or
                "lookup_failed" when the records could not be read
        """
        try:
            records = self.permissions.get_permissions(review_id)
        except Exception as e:
            logger.error(f"[GEN] Permission lookup failed for review {review_id}: {e}")
            raise PermissionDenied(review_id, LOOKUP_FAILED) from e

        if not records:
            logger.warning(f"[GEN] No permission record for review {review_id}")
            raise PermissionDenied(review_id, NO_RECORD)

        for record in sorted(records, key=_answered, reverse=True):
            if record.status == PermissionStatus.APPROVED.value:
                logger.info(f"[GEN] Permission {record.id} approved for review {review_id}")
                return record

        current_status = max(records, key=_sent).status
        logger.warning(f"[GEN] Review {review_id} not approved (status: {current_status})")
        raise PermissionDenied(review_id, current_status)
