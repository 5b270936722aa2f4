"""
Persistence Module.
Provides SQLite-backed storage for reviews, consent records and generated videos.
"""
from .database import (
    get_connection,
    open_connection,
    transaction,
    close_connection,
    init_schema,
)
from .reviews_repo import SQLiteReviewRepository, ReviewRecord
from .permissions_repo import (
    SQLitePermissionRepository,
    PermissionRecord,
    PermissionStatus,
)
from .videos_repo import SQLiteVideoRepository, VideoRecord

__all__ = [
    "get_connection",
    "open_connection",
    "transaction",
    "close_connection",
    "init_schema",
    "SQLiteReviewRepository",
    "ReviewRecord",
    "SQLitePermissionRepository",
    "PermissionRecord",
    "PermissionStatus",
    "SQLiteVideoRepository",
    "VideoRecord",
]
