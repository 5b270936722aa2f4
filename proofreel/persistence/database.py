"""
SQLite Database Connection and Schema Management.
"""
import sqlite3
import logging
from pathlib import Path
from threading import Lock
from typing import Dict, Optional
from contextlib import contextmanager

from proofreel.config import get_config

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_PATH = "data/proof.db"

_connection_lock = Lock()
_connections: Dict[str, sqlite3.Connection] = {}


def get_database_path() -> str:
    """Get database path from the process configuration."""
    return get_config().database_path or DEFAULT_DATABASE_PATH


def open_connection(db_path: str) -> sqlite3.Connection:
    """
    Open a configured connection and make sure the schema exists.
    Use ":memory:" for a throwaway database.
    """
    if db_path != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(
        db_path,
        check_same_thread=False,
        isolation_level=None,
    )
    conn.row_factory = sqlite3.Row

    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    conn.execute("PRAGMA busy_timeout=5000")

    init_schema(conn)
    return conn


def get_connection(db_path: Optional[str] = None) -> sqlite3.Connection:
    """
    Get or create the shared SQLite connection for a database file.
    Defaults to the configured path. Thread-safe.
    """
    db_path = db_path or get_database_path()

    with _connection_lock:
        conn = _connections.get(db_path)
        if conn is None:
            conn = open_connection(db_path)
            _connections[db_path] = conn
            logger.info(f"SQLite connection established: {db_path}")

        return conn


@contextmanager
def transaction(conn: Optional[sqlite3.Connection] = None):
    """
    Context manager for database transactions.
    Auto-commits on success, rolls back on exception.
    """
    conn = conn or get_connection()

    conn.execute("BEGIN IMMEDIATE")
    try:
        yield conn
        conn.execute("COMMIT")
    except Exception:
        conn.execute("ROLLBACK")
        raise


def init_schema(conn: sqlite3.Connection) -> None:
    """
    Initialize database schema.
    Creates tables if they don't exist.
    """
    conn.executescript("""
        -- Reviews table (written by the review ingestion side)
        CREATE TABLE IF NOT EXISTS reviews (
            id TEXT PRIMARY KEY,
            platform TEXT,
            author TEXT,
            rating REAL,
            text TEXT NOT NULL,
            review_date TEXT,
            created_at TEXT NOT NULL DEFAULT (datetime('now'))
        );

        -- Consent requests and their outcome
        CREATE TABLE IF NOT EXISTS permissions (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            review_id TEXT NOT NULL,
            consent_token TEXT UNIQUE,
            phone_number TEXT,
            status TEXT NOT NULL DEFAULT 'pending',
            sent_at TEXT NOT NULL DEFAULT (datetime('now')),
            responded_at TEXT,
            FOREIGN KEY (review_id) REFERENCES reviews(id)
        );

        -- Generated video artifacts
        CREATE TABLE IF NOT EXISTS videos (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            script_ref TEXT NOT NULL,
            review_id TEXT,
            angle TEXT,
            file_path TEXT NOT NULL,
            duration REAL,
            file_size_bytes INTEGER,
            status TEXT NOT NULL DEFAULT 'completed',
            created_at TEXT NOT NULL DEFAULT (datetime('now'))
        );

        -- Indexes for performance
        CREATE INDEX IF NOT EXISTS idx_permissions_review_id
            ON permissions(review_id);
        CREATE INDEX IF NOT EXISTS idx_videos_review_id
            ON videos(review_id);
    """)

    logger.debug("Database schema initialized")


def close_connection(db_path: Optional[str] = None) -> None:
    """Close one shared connection, or all of them when no path is given."""
    with _connection_lock:
        paths = [db_path] if db_path else list(_connections)
        for path in paths:
            conn = _connections.pop(path, None)
            if conn is not None:
                conn.close()
                logger.info(f"SQLite connection closed: {path}")
