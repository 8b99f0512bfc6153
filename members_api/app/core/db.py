"""
SQLite database integration, storage gateway and simple migrations.

This module provides functions for obtaining a database connection
(``get_connection``), applying migrations on application start
(``init_db``) and the ``StorageGateway`` used by the service layer.

The gateway executes a single parameterized statement per call and
reports the result as a ``QueryResult``.  Store errors are classified
here, once, into the ``Outcome`` variants so callers never need to
inspect SQLite error messages themselves.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from fastapi.concurrency import run_in_threadpool

from .config import settings

logger = logging.getLogger(__name__)


def get_database_path(db_url: Optional[str] = None) -> str:
    """Compute the path to the SQLite database file.

    ``db_url`` defaults to ``settings.database_url``.  An absolute path
    is used directly; a relative one is resolved against the project
    root.
    """
    db_url = db_url or settings.database_url
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent  # members_api/
    return str((base_dir / db_url).resolve())


def get_connection(db_url: Optional[str] = None) -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` so columns can be accessed by
    name.  No type detection is enabled; ``joined_date`` is stored and
    returned as a ``YYYY-MM-DD`` string.
    """
    conn = sqlite3.connect(get_database_path(db_url))
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def get_cursor(db_url: Optional[str] = None) -> Iterator[sqlite3.Cursor]:
    """Context manager that yields a cursor and closes the connection on exit."""
    conn = get_connection(db_url)
    try:
        yield conn.cursor()
        conn.commit()
    finally:
        conn.close()


MIGRATIONS: List[Tuple[int, str]] = [
    # Migration 1: Initial schema
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS members (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            email TEXT NOT NULL UNIQUE,
            joined_date TEXT NOT NULL
        );
        """,
    ),
    # Migration 2: the list endpoint always sorts by join date
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_members_joined_date ON members(joined_date);
        """,
    ),
]


def init_db(db_url: Optional[str] = None) -> None:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version, and applies any newer entries of
    ``MIGRATIONS``.  To change the schema, append a migration with an
    incremented version number.
    """
    with get_cursor(db_url) as cursor:
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        cursor.execute("SELECT MAX(version) as version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                cursor.executescript(sql)
                cursor.execute(
                    "INSERT INTO migrations (version) VALUES (?)", (version,)
                )
                current_version = version
                logger.info("Applied migration %s", version)


class Outcome(str, Enum):
    """Classification of a single statement execution."""

    OK = "ok"
    UNIQUE_VIOLATION = "unique_violation"
    ERROR = "error"


@dataclass
class QueryResult:
    """Result of ``StorageGateway.execute``.

    Reads fill ``rows``; writes fill ``rows_affected`` and
    ``inserted_id``.  ``error`` holds the raw store message and is meant
    for logs only.
    """

    outcome: Outcome
    rows: List[Dict[str, Any]] = field(default_factory=list)
    rows_affected: int = 0
    inserted_id: Optional[int] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.outcome is Outcome.OK


def _is_unique_violation(exc: sqlite3.IntegrityError) -> bool:
    # ``sqlite_errorname`` exists on Python 3.11+; older versions only
    # expose the message.
    if getattr(exc, "sqlite_errorname", None) == "SQLITE_CONSTRAINT_UNIQUE":
        return True
    return "UNIQUE constraint failed" in str(exc)


class StorageGateway:
    """Executes parameterized statements against the SQLite store.

    Every call opens its own connection, so one gateway can be shared
    by concurrent requests.  The blocking SQLite work runs in the
    threadpool.
    """

    def __init__(self, db_url: Optional[str] = None) -> None:
        self.db_url = db_url

    async def execute(self, query: str, params: Sequence[Any] = ()) -> QueryResult:
        """Run ``query`` with positional ``params`` and classify the outcome."""
        return await run_in_threadpool(self._execute, query, tuple(params))

    def _execute(self, query: str, params: tuple) -> QueryResult:
        try:
            conn = get_connection(self.db_url)
        except sqlite3.Error as exc:
            logger.warning("Could not open database: %s", exc)
            return QueryResult(Outcome.ERROR, error=str(exc))
        try:
            cursor = conn.execute(query, params)
            if cursor.description is not None:
                rows = [dict(row) for row in cursor.fetchall()]
                return QueryResult(Outcome.OK, rows=rows)
            conn.commit()
            return QueryResult(
                Outcome.OK,
                rows_affected=cursor.rowcount,
                inserted_id=cursor.lastrowid,
            )
        except sqlite3.IntegrityError as exc:
            conn.rollback()
            if _is_unique_violation(exc):
                logger.warning("Uniqueness violation: %s", exc)
                return QueryResult(Outcome.UNIQUE_VIOLATION, error=str(exc))
            logger.warning("Integrity error: %s", exc)
            return QueryResult(Outcome.ERROR, error=str(exc))
        except sqlite3.Error as exc:
            conn.rollback()
            logger.warning("Statement failed: %s", exc)
            return QueryResult(Outcome.ERROR, error=str(exc))
        finally:
            conn.close()
