"""
SQLite database integration and simple migration system.

This module provides functions for obtaining a database connection
(``get_connection``), running one logical operation inside a
transaction (``transaction``) and creating the schema on application
start (``init_db``).

The schema is applied as an ordered list of versions.  Applied
versions are stored in the ``migrations`` table so ``init_db`` can be
called on every start.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Tuple

from .config import settings


MIGRATIONS: List[Tuple[int, str]] = [
    # Migration 1: teachers, students and the join table
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS teacher (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            email TEXT NOT NULL UNIQUE
        );

        CREATE TABLE IF NOT EXISTS student (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            email TEXT NOT NULL UNIQUE,
            suspended INTEGER NOT NULL DEFAULT 0
        );

        CREATE TABLE IF NOT EXISTS teacher_student (
            teacher_id INTEGER NOT NULL,
            student_id INTEGER NOT NULL,
            PRIMARY KEY (teacher_id, student_id),
            FOREIGN KEY(teacher_id) REFERENCES teacher(id),
            FOREIGN KEY(student_id) REFERENCES student(id)
        );
        """,
    ),
    # Migration 2: reverse lookup from student to teachers
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_teacher_student_student_id ON teacher_student(student_id);
        """,
    ),
]


def get_database_path() -> str:
    """Compute the path to the SQLite database file.

    If ``settings.database_url`` is an absolute path, use it directly.
    Otherwise resolve it relative to the project root.
    """
    db_url = settings.database_url
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return str((base_dir / db_url).resolve())


def get_connection() -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` objects keyed by column name
    and foreign key enforcement is switched on.  The connection may be
    used from more than one thread, because FastAPI enters and leaves
    request dependencies in a worker thread while the route itself
    runs on the event loop; it is never used concurrently.
    """
    db_path = get_database_path()
    conn = sqlite3.connect(db_path, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    # SQLite leaves foreign keys off unless enabled per connection.
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def transaction() -> Iterator[sqlite3.Connection]:
    """Yield a connection whose work is committed as a single unit.

    The transaction is committed when the block exits normally and
    rolled back when it raises; the exception is re‑raised unchanged.
    The connection is closed in both cases.
    """
    conn = get_connection()
    try:
        yield conn
        conn.commit()
    except BaseException:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db() -> None:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version, and applies any newer entries of
    ``MIGRATIONS``.  To change the schema, append a new entry with an
    incremented version number.
    """
    logger = logging.getLogger(__name__)
    conn = get_connection()
    try:
        cursor = conn.cursor()
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        cursor.execute("SELECT MAX(version) AS version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                cursor.executescript(sql)
                cursor.execute(
                    "INSERT INTO migrations (version) VALUES (?)", (version,)
                )
                current_version = version
                logger.info("Applied schema version %s", version)
        conn.commit()
    finally:
        conn.close()
