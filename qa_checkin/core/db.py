"""
SQLite storage for the record bucket: connections, transactions and health.
"""

import sqlite3
from contextlib import contextmanager
from typing import Generator, Optional

from .config import ensure_db_directory, get_bucket_name, get_busy_timeout
from .errors import InternalStoreError
from ..util.logging import logger


class Database:
    """A single SQLite file holding one bucket of phone number -> record JSON.

    Every transaction opens its own connection. Writers use BEGIN IMMEDIATE so
    SQLite admits one at a time; readers use a deferred BEGIN and, in WAL
    mode, see the last committed snapshot.
    """

    def __init__(self, path: str, bucket: Optional[str] = None, timeout: Optional[float] = None):
        self.path = path
        self.bucket = bucket or get_bucket_name()
        self.timeout = get_busy_timeout() if timeout is None else timeout
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @contextmanager
    def get_db(self) -> Generator[sqlite3.Connection, None, None]:
        """Get a SQLite connection in autocommit mode; callers issue BEGIN."""
        if self._closed:
            raise InternalStoreError("Database is closed")
        try:
            conn = sqlite3.connect(self.path, timeout=self.timeout, isolation_level=None)
        except sqlite3.Error as e:
            raise InternalStoreError(f"Failed to open database {self.path}: {e}") from e
        try:
            yield conn
        finally:
            conn.close()

    @contextmanager
    def transaction(self, write: bool = False) -> Generator[sqlite3.Cursor, None, None]:
        """Run a block atomically: commit on success, roll back on any exception.

        sqlite3 errors and text that cannot be bound as UTF-8 are re-raised
        as InternalStoreError.
        """
        with self.get_db() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute("BEGIN IMMEDIATE" if write else "BEGIN")
            except sqlite3.Error as e:
                raise InternalStoreError(f"Failed to begin transaction: {e}") from e

            try:
                yield cursor
            except (sqlite3.Error, UnicodeError) as e:
                conn.rollback()
                raise InternalStoreError(f"Transaction aborted: {e}") from e
            except BaseException:
                conn.rollback()
                raise

            try:
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                raise InternalStoreError(f"Commit failed: {e}") from e

    def bucket_exists(self, cursor: sqlite3.Cursor) -> bool:
        cursor.execute(
            "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?",
            (self.bucket,),
        )
        return cursor.fetchone() is not None

    def create_bucket(self, cursor: sqlite3.Cursor) -> None:
        # Primary-key B-tree gives lexicographic iteration over key bytes
        cursor.execute(
            f'CREATE TABLE IF NOT EXISTS "{self.bucket}" ('
            "key TEXT PRIMARY KEY, "
            "value TEXT NOT NULL"
            ") WITHOUT ROWID"
        )

    def require_bucket(self, cursor: sqlite3.Cursor) -> None:
        if not self.bucket_exists(cursor):
            raise InternalStoreError(f"Bucket not found: {self.bucket}")

    def init_db(self) -> None:
        """Create the database file and the bucket, and switch to WAL mode."""
        ensure_db_directory(self.path)
        with self.get_db() as conn:
            try:
                conn.execute("PRAGMA journal_mode = WAL")
            except sqlite3.Error as e:
                raise InternalStoreError(f"Failed to initialize database {self.path}: {e}") from e
        with self.transaction(write=True) as cursor:
            self.create_bucket(cursor)
        logger.log_operation("db.init", "success", {"path": self.path, "bucket": self.bucket})

    def health_check(self) -> bool:
        """Check the database opens and the bucket exists."""
        try:
            with self.transaction() as cursor:
                return self.bucket_exists(cursor)
        except InternalStoreError as e:
            logger.warning(f"Database health check failed: {e}")
            return False

    def close(self) -> None:
        self._closed = True
        logger.log_operation("db.close", "success", {"path": self.path})
