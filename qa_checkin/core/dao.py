"""
Record store: merges Q&A submissions into per-phone-number records.

Each operation runs in exactly one transaction on the injected Database, so a
read-modify-write of a key is atomic and a failure leaves nothing behind.
"""

from typing import Callable, List, Optional, Sequence

from .db import Database
from .errors import InternalStoreError, RecordNotFoundError
from .schema import Entry, Record, decode_record, encode_record, now_rfc3339
from ..util.logging import logger


class RecordStore:
    """Append-only Q&A records keyed by phone number."""

    def __init__(self, db: Database, clock: Optional[Callable[[], str]] = None):
        self.db = db
        self.clock = clock or now_rfc3339

    def _get(self, cursor, key: str) -> Optional[Record]:
        cursor.execute(f'SELECT value FROM "{self.db.bucket}" WHERE key = ?', (key,))
        row = cursor.fetchone()
        return decode_record(row[0]) if row else None

    def _put(self, cursor, key: str, record: Record) -> None:
        cursor.execute(
            f'INSERT OR REPLACE INTO "{self.db.bucket}" (key, value) VALUES (?, ?)',
            (key, encode_record(record)),
        )

    def append_or_create(self, key: str, new_entries: Sequence[Entry]) -> Record:
        """Append new_entries to the record for key, creating it if absent.

        A new record gets check_in from the store clock and no checkout. An
        existing record keeps both timestamps.
        """
        try:
            with self.db.transaction(write=True) as cursor:
                self.db.create_bucket(cursor)
                existing = self._get(cursor, key)
                if existing is None:
                    record = Record(tel_number=key, check_in=self.clock(), questions=list(new_entries))
                    action = "created"
                else:
                    record = existing.with_entries(new_entries)
                    action = "appended"
                self._put(cursor, key, record)
        except InternalStoreError as e:
            logger.log_record_operation("append", key, "failed", {"error": str(e)})
            raise

        logger.log_record_operation("append", key, details={
            "action": action,
            "added": len(new_entries),
            "total": len(record.questions),
        })
        return record

    def mark_checkout(self, key: str, entry_id: str, timestamp: str) -> Record:
        """Set the record's checkout time if one of its entries has entry_id.

        Raises RecordNotFoundError when key has no record. An unmatched
        entry_id is not an error: the record is written back unchanged.
        """
        try:
            with self.db.transaction(write=True) as cursor:
                self.db.require_bucket(cursor)
                existing = self._get(cursor, key)
                if existing is None:
                    raise RecordNotFoundError(key)
                record = existing.checked_out(entry_id, timestamp)
                self._put(cursor, key, record)
        except RecordNotFoundError:
            logger.log_record_operation("checkout", key, "not_found")
            raise
        except InternalStoreError as e:
            logger.log_record_operation("checkout", key, "failed", {"error": str(e)})
            raise

        matched = record is not existing
        if not matched:
            logger.warning(f"Checkout for unknown entry id {entry_id!r}; record left unchanged")
        logger.log_record_operation("checkout", key, details={"matched": matched})
        return record

    def list_all(self) -> List[Record]:
        """Every record, in lexicographic phone-number order, from one snapshot."""
        try:
            with self.db.transaction() as cursor:
                self.db.require_bucket(cursor)
                cursor.execute(f'SELECT value FROM "{self.db.bucket}" ORDER BY key')
                records = [decode_record(value) for (value,) in cursor.fetchall()]
        except InternalStoreError as e:
            logger.log_operation("record.list", "failed", {"error": str(e)})
            raise

        logger.log_operation("record.list", "success", {"count": len(records)})
        return records

    def count_records(self) -> int:
        with self.db.transaction() as cursor:
            self.db.require_bucket(cursor)
            cursor.execute(f'SELECT COUNT(*) FROM "{self.db.bucket}"')
            return cursor.fetchone()[0]
