"""File-backed record store - main public API.

Orchestrates the record table, the JSON codec and the background flush
scheduler behind create/read/update/delete.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import IO, TYPE_CHECKING

from ..components.codec import JSONCodec
from ..components.scheduler import FlushScheduler
from ..components.table import RecordTable
from .config import FileDBConfig
from .errors import DecodeFailure, StoreClosedError

if TYPE_CHECKING:
    from ..interfaces.codec import Codec
    from ..interfaces.table import Table
    from .types import Record, RecordId

logger = logging.getLogger(__name__)


class FileBackedStore:
    """Write-back record store persisted to a single JSON file.

    Args:
        config: Store configuration

    Public API:
        - create(data): Insert a record, returns the assigned id
        - read(record_id): Retrieve a copy of a record
        - update(record_id, data): Replace a record in full
        - delete(record_id): Remove a record
        - flush(): Force a synchronous rewrite of the file
        - close(): Final flush, stop the worker, close the file

    Invariants:
        - CRUD calls only touch memory; disk I/O happens on the flush path
        - The flush holds the file lock, then the table lock in read mode
        - After close() returns, the file matches the in-memory table
    """

    def __init__(self, config: FileDBConfig, fp: IO[str] | None = None):
        self.config = config
        self.path = Path(config.path)

        if fp is None:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self.path.touch(exist_ok=True)
                fp = open(self.path, "r+", encoding="utf-8")
            except OSError as e:
                raise DecodeFailure(f"error opening {self.path}: {e}") from e

        self._fp = fp
        self._file_lock = threading.Lock()
        self._close_lock = threading.Lock()
        self._closed = False
        self._codec: Codec = JSONCodec(indent=config.indent, fsync=config.fsync_on_flush)

        try:
            records = self._codec.decode(self._fp)
        except DecodeFailure:
            self._fp.close()
            raise

        self._scheduler = FlushScheduler(
            self._sync_to_disk,
            threshold=config.flush_threshold,
            interval=config.flush_interval_seconds,
        )
        self._table: Table = RecordTable(records, on_change=self._scheduler.mark_dirty)
        self._scheduler.start()

        logger.info(f"Opened record store at {self.path} with {len(records)} records")

    @classmethod
    def from_file(cls, fp: IO[str], **options) -> FileBackedStore:
        """Build a store around an already-open, readable and writable text file.

        The store takes ownership of fp and closes it in close().
        """
        name = getattr(fp, "name", "<stream>")
        return cls(FileDBConfig(path=str(name), **options), fp=fp)

    def _check_open(self) -> None:
        if self._closed:
            raise StoreClosedError(f"store at {self.path} is closed")

    @property
    def dirty_count(self) -> int:
        return self._scheduler.dirty_count

    @property
    def closed(self) -> bool:
        return self._closed

    def __len__(self) -> int:
        return len(self._table)

    def create(self, data: Record) -> RecordId:
        """Insert data as a new record and return its id.

        Any id already present in data is overwritten.
        """
        self._check_open()
        self._codec.dumps([data])
        return self._table.append(data)

    def read(self, record_id: RecordId) -> Record:
        """Return a copy of the record with record_id."""
        self._check_open()
        return self._table.get(record_id)

    def update(self, record_id: RecordId, data: Record) -> None:
        """Replace the record with record_id by data (not a merge)."""
        self._check_open()
        self._codec.dumps([data])
        self._table.replace(record_id, data)

    def delete(self, record_id: RecordId) -> None:
        """Remove the record with record_id."""
        self._check_open()
        self._table.remove(record_id)

    def _sync_to_disk(self) -> None:
        """Rewrite the file from the current table.

        The table is only read-locked while serializing, so mutations can
        proceed during the disk write and stay counted as dirty.
        """
        with self._file_lock:
            with self._table.lock.read_locked():
                records = self._table.records_locked()
                document = self._codec.dumps(records)
                flushed = self._scheduler.dirty_count
                count = len(records)
            self._codec.write(self._fp, document)
            self._scheduler.mark_clean(flushed)
        logger.debug(f"Flushed {count} records to {self.path}")

    def flush(self) -> None:
        """Force a synchronous flush on the calling thread."""
        self._check_open()
        self._sync_to_disk()

    def close(self) -> None:
        """Run the final flush, stop the worker and close the file."""
        with self._close_lock:
            if self._closed:
                logger.warning(f"Record store at {self.path} already closed")
                return
            self._closed = True

        logger.info(f"Closing record store at {self.path}")
        try:
            self._scheduler.stop()
        finally:
            self._fp.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
