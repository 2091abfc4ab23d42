"""In-memory record table.

Holds records in insertion order and owns identifier allocation.
"""

from __future__ import annotations

import copy
import logging
from typing import TYPE_CHECKING

from ..core.errors import InvalidIdentifierType, RecordNotFound
from ..core.types import ID_FIELD, is_valid_id
from .rwlock import ReadWriteLock

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from ..core.types import Record, RecordId

logger = logging.getLogger(__name__)


class RecordTable:
    """Ordered collection of records guarded by a readers-writer lock.

    Args:
        records: Initial records, usually decoded from the backing file
        on_change: Called once per successful mutation, while the write lock is held

    Invariants:
        - Order is insertion order; deletion shifts later records down
        - New ids are "last record's id + 1", or 1 when the table is empty
        - Records are copied on the way in and out; no caller holds a live reference
    """

    def __init__(
        self,
        records: Iterable[Record] | None = None,
        on_change: Callable[[], None] | None = None,
    ):
        self._records: list[Record] = list(records) if records is not None else []
        self._on_change = on_change
        self._lock = ReadWriteLock()

    @property
    def lock(self) -> ReadWriteLock:
        return self._lock

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._records)

    def _next_id_locked(self) -> RecordId:
        """Compute the id for the next insert (must hold lock)."""
        if not self._records:
            return 1
        last_id = self._records[-1].get(ID_FIELD)
        if not is_valid_id(last_id):
            raise InvalidIdentifierType(f"invalid ID type in record: {last_id!r}")
        return last_id + 1

    def _index_of_locked(self, record_id: RecordId) -> int:
        """Return the position of record_id (must hold lock)."""
        for i, record in enumerate(self._records):
            current = record.get(ID_FIELD)
            if not is_valid_id(current):
                raise InvalidIdentifierType(f"invalid ID type in record at position {i}: {current!r}")
            if current == record_id:
                return i
        raise RecordNotFound(f"record not found: {record_id}")

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()

    def append(self, data: Record) -> RecordId:
        """Assign the next id to data, store a copy, and return the id.

        The id is also set on the caller's mapping.
        """
        with self._lock.write_locked():
            new_id = self._next_id_locked()
            data[ID_FIELD] = new_id
            self._records.append(copy.deepcopy(data))
            self._changed()
        logger.debug(f"Created record {new_id}")
        return new_id

    def get(self, record_id: RecordId) -> Record:
        """Return a copy of the record with record_id."""
        with self._lock.read_locked():
            return copy.deepcopy(self._records[self._index_of_locked(record_id)])

    def replace(self, record_id: RecordId, data: Record) -> None:
        """Replace the record with record_id by data, re-stamping the id."""
        with self._lock.write_locked():
            i = self._index_of_locked(record_id)
            data[ID_FIELD] = record_id
            self._records[i] = copy.deepcopy(data)
            self._changed()
        logger.debug(f"Updated record {record_id}")

    def remove(self, record_id: RecordId) -> None:
        """Delete the record with record_id, keeping the order of the rest."""
        with self._lock.write_locked():
            del self._records[self._index_of_locked(record_id)]
            self._changed()
        logger.debug(f"Deleted record {record_id}")

    def records_locked(self) -> list[Record]:
        """Return the live record list (must hold lock in read mode)."""
        return self._records
