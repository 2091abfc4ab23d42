"""Protocol definition for the in-memory record table."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..components.rwlock import ReadWriteLock
    from ..core.types import Record, RecordId


class Table(Protocol):
    """Ordered, lock-guarded collection of records."""

    @property
    def lock(self) -> ReadWriteLock:
        """Lock guarding the records; the flush path holds it in read mode."""
        ...

    def __len__(self) -> int:
        ...

    def append(self, data: Record) -> RecordId:
        """Assign the next id and store the record."""
        ...

    def get(self, record_id: RecordId) -> Record:
        """Return a copy of the record with record_id."""
        ...

    def replace(self, record_id: RecordId, data: Record) -> None:
        """Replace a record in full, keeping its id."""
        ...

    def remove(self, record_id: RecordId) -> None:
        """Delete a record, preserving the order of the rest."""
        ...

    def records_locked(self) -> list[Record]:
        """Live record list; caller must hold lock in read mode."""
        ...
