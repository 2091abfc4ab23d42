"""Protocol definition for the record store."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..core.types import Record, RecordId


class RecordStore(Protocol):
    """Public API for the record store, as consumed by the HTTP layer."""

    def create(self, data: Record) -> RecordId:
        """Insert a record; sets and returns its id."""
        ...

    def read(self, record_id: RecordId) -> Record:
        """Return the record or raise RecordNotFound."""
        ...

    def update(self, record_id: RecordId, data: Record) -> None:
        """Replace the record or raise RecordNotFound."""
        ...

    def delete(self, record_id: RecordId) -> None:
        """Delete the record or raise RecordNotFound."""
        ...

    def close(self) -> None:
        """Flush everything and release the backing file."""
        ...
