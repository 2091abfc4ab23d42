"""Protocol definition for the whole-file codec."""

from __future__ import annotations

from typing import IO, TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ..core.types import Record


class Codec(Protocol):
    """Converts the full record collection to and from file contents."""

    def decode(self, fp: IO[str]) -> list[Record]:
        """Read the whole file; empty file yields an empty list."""
        ...

    def dumps(self, records: Sequence[Record]) -> str:
        """Serialize records without touching any file."""
        ...

    def write(self, fp: IO[str], document: str) -> None:
        """Truncate the file and rewrite it with a serialized document."""
        ...
