"""Whole-file JSON codec.

Encodes the full record collection as a single JSON array and decodes it
back. There is no incremental format: every write rewrites the file.
"""

from __future__ import annotations

import json
import logging
import os
from typing import IO, TYPE_CHECKING

from ..core.errors import DecodeFailure, EncodeFailure

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ..core.types import Record

logger = logging.getLogger(__name__)


def _reject_constant(name: str):
    # NaN and Infinity are accepted by the json module but are not JSON.
    raise ValueError(f"invalid JSON constant: {name}")


class JSONCodec:
    """Serializes a record sequence to and from one JSON array document.

    Args:
        indent: JSON indentation (None for compact output)
        fsync: Whether to fsync the file after each write

    Invariants:
        - An empty file decodes to an empty list
        - Anything other than a JSON array of objects fails to decode
        - Writing truncates and rewrites the whole file
    """

    def __init__(self, indent: int | None = None, fsync: bool = True):
        self.indent = indent
        self.fsync = fsync

    def decode(self, fp: IO[str]) -> list[Record]:
        """Read the full file contents and return the records in file order."""
        try:
            fp.seek(0)
            content = fp.read()
        except (OSError, ValueError) as e:
            raise DecodeFailure(f"error reading file: {e}") from e

        if len(content) == 0:
            return []

        try:
            data = json.loads(content, parse_constant=_reject_constant)
        except (json.JSONDecodeError, ValueError) as e:
            raise DecodeFailure(f"error unmarshalling JSON data: {e}") from e

        if not isinstance(data, list):
            raise DecodeFailure(f"expected a JSON array, got {type(data).__name__}")
        for pos, record in enumerate(data):
            if not isinstance(record, dict):
                raise DecodeFailure(
                    f"expected a JSON object at position {pos}, got {type(record).__name__}"
                )

        logger.debug(f"Decoded {len(data)} records")
        return data

    def dumps(self, records: Sequence[Record]) -> str:
        """Serialize records to a JSON document without touching any file."""
        try:
            return json.dumps(list(records), indent=self.indent, allow_nan=False)
        except (TypeError, ValueError) as e:
            raise EncodeFailure(f"error encoding JSON data: {e}") from e

    def write(self, fp: IO[str], document: str) -> None:
        """Truncate the file and write an already serialized document.

        A failure after the truncate leaves the file empty or partially written.
        """
        try:
            fp.seek(0)
            fp.truncate(0)
            fp.write(document)
            fp.write("\n")
            fp.flush()
            if self.fsync:
                os.fsync(fp.fileno())
        except (OSError, ValueError) as e:
            raise EncodeFailure(f"error writing to file: {e}") from e

        logger.debug(f"Wrote {len(document)} chars")
