"""Exception hierarchy for the file-backed record store.

Defines all custom exceptions used throughout the implementation.
"""

from __future__ import annotations


class FileDBError(Exception):
    """Base exception for all record store errors."""
    pass


class RecordNotFound(FileDBError):
    """Raised when an operation targets an identifier not in the table."""
    pass


class InvalidIdentifierType(FileDBError):
    """Raised when a stored record's id field is not numeric."""
    pass


class DecodeFailure(FileDBError):
    """Raised when the backing file cannot be read or parsed."""
    pass


class EncodeFailure(FileDBError):
    """Raised when records cannot be serialized or written to disk."""
    pass


class StoreClosedError(FileDBError):
    """Raised when a store is used after close()."""
    pass
