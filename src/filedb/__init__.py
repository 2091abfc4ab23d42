"""filedb - embedded JSON record store with write-back persistence."""

from .core.config import FileDBConfig
from .core.errors import (
    FileDBError,
    RecordNotFound,
    InvalidIdentifierType,
    DecodeFailure,
    EncodeFailure,
    StoreClosedError,
)
from .core.store import FileBackedStore
from .core.types import JSONValue, Record, RecordId

__version__ = "0.1.0"

__all__ = [
    "FileDBConfig",
    "FileDBError",
    "RecordNotFound",
    "InvalidIdentifierType",
    "DecodeFailure",
    "EncodeFailure",
    "StoreClosedError",
    "FileBackedStore",
    "JSONValue",
    "Record",
    "RecordId",
]
