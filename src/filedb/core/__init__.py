"""Record store core."""

from .store import FileBackedStore

__all__ = ["FileBackedStore"]
