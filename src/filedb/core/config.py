"""Configuration for the file-backed record store.

Defines all tunable parameters for the write-back persistence engine.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class FileDBConfig:
    """Configuration parameters for the record store.

    Attributes:
        path: Backing JSON file; created if missing
        flush_threshold: Dirty count that must be exceeded to signal a flush
        flush_interval_seconds: Period of the background flush timer
        fsync_on_flush: Whether to fsync after each file rewrite
        indent: JSON indentation for the on-disk array (None = compact)
    """

    path: str
    flush_threshold: int = 5
    flush_interval_seconds: float = 5.0
    fsync_on_flush: bool = True
    indent: int | None = None

    def __post_init__(self) -> None:
        if self.flush_threshold < 0:
            raise ValueError(f"flush_threshold must be >= 0, got {self.flush_threshold}")  # noqa: TRY003
        if self.flush_interval_seconds <= 0:
            raise ValueError(  # noqa: TRY003
                f"flush_interval_seconds must be > 0, got {self.flush_interval_seconds}"
            )
