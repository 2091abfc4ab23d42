"""Common type definitions for the file-backed record store.

Defines fundamental types used across all components.
"""

from __future__ import annotations

from typing import Any, Union

# JSON value: str | int | float | bool | None | list[JSONValue] | dict[str, JSONValue]
JSONValue = Union[str, int, float, bool, None, list[Any], dict[str, Any]]

# Core record types
RecordId = int
Record = dict[str, JSONValue]

ID_FIELD = "id"


def is_valid_id(value: object) -> bool:
    """Return True if value can serve as a record identifier.

    JSON numbers decode to int or float; bool is a subclass of int and
    is rejected explicitly.
    """
    return isinstance(value, (int, float)) and not isinstance(value, bool)
