"""CRUD routes over /records."""

from __future__ import annotations

import logging

from flask import Blueprint, current_app, jsonify, request

from ..core.errors import EncodeFailure, FileDBError
from ..core.types import ID_FIELD
from . import EXTENSION_KEY

logger = logging.getLogger(__name__)

bp = Blueprint("records", __name__)

MAX_RECORD_ID = 2**32 - 1


def _store():
    return current_app.extensions[EXTENSION_KEY]


def _error(message: str, status: int):
    return jsonify({"error": message}), status


def _parse_id(raw: str) -> int | None:
    # Unsigned 32-bit decimal only; int() alone would accept "+1" or " 1".
    if not (raw.isascii() and raw.isdigit()):
        return None
    value = int(raw)
    return value if value <= MAX_RECORD_ID else None


def _record_body() -> tuple[dict | None, tuple | None]:
    """Decode the request body into a record, or return an error response."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return None, _error("Error decoding JSON", 400)
    if ID_FIELD in data:
        return None, _error("Field 'id' is not allowed", 400)
    return data, None


@bp.post("/records")
def post_record():
    data, err = _record_body()
    if err:
        return err

    try:
        _store().create(data)
    except EncodeFailure as e:
        return _error(str(e), 400)
    except FileDBError:
        logger.exception("Error creating record")
        return _error("Error creating record", 500)

    return jsonify(data)


@bp.get("/records/<raw_id>")
def get_record(raw_id: str):
    record_id = _parse_id(raw_id)
    if record_id is None:
        return _error("Invalid ID", 400)

    try:
        record = _store().read(record_id)
    except FileDBError as e:
        return _error(str(e), 400)

    return jsonify(record)


@bp.put("/records/<raw_id>")
def put_record(raw_id: str):
    record_id = _parse_id(raw_id)
    if record_id is None:
        return _error("Invalid ID", 400)

    data, err = _record_body()
    if err:
        return err

    try:
        _store().update(record_id, data)
    except FileDBError as e:
        return _error(str(e), 400)

    return jsonify(data)


@bp.delete("/records/<raw_id>")
def delete_record(raw_id: str):
    record_id = _parse_id(raw_id)
    if record_id is None:
        return _error("Invalid ID", 400)

    try:
        _store().delete(record_id)
    except FileDBError as e:
        return _error(str(e), 400)

    return "", 204
