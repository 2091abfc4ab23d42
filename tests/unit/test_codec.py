"""Unit tests for the whole-file JSON codec."""

import io
import json
import shutil
import tempfile
from pathlib import Path

import pytest

from filedb.components.codec import JSONCodec
from filedb.core.errors import DecodeFailure, EncodeFailure


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield tmpdir
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def db_file(temp_dir):
    """Open an empty read/write database file."""
    path = Path(temp_dir) / "db.json"
    path.touch()
    with open(path, "r+", encoding="utf-8") as f:
        yield f


def save(codec, fp, records):
    codec.write(fp, codec.dumps(records))


def test_decode_empty_file(db_file):
    """An empty file decodes to an empty record list."""
    assert JSONCodec().decode(db_file) == []


def test_decode_array_of_objects(db_file):
    db_file.write('[{"id": 1, "name": "Bob"}, {"id": 2, "tags": ["a", "b"], "meta": {"x": null}}]')
    db_file.flush()

    records = JSONCodec().decode(db_file)

    assert records == [
        {"id": 1, "name": "Bob"},
        {"id": 2, "tags": ["a", "b"], "meta": {"x": None}},
    ]


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        '{"id": 1}',
        "[1, 2, 3]",
        '[{"id": 1}, "oops"]',
        "   ",
        '[{"id": 1, "x": NaN}]',
        '[{"id": 1, "x": Infinity}]',
        '[{"id": 1, "x": -Infinity}]',
    ],
)
def test_decode_malformed_content(db_file, content):
    """Anything other than a strict JSON array of objects is rejected."""
    db_file.write(content)
    db_file.flush()

    with pytest.raises(DecodeFailure):
        JSONCodec().decode(db_file)


def test_write_rewrites_whole_file(db_file, temp_dir):
    """Writing truncates first, so a shorter document leaves no stale tail."""
    codec = JSONCodec(fsync=False)
    save(codec, db_file, [{"id": i, "payload": "x" * 50} for i in range(1, 11)])
    save(codec, db_file, [{"id": 1}])

    on_disk = json.loads((Path(temp_dir) / "db.json").read_text(encoding="utf-8"))
    assert on_disk == [{"id": 1}]


def test_write_then_decode_from_same_handle(db_file):
    codec = JSONCodec()
    records = [{"id": 1, "name": "Bob"}, {"id": 2, "ok": True, "n": 1.5}]

    save(codec, db_file, records)

    assert codec.decode(db_file) == records


def test_dumps_with_indent():
    assert "\n  " in JSONCodec(indent=2).dumps([{"id": 1}])


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_dumps_rejects_non_json_floats(value):
    """NaN and Infinity have no JSON representation."""
    with pytest.raises(EncodeFailure):
        JSONCodec().dumps([{"id": 1, "x": value}])


def test_unserializable_record_leaves_file_untouched(db_file, temp_dir):
    """Serialization errors surface before the file is truncated."""
    codec = JSONCodec(fsync=False)
    save(codec, db_file, [{"id": 1}])

    with pytest.raises(EncodeFailure):
        save(codec, db_file, [{"id": 1, "bad": {1, 2}}])

    on_disk = json.loads((Path(temp_dir) / "db.json").read_text(encoding="utf-8"))
    assert on_disk == [{"id": 1}]


def test_write_error_is_wrapped():
    """Write failures on the handle surface as EncodeFailure."""
    stream = io.StringIO()
    stream.close()

    with pytest.raises(EncodeFailure):
        JSONCodec(fsync=False).write(stream, "[]")
