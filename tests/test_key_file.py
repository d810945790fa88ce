import base64
import dataclasses
import json
import secrets

import pytest

from chunkcrypt.core.config import DEFAULT_MAX_CHUNK_SIZE
from chunkcrypt.core.crypto.chacha20 import CHACHA_MAX_CHUNK_SIZE
from chunkcrypt.core.errors import InvalidInputError, MalformedKeyFileError, MissingFileError
from chunkcrypt.core.file_ops.key_file import ChunkNote, KeyFile


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def make_notes(count: int) -> tuple:
    return tuple(
        ChunkNote(order=i, nonce=secrets.token_bytes(12), tag=secrets.token_bytes(16))
        for i in range(1, count + 1)
    )


@pytest.fixture
def key_file(key) -> KeyFile:
    return KeyFile(key=key, notes=make_notes(3), max_chunk_size=64)


@pytest.fixture
def document(key_file) -> dict:
    return json.loads(key_file.to_json())


def test_round_trip(key_file):
    assert KeyFile.from_json(key_file.to_json()) == key_file


@pytest.mark.parametrize("count", [1, 2, 50])
def test_round_trip_for_various_note_counts(key, count):
    original = KeyFile(key=key, notes=make_notes(count))

    assert KeyFile.from_json(original.to_json()) == original


def test_save_and_load(key_file, tmp_path):
    path = key_file.save(tmp_path / "nested" / "data.enc.key")

    assert KeyFile.load(path) == key_file


def test_serialized_fields(key_file, document):
    assert document["Version"] == 1
    assert document["MaxChunkSize"] == 64
    assert base64.b64decode(document["Key"]) == key_file.key
    assert [n["Order"] for n in document["KeyNoteList"]] == [1, 2, 3]
    for note, raw in zip(key_file.notes, document["KeyNoteList"]):
        assert base64.b64decode(raw["Nonce"]) == note.nonce
        assert base64.b64decode(raw["Tag"]) == note.tag


def test_minimal_document_uses_default_chunk_size(key):
    text = json.dumps({
        "Key": b64(key),
        "KeyNoteList": [{"Order": 1, "Nonce": b64(bytes(12)), "Tag": b64(bytes(16))}],
    })

    assert KeyFile.from_json(text).max_chunk_size == DEFAULT_MAX_CHUNK_SIZE
    assert KeyFile.from_json(text, default_max_chunk_size=99).max_chunk_size == 99


def test_unknown_fields_are_ignored(key_file, document):
    document["Comment"] = "made by hand"
    document["KeyNoteList"][0]["Extra"] = 42

    assert KeyFile.from_json(json.dumps(document)) == key_file


def test_missing_file_raises(tmp_path):
    with pytest.raises(MissingFileError) as excinfo:
        KeyFile.load(tmp_path / "absent.key")

    assert excinfo.value.path == tmp_path / "absent.key"


@pytest.mark.parametrize("text", ["", "not json", "{", "[]", "42", "null"])
def test_unparsable_documents(text):
    with pytest.raises(MalformedKeyFileError):
        KeyFile.from_json(text)


def test_non_utf8_file(tmp_path):
    path = tmp_path / "binary.key"
    path.write_bytes(b"\xff\xfe\x00garbage")

    with pytest.raises(MalformedKeyFileError):
        KeyFile.load(path)


@pytest.mark.parametrize("field", ["Key", "KeyNoteList"])
def test_missing_top_level_field(document, field):
    del document[field]

    with pytest.raises(MalformedKeyFileError, match=field):
        KeyFile.from_json(json.dumps(document))


@pytest.mark.parametrize("field", ["Order", "Nonce", "Tag"])
def test_missing_note_field(document, field):
    del document["KeyNoteList"][1][field]

    with pytest.raises(MalformedKeyFileError, match=r"KeyNoteList\[1\]"):
        KeyFile.from_json(json.dumps(document))


def test_empty_note_list(document):
    document["KeyNoteList"] = []

    with pytest.raises(MalformedKeyFileError):
        KeyFile.from_json(json.dumps(document))


@pytest.mark.parametrize(
    "field, value",
    [
        ("Order", "1"),
        ("Order", True),
        ("Order", 1.5),
        ("Nonce", 123),
        ("Nonce", "!!!not base64!!!"),
        ("Tag", None),
    ],
)
def test_ill_typed_note_fields(document, field, value):
    document["KeyNoteList"][0][field] = value

    with pytest.raises(MalformedKeyFileError):
        KeyFile.from_json(json.dumps(document))


def test_note_list_must_be_array(document):
    document["KeyNoteList"] = {"Order": 1}

    with pytest.raises(MalformedKeyFileError):
        KeyFile.from_json(json.dumps(document))


def test_note_must_be_object(document):
    document["KeyNoteList"][0] = "note"

    with pytest.raises(MalformedKeyFileError):
        KeyFile.from_json(json.dumps(document))


def test_wrong_key_length(document):
    document["Key"] = b64(bytes(31))

    with pytest.raises(MalformedKeyFileError, match="Key"):
        KeyFile.from_json(json.dumps(document))


def test_wrong_nonce_length(document):
    document["KeyNoteList"][2]["Nonce"] = b64(bytes(11))

    with pytest.raises(MalformedKeyFileError, match="Nonce"):
        KeyFile.from_json(json.dumps(document))


def test_wrong_tag_length(document):
    document["KeyNoteList"][0]["Tag"] = b64(bytes(17))

    with pytest.raises(MalformedKeyFileError, match="Tag"):
        KeyFile.from_json(json.dumps(document))


@pytest.mark.parametrize("orders", [[1, 3, 4], [2, 3, 4], [1, 2, 2], [3, 2, 1], [0, 1, 2]])
def test_orders_must_be_contiguous_from_one(document, orders):
    for raw, order in zip(document["KeyNoteList"], orders):
        raw["Order"] = order

    with pytest.raises(MalformedKeyFileError):
        KeyFile.from_json(json.dumps(document))


def test_unsupported_version(document):
    document["Version"] = 2

    with pytest.raises(MalformedKeyFileError, match="version"):
        KeyFile.from_json(json.dumps(document))


@pytest.mark.parametrize("value", [0, -5, "64", False, CHACHA_MAX_CHUNK_SIZE + 1, 2**40])
def test_invalid_max_chunk_size(document, value):
    document["MaxChunkSize"] = value

    with pytest.raises(MalformedKeyFileError):
        KeyFile.from_json(json.dumps(document))


def test_largest_chunk_size_is_accepted(document):
    document["MaxChunkSize"] = CHACHA_MAX_CHUNK_SIZE

    assert KeyFile.from_json(json.dumps(document)).max_chunk_size == CHACHA_MAX_CHUNK_SIZE


def test_constructor_validates_invariants(key):
    with pytest.raises(InvalidInputError):
        KeyFile(key=bytes(16), notes=make_notes(1))
    with pytest.raises(InvalidInputError):
        KeyFile(key=key, notes=())
    with pytest.raises(InvalidInputError, match="MaxChunkSize"):
        KeyFile(key=key, notes=make_notes(1), max_chunk_size=CHACHA_MAX_CHUNK_SIZE + 1)
    with pytest.raises(InvalidInputError):
        ChunkNote(order=0, nonce=bytes(12), tag=bytes(16))


def test_key_file_is_immutable(key_file):
    with pytest.raises(dataclasses.FrozenInstanceError):
        key_file.key = bytes(32)


def test_repr_hides_key_material(key_file):
    text = repr(key_file) + repr(key_file.notes[0])

    assert b64(key_file.key) not in text
    assert key_file.key.hex() not in text
    assert "chunks=3" in text
