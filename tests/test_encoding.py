"""Tests for the canonical encoding rule."""

import json
import uuid
from datetime import datetime, timezone
from decimal import Decimal

import pytest
from bson import Binary, Decimal128, Int64, ObjectId, Timestamp

from docbridge.model.encoding import (
    parse_canonical_text,
    render_object_id,
    restore_datetime,
    restore_decimal,
    restore_object_id,
    restore_uuid,
    to_canonical_text,
)
from docbridge.model.errors import MalformedRecord

OID_HEX = "507f191e810c19729de860ea"


def test_object_id_renders_as_lowercase_hex():
    """Identifiers become lowercase hex regardless of how they were built."""
    oid = ObjectId(OID_HEX.upper())
    assert render_object_id(oid) == OID_HEX


def test_canonical_text_keeps_field_order():
    """Fields appear in record order with the identifier rendered as a string."""
    text = to_canonical_text({"_id": ObjectId(OID_HEX), "name": "a", "age": 3})
    assert text == '{"_id": "507f191e810c19729de860ea", "name": "a", "age": 3}'


def test_canonical_text_mapping_table():
    """Every store type in the table has a JSON rendering."""
    record = {
        "when": datetime(2024, 1, 2, 3, 4, 5),
        "aware": datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        "key": uuid.UUID("12345678-1234-5678-1234-567812345678"),
        "price": Decimal128("1.10"),
        "cost": Decimal("2.50"),
        "count": Int64(7),
        "flag": True,
        "nothing": None,
        "refs": (ObjectId(OID_HEX),),
        "nested": {"inner": ObjectId(OID_HEX)},
    }

    parsed = json.loads(to_canonical_text(record))

    assert parsed["when"] == "2024-01-02T03:04:05+00:00"
    assert parsed["aware"] == "2024-01-02T03:04:05+00:00"
    assert parsed["key"] == "12345678-1234-5678-1234-567812345678"
    assert parsed["price"] == "1.10"
    assert parsed["cost"] == "2.50"
    assert parsed["count"] == 7
    assert parsed["flag"] is True
    assert parsed["nothing"] is None
    assert parsed["refs"] == [OID_HEX]
    assert parsed["nested"] == {"inner": OID_HEX}


def test_other_bson_types_render_as_extended_json():
    """BSON types outside the table fall back to relaxed Extended JSON."""
    parsed = json.loads(to_canonical_text({
        "blob": b"\x00\x01",
        "typed": Binary(b"\x00\x01", 5),
        "ts": Timestamp(1700000000, 1),
    }))

    assert parsed["blob"] == {"$binary": {"base64": "AAE=", "subType": "00"}}
    assert parsed["typed"] == {"$binary": {"base64": "AAE=", "subType": "05"}}
    assert parsed["ts"] == {"$timestamp": {"t": 1700000000, "i": 1}}


def test_non_finite_floats_render_as_literals():
    """NaN and infinities keep their JSON literal spelling."""
    text = to_canonical_text({"a": float("nan"), "b": float("inf")})
    assert text == '{"a": NaN, "b": Infinity}'


def test_non_bson_values_are_malformed():
    """Arbitrary Python objects have no rendering and are rejected."""
    with pytest.raises(MalformedRecord):
        to_canonical_text({"field": object()})


def test_non_mapping_record_is_malformed():
    """Only mappings are records."""
    with pytest.raises(MalformedRecord):
        to_canonical_text(["not", "a", "record"])


def test_parse_canonical_text_requires_object():
    """Canonical text must hold a JSON object."""
    assert list(parse_canonical_text('{"b": 1, "a": 2}')) == ["b", "a"]
    with pytest.raises(MalformedRecord):
        parse_canonical_text("[1, 2]")
    with pytest.raises(MalformedRecord):
        parse_canonical_text("{not json")


def test_restore_object_id():
    """Only valid hex strings are turned back into identifiers."""
    assert restore_object_id(OID_HEX) == ObjectId(OID_HEX)
    assert restore_object_id("user-1") == "user-1"
    assert restore_object_id(42) == 42


def test_restore_datetime():
    """ISO strings, including a trailing Z, become aware datetimes."""
    expected = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    assert restore_datetime("2024-01-02T03:04:05Z") == expected
    assert restore_datetime("2024-01-02T03:04:05+00:00") == expected
    assert restore_datetime(None) is None
    with pytest.raises(MalformedRecord):
        restore_datetime("yesterday")


def test_restore_datetime_naive():
    """With tz_aware off, datetimes come back naive in UTC."""
    restored = restore_datetime("2024-01-02T05:04:05+02:00", tz_aware=False)
    assert restored == datetime(2024, 1, 2, 3, 4, 5)
    assert restored.tzinfo is None


def test_restore_decimal():
    """Decimal strings become Decimal128 with their precision."""
    assert restore_decimal("1.10") == Decimal128("1.10")
    assert str(restore_decimal("1.10")) == "1.10"
    assert restore_decimal(None) is None
    with pytest.raises(MalformedRecord):
        restore_decimal("cheap")


def test_restore_uuid():
    """Hyphenated strings become UUIDs."""
    value = "12345678-1234-5678-1234-567812345678"
    assert restore_uuid(value) == uuid.UUID(value)
    assert restore_uuid(None) is None
    with pytest.raises(MalformedRecord):
        restore_uuid("not-a-uuid")
