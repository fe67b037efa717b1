"""Canonical encoding rule for store values.

Raw records coming out of the store carry native BSON types. Before a
record is handed to the structural codec it is rendered as canonical JSON
text using the mapping below; partial models therefore never see the store's
native identifier type.

Mapping table
- ``ObjectId``                 -> lowercase 24-digit hex string
- ``str``                      -> string
- ``bool``                     -> ``true`` / ``false``
- ``int`` / ``Int64``          -> integer
- ``float``                    -> number; non-finite values as ``NaN`` / ``Infinity``
- ``None``                     -> ``null``
- mapping                      -> object, key order preserved
- ``list`` / ``tuple``         -> array (read back as ``list``, as pymongo does)
- ``datetime``                 -> ISO-8601 string, naive values taken as UTC
- ``UUID``                     -> hyphenated string
- ``Decimal128`` / ``Decimal`` -> decimal string, precision kept
- other BSON types             -> relaxed Extended JSON (``$binary``,
  ``$timestamp``, ``$regularExpression``, ...)

Other BSON types never fail canonicalization; a shape that declares such a
field with a plain type simply fails validation for that field, and a shape
that doesn't declare it never sees it. Only values that are not BSON at all
raise ``MalformedRecord``.

The inverse direction exists for identifiers, datetimes, decimals and UUIDs
(``restore_*``); the bridge applies it to the fields a shape's descriptors
mark as such. Datetimes come back naive UTC unless ``tz_aware`` is set,
matching pymongo's own ``tz_aware`` client option.
"""

import json
import uuid
from collections.abc import Mapping
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict

from bson import Decimal128, ObjectId, json_util
from pydantic import TypeAdapter, ValidationError

from .errors import MalformedRecord

_DATETIME = TypeAdapter(datetime)


def render_object_id(value: ObjectId) -> str:
    """Render an identifier as normalized lowercase hex."""
    return value.binary.hex()


def _render(value: Any) -> Any:
    """``json.dumps`` fallback for values outside the plain JSON types."""
    if isinstance(value, ObjectId):
        return render_object_id(value)
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, Decimal128):
        return str(value.to_decimal())
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Mapping):
        return dict(value)
    # raises TypeError for values that aren't BSON either
    return json.loads(json_util.dumps(value, json_options=json_util.RELAXED_JSON_OPTIONS))


def to_canonical_text(raw: Mapping) -> str:
    """Render a raw record as canonical JSON text.

    Raises ``MalformedRecord`` for non-mapping input or values that have no
    JSON or Extended JSON rendering.
    """
    if not isinstance(raw, Mapping):
        raise MalformedRecord(f"Expected a mapping, got {type(raw).__name__}")
    try:
        return json.dumps(raw, default=_render, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise MalformedRecord(f"Record cannot be canonicalized: {e}") from e


def parse_canonical_text(text: str) -> Dict[str, Any]:
    """Parse canonical text back into an ordered raw record."""
    try:
        parsed = json.loads(text)
    except ValueError as e:
        raise MalformedRecord(f"Invalid canonical text: {e}") from e
    if not isinstance(parsed, dict):
        raise MalformedRecord("Canonical text does not hold an object")
    return parsed


def restore_object_id(value: Any) -> Any:
    """Inverse of ``render_object_id``; non-hex values pass through."""
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return value


def restore_datetime(value: Any, tz_aware: bool = True) -> Any:
    """Inverse of the datetime rendering; non-string values pass through.

    With ``tz_aware`` off the result is a naive datetime in UTC.
    """
    if not isinstance(value, str):
        return value
    try:
        restored = _DATETIME.validate_strings(value)
    except ValidationError as e:
        raise MalformedRecord(f"Not an ISO-8601 datetime: {value!r}") from e
    if not tz_aware and restored.tzinfo is not None:
        restored = restored.astimezone(timezone.utc).replace(tzinfo=None)
    return restored


def restore_decimal(value: Any) -> Any:
    """Inverse of the decimal rendering: decimal strings become ``Decimal128``."""
    if not isinstance(value, str):
        return value
    try:
        return Decimal128(value)
    except (ArithmeticError, ValueError) as e:
        raise MalformedRecord(f"Not representable as Decimal128: {value!r}") from e


def restore_uuid(value: Any) -> Any:
    """Inverse of the UUID rendering; non-string values pass through."""
    if not isinstance(value, str):
        return value
    try:
        return uuid.UUID(value)
    except ValueError as e:
        raise MalformedRecord(f"Not a UUID: {value!r}") from e
