"""Serialization bridge between raw store records and partial models.

Decoding renders a raw record as canonical text (see ``encoding``) and
validates it against a partial shape with pydantic. Encoding dumps the model
to canonical text, parses it back into a raw record and, unless disabled,
restores native identifier, datetime, decimal and UUID values for the fields
the shape declares as such.

``decode_optional`` is the only entry point that accepts a missing record:
"not found" yields ``None`` and never reaches ``decode``, so it can't be
confused with "found but malformed".
"""

from typing import Any, Dict, Iterable, Iterator, Mapping, Optional, Type, TypeVar

import structlog
from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from .encoding import (
    parse_canonical_text,
    restore_datetime,
    restore_decimal,
    restore_object_id,
    restore_uuid,
    to_canonical_text,
)
from .errors import MalformedRecord
from .partial import FieldDescriptor, FieldKind, PartialModel, describe_shape, is_partial_shape

logger = structlog.get_logger("docbridge.bridge")

M = TypeVar("M", bound=PartialModel)


def _restore_value(value: Any, descriptor: FieldDescriptor, tz_aware: bool) -> Any:
    if descriptor.kind is FieldKind.IDENTIFIER:
        return restore_object_id(value)
    if descriptor.kind is FieldKind.DATETIME:
        return restore_datetime(value, tz_aware=tz_aware)
    if descriptor.kind is FieldKind.DECIMAL:
        return restore_decimal(value)
    if descriptor.kind is FieldKind.UUID:
        return restore_uuid(value)
    if descriptor.kind is FieldKind.MODEL and isinstance(value, dict):
        return restore_native(value, descriptor.fields, tz_aware=tz_aware)
    return value


def restore_native(
    raw: Dict[str, Any],
    descriptors: Iterable[FieldDescriptor],
    tz_aware: bool = False,
) -> Dict[str, Any]:
    """Apply the inverse encoding rule to a parsed record, in place."""
    for descriptor in descriptors:
        if descriptor.kind is FieldKind.VALUE or descriptor.key not in raw:
            continue
        value = raw[descriptor.key]
        if descriptor.many and isinstance(value, list):
            raw[descriptor.key] = [_restore_value(item, descriptor, tz_aware) for item in value]
        else:
            raw[descriptor.key] = _restore_value(value, descriptor, tz_aware)
    return raw


def _require_partial_shape(shape: Any) -> None:
    if not is_partial_shape(shape):
        raise TypeError(f"{shape!r} is not a PartialModel subclass")


class SerializationBridge:
    """Converts raw store records to partial models and back.

    Instances hold configuration only and may be shared freely.

    Parameters
    - restore_native_types: Rebuild ``ObjectId``, ``datetime``,
      ``Decimal128`` and ``UUID`` values on encode for fields declared with
      those types
    - exclude_unset: Only encode fields that were present on decode or set
      explicitly, so defaults never leak into the store
    - tz_aware: Encode datetimes as aware UTC values instead of naive UTC;
      set it to match the pymongo client's ``tz_aware`` option
    """

    def __init__(
        self,
        restore_native_types: bool = True,
        exclude_unset: bool = True,
        tz_aware: bool = False,
    ):
        self._restore_native_types = restore_native_types
        self._exclude_unset = exclude_unset
        self._tz_aware = tz_aware

    @classmethod
    def from_config(cls, config: Any) -> "SerializationBridge":
        """Build a bridge from a ``BridgeConfig``."""
        return cls(
            restore_native_types=config.restore_native_types,
            exclude_unset=config.exclude_unset,
            tz_aware=config.tz_aware,
        )

    @property
    def restore_native_types(self) -> bool:
        return self._restore_native_types

    @property
    def exclude_unset(self) -> bool:
        return self._exclude_unset

    @property
    def tz_aware(self) -> bool:
        return self._tz_aware

    def decode(self, raw: Mapping[str, Any], shape: Type[M]) -> M:
        """Deserialize a raw record into a partial model.

        Raises ``MalformedRecord`` if a field required by ``shape`` is missing
        or has an incompatible type.
        """
        _require_partial_shape(shape)
        try:
            text = to_canonical_text(raw)
        except MalformedRecord as e:
            e.shape = shape.__name__
            logger.warning("Record could not be canonicalized", shape=shape.__name__, error=str(e))
            raise

        try:
            model = shape.model_validate_json(text)
        except ValidationError as e:
            logger.warning(
                "Record does not match shape",
                shape=shape.__name__,
                error_count=e.error_count(),
            )
            raise MalformedRecord.from_validation_error(shape, e) from e

        logger.debug("Decoded record", shape=shape.__name__)
        return model

    def decode_optional(self, raw: Optional[Mapping[str, Any]], shape: Type[M]) -> Optional[M]:
        """Deserialize a raw record that may be missing.

        Returns ``None`` for a missing record without attempting to decode.
        """
        if raw is None:
            return None
        return self.decode(raw, shape)

    def decode_many(self, raws: Iterable[Mapping[str, Any]], shape: Type[M]) -> Iterator[M]:
        """Lazily decode a sequence of raw records, failing on the first bad one."""
        for raw in raws:
            yield self.decode(raw, shape)

    def encode(self, model: PartialModel) -> Dict[str, Any]:
        """Serialize a partial model into a raw record.

        Only the fields declared by the model's shape are written; with
        ``exclude_unset`` fields that were neither decoded nor set are
        skipped as well.
        """
        if not isinstance(model, PartialModel):
            raise TypeError(f"Expected a PartialModel instance, got {type(model).__name__}")

        shape = type(model)
        try:
            text = model.model_dump_json(by_alias=True, exclude_unset=self._exclude_unset)
        except PydanticSerializationError as e:
            logger.warning("Model could not be serialized", shape=shape.__name__, error=str(e))
            raise MalformedRecord(
                f"{shape.__name__} cannot be serialized: {e}", shape=shape.__name__
            ) from e

        raw = parse_canonical_text(text)
        if self._restore_native_types:
            raw = restore_native(raw, describe_shape(shape), tz_aware=self._tz_aware)

        logger.debug("Encoded model", shape=shape.__name__, fields=len(raw))
        return raw
