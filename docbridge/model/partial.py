"""Partial model capabilities.

A partial model captures a subset of the fields of a larger stored record.
Any number of partial shapes may exist for the same record; each one only
declares the fields it cares about and silently ignores the rest.

Shapes are pydantic models. The capability taxonomy is:

- ``PartialModel``: any subset of a record's fields.
- ``IdentifiedModel``: a partial model that also carries the reserved
  identity field ``_id``. The identity is mandatory and exposed as a string
  through ``model_id()``.

Example::

    class UserName(IdentifiedModel):
        name: str

    class UserEmail(PartialModel):
        email: str
        verified: bool = False
"""

import functools
import types
import typing
import uuid
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, ClassVar, Optional, Protocol, Tuple, Type, runtime_checkable

from bson import ObjectId
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

ID_FIELD = "_id"


class _IdentifierMarker:
    """Annotation metadata flagging a ``str`` field as a record identifier."""

    def __repr__(self) -> str:
        return "IDENTIFIER"


IDENTIFIER = _IdentifierMarker()


def _coerce_identifier(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return value.binary.hex()
    return value


# A record identifier held in its canonical hex form.
ObjectIdStr = Annotated[str, IDENTIFIER, BeforeValidator(_coerce_identifier)]


class PartialModel(BaseModel):
    """A model representing one or more fields of a full record."""

    model_config = ConfigDict(extra="ignore", frozen=True, ser_json_inf_nan="constants")


class IdentifiedModel(PartialModel):
    """A partial model representing (at least) the ``_id`` field."""

    ID: ClassVar[str] = ID_FIELD

    id: ObjectIdStr = Field(alias=ID_FIELD, min_length=1)

    def model_id(self) -> str:
        """Get the id of the model."""
        return self.id


@runtime_checkable
class HasIdentity(Protocol):
    """Structural form of the identity capability."""

    def model_id(self) -> str:
        ...


class FieldKind(Enum):
    """How a declared field is treated by the inverse encoding rule."""
    VALUE = "value"
    IDENTIFIER = "identifier"
    DATETIME = "datetime"
    DECIMAL = "decimal"
    UUID = "uuid"
    MODEL = "model"


@dataclass(frozen=True)
class FieldDescriptor:
    """A declared field of a partial shape.

    ``key`` is the record field name (the alias when one is set), ``many``
    marks sequence-valued fields, and ``shape`` is the nested partial shape
    for ``FieldKind.MODEL``.
    """
    name: str
    key: str
    annotation: Any
    required: bool
    kind: FieldKind
    many: bool = False
    shape: Optional[Type["PartialModel"]] = None

    @property
    def fields(self) -> Tuple["FieldDescriptor", ...]:
        """Descriptors of the nested shape, resolved on first use.

        Resolving lazily lets a shape refer to itself.
        """
        if self.shape is None:
            return ()
        return describe_shape(self.shape)


_SEQUENCE_ORIGINS = (list, tuple, set, frozenset)
_UNION_ORIGINS = (typing.Union, types.UnionType)
_SCALAR_KINDS = (
    (datetime, FieldKind.DATETIME),
    (Decimal, FieldKind.DECIMAL),
    (uuid.UUID, FieldKind.UUID),
)


def _classify(
    annotation: Any,
    metadata: Tuple[Any, ...] = (),
) -> Tuple[FieldKind, bool, Optional[type]]:
    if any(isinstance(item, _IdentifierMarker) for item in metadata):
        return FieldKind.IDENTIFIER, False, None

    origin = typing.get_origin(annotation)
    if origin is Annotated:
        base, *extra = typing.get_args(annotation)
        return _classify(base, metadata + tuple(extra))
    if origin in _UNION_ORIGINS:
        members = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(members) == 1:
            return _classify(members[0], metadata)
        return FieldKind.VALUE, False, None
    if origin in _SEQUENCE_ORIGINS:
        args = [arg for arg in typing.get_args(annotation) if arg is not Ellipsis]
        if len(args) == 1:
            kind, _, nested = _classify(args[0])
            return kind, True, nested
        return FieldKind.VALUE, False, None

    if isinstance(annotation, type):
        for base, kind in _SCALAR_KINDS:
            if issubclass(annotation, base):
                return kind, False, None
        if issubclass(annotation, PartialModel):
            return FieldKind.MODEL, False, annotation
    return FieldKind.VALUE, False, None


def is_partial_shape(shape: Any) -> bool:
    return isinstance(shape, type) and issubclass(shape, PartialModel)


def is_identified(shape: Any) -> bool:
    """Whether ``shape`` claims the identity capability."""
    return isinstance(shape, type) and issubclass(shape, IdentifiedModel)


@functools.lru_cache(maxsize=None)
def describe_shape(shape: Type[PartialModel]) -> Tuple[FieldDescriptor, ...]:
    """Field descriptors of a partial shape, computed once per shape."""
    if not is_partial_shape(shape):
        raise TypeError(f"{shape!r} is not a PartialModel subclass")

    descriptors = []
    for name, info in shape.model_fields.items():
        kind, many, nested = _classify(info.annotation, tuple(info.metadata))
        descriptors.append(
            FieldDescriptor(
                name=name,
                key=info.serialization_alias or info.alias or name,
                annotation=info.annotation,
                required=info.is_required(),
                kind=kind,
                many=many,
                shape=nested,
            )
        )
    return tuple(descriptors)


def required_keys(shape: Type[PartialModel]) -> Tuple[str, ...]:
    """Record field names a record must carry to decode as ``shape``."""
    return tuple(d.key for d in describe_shape(shape) if d.required)
