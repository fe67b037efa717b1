"""Partial models and the bridge to raw store records.

Primary components:
- ``encoding``: canonical text rendering of raw records.
- ``partial``: ``PartialModel`` / ``IdentifiedModel`` shapes and their field
  descriptors.
- ``bridge``: ``SerializationBridge`` decode/encode entry points.
- ``collection``: ``ModelCollection`` per-record-type access point.
"""

from .bridge import SerializationBridge
from .collection import AbstractModelCollection, ModelCollection
from .errors import BridgeError, MalformedRecord
from .partial import (
    ID_FIELD,
    FieldDescriptor,
    FieldKind,
    HasIdentity,
    IdentifiedModel,
    ObjectIdStr,
    PartialModel,
    describe_shape,
    is_identified,
)

__all__ = [
    "AbstractModelCollection",
    "BridgeError",
    "FieldDescriptor",
    "FieldKind",
    "HasIdentity",
    "ID_FIELD",
    "IdentifiedModel",
    "MalformedRecord",
    "ModelCollection",
    "ObjectIdStr",
    "PartialModel",
    "SerializationBridge",
    "describe_shape",
    "is_identified",
]
