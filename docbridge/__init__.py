"""docbridge: typed partial models over document store records.

Subpackages:
- ``docbridge.model``: partial model shapes, the serialization bridge and
  model collections.
- ``docbridge.store``: document store adapters (MongoDB, in-memory).
- ``docbridge.common``: configuration and structured logging.

Usage:
- Define partial shapes by subclassing ``PartialModel`` or
  ``IdentifiedModel`` and access records through a ``ModelCollection``.
"""

from .model import (
    ID_FIELD,
    IdentifiedModel,
    MalformedRecord,
    ModelCollection,
    ObjectIdStr,
    PartialModel,
    SerializationBridge,
)

__all__ = [
    "ID_FIELD",
    "IdentifiedModel",
    "MalformedRecord",
    "ModelCollection",
    "ObjectIdStr",
    "PartialModel",
    "SerializationBridge",
]
