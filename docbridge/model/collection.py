"""Model collections.

A model collection is the access point for one family of records: it binds
a single store collection to a serialization bridge and fixes the partial
shape family ``P`` that records may be decoded into.

``query_all`` hands back raw records without decoding them, so callers pick
the decode policy themselves::

    users = ModelCollection(store.collection("users"), User)
    names = [users.decode(raw, UserName) for raw in users.query_all()]

Store and bridge failures propagate unchanged; nothing here retries or
recovers.
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, Iterator, Mapping, Optional, Type, TypeVar

from ..store.base import CollectionHandle
from .bridge import SerializationBridge
from .partial import PartialModel, is_partial_shape

P = TypeVar("P", bound=PartialModel)
M = TypeVar("M", bound=PartialModel)


class AbstractModelCollection(ABC, Generic[P]):
    """An abstract implementation of a model collection.

    Subclasses supply the store collection, the shape family and the bridge.
    """

    @property
    @abstractmethod
    def collection(self) -> CollectionHandle:
        pass

    @property
    @abstractmethod
    def model_type(self) -> Type[P]:
        pass

    @property
    @abstractmethod
    def bridge(self) -> SerializationBridge:
        pass

    @property
    def name(self) -> str:
        return self.collection.name

    def query_all(self) -> Iterator[Mapping[str, Any]]:
        """Iterate over every raw record in the collection.

        The iterator is lazy and single-use; records are not decoded.
        """
        return iter(self.collection.find())

    def _require_family_shape(self, shape: Any) -> None:
        if not (is_partial_shape(shape) and issubclass(shape, self.model_type)):
            raise TypeError(
                f"{shape!r} is not a {self.model_type.__name__} shape "
                f"for collection {self.name}"
            )

    def decode(self, raw: Mapping[str, Any], shape: Optional[Type[M]] = None) -> M:
        """Deserialize a raw record into ``shape`` (default: ``model_type``)."""
        shape = shape or self.model_type
        self._require_family_shape(shape)
        return self.bridge.decode(raw, shape)

    def decode_optional(
        self,
        raw: Optional[Mapping[str, Any]],
        shape: Optional[Type[M]] = None,
    ) -> Optional[M]:
        """Deserialize a record that may be missing; ``None`` stays ``None``."""
        shape = shape or self.model_type
        self._require_family_shape(shape)
        return self.bridge.decode_optional(raw, shape)

    def decode_all(self, shape: Optional[Type[M]] = None) -> Iterator[M]:
        """Lazily decode every record in the collection into ``shape``."""
        shape = shape or self.model_type
        self._require_family_shape(shape)
        return self.bridge.decode_many(self.query_all(), shape)

    def encode(self, model: P) -> dict:
        """Serialize a partial model into a raw record."""
        if not isinstance(model, self.model_type):
            raise TypeError(
                f"Expected a {self.model_type.__name__} model for collection "
                f"{self.name}, got {type(model).__name__}"
            )
        return self.bridge.encode(model)


class ModelCollection(AbstractModelCollection[P]):
    """Model collection bound at construction time.

    Parameters
    - collection: Store collection handle (e.g. a pymongo collection)
    - model_type: Root shape of the family; every decode target must
      subclass it
    - bridge: Serialization bridge; a default bridge when omitted
    """

    def __init__(
        self,
        collection: CollectionHandle,
        model_type: Type[P],
        bridge: Optional[SerializationBridge] = None,
    ):
        if not is_partial_shape(model_type):
            raise TypeError(f"{model_type!r} is not a PartialModel subclass")
        self._collection = collection
        self._model_type = model_type
        self._bridge = bridge or SerializationBridge()

    @property
    def collection(self) -> CollectionHandle:
        return self._collection

    @property
    def model_type(self) -> Type[P]:
        return self._model_type

    @property
    def bridge(self) -> SerializationBridge:
        return self._bridge

    def __repr__(self) -> str:
        return f"ModelCollection(name={self.name!r}, model_type={self._model_type.__name__})"
