"""Base document store interface.

Defines the contract the model layer depends on, independent of the backing
implementation (MongoDB, in-process memory, etc.).

A ``CollectionHandle`` is shaped after ``pymongo.collection.Collection`` so a
pymongo collection can be used directly; only ``name`` and ``find`` are
required by ``ModelCollection``. The remaining primitives are used by
application code for persistence.
"""

from abc import ABC, abstractmethod
from typing import Any, Iterable, Mapping, Optional, Protocol, runtime_checkable

RawRecord = Mapping[str, Any]


@runtime_checkable
class CollectionHandle(Protocol):
    """A single named collection of raw records."""

    @property
    def name(self) -> str:
        ...

    def find(self, filter: Optional[Mapping[str, Any]] = None) -> Iterable[RawRecord]:
        ...

    def find_one(self, filter: Optional[Mapping[str, Any]] = None) -> Optional[RawRecord]:
        ...

    def insert_one(self, document: RawRecord) -> Any:
        ...

    def replace_one(
        self,
        filter: Mapping[str, Any],
        replacement: RawRecord,
        upsert: bool = False,
    ) -> Any:
        ...


class DocumentStore(ABC):
    """Abstract base class for document stores.

    Implementations hand out collection handles by name and own all
    connection, timeout and cancellation behavior.
    """

    @abstractmethod
    def collection(self, name: str) -> CollectionHandle:
        """Get the handle for the collection called ``name``."""
        pass

    @abstractmethod
    def health_check(self) -> bool:
        """Check if the store is reachable."""
        pass

    def close(self) -> None:
        """Release any resources held by the store."""
        pass


class StoreError(Exception):
    """Base exception for store adapters in this package."""
    pass


class DuplicateRecordError(StoreError):
    """A record with the same ``_id`` already exists."""
    pass
