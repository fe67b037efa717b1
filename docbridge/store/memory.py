"""In-process document store.

Keeps records in insertion order, keyed by ``_id``. Records are deep-copied
on the way in and on the way out so callers never share mutable state with
the store. Filters support top-level equality only.
"""

import copy
import threading
from typing import Any, Dict, Iterator, List, Mapping, Optional

import structlog
from bson import ObjectId

from .base import CollectionHandle, DocumentStore, DuplicateRecordError, RawRecord

logger = structlog.get_logger("docbridge.store.memory")

ID_KEY = "_id"


def _matches(record: Mapping[str, Any], filter: Optional[Mapping[str, Any]]) -> bool:
    if not filter:
        return True
    return all(key in record and record[key] == value for key, value in filter.items())


class MemoryCollection:
    """A named collection held in memory."""

    def __init__(self, name: str, records: Optional[List[RawRecord]] = None):
        self._name = name
        self._records: Dict[Any, Dict[str, Any]] = {}
        self._lock = threading.Lock()
        for record in records or []:
            self.insert_one(record)

    @property
    def name(self) -> str:
        return self._name

    def __len__(self) -> int:
        return len(self._records)

    def find(self, filter: Optional[Mapping[str, Any]] = None) -> Iterator[Dict[str, Any]]:
        """Lazily yield copies of matching records.

        The result set is fixed when iteration starts.
        """
        def _cursor() -> Iterator[Dict[str, Any]]:
            with self._lock:
                snapshot = list(self._records.values())
            for record in snapshot:
                if _matches(record, filter):
                    yield copy.deepcopy(record)

        return _cursor()

    def find_one(self, filter: Optional[Mapping[str, Any]] = None) -> Optional[Dict[str, Any]]:
        """Return a copy of the first matching record, or ``None``."""
        return next(self.find(filter), None)

    def insert_one(self, document: RawRecord) -> Any:
        """Insert a record, assigning an ``ObjectId`` when it has no ``_id``.

        Returns the record's ``_id``.
        """
        record = copy.deepcopy(dict(document))
        if ID_KEY not in record:
            record = {ID_KEY: ObjectId(), **record}
        with self._lock:
            if record[ID_KEY] in self._records:
                raise DuplicateRecordError(
                    f"Duplicate {ID_KEY} {record[ID_KEY]!r} in collection {self._name}"
                )
            self._records[record[ID_KEY]] = record
        logger.debug("Inserted record", collection=self._name)
        return record[ID_KEY]

    def replace_one(
        self,
        filter: Mapping[str, Any],
        replacement: RawRecord,
        upsert: bool = False,
    ) -> int:
        """Replace the first matching record.

        Returns the number of records replaced or inserted (0 or 1).
        """
        record = copy.deepcopy(dict(replacement))
        with self._lock:
            for key, existing in self._records.items():
                if _matches(existing, filter):
                    if ID_KEY in record and record[ID_KEY] != key:
                        raise DuplicateRecordError(f"Replacement may not change {ID_KEY}")
                    self._records[key] = {ID_KEY: key, **record}
                    return 1
        if not upsert:
            return 0
        seed = {k: v for k, v in filter.items() if k == ID_KEY}
        self.insert_one({**seed, **record})
        return 1


class MemoryDocumentStore(DocumentStore):
    """Document store holding every collection in memory."""

    def __init__(self):
        self._collections: Dict[str, MemoryCollection] = {}
        self._lock = threading.Lock()

    def collection(self, name: str) -> CollectionHandle:
        with self._lock:
            if name not in self._collections:
                self._collections[name] = MemoryCollection(name)
                logger.info("Created in-memory collection", collection=name)
            return self._collections[name]

    def health_check(self) -> bool:
        return True

    def close(self) -> None:
        with self._lock:
            self._collections.clear()
