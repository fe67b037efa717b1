"""MongoDB implementation of the document store.

Collection handles are plain ``pymongo`` collections; they already satisfy
``CollectionHandle``. Errors raised by pymongo are never wrapped: callers
see ``pymongo.errors.PyMongoError`` subclasses with their original detail.

Connection management
- A ``MongoClient`` is created on first use and shared by every collection
- ``close`` drops the client; the next call creates a new one
"""

from typing import Optional

import structlog
from pymongo import MongoClient
from pymongo.errors import PyMongoError

from .base import CollectionHandle, DocumentStore

logger = structlog.get_logger("docbridge.store.mongo")


class MongoDocumentStore(DocumentStore):
    """MongoDB-backed document store."""

    def __init__(
        self,
        uri: str,
        database: str,
        timeout_ms: int = 5000,
        app_name: Optional[str] = None,
        tz_aware: bool = False,
    ):
        """Configure a MongoDB-backed store.

        Parameters
        - uri: MongoDB connection string
        - database: Database holding the collections
        - timeout_ms: Server selection timeout in milliseconds
        - app_name: Optional client application name reported to the server
        - tz_aware: Return aware UTC datetimes from reads
        """
        self.uri = uri
        self.database = database
        self.timeout_ms = timeout_ms
        self.app_name = app_name
        self.tz_aware = tz_aware
        self._client: Optional[MongoClient] = None

    def _get_client(self) -> MongoClient:
        """Get or create the shared client.

        pymongo connects lazily, so creating the client does not block.
        """
        if self._client is None:
            options = {
                "serverSelectionTimeoutMS": self.timeout_ms,
                "tz_aware": self.tz_aware,
                "uuidRepresentation": "standard",
            }
            if self.app_name:
                options["appname"] = self.app_name
            self._client = MongoClient(self.uri, **options)
            logger.info("Created MongoDB client", database=self.database)
        return self._client

    def collection(self, name: str) -> CollectionHandle:
        return self._get_client()[self.database][name]

    def health_check(self) -> bool:
        """Ping the server; ``False`` when it cannot be reached."""
        try:
            self._get_client().admin.command("ping")
            return True
        except PyMongoError as e:
            logger.warning("MongoDB health check failed", error=str(e))
            return False

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
            logger.info("Closed MongoDB client", database=self.database)
