"""Document store factory.

Centralizes creation of concrete ``DocumentStore`` backends so application
wiring doesn't depend on implementation details.
"""

from enum import Enum
from typing import Any, Mapping

import structlog

from .base import DocumentStore
from .memory import MemoryDocumentStore
from .mongo import MongoDocumentStore

logger = structlog.get_logger("docbridge.store.factory")


class StoreBackend(Enum):
    """Supported store backends."""
    MONGO = "mongo"
    MEMORY = "memory"


class StoreFactory:
    """Factory for creating document store instances."""

    @staticmethod
    def create(backend: StoreBackend, config: Mapping[str, Any]) -> DocumentStore:
        """Create a document store.

        Parameters
        - backend: A ``StoreBackend`` value
        - config: Backend-specific parameters (``uri`` and ``database`` for
          MongoDB; nothing for memory)
        """
        if backend == StoreBackend.MONGO:
            uri = config.get("uri")
            if not uri:
                raise ValueError("MongoDB store requires 'uri' in config")
            database = config.get("database")
            if not database:
                raise ValueError("MongoDB store requires 'database' in config")

            return MongoDocumentStore(
                uri=uri,
                database=database,
                timeout_ms=config.get("timeout_ms", 5000),
                app_name=config.get("app_name"),
                tz_aware=config.get("tz_aware", False),
            )

        elif backend == StoreBackend.MEMORY:
            return MemoryDocumentStore()

        else:
            raise ValueError(f"Unsupported store backend: {backend}")

    @staticmethod
    def create_from_config(config: Mapping[str, Any]) -> DocumentStore:
        """Create a store from a dictionary with a ``backend`` key."""
        backend_name = config.get("backend", StoreBackend.MONGO.value)
        try:
            backend = StoreBackend(backend_name)
        except ValueError:
            raise ValueError(f"Unsupported store backend: {backend_name}")

        logger.info("Creating document store", backend=backend.value)
        return StoreFactory.create(backend, config)


def create_store_from_config(config: Any) -> DocumentStore:
    """Create a store from a ``BridgeConfig``."""
    return StoreFactory.create_from_config({
        "backend": config.store_backend,
        "uri": config.mongo_uri,
        "database": config.mongo_database,
        "timeout_ms": config.mongo_timeout_ms,
        "tz_aware": config.tz_aware,
    })

