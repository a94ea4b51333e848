"""
Storage Services Package

Provides the abstract entity store interface and its two implementations:
an in-memory store and a SQLAlchemy store (PostgreSQL or SQLite).
"""

from aetherius.config import DatabaseSettings
from aetherius.services.storage.interface import (
    DEFAULT_TRANSACTION_LIMIT,
    ConnectionError,
    EntityStoreInterface,
    StorageError,
)
from aetherius.services.storage.memory import InMemoryEntityStore
from aetherius.services.storage.sql import SQLAlchemyEntityStore


def create_entity_store(settings: DatabaseSettings) -> EntityStoreInterface:
    """Pick the store implementation for the configured database URL."""
    if settings.use_memory:
        return InMemoryEntityStore()
    return SQLAlchemyEntityStore(settings)


__all__ = [
    # Interface
    "DEFAULT_TRANSACTION_LIMIT",
    "EntityStoreInterface",
    "create_entity_store",
    # Exceptions
    "ConnectionError",
    "StorageError",
    # Implementations
    "InMemoryEntityStore",
    "SQLAlchemyEntityStore",
]
