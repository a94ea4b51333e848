"""Services package."""

from aetherius.services.seed import DEMO_FAMILY_ID, build_demo_family, seed_demo_data
from aetherius.services.storage import (
    ConnectionError,
    EntityStoreInterface,
    InMemoryEntityStore,
    SQLAlchemyEntityStore,
    StorageError,
    create_entity_store,
)

__all__ = [
    # Demo data
    "DEMO_FAMILY_ID",
    "build_demo_family",
    "seed_demo_data",
    # Storage services
    "ConnectionError",
    "EntityStoreInterface",
    "InMemoryEntityStore",
    "SQLAlchemyEntityStore",
    "StorageError",
    "create_entity_store",
]
