"""
Pluggable persistence backends for the query gateway.
"""

from lightbnb.config import Settings
from lightbnb.exceptions import StoreNotConfiguredError
from lightbnb.stores.base import Store
from lightbnb.stores.database import DatabaseStore
from lightbnb.stores.memory import MemoryStore
import logging

logger = logging.getLogger(__name__)


def create_store(settings: Settings) -> Store:
    """
    Build the backend named by ``settings.storage_backend``.

    The durable store owns a fresh connection pool; close the store at
    shutdown to release it.
    """
    if settings.storage_backend == "database":
        logger.info("Using durable database store")
        return DatabaseStore.from_settings(settings)
    if settings.storage_backend == "memory":
        logger.info("Using ephemeral in-memory store")
        if settings.fixtures_dir:
            return MemoryStore.from_fixtures(settings.fixtures_dir)
        return MemoryStore()
    raise StoreNotConfiguredError(f"Unknown storage backend: {settings.storage_backend}")


__all__ = ["Store", "DatabaseStore", "MemoryStore", "create_store"]
