import logging
import threading
from typing import Optional

from django.conf import settings
from pymongo.errors import PyMongoError

from .base import ASCENDING, DESCENDING, Collection, DuplicateRecord, Store, StoreError
from .memory_store import MemoryStore
from .mongo_store import MongoStore

logger = logging.getLogger(__name__)

_store: Optional[Store] = None
_lock = threading.Lock()


def connect_store() -> Store:
    """
    Pick the backend for this process.

    MongoDB is used when configured and reachable. In DEBUG the in-memory
    store takes over if it is not; outside DEBUG the failure propagates.
    """
    uri = settings.MONGODB_URI
    if uri:
        try:
            store = MongoStore(uri, settings.MONGODB_DB_NAME, settings.MONGODB_TIMEOUT_MS)
            store.ping()
            store.ensure_indexes()
            logger.info("MongoDB connected: db=%s", settings.MONGODB_DB_NAME)
            return store
        except PyMongoError as exc:
            logger.error("Database connection failed: %s", exc)
            if not settings.DEBUG:
                raise
    elif not settings.DEBUG:
        raise StoreError("MONGODB_URI is not configured")

    logger.warning("DEVELOPMENT MODE: running without a persistent database")
    return MemoryStore()


def get_store() -> Store:
    global _store
    if _store is None:
        with _lock:
            if _store is None:
                _store = connect_store()
    return _store


def set_store(store: Optional[Store]) -> None:
    """Install ``store`` as the process-wide backend (None resets the choice)."""
    global _store
    with _lock:
        _store = store


__all__ = [
    'ASCENDING',
    'DESCENDING',
    'Collection',
    'DuplicateRecord',
    'MemoryStore',
    'MongoStore',
    'Store',
    'StoreError',
    'connect_store',
    'get_store',
    'set_store',
]
