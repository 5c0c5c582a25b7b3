"""
kvstorage: a minimal persistent key-value store on a single SQLite file.

    from kvstorage import KeyValueStore, StoreConfig

    store = KeyValueStore(StoreConfig(db_path="storage.db"))
    store.set("foo", {"a": 1})
    store.get("foo")        # {"a": 1}
"""
from .core import (
    ConfigError,
    InvalidAgeError,
    KVStorageError,
    SerializationError,
    StorageError,
    StoreConfig,
    load_config,
)
from .storage import Entry, KeyValueStore, default_store

__version__ = "1.0.0"

__all__ = [
    "KeyValueStore",
    "Entry",
    "StoreConfig",
    "load_config",
    "default_store",
    "KVStorageError",
    "StorageError",
    "SerializationError",
    "InvalidAgeError",
    "ConfigError",
]
