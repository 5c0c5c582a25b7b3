"""Persistent key-value storage backed by SQLite."""
from functools import lru_cache

from ..core.config import load_config
from .kv_store import Entry, KeyValueStore

__all__ = ["Entry", "KeyValueStore", "default_store"]


@lru_cache(maxsize=1)
def default_store() -> KeyValueStore:
    """Return the process-wide store configured from config.yaml and the environment (cached)."""
    return KeyValueStore(load_config())
