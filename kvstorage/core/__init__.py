"""Configuration and error types shared across kvstorage."""

from .config import StoreConfig, load_config
from .errors import (
    KVStorageError,
    StorageError,
    SerializationError,
    InvalidAgeError,
    ConfigError,
)

__all__ = [
    "StoreConfig",
    "load_config",
    # Errors
    "KVStorageError",
    "StorageError",
    "SerializationError",
    "InvalidAgeError",
    "ConfigError",
]
