"""
Exception hierarchy for kvstorage.

Every failure raised by the store derives from ``KVStorageError`` so callers
can catch the whole family with one clause, or a specific kind when they need
to tell an engine failure apart from a bad value.
"""

from __future__ import annotations


class KVStorageError(Exception):
    """Base exception for all kvstorage failures."""


class StorageError(KVStorageError):
    """The backing SQLite engine failed to prepare, bind or execute a statement."""


class SerializationError(KVStorageError, ValueError):
    """A value could not be encoded to JSON, or stored text could not be decoded."""


class InvalidAgeError(KVStorageError, ValueError):
    """A prune age modifier could not be parsed."""


class ConfigError(KVStorageError):
    """Invalid configuration file or environment values."""
