"""
Configuration for the key-value store.

Values are resolved in this order (later wins):

1. ``StoreConfig`` field defaults
2. the ``storage:`` section of ``config.yaml`` in the project root
3. environment variables (a ``.env`` file is loaded first):

    KVSTORAGE_FILE            path of the SQLite file      (default storage.db)
    KVSTORAGE_ENCRYPTION_KEY  SQLCipher key, empty = plain (default "")
    KVSTORAGE_WAL             enable WAL journaling        (default false)
    KVSTORAGE_TIMEOUT         driver busy timeout seconds  (default 0, fail at once)
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, SecretStr, ValidationError

from .errors import ConfigError

_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config.yaml"

_ENV_FIELDS = {
    "KVSTORAGE_FILE": "db_path",
    "KVSTORAGE_ENCRYPTION_KEY": "encryption_key",
    "KVSTORAGE_WAL": "wal",
    "KVSTORAGE_TIMEOUT": "timeout",
}


class StoreConfig(BaseModel):
    """Injected configuration for one ``KeyValueStore`` instance."""

    db_path: Path = Field(Path("storage.db"), description="SQLite file backing the store")
    encryption_key: SecretStr = Field(
        SecretStr(""), description="SQLCipher key material; empty disables encryption"
    )
    # WAL adds -wal/-shm files beside the database
    wal: bool = Field(False, description="Switch connections to WAL journaling")
    timeout: float = Field(0.0, ge=0, description="sqlite3 busy timeout in seconds")

    model_config = {"frozen": True}

    @property
    def encrypted(self) -> bool:
        return bool(self.encryption_key.get_secret_value())


def _load_yaml(config_path: Path) -> Dict[str, Any]:
    """Return the ``storage:`` section of *config_path* (empty dict if missing)."""
    if not config_path.exists():
        return {}
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            document = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Could not parse {config_path}: {exc}") from exc
    if not isinstance(document, dict):
        raise ConfigError(f"{config_path} must contain a mapping at the top level.")
    section = document.get("storage") or {}
    if not isinstance(section, dict):
        raise ConfigError(f"'storage' in {config_path} must be a mapping.")
    return section


def load_config(config_path: Optional[Path] = None) -> StoreConfig:
    """
    Build a ``StoreConfig`` from ``config.yaml`` and the environment.

    Parameters
    ----------
    config_path : Path, optional
        YAML file to read. Defaults to ``config.yaml`` in the project root.

    Raises
    ------
    ConfigError
        If the YAML is malformed or a value fails validation.
    """
    load_dotenv()

    values = _load_yaml(Path(config_path) if config_path else _CONFIG_PATH)
    for env_name, field_name in _ENV_FIELDS.items():
        raw = os.getenv(env_name)
        if raw is not None:
            values[field_name] = raw

    try:
        return StoreConfig(**values)
    except ValidationError as exc:
        raise ConfigError(f"Invalid storage configuration: {exc}") from exc
