"""
SQLite-backed persistent key-value store.

Schema
------
cache : id TEXT PK, mod DATETIME (local time, refreshed on every write),
        data TEXT (JSON-encoded value)

Every public method opens its own connection, runs a single statement and
closes the connection again, so no session outlives a call. The table is
created lazily on the first operation, and again if the file disappears.

Usage
-----
    store = KeyValueStore(StoreConfig(db_path="storage.db"))
    store.set("foo", {"a": 1})
    store.get("foo")            # {"a": 1}
    store.prune("-7 days")      # drop entries untouched for a week
"""
from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, Optional, Union

from pydantic import BaseModel

from ..core.config import StoreConfig
from ..core.errors import StorageError
from ..utils.logging import get_logger
from .age import cutoff_for, format_timestamp, parse_timestamp
from .codec import JsonValue, decode_value, encode_value

logger = get_logger(__name__)

_SCHEMA = """
    CREATE TABLE IF NOT EXISTS cache (
        id    TEXT NOT NULL UNIQUE,
        mod   DATETIME DEFAULT (DATETIME('now', 'localtime')),
        data  TEXT,
        PRIMARY KEY(id)
    )
"""


class Entry(BaseModel):
    """One stored key/value/timestamp triple."""

    id: str
    mod: datetime
    data: Any

    model_config = {"frozen": True}


def _check_key(key: str) -> None:
    if not isinstance(key, str):
        raise TypeError(f"key must be a str, got {type(key).__name__!r}.")


class KeyValueStore:
    """Persistent string-keyed JSON value store on a single SQLite file."""

    def __init__(
        self,
        config: Optional[StoreConfig] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """
        Parameters
        ----------
        config : StoreConfig, optional
            File path, encryption key and connection options. Defaults to
            ``StoreConfig()`` (``storage.db`` in the working directory).
        clock : callable, optional
            Returns the current local time for ``mod`` stamps and prune
            cutoffs. Defaults to ``datetime.now``.
        """
        self.config = config or StoreConfig()
        self.db_path = Path(self.config.db_path)
        self._clock = clock or datetime.now
        self._schema_ready = False
        self._cipher_checked = False

    # ── connections ───────────────────────────────────────────────────────────

    def _configure(self, conn: sqlite3.Connection) -> None:
        """Apply per-connection pragmas. The key pragma must run first."""
        key = self.config.encryption_key.get_secret_value()
        if key:
            quoted = key.replace("'", "''")
            conn.execute(f"PRAGMA key = '{quoted}'")
            if not self._cipher_checked:
                self._cipher_checked = True
                if conn.execute("PRAGMA cipher_version").fetchone() is None:
                    logger.warning(
                        "An encryption key is configured but the linked SQLite has no "
                        "SQLCipher support; %s is stored unencrypted.",
                        self.db_path,
                    )
        if self.config.wal:
            conn.execute("PRAGMA journal_mode=WAL")

    @contextmanager
    def _open(self) -> Iterator[sqlite3.Connection]:
        """Open a connection, run the body in one transaction, always close."""
        conn = None
        try:
            conn = sqlite3.connect(str(self.db_path), timeout=self.config.timeout)
            conn.row_factory = sqlite3.Row
            self._configure(conn)
            with conn:
                yield conn
        except (sqlite3.Error, UnicodeEncodeError) as exc:
            # UnicodeEncodeError: a bound str (e.g. a key with a lone surrogate) is not valid UTF-8
            logger.error("SQLite error on %s: %s", self.db_path, exc)
            raise StorageError(str(exc)) from exc
        finally:
            if conn is not None:
                conn.close()

    def _init_schema(self) -> None:
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"Cannot create directory for {self.db_path}: {exc}") from exc
        with self._open() as conn:
            conn.execute(_SCHEMA)
        self._schema_ready = True
        logger.info("Key-value store ready at %s", self.db_path)

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        # re-provision if the file was removed behind our back
        if not self._schema_ready or not self.db_path.exists():
            self._init_schema()
        with self._open() as conn:
            yield conn

    # ── public API ────────────────────────────────────────────────────────────

    def get(self, key: str) -> JsonValue:
        """
        Return the value stored under *key*.

        An absent key returns an empty dict rather than raising, so a missing
        entry and an entry holding ``{}`` look the same here.
        """
        _check_key(key)
        with self._connect() as conn:
            row = conn.execute("SELECT data FROM cache WHERE id=?", (key,)).fetchone()
        if row is None:
            logger.debug("get %r: not found", key)
            return {}
        return decode_value(row["data"])

    def get_all(self) -> Dict[str, JsonValue]:
        """Return every entry as ``{id: value}``. Order is not guaranteed."""
        with self._connect() as conn:
            rows = conn.execute("SELECT id, data FROM cache").fetchall()
        return {r["id"]: decode_value(r["data"]) for r in rows}

    def get_entry(self, key: str) -> Optional[Entry]:
        """Return the full ``Entry`` for *key* including its ``mod`` time, or ``None``."""
        _check_key(key)
        with self._connect() as conn:
            row = conn.execute(
                "SELECT id, mod, data FROM cache WHERE id=?", (key,)
            ).fetchone()
        if row is None:
            return None
        return Entry(
            id=row["id"],
            mod=parse_timestamp(row["mod"]),
            data=decode_value(row["data"]),
        )

    def set(self, key: str, value: JsonValue) -> bool:
        """
        Insert or replace the value for *key* and stamp ``mod`` with now.

        Raises
        ------
        SerializationError
            If *value* cannot be encoded as JSON. Nothing is written.
        StorageError
            If the write fails.
        """
        _check_key(key)
        data = encode_value(value)
        now = format_timestamp(self._clock())
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO cache (id, mod, data) VALUES (?, ?, ?) "
                "ON CONFLICT(id) DO UPDATE SET data=excluded.data, mod=excluded.mod",
                (key, now, data),
            )
        logger.debug("set %r at %s", key, now)
        return True

    def delete(self, key: str) -> bool:
        """Delete *key*. Deleting a missing key succeeds as a no-op."""
        _check_key(key)
        with self._connect() as conn:
            conn.execute("DELETE FROM cache WHERE id=?", (key,))
        logger.debug("delete %r", key)
        return True

    def count(self) -> int:
        """Return the number of stored entries."""
        with self._connect() as conn:
            row = conn.execute("SELECT COUNT(*) AS cnt FROM cache").fetchone()
        return int(row["cnt"])

    def prune(self, age: Union[str, timedelta]) -> bool:
        """
        Delete every entry whose ``mod`` is at or before ``now + age``.

        Parameters
        ----------
        age : str | timedelta
            A date modifier such as ``"-7 days"`` or ``"-12 hours"`` (see
            ``kvstorage.storage.age``), or a ``timedelta`` giving the
            maximum age to keep.

        Raises
        ------
        InvalidAgeError
            If *age* cannot be parsed. The database is not touched.
        StorageError
            If the delete fails.
        """
        cutoff = format_timestamp(cutoff_for(age, self._clock()))
        with self._connect() as conn:
            removed = conn.execute("DELETE FROM cache WHERE mod <= ?", (cutoff,)).rowcount
        logger.info("Pruned %d entries modified at or before %s", removed, cutoff)
        return True
