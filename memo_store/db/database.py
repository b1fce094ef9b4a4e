"""Store handle: one SQLite connection with ACID transaction support."""

from __future__ import annotations

import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator, Optional

from memo_store.db.schema import column_names, migrate, read_version
from memo_store.errors import (
    FatalStoreError,
    IntegrityViolation,
    StorageUnavailable,
)

logger = logging.getLogger(__name__)

MEMORY = ":memory:"


class Database:
    """
    SQLite database wrapper with explicit ACID transaction support.

    Implements the Unit-of-Work pattern: every mutation goes through
    ``transaction()``, which commits on success and rolls back on failure.
    The connection is shared between threads; a re-entrant lock is held for
    the whole of each transaction and each read, so readers never see a
    half-applied multi-statement write.
    """

    def __init__(self, path: Optional[Path | str] = None):
        from memo_store.config import get_db_path
        if path is None:
            self.path: Path = get_db_path()
        elif isinstance(path, str):
            self.path = Path(path)
        else:
            self.path = path
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = threading.RLock()

    @property
    def in_memory(self) -> bool:
        return str(self.path) == MEMORY

    # -- connection lifecycle --------------------------------------------------

    def _ensure_dir(self) -> None:
        if not self.in_memory:
            self.path.parent.mkdir(parents=True, exist_ok=True)

    def connection(self) -> sqlite3.Connection:
        if self._conn is None:
            try:
                self._ensure_dir()
                self._conn = sqlite3.connect(str(self.path), check_same_thread=False)
                self._conn.row_factory = sqlite3.Row
                self._conn.execute("PRAGMA foreign_keys = ON")
                self._conn.execute("PRAGMA journal_mode = WAL")
            except (OSError, sqlite3.Error) as exc:
                if self._conn is not None:
                    self._conn.close()
                self._conn = None
                raise StorageUnavailable(f"Cannot open store at {self.path}: {exc}") from exc
        return self._conn

    def close(self) -> None:
        with self._lock:
            if self._conn:
                self._conn.close()
                self._conn = None

    def init(self) -> int:
        """Create or migrate the schema (idempotent); returns the schema version."""
        with self._lock:
            try:
                version = migrate(self.connection())
            except sqlite3.DatabaseError as exc:
                raise StorageUnavailable(f"Cannot read store at {self.path}: {exc}") from exc
        logger.info(f"Store ready at {self.path} (schema version {version})")
        return version

    # -- transaction helpers ---------------------------------------------------

    @contextmanager
    def transaction(self) -> Generator[sqlite3.Connection, None, None]:
        """ACID transaction: commits on success, rolls back on exception.

        Nested calls join the outer transaction.
        """
        with self._lock:
            conn = self.connection()
            if conn.in_transaction:
                yield conn
                return
            try:
                conn.execute("BEGIN IMMEDIATE")
                yield conn
                conn.commit()
            except sqlite3.IntegrityError as exc:
                conn.rollback()
                raise IntegrityViolation(str(exc)) from exc
            except sqlite3.DatabaseError as exc:
                if conn.in_transaction:
                    conn.rollback()
                raise StorageUnavailable(str(exc)) from exc
            except BaseException:
                conn.rollback()
                raise

    @contextmanager
    def _reading(self) -> Generator[sqlite3.Connection, None, None]:
        with self._lock:
            try:
                yield self.connection()
            except sqlite3.DatabaseError as exc:
                raise StorageUnavailable(str(exc)) from exc

    # -- low-level query helpers -----------------------------------------------

    def fetchone(self, sql: str, params: tuple = ()) -> Optional[dict[str, Any]]:
        with self._reading() as conn:
            row = conn.execute(sql, params).fetchone()
        return dict(row) if row else None

    def fetchall(self, sql: str, params: tuple = ()) -> list[dict[str, Any]]:
        with self._reading() as conn:
            rows = conn.execute(sql, params).fetchall()
        return [dict(r) for r in rows]

    # -- introspection ---------------------------------------------------------

    def schema_version(self) -> int:
        with self._reading() as conn:
            return read_version(conn)

    def table_columns(self, table: str) -> set[str]:
        with self._reading() as conn:
            return column_names(conn, table)


# -- process-wide handles ------------------------------------------------------

_stores: dict[str, Database] = {}


def _store_key(path: Path | str) -> str:
    if str(path) == MEMORY:
        return MEMORY
    return str(Path(path).expanduser().resolve())


def open_store(path: Optional[Path | str] = None) -> Database:
    """Return the handle for *path*, opening and migrating it on first use.

    Later calls with the same path return the same handle.  Must be called
    once during startup, not raced from several threads.  Raises
    ``FatalStoreError`` if the schema cannot be brought up to date.
    """
    if path is None:
        from memo_store.config import get_db_path
        path = get_db_path()
    key = _store_key(path)
    db = _stores.get(key)
    if db is not None:
        return db

    db = Database(path)
    try:
        db.init()
    except (FatalStoreError, StorageUnavailable):
        db.close()
        raise
    _stores[key] = db
    return db


def close_store(path: Path | str) -> None:
    db = _stores.pop(_store_key(path), None)
    if db is not None:
        db.close()


def reset_stores() -> None:
    """Close and discard every cached handle (useful in tests)."""
    for db in list(_stores.values()):
        db.close()
    _stores.clear()
