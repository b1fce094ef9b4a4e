"""Schema DDL and the ordered, structurally idempotent migration steps.

Version history (stored in ``PRAGMA user_version``):

1. accounts + notes
2. locations table
3. notes.location_id column

Foreign keys carry no ``ON DELETE`` actions: cascading and nullifying deletes
are done by the repositories inside one transaction.
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from typing import Callable

from memo_store.errors import FatalStoreError, MigrationError

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 3

# ==========================================================================
# Accounts
# ==========================================================================
ACCOUNTS_DDL = """
CREATE TABLE accounts (
    id              INTEGER PRIMARY KEY AUTOINCREMENT,
    username        TEXT NOT NULL UNIQUE,
    credential_hash TEXT NOT NULL,
    created_at      TEXT NOT NULL
)
"""

# ==========================================================================
# Locations (v2)
# ==========================================================================
LOCATIONS_DDL = """
CREATE TABLE locations (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    account_id  INTEGER NOT NULL REFERENCES accounts(id),
    label       TEXT,
    latitude    REAL NOT NULL,
    longitude   REAL NOT NULL,
    created_at  TEXT NOT NULL
)
"""

LOCATIONS_INDEX_DDL = (
    "CREATE INDEX IF NOT EXISTS idx_locations_account_created "
    "ON locations(account_id, created_at)"
)

# ==========================================================================
# Notes (location_id added in v3)
# ==========================================================================
NOTES_DDL = """
CREATE TABLE notes (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    account_id  INTEGER NOT NULL REFERENCES accounts(id),
    title       TEXT NOT NULL,
    body        TEXT,
    updated_at  TEXT NOT NULL,
    location_id INTEGER REFERENCES locations(id)
)
"""

NOTES_INDEX_DDL = (
    "CREATE INDEX IF NOT EXISTS idx_notes_account_updated "
    "ON notes(account_id, updated_at)"
)

NOTES_LOCATION_COLUMN_DDL = (
    "ALTER TABLE notes ADD COLUMN location_id INTEGER REFERENCES locations(id)"
)

TABLES = (
    ("accounts", ACCOUNTS_DDL),
    ("locations", LOCATIONS_DDL),
    ("notes", NOTES_DDL),
)


# -- introspection -------------------------------------------------------------

def read_version(conn: sqlite3.Connection) -> int:
    return conn.execute("PRAGMA user_version").fetchone()[0]


def table_exists(conn: sqlite3.Connection, name: str) -> bool:
    row = conn.execute(
        "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?", (name,)
    ).fetchone()
    return row is not None


def column_names(conn: sqlite3.Connection, table: str) -> set[str]:
    return {row[1] for row in conn.execute(f"PRAGMA table_info({table})").fetchall()}


# -- migration steps -----------------------------------------------------------

@dataclass(frozen=True)
class MigrationStep:
    version: int
    name: str
    apply: Callable[[sqlite3.Connection], None]


def _add_locations_table(conn: sqlite3.Connection) -> None:
    if not table_exists(conn, "locations"):
        conn.execute(LOCATIONS_DDL)
    else:
        logger.info("locations table already present; skipping CREATE TABLE")
    conn.execute(LOCATIONS_INDEX_DDL)


def _add_note_location_column(conn: sqlite3.Connection) -> None:
    if "location_id" not in column_names(conn, "notes"):
        conn.execute(NOTES_LOCATION_COLUMN_DDL)
    else:
        logger.info("notes.location_id already present; skipping ALTER TABLE")
    conn.execute(NOTES_INDEX_DDL)


MIGRATIONS: tuple[MigrationStep, ...] = (
    MigrationStep(2, "add locations table", _add_locations_table),
    MigrationStep(3, "add notes.location_id column", _add_note_location_column),
)


# -- entry point ---------------------------------------------------------------

def _set_version(conn: sqlite3.Connection, version: int) -> None:
    # PRAGMA does not accept bound parameters
    conn.execute(f"PRAGMA user_version = {int(version)}")


def migrate(conn: sqlite3.Connection, steps: tuple[MigrationStep, ...] = MIGRATIONS) -> int:
    """Bring the schema on *conn* to ``SCHEMA_VERSION`` and return that version.

    A brand-new file gets the full schema in one pass.  An existing file runs the
    pending steps; all of them and the version bump share one transaction, so a
    failure leaves both structure and version as they were.
    """
    current = read_version(conn)
    if current > SCHEMA_VERSION:
        raise FatalStoreError(
            f"Store schema version {current} is newer than supported version {SCHEMA_VERSION}",
            {"version": current},
        )

    fresh = current == 0 and not table_exists(conn, "accounts")
    if not fresh and current == SCHEMA_VERSION:
        logger.debug(f"Schema already at version {current}")
        return current

    step_name = "create schema" if fresh else "begin"
    try:
        conn.execute("BEGIN IMMEDIATE")
        if fresh:
            logger.info(f"Creating schema version {SCHEMA_VERSION}")
            for table, ddl in TABLES:
                if not table_exists(conn, table):
                    conn.execute(ddl)
            # Leftover tables from an aborted first run still need columns and indexes
            for step in steps:
                step.apply(conn)
        else:
            # Files written before versioning existed have tables but version 0
            baseline = max(current, 1)
            for step in steps:
                if step.version <= baseline:
                    continue
                step_name = step.name
                logger.info(f"Applying migration {step.version}: {step.name}")
                step.apply(conn)
        _set_version(conn, SCHEMA_VERSION)
        conn.commit()
    except Exception as exc:
        conn.rollback()
        logger.error(f"Migration failed at step {step_name!r}: {exc}")
        raise MigrationError(step_name, str(exc)) from exc
    return SCHEMA_VERSION
