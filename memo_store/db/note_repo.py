"""Repository for the ``notes`` table — writes only; reads live in ``note_query``."""

from __future__ import annotations

import logging
import sqlite3
from typing import Optional

from memo_store.db.database import Database
from memo_store.errors import NotFound, ValidationError
from memo_store.models.note import Note
from memo_store.models.timestamps import next_after

logger = logging.getLogger(__name__)


class NoteRepository:
    """Single-Responsibility repository for note persistence.

    ``updated_at`` is stamped here on every write and is strictly increasing
    across the table, so "most recently touched" ordering is meaningful.
    """

    def __init__(self, db: Database):
        self._db = db

    # -- Create ----------------------------------------------------------------

    def create_note(self, note: Note) -> int:
        with self._db.transaction() as conn:
            owner = conn.execute("SELECT 1 FROM accounts WHERE id = ?", (note.account_id,)).fetchone()
            if owner is None:
                raise NotFound("account", note.account_id)
            self._check_location(conn, note.location_id, note.account_id)
            stamp = self._stamp(conn)
            cursor = conn.execute(
                """INSERT INTO notes
                   (account_id, title, body, updated_at, location_id)
                   VALUES (?, ?, ?, ?, ?)""",
                (note.account_id, note.title, note.body, stamp, note.location_id),
            )
        logger.debug(f"Created note {cursor.lastrowid} for account {note.account_id}")
        return cursor.lastrowid

    # -- Update ----------------------------------------------------------------

    def update_note(self, note: Note) -> None:
        """Rewrite title, body and location of an existing note.

        The owning account is taken from the stored row; it never changes.
        """
        if note.id is None:
            raise NotFound("note", None)
        with self._db.transaction() as conn:
            row = conn.execute("SELECT account_id FROM notes WHERE id = ?", (note.id,)).fetchone()
            if row is None:
                raise NotFound("note", note.id)
            self._check_location(conn, note.location_id, row["account_id"])
            stamp = self._stamp(conn)
            conn.execute(
                """UPDATE notes SET title = ?, body = ?, location_id = ?, updated_at = ?
                   WHERE id = ?""",
                (note.title, note.body, note.location_id, stamp, note.id),
            )
        logger.debug(f"Updated note {note.id}")

    # -- Delete ----------------------------------------------------------------

    def delete_note(self, note_id: int) -> bool:
        with self._db.transaction() as conn:
            cursor = conn.execute("DELETE FROM notes WHERE id = ?", (note_id,))
        return cursor.rowcount > 0

    # -- internal --------------------------------------------------------------

    @staticmethod
    def _check_location(conn: sqlite3.Connection, location_id: Optional[int], account_id: int) -> None:
        if location_id is None:
            return
        owned = conn.execute(
            "SELECT 1 FROM locations WHERE id = ? AND account_id = ?",
            (location_id, account_id),
        ).fetchone()
        if owned is None:
            raise ValidationError("location_id", f"location {location_id} does not belong to account {account_id}")

    @staticmethod
    def _stamp(conn: sqlite3.Connection) -> str:
        latest = conn.execute("SELECT MAX(updated_at) FROM notes").fetchone()[0]
        return next_after(latest)
