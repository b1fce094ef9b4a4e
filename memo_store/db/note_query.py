"""Read model for notes: paginated Note LEFT JOIN Location projections.

Pagination is a plain ``LIMIT``/``OFFSET`` skip count, not a cursor.  A caller
loading page after page while notes are being written may see a row twice or
miss one when the ordering shifts between calls; tracking offsets is up to
the caller.
"""

from __future__ import annotations

from typing import Optional

from memo_store.db.database import Database
from memo_store.errors import ValidationError
from memo_store.models.note import NoteView

DEFAULT_PAGE_SIZE = 20

_PROJECTION = """
    SELECT
        n.id,
        n.account_id,
        n.title,
        n.body,
        n.updated_at,
        n.location_id,
        l.label AS location_label
    FROM notes n
    LEFT JOIN locations l ON n.location_id = l.id
"""


class NoteQuery:
    """Read-only queries over notes; never mutates."""

    def __init__(self, db: Database):
        self._db = db

    def list_notes(self, account_id: int, limit: int = DEFAULT_PAGE_SIZE, offset: int = 0) -> list[NoteView]:
        """Most recently updated first, at most *limit* rows after skipping *offset*."""
        if limit < 0:
            raise ValidationError("limit", "must not be negative")
        if offset < 0:
            raise ValidationError("offset", "must not be negative")
        rows = self._db.fetchall(
            _PROJECTION
            + """WHERE n.account_id = ?
                 ORDER BY n.updated_at DESC, n.id DESC
                 LIMIT ? OFFSET ?""",
            (account_id, limit, offset),
        )
        return [NoteView.from_row(r) for r in rows]

    def get_note(self, note_id: int) -> Optional[NoteView]:
        row = self._db.fetchone(_PROJECTION + "WHERE n.id = ? LIMIT 1", (note_id,))
        return NoteView.from_row(row) if row else None

    def count_notes_by_location(self, account_id: int) -> dict[int, int]:
        """Number of the account's notes pinned to each of its locations."""
        rows = self._db.fetchall(
            """SELECT location_id, COUNT(*) AS note_count
               FROM notes
               WHERE account_id = ? AND location_id IS NOT NULL
               GROUP BY location_id""",
            (account_id,),
        )
        return {r["location_id"]: r["note_count"] for r in rows}
