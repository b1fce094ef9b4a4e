"""Repository for the ``locations`` table — owner-scoped pins with nullifying delete."""

from __future__ import annotations

import logging
from typing import Optional

from memo_store.db.database import Database
from memo_store.errors import NotFound
from memo_store.models.location import Location

logger = logging.getLogger(__name__)


class LocationRepository:
    """Single-Responsibility repository for saved-location persistence."""

    def __init__(self, db: Database):
        self._db = db

    # -- Create ----------------------------------------------------------------

    def create_location(
        self,
        account_id: int,
        latitude: float,
        longitude: float,
        label: Optional[str] = None,
    ) -> int:
        label = label.strip() if label else None
        location = Location(
            account_id=account_id,
            latitude=latitude,
            longitude=longitude,
            label=label or None,
        )
        with self._db.transaction() as conn:
            owner = conn.execute("SELECT 1 FROM accounts WHERE id = ?", (account_id,)).fetchone()
            if owner is None:
                raise NotFound("account", account_id)
            cursor = conn.execute(
                """INSERT INTO locations
                   (account_id, label, latitude, longitude, created_at)
                   VALUES (?, ?, ?, ?, ?)""",
                (
                    location.account_id, location.label,
                    location.latitude, location.longitude, location.created_at,
                ),
            )
        logger.debug(f"Created location {cursor.lastrowid} for account {account_id}")
        return cursor.lastrowid

    # -- Read ------------------------------------------------------------------

    def get_location(self, location_id: int, account_id: Optional[int] = None) -> Optional[Location]:
        if account_id is None:
            row = self._db.fetchone("SELECT * FROM locations WHERE id = ?", (location_id,))
        else:
            row = self._db.fetchone(
                "SELECT * FROM locations WHERE id = ? AND account_id = ?",
                (location_id, account_id),
            )
        return Location.from_row(row) if row else None

    def list_locations(self, account_id: int) -> list[Location]:
        """Newest first; ties on ``created_at`` fall back to the higher id."""
        rows = self._db.fetchall(
            """SELECT * FROM locations WHERE account_id = ?
               ORDER BY created_at DESC, id DESC""",
            (account_id,),
        )
        return [Location.from_row(r) for r in rows]

    # -- Delete (nullifying) ---------------------------------------------------

    def delete_location(self, location_id: int, account_id: int) -> None:
        """Delete a location owned by *account_id*; notes pinned to it lose the pin."""
        with self._db.transaction() as conn:
            owned = conn.execute(
                "SELECT 1 FROM locations WHERE id = ? AND account_id = ?",
                (location_id, account_id),
            ).fetchone()
            if owned is None:
                raise NotFound("location", location_id)
            unpinned = conn.execute(
                "UPDATE notes SET location_id = NULL WHERE location_id = ?",
                (location_id,),
            ).rowcount
            conn.execute(
                "DELETE FROM locations WHERE id = ? AND account_id = ?",
                (location_id, account_id),
            )
        logger.debug(f"Deleted location {location_id}; unpinned {unpinned} notes")
