"""Note domain model and its denormalized read view."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class Note:
    """A note owned by one account, optionally pinned to one of its locations.

    ``updated_at`` is always stamped by the repository on write; whatever the
    caller puts here is ignored by ``create_note`` / ``update_note``.
    """

    account_id: int
    title: str
    body: Optional[str] = None
    location_id: Optional[int] = None
    id: Optional[int] = None
    updated_at: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "account_id": self.account_id,
            "title": self.title,
            "body": self.body,
            "updated_at": self.updated_at,
            "location_id": self.location_id,
        }

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Note":
        return cls(
            id=row["id"],
            account_id=row["account_id"],
            title=row["title"],
            body=row.get("body"),
            updated_at=row.get("updated_at", ""),
            location_id=row.get("location_id"),
        )


@dataclass(frozen=True)
class NoteView:
    """Note fields joined with the label of the location it is pinned to."""

    id: int
    account_id: int
    title: str
    body: Optional[str]
    updated_at: str
    location_id: Optional[int] = None
    location_label: Optional[str] = None

    def to_note(self) -> Note:
        return Note(
            id=self.id,
            account_id=self.account_id,
            title=self.title,
            body=self.body,
            location_id=self.location_id,
            updated_at=self.updated_at,
        )

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "NoteView":
        return cls(
            id=row["id"],
            account_id=row["account_id"],
            title=row["title"],
            body=row.get("body"),
            updated_at=row["updated_at"],
            location_id=row.get("location_id"),
            location_label=row.get("location_label"),
        )
