"""Account domain model — a local sign-in identity that owns notes and locations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from memo_store.models.timestamps import utc_now


@dataclass
class Account:
    """A user account.  Created once at sign-up and never updated."""

    username: str
    credential_hash: str
    id: Optional[int] = None
    created_at: str = field(default_factory=utc_now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "credential_hash": self.credential_hash,
            "created_at": self.created_at,
        }

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Account":
        return cls(
            id=row["id"],
            username=row["username"],
            credential_hash=row["credential_hash"],
            created_at=row.get("created_at", ""),
        )
