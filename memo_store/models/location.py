"""Location domain model — a map pin saved by an account."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from memo_store.models.timestamps import utc_now


@dataclass
class Location:
    """A saved map point.

    Coordinates are stored as given; range checking belongs to the map picker.
    """

    account_id: int
    latitude: float
    longitude: float
    label: Optional[str] = None
    id: Optional[int] = None
    created_at: str = field(default_factory=utc_now)

    @property
    def display_label(self) -> str:
        """The label, or a coordinate string when the label is blank."""
        trimmed = (self.label or "").strip()
        if trimmed:
            return trimmed
        return f"Lat {self.latitude:.4f}, Lng {self.longitude:.4f}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "account_id": self.account_id,
            "label": self.label,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "created_at": self.created_at,
        }

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Location":
        return cls(
            id=row["id"],
            account_id=row["account_id"],
            label=row.get("label"),
            latitude=float(row["latitude"]),
            longitude=float(row["longitude"]),
            created_at=row.get("created_at", ""),
        )
