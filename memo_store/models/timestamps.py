"""UTC timestamp strings shared by every table.

Stored as ``YYYY-MM-DDTHH:MM:SS.ffffffZ`` so that lexicographic order is time order.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def utc_now() -> str:
    return datetime.now(timezone.utc).strftime(TIMESTAMP_FORMAT)


def parse_timestamp(raw: str) -> Optional[datetime]:
    """Parse a stored stamp; ``None`` if it is not in a recognisable ISO form."""
    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except (ValueError, AttributeError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def next_after(latest: Optional[str]) -> str:
    """Current time, or one microsecond past *latest* if the clock has not moved beyond it."""
    now = datetime.now(timezone.utc)
    previous = parse_timestamp(latest) if latest else None
    if previous is not None and now <= previous:
        now = previous + timedelta(microseconds=1)
    return now.strftime(TIMESTAMP_FORMAT)
