"""Current-identity record, kept in a JSON file beside (not inside) the database.

Signing in or out only touches this file, never note or location data.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from memo_store.errors import StorageUnavailable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    account_id: int
    username: str


class SessionStore:
    """Durable key-value record holding at most one signed-in identity."""

    def __init__(self, path: Optional[Path | str] = None):
        from memo_store.config import get_session_path
        self.path = Path(path) if path is not None else get_session_path()

    def get_current_identity(self) -> Optional[Identity]:
        state = self._load()
        if not state:
            return None
        try:
            return Identity(account_id=int(state["account_id"]), username=str(state["username"]))
        except (KeyError, TypeError, ValueError):
            logger.warning(f"Ignoring malformed session record at {self.path}")
            return None

    def set_identity(self, account_id: int, username: str) -> None:
        self._save({
            "account_id": account_id,
            "username": username,
            "signed_in_at": datetime.now(tz=timezone.utc).isoformat(),
        })

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageUnavailable(f"Cannot clear session at {self.path}: {exc}") from exc

    # -- internal --------------------------------------------------------------

    def _load(self) -> Optional[dict[str, Any]]:
        if not self.path.exists():
            return None
        try:
            with self.path.open(encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError:
            logger.warning(f"Session file {self.path} is corrupt; treating as signed out")
            return None
        except OSError as exc:
            raise StorageUnavailable(f"Cannot read session at {self.path}: {exc}") from exc
        return data if isinstance(data, dict) else None

    def _save(self, state: dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # Write atomically via temp file
            temp_path = self.path.with_suffix(".tmp")
            with temp_path.open("w", encoding="utf-8") as f:
                json.dump(state, f, indent=2)
            temp_path.replace(self.path)
        except OSError as exc:
            raise StorageUnavailable(f"Cannot write session at {self.path}: {exc}") from exc
