"""
Default storage locations.
Library calls always take an explicit path; these helpers only resolve the
defaults an application uses at startup.  ``MEMO_STORE_DATA_DIR`` may be set in
the environment or in a ``.env`` file at the working directory.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


load_dotenv(Path.cwd() / ".env")

DB_FILENAME = "memo_app.db"
SESSION_FILENAME = "session.json"


def _get(key: str, default: Optional[str] = None) -> Optional[str]:
    val = os.getenv(key)
    return val if val else default


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class StoreConfig:
    data_dir: Path

    @property
    def db_path(self) -> Path:
        return self.data_dir / DB_FILENAME

    @property
    def session_path(self) -> Path:
        return self.data_dir / SESSION_FILENAME


def get_store_config() -> StoreConfig:
    default_dir = str(Path.home() / ".memo_store")
    return StoreConfig(data_dir=Path(_get("MEMO_STORE_DATA_DIR", default_dir)).expanduser())  # type: ignore[arg-type]


def get_db_path() -> Path:
    return get_store_config().db_path


def get_session_path() -> Path:
    return get_store_config().session_path
