"""Pytest configuration and shared fixtures."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from memo_store.db.database import reset_stores


@pytest.fixture(autouse=True)
def _discard_cached_stores():
    """Every test starts without process-wide store handles."""
    yield
    reset_stores()
