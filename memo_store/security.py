"""Credential digest collaborator.

A digest is a pure function from the password to a fixed-length string.  Any
replacement must keep producing values comparable to the hashes already stored;
switching algorithms invalidates every existing account's credential.
"""

from __future__ import annotations

import hashlib
from typing import Callable

CredentialDigest = Callable[[str], str]


def sha256_digest(password: str) -> str:
    """Unsalted SHA-256 hex digest of the UTF-8 encoded password."""
    return hashlib.sha256(password.encode("utf-8")).hexdigest()
