"""Repository for the ``accounts`` table — sign-up, credential check, cascading delete."""

from __future__ import annotations

import hmac
import logging
from typing import Optional

from memo_store.db.database import Database
from memo_store.errors import (
    DuplicateUsername,
    IntegrityViolation,
    InvalidCredential,
    NotFound,
    ValidationError,
)
from memo_store.models.account import Account
from memo_store.security import CredentialDigest, sha256_digest

logger = logging.getLogger(__name__)

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 20
PASSWORD_MIN_LENGTH = 6


class AccountRepository:
    """Single-Responsibility repository for account persistence."""

    def __init__(self, db: Database, digest: CredentialDigest = sha256_digest):
        self._db = db
        self._digest = digest

    # -- Create ----------------------------------------------------------------

    def create_account(self, username: str, password: str) -> int:
        """Insert a new account and return its id.

        The pre-insert duplicate check only saves a round trip; the UNIQUE
        constraint decides, and losing that race also raises ``DuplicateUsername``.
        """
        name = (username or "").strip()
        if not USERNAME_MIN_LENGTH <= len(name) <= USERNAME_MAX_LENGTH:
            raise ValidationError(
                "username",
                f"must be {USERNAME_MIN_LENGTH}-{USERNAME_MAX_LENGTH} characters after trimming",
            )
        if password is None or len(password) < PASSWORD_MIN_LENGTH:
            raise ValidationError("password", f"must be at least {PASSWORD_MIN_LENGTH} characters")
        if self.get_by_username(name) is not None:
            raise DuplicateUsername(name)

        account = Account(username=name, credential_hash=self._digest(password))
        try:
            with self._db.transaction() as conn:
                cursor = conn.execute(
                    """INSERT INTO accounts (username, credential_hash, created_at)
                       VALUES (?, ?, ?)""",
                    (account.username, account.credential_hash, account.created_at),
                )
        except IntegrityViolation as exc:
            if "accounts.username" in exc.constraint:
                raise DuplicateUsername(name) from exc
            raise
        logger.info(f"Created account {cursor.lastrowid} ({name})")
        return cursor.lastrowid

    # -- Read ------------------------------------------------------------------

    def get_by_id(self, account_id: int) -> Optional[Account]:
        row = self._db.fetchone("SELECT * FROM accounts WHERE id = ?", (account_id,))
        return Account.from_row(row) if row else None

    def get_by_username(self, username: str) -> Optional[Account]:
        """Exact, case-sensitive match."""
        row = self._db.fetchone("SELECT * FROM accounts WHERE username = ?", (username,))
        return Account.from_row(row) if row else None

    def authenticate(self, username: str, password: str) -> int:
        """Return the account id if *password* matches.  Pure read."""
        name = (username or "").strip()
        account = self.get_by_username(name)
        if account is None:
            raise NotFound("account", name)
        if not hmac.compare_digest(
            self._digest(password or "").encode("utf-8"),
            account.credential_hash.encode("utf-8"),
        ):
            raise InvalidCredential(name)
        return account.id  # type: ignore[return-value]

    # -- Delete (cascading) ----------------------------------------------------

    def delete_account(self, account_id: int) -> None:
        """Remove the account with all of its notes and locations in one transaction.

        Notes go first because they may still point at locations being removed.
        """
        with self._db.transaction() as conn:
            notes = conn.execute("DELETE FROM notes WHERE account_id = ?", (account_id,)).rowcount
            locations = conn.execute(
                "DELETE FROM locations WHERE account_id = ?", (account_id,)
            ).rowcount
            cursor = conn.execute("DELETE FROM accounts WHERE id = ?", (account_id,))
            if cursor.rowcount == 0:
                raise NotFound("account", account_id)
        logger.info(
            f"Deleted account {account_id} with {notes} notes and {locations} locations"
        )
