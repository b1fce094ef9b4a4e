"""Auth service — account lifecycle plus the signed-in identity.

Coordinates the account repository (relational store) with the session store
(separate file), so that neither one has to know about the other.
"""

from __future__ import annotations

import logging
from typing import Optional

from memo_store.db.account_repo import AccountRepository
from memo_store.session import Identity, SessionStore

logger = logging.getLogger(__name__)


class AuthService:
    """
    Facade for sign-up, sign-in, sign-out and account deletion.

    Dependencies are injected so the service can be tested against a
    temporary database and session file.
    """

    def __init__(self, accounts: AccountRepository, session: SessionStore):
        self._accounts = accounts
        self._session = session

    def sign_up(self, username: str, password: str) -> int:
        return self._accounts.create_account(username, password)

    def sign_in(self, username: str, password: str) -> Identity:
        account_id = self._accounts.authenticate(username, password)
        identity = Identity(account_id=account_id, username=username.strip())
        self._session.set_identity(identity.account_id, identity.username)
        logger.info(f"Signed in account {account_id}")
        return identity

    def sign_out(self) -> None:
        self._session.clear()

    def current_identity(self) -> Optional[Identity]:
        return self._session.get_current_identity()

    def delete_account(self, account_id: int) -> None:
        """Cascade-delete the account, then forget it if it is the signed-in one."""
        self._accounts.delete_account(account_id)
        current = self._session.get_current_identity()
        if current is not None and current.account_id == account_id:
            self._session.clear()
