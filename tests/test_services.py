"""Tests for the session store, the auth service and default path configuration."""

from __future__ import annotations

import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from memo_store.config import get_db_path, get_session_path
from memo_store.db.account_repo import AccountRepository
from memo_store.db.database import Database
from memo_store.db.location_repo import LocationRepository
from memo_store.db.note_query import NoteQuery
from memo_store.db.note_repo import NoteRepository
from memo_store.errors import InvalidCredential, NotFound, StorageUnavailable
from memo_store.models.note import Note
from memo_store.services.auth_service import AuthService
from memo_store.session import Identity, SessionStore


class TestSessionStore(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.path = Path(self.tmpdir.name) / "state" / "session.json"
        self.store = SessionStore(self.path)

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_empty(self):
        self.assertIsNone(self.store.get_current_identity())

    def test_set_and_get(self):
        self.store.set_identity(7, "alice")
        self.assertEqual(self.store.get_current_identity(), Identity(7, "alice"))

    def test_survives_new_instance(self):
        self.store.set_identity(7, "alice")
        self.assertEqual(SessionStore(self.path).get_current_identity(), Identity(7, "alice"))

    def test_holds_one_identity(self):
        self.store.set_identity(1, "alice")
        self.store.set_identity(2, "bob")
        self.assertEqual(self.store.get_current_identity(), Identity(2, "bob"))

    def test_clear(self):
        self.store.set_identity(7, "alice")
        self.store.clear()
        self.assertIsNone(self.store.get_current_identity())
        self.store.clear()

    def test_corrupt_file_reads_as_signed_out(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("{not json", encoding="utf-8")
        with self.assertLogs("memo_store.session", level="WARNING"):
            self.assertIsNone(self.store.get_current_identity())

    def test_unreadable_location_is_unavailable(self):
        self.path.mkdir(parents=True)
        with self.assertRaises(StorageUnavailable):
            self.store.get_current_identity()
        with self.assertRaises(StorageUnavailable):
            self.store.set_identity(7, "alice")

    def test_file_format(self):
        self.store.set_identity(3, "carol")
        data = json.loads(self.path.read_text(encoding="utf-8"))
        self.assertEqual(data["account_id"], 3)
        self.assertEqual(data["username"], "carol")
        self.assertIn("signed_in_at", data)


class TestAuthService(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        root = Path(self.tmpdir.name)
        self.db = Database(root / "memo_app.db")
        self.db.init()
        self.session = SessionStore(root / "session.json")
        self.auth = AuthService(AccountRepository(self.db), self.session)

    def tearDown(self):
        self.db.close()
        self.tmpdir.cleanup()

    def test_sign_up_does_not_sign_in(self):
        self.auth.sign_up("alice", "secret1")
        self.assertIsNone(self.auth.current_identity())

    def test_sign_in_records_identity(self):
        account_id = self.auth.sign_up("alice", "secret1")
        identity = self.auth.sign_in(" alice ", "secret1")
        self.assertEqual(identity, Identity(account_id, "alice"))
        self.assertEqual(self.auth.current_identity(), identity)

    def test_failed_sign_in_leaves_session(self):
        self.auth.sign_up("alice", "secret1")
        with self.assertRaises(InvalidCredential):
            self.auth.sign_in("alice", "wrong-pw")
        with self.assertRaises(NotFound):
            self.auth.sign_in("nobody", "secret1")
        self.assertIsNone(self.auth.current_identity())

    def test_sign_out_keeps_data(self):
        account_id = self.auth.sign_up("alice", "secret1")
        NoteRepository(self.db).create_note(Note(account_id=account_id, title="stays"))
        self.auth.sign_in("alice", "secret1")
        self.auth.sign_out()
        self.assertIsNone(self.auth.current_identity())
        self.assertEqual(len(NoteQuery(self.db).list_notes(account_id)), 1)

    def test_delete_account_clears_identity_and_data(self):
        account_id = self.auth.sign_up("alice", "secret1")
        loc_id = LocationRepository(self.db).create_location(account_id, 3.139, 101.687, "KLCC")
        NoteRepository(self.db).create_note(Note(account_id=account_id, title="x", location_id=loc_id))
        self.auth.sign_in("alice", "secret1")

        self.auth.delete_account(account_id)

        self.assertIsNone(self.auth.current_identity())
        self.assertEqual(NoteQuery(self.db).list_notes(account_id), [])
        self.assertEqual(LocationRepository(self.db).list_locations(account_id), [])

    def test_delete_other_account_keeps_identity(self):
        alice = self.auth.sign_up("alice", "secret1")
        bob = self.auth.sign_up("bob", "secret1")
        self.auth.sign_in("alice", "secret1")
        self.auth.delete_account(bob)
        self.assertEqual(self.auth.current_identity(), Identity(alice, "alice"))

    def test_delete_missing_account(self):
        with self.assertRaises(NotFound):
            self.auth.delete_account(99)


class TestConfig(unittest.TestCase):
    def test_paths_follow_data_dir(self):
        with mock.patch.dict(os.environ, {"MEMO_STORE_DATA_DIR": "/var/lib/memo"}):
            self.assertEqual(get_db_path(), Path("/var/lib/memo/memo_app.db"))
            self.assertEqual(get_session_path(), Path("/var/lib/memo/session.json"))

    def test_default_data_dir(self):
        env = {k: v for k, v in os.environ.items() if k != "MEMO_STORE_DATA_DIR"}
        with mock.patch.dict(os.environ, env, clear=True):
            self.assertEqual(get_db_path().parent, Path.home() / ".memo_store")


if __name__ == "__main__":
    unittest.main()
