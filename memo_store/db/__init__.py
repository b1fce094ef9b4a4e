"""Database layer — SQLite with ACID transactions and repository pattern."""

from memo_store.db.account_repo import AccountRepository
from memo_store.db.database import Database, close_store, open_store, reset_stores
from memo_store.db.location_repo import LocationRepository
from memo_store.db.note_query import NoteQuery
from memo_store.db.note_repo import NoteRepository
from memo_store.db.schema import SCHEMA_VERSION

__all__ = [
    "Database", "open_store", "close_store", "reset_stores", "SCHEMA_VERSION",
    "AccountRepository", "LocationRepository", "NoteRepository", "NoteQuery",
]
