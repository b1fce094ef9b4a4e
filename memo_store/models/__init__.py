"""Domain models for accounts, saved locations and notes."""

from memo_store.models.account import Account
from memo_store.models.location import Location
from memo_store.models.note import Note, NoteView

__all__ = ["Account", "Location", "Note", "NoteView"]
