"""Exception hierarchy for the persistence layer.

Every error carries a developer-facing ``message`` and a ``context`` dict with
the structured fields (entity, id, field, ...).  Mapping these to user-facing
text is the caller's job.
"""

from __future__ import annotations

from typing import Any, Optional


class MemoStoreError(Exception):
    """Root of all persistence-layer errors."""

    def __init__(self, message: str = "Store error", context: Optional[dict[str, Any]] = None):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(MemoStoreError):
    """Caller input is malformed; recoverable by re-prompting."""

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid {field}: {reason}", {"field": field, "reason": reason})


class DuplicateUsername(MemoStoreError):
    def __init__(self, username: str):
        self.username = username
        super().__init__(f"Username already exists: {username!r}", {"username": username})


class NotFound(MemoStoreError):
    def __init__(self, entity: str, id: Any):
        self.entity = entity
        self.id = id
        super().__init__(f"{entity} not found: {id!r}", {"entity": entity, "id": id})


class InvalidCredential(MemoStoreError):
    def __init__(self, username: str):
        self.username = username
        super().__init__("Credential does not match", {"username": username})


class IntegrityViolation(MemoStoreError):
    """A database constraint rejected a write.

    Repository pre-checks should make this unreachable; it is surfaced so that
    bugs stay visible.
    """

    def __init__(self, constraint: str):
        self.constraint = constraint
        super().__init__(f"Integrity violation: {constraint}", {"constraint": constraint})


class StorageUnavailable(MemoStoreError):
    """Disk or engine failure; the operation had no effect and may be retried later."""


class FatalStoreError(MemoStoreError):
    """The store cannot be used at all; startup must abort."""


class MigrationError(FatalStoreError):
    def __init__(self, step: str, cause: str):
        self.step = step
        super().__init__(f"Migration step {step!r} failed: {cause}", {"step": step})
