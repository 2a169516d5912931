"""Tests for the vaultmd exception hierarchy."""

import pytest

from vaultmd.domain.exceptions import (
    ConflictError,
    ContentNotFoundError,
    EntryNotFoundError,
    IntegrityFailureError,
    InvalidScopeError,
    KeyAlreadyExistsInTargetError,
    KeyNotFoundInSourceError,
    SameSourceAndTargetError,
    SourceChangedError,
    StorageError,
    VaultError,
)


class TestHierarchy:
    """Verify every error derives from VaultError."""

    @pytest.mark.parametrize(
        "exc_class",
        [
            InvalidScopeError,
            EntryNotFoundError,
            ConflictError,
            IntegrityFailureError,
            StorageError,
        ],
    )
    def test_base(self, exc_class):
        assert issubclass(exc_class, VaultError)

    def test_move_errors(self):
        """Move errors refine the generic categories."""
        assert issubclass(KeyNotFoundInSourceError, EntryNotFoundError)
        assert issubclass(KeyAlreadyExistsInTargetError, ConflictError)
        assert issubclass(SameSourceAndTargetError, ConflictError)
        assert issubclass(SourceChangedError, ConflictError)
        assert issubclass(ContentNotFoundError, StorageError)


class TestAttributes:
    """Verify structured attributes and messages."""

    def test_entry_not_found(self):
        exc = EntryNotFoundError("Entry", "notes")
        assert exc.entity_type == "Entry"
        assert exc.identifier == "notes"
        assert str(exc) == "Entry not found: notes"

    def test_key_not_found_in_source(self):
        exc = KeyNotFoundInSourceError("notes", "/r:main")
        assert exc.key == "notes"
        assert exc.scope == "/r:main"
        assert exc.entity_type == "Entry"
        assert exc.identifier == "notes"
        assert "/r:main" in str(exc)
        assert str(exc) == "Key not found in source scope /r:main: notes"

    def test_source_changed(self):
        exc = SourceChangedError("notes", "/r")
        assert exc.key == "notes"
        assert exc.scope == "/r"
        assert "changed during move" in str(exc)

    def test_key_already_exists(self):
        exc = KeyAlreadyExistsInTargetError("notes", "global")
        assert exc.key == "notes"
        assert exc.scope == "global"

    def test_integrity_failure(self):
        exc = IntegrityFailureError("notes", "/tmp/notes_v1.txt")
        assert exc.key == "notes"
        assert exc.file_path == "/tmp/notes_v1.txt"
        assert "notes" in str(exc)
