"""Tests for IntegrityService domain service."""

import pytest
from unittest.mock import MagicMock

from vaultmd.domain.entities.scoped_entry import ScopedEntry
from vaultmd.domain.exceptions import IntegrityFailureError
from vaultmd.domain.services.integrity_service import IntegrityService


@pytest.fixture
def mock_gateway():
    """Mock ContentGateway for integrity verification."""
    mock = MagicMock()
    mock.verify.return_value = True
    return mock


@pytest.fixture
def service(mock_gateway):
    """IntegrityService with mock gateway."""
    return IntegrityService(mock_gateway)


def _entry(key="notes", version=1, hash="abc123"):
    return ScopedEntry(
        id=1,
        scope_id=1,
        key=key,
        version=version,
        file_path=f"/objects/global/{key}_v{version}.txt",
        hash=hash,
    )


class TestVerifyEntry:
    """Verify single entry verification."""

    def test_verify_returns_true(self, service):
        """verify_entry() returns True when gateway confirms."""
        assert service.verify_entry(_entry()) is True

    def test_verify_calls_gateway(self, service, mock_gateway):
        """verify_entry() delegates to gateway.verify()."""
        service.verify_entry(_entry())
        mock_gateway.verify.assert_called_once_with(
            "/objects/global/notes_v1.txt", "abc123"
        )

    def test_verify_returns_false_on_mismatch(self, service, mock_gateway):
        """verify_entry() returns False when gateway says no."""
        mock_gateway.verify.return_value = False
        assert service.verify_entry(_entry()) is False

    def test_verify_empty_hash_returns_false(self, service, mock_gateway):
        """verify_entry() returns False for empty hash."""
        assert service.verify_entry(_entry(hash="")) is False
        mock_gateway.verify.assert_not_called()


class TestVerifyBatch:
    """Verify batch verification."""

    def test_keys_by_key_and_version(self, service, mock_gateway):
        """Results are keyed by (key, version)."""
        mock_gateway.verify.side_effect = [True, False]
        results = service.verify_batch([_entry(version=1), _entry(version=2)])
        assert results == {("notes", 1): True, ("notes", 2): False}

    def test_empty(self, service):
        assert service.verify_batch([]) == {}


class TestEnsureIntact:
    """Verify the raising variant."""

    def test_returns_entry(self, service):
        entry = _entry()
        assert service.ensure_intact(entry) is entry

    def test_raises_on_failure(self, service, mock_gateway):
        mock_gateway.verify.return_value = False
        with pytest.raises(IntegrityFailureError) as excinfo:
            service.ensure_intact(_entry())
        assert excinfo.value.key == "notes"
