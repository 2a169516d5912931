"""Domain service for verifying stored content.

Provides single and batch verification of ScopedEntry hashes against
the payload files held by the injected ContentGateway.
"""

from typing import TYPE_CHECKING

from vaultmd.domain.exceptions import IntegrityFailureError

if TYPE_CHECKING:
    from vaultmd.domain.entities.scoped_entry import ScopedEntry
    from vaultmd.infrastructure.gateways.content_gateway import (
        ContentGateway,
    )


class IntegrityService:
    """Domain service for verifying content integrity.

    Attributes:
        _content_gateway: Injected ContentGateway for verification.
    """

    def __init__(self, content_gateway: "ContentGateway") -> None:
        """Initialize with a ContentGateway.

        Args:
            content_gateway: Gateway that reads and hashes payloads.
        """
        self._content_gateway = content_gateway

    def verify_entry(self, entry: "ScopedEntry") -> bool:
        """Verify a single entry version's payload.

        Args:
            entry: ScopedEntry to verify.

        Returns:
            True if the file exists and its hash matches.
        """
        if not entry.hash:
            return False
        return self._content_gateway.verify(entry.file_path, entry.hash)

    def verify_batch(
        self, entries: list["ScopedEntry"]
    ) -> dict[tuple[str, int], bool]:
        """Verify multiple entry versions.

        Args:
            entries: List of ScopedEntries to verify.

        Returns:
            Dict mapping (key, version) to verification result.
        """
        results = {}
        for entry in entries:
            results[(entry.key, entry.version)] = self.verify_entry(entry)
        return results

    def ensure_intact(self, entry: "ScopedEntry") -> "ScopedEntry":
        """Return the entry unchanged, or raise if its payload is bad.

        Raises:
            IntegrityFailureError: If the file is missing or modified.
        """
        if not self.verify_entry(entry):
            raise IntegrityFailureError(entry.key, entry.file_path)
        return entry
