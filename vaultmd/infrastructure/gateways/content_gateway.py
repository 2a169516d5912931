from typing import Protocol, runtime_checkable


@runtime_checkable
class ContentGateway(Protocol):
    """Abstract gateway for version payload storage.

    Defines the contract for saving, reading, verifying and deleting the
    immutable payload of each entry version. Payloads are addressed by a
    scope directory name, the entry key and the version number.
    """

    def save(
        self,
        scope_dir_name: str,
        key: str,
        version: int,
        content: str,
    ) -> tuple[str, str]:
        """Persist a version payload.

        Args:
            scope_dir_name: Directory name derived from the owning scope.
            key: Entry key.
            version: Version number of the payload.
            content: Text to store.

        Returns:
            Tuple of (absolute file path, SHA-256 hex digest).
        """
        ...

    def read(self, path: str) -> str:
        """Read a stored payload.

        Args:
            path: Location returned by save().

        Returns:
            The stored text.

        Raises:
            ContentNotFoundError: If nothing is stored at ``path``.
        """
        ...

    def exists(self, path: str) -> bool:
        """Whether a payload is stored at ``path``."""
        ...

    def delete(self, path: str) -> bool:
        """Remove a payload; a missing file is not an error.

        Returns:
            True if a file was removed.
        """
        ...

    def verify(self, path: str, expected_hash: str) -> bool:
        """Check that a payload exists and matches its digest.

        Returns:
            False if the file is missing or its digest differs.
        """
        ...

    def delete_all(self, scope_dir_name: str) -> bool:
        """Remove every payload stored for a scope.

        Returns:
            True if the scope directory existed.
        """
        ...

    def copy(
        self,
        path: str,
        scope_dir_name: str,
        key: str,
        version: int,
    ) -> tuple[str, str]:
        """Copy a payload to the location of another scope/key/version.

        Returns:
            Tuple of (new absolute file path, SHA-256 hex digest of the copy).
        """
        ...
