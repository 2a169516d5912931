class VaultError(Exception):
    """Base exception for all vaultmd errors."""


class InvalidScopeError(VaultError):
    """Raised when scope attributes are malformed or reserved."""


class EntryNotFoundError(VaultError):
    """Raised when a requested entry or version does not exist.

    Attributes:
        entity_type: Type name (e.g., "Entry", "Version", "Scope").
        identifier: Key or id used in the lookup.
    """

    def __init__(self, entity_type: str, identifier: str) -> None:
        self.entity_type = entity_type
        self.identifier = identifier
        super().__init__(f"{entity_type} not found: {identifier}")


class KeyNotFoundInSourceError(EntryNotFoundError):
    """Raised when a move names a key absent from the source scope."""

    def __init__(self, key: str, scope: str) -> None:
        super().__init__("Entry", key)
        self.key = key
        self.scope = scope
        self.args = (f"Key not found in source scope {scope}: {key}",)


class ConflictError(VaultError):
    """Raised when an operation would violate a uniqueness rule."""


class KeyAlreadyExistsInTargetError(ConflictError):
    """Raised when a move target already holds the key.

    Attributes:
        key: The conflicting key.
        scope: Formatted target scope.
    """

    def __init__(self, key: str, scope: str) -> None:
        self.key = key
        self.scope = scope
        super().__init__(f"Key already exists in target scope {scope}: {key}")


class SameSourceAndTargetError(ConflictError):
    """Raised when move source and target resolve to the same scope."""

    def __init__(self, scope: str) -> None:
        self.scope = scope
        super().__init__(f"Source and target scopes must be different: {scope}")


class SourceChangedError(ConflictError):
    """Raised when the source history changed while a move was copying it."""

    def __init__(self, key: str, scope: str) -> None:
        self.key = key
        self.scope = scope
        super().__init__(
            f"Entry {key} in scope {scope} changed during move; retry"
        )


class IntegrityFailureError(VaultError):
    """Raised when stored content is missing or fails hash verification.

    Attributes:
        key: Entry key whose content failed verification.
        file_path: Content store location recorded for the version.
    """

    def __init__(self, key: str, file_path: str) -> None:
        self.key = key
        self.file_path = file_path
        super().__init__(
            f"File integrity check failed for {key} ({file_path})"
        )


class StorageError(VaultError):
    """Raised when a storage operation fails."""


class ContentNotFoundError(StorageError):
    """Raised when a content file does not exist."""
