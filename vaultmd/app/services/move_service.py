"""Move an entry, with its full version history, between scopes.

Content and metadata live in different stores, so a move runs as three
steps: copy and verify the payloads, re-parent the rows in one
transaction, then remove the original payloads. A failure before the
commit removes the copies; a failure after it only leaves unreferenced
files behind.
"""

from vaultmd.data.mapping import scope_to_row
from vaultmd.data.metadata_sqlite import MetadataStore
from vaultmd.domain.exceptions import (
    IntegrityFailureError,
    KeyAlreadyExistsInTargetError,
    KeyNotFoundInSourceError,
    SameSourceAndTargetError,
    SourceChangedError,
)
from vaultmd.domain.scope import (
    Scope,
    format_scope,
    scope_dir_name,
    storage_key,
    validate,
)
from vaultmd.infrastructure.gateways.content_gateway import ContentGateway
from vaultmd.log import logger

logger = logger.getChild(__name__)


def _fingerprint(versions: list[dict]) -> list[tuple[int, str]]:
    return [(v["version"], v["hash"]) for v in versions]


class MoveService:
    """Re-parents entries from one scope to another.

    Attributes:
        _store: Injected MetadataStore.
        _content: Content store holding the payload files.
    """

    def __init__(
        self, store: MetadataStore, content_store: ContentGateway
    ) -> None:
        self._store = store
        self._content = content_store

    def move_entry(self, key: str, from_scope: Scope, to_scope: Scope) -> None:
        """Move every version of ``key`` from one scope to another.

        Version numbers, hashes, descriptions, timestamps, the current
        version and the archived flag are preserved.

        Args:
            key: Entry key.
            from_scope: Scope currently holding the entry.
            to_scope: Scope receiving the entry.

        Raises:
            SameSourceAndTargetError: If both scopes are the same.
            KeyNotFoundInSourceError: If the source has no such entry.
            KeyAlreadyExistsInTargetError: If the target already has it.
            SourceChangedError: If versions of the source entry were added
                or removed while the payloads were being copied.
            IntegrityFailureError: If a copied payload does not match the
                hash recorded for its version.
        """
        validate(from_scope)
        validate(to_scope)
        source_key = storage_key(from_scope)
        target_key = storage_key(to_scope)
        if source_key == target_key:
            raise SameSourceAndTargetError(format_scope(from_scope))

        scopes = self._store.scopes
        source_row = scopes.get_by_storage_key(source_key)
        entry = (
            self._store.entries.get_by_key(source_row["id"], key)
            if source_row
            else None
        )
        if entry is None:
            raise KeyNotFoundInSourceError(key, format_scope(from_scope))

        target_row = scopes.get_by_storage_key(target_key)
        if target_row and self._store.entries.get_by_key(target_row["id"], key):
            raise KeyAlreadyExistsInTargetError(key, format_scope(to_scope))

        versions = self._store.versions.list_for_entry(entry["id"])
        copies = self._copy_versions(key, versions, scope_dir_name(to_scope))

        try:
            with self._store.transaction() as uow:
                existing = uow.scopes.get_by_storage_key(target_key)
                if existing and uow.entries.get_by_key(existing["id"], key):
                    raise KeyAlreadyExistsInTargetError(
                        key, format_scope(to_scope)
                    )
                current = uow.entries.get_by_key(source_row["id"], key)
                if current is None:
                    raise KeyNotFoundInSourceError(
                        key, format_scope(from_scope)
                    )
                if current["id"] != entry["id"] or _fingerprint(
                    uow.versions.list_for_entry(entry["id"])
                ) != _fingerprint(versions):
                    raise SourceChangedError(key, format_scope(from_scope))
                status = uow.statuses.get(entry["id"])
                target_id = uow.scopes.get_or_create(scope_to_row(to_scope))
                new_entry_id = uow.entries.create(
                    target_id, key, entry["created_at"]
                )
                uow.statuses.create(
                    new_entry_id,
                    status["current_version"] if status else versions[0]["version"],
                    bool(status["is_archived"]) if status else False,
                )
                for version in versions:
                    uow.versions.create(
                        {
                            "entry_id": new_entry_id,
                            "version": version["version"],
                            "file_path": copies[version["version"]],
                            "hash": version["hash"],
                            "description": version["description"],
                            "created_at": version["created_at"],
                        }
                    )
                uow.versions.delete_all_for_entry(entry["id"])
                uow.statuses.delete(entry["id"])
                uow.entries.delete(entry["id"])
        except Exception:
            self._remove_quietly(copies.values())
            raise

        logger.debug(
            "Moved %s (%d versions) from %s to %s",
            key, len(versions), source_key, target_key,
        )
        self._remove_quietly(v["file_path"] for v in versions)

    def _copy_versions(
        self, key: str, versions: list[dict], target_dir: str
    ) -> dict[int, str]:
        copies: dict[int, str] = {}
        try:
            for version in versions:
                path, digest = self._content.copy(
                    version["file_path"], target_dir, key, version["version"]
                )
                copies[version["version"]] = path
                if digest != version["hash"]:
                    raise IntegrityFailureError(key, version["file_path"])
        except Exception:
            self._remove_quietly(copies.values())
            raise
        return copies

    def _remove_quietly(self, paths) -> None:
        for path in paths:
            try:
                self._content.delete(path)
            except OSError as exc:
                logger.warning("Could not remove %s: %s", path, exc)
