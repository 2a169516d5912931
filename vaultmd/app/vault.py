"""Facade for vault operations.

Wires together all layers: creates MetadataStore, LocalContentStore and
the services sharing them. Provides lazy-initialized properties and the
operations exposed by the command line.
"""

import os
from typing import TYPE_CHECKING, Iterable, Optional

from vaultmd.config import VaultConfig
from vaultmd.domain.entities.listed_entry import ListedEntry
from vaultmd.domain.exceptions import InvalidScopeError
from vaultmd.domain.scope import (
    BranchScope,
    RepositoryScope,
    Scope,
    WorktreeScope,
    is_global,
    scope_dir_name,
    validate,
)
from vaultmd.log import logger

if TYPE_CHECKING:
    from vaultmd.app.services.entry_service import EntryService
    from vaultmd.app.services.move_service import MoveService
    from vaultmd.app.services.scope_service import ScopeService
    from vaultmd.data.adapters.local_content_store import LocalContentStore
    from vaultmd.data.metadata_sqlite import MetadataStore
    from vaultmd.domain.entities.scoped_entry import ScopedEntry
    from vaultmd.domain.services.integrity_service import IntegrityService
    from vaultmd.domain.services.resolution_service import (
        ResolutionService,
    )

logger = logger.getChild(__name__)


def _primary_path(scope: Scope) -> str:
    if isinstance(scope, (RepositoryScope, BranchScope, WorktreeScope)):
        return scope.primary_path
    raise InvalidScopeError("operation requires a repository-bound scope")


class Vault:
    """Facade for vault operations.

    Every service shares the one MetadataStore handle, so a Vault is the
    unit that is opened, used and closed. All properties are
    lazy-initialized.

    Attributes:
        _config: Resolved storage locations.
    """

    def __init__(self, config: Optional[VaultConfig] = None) -> None:
        """Initialize with storage locations.

        Args:
            config: Vault locations. Resolved from the environment when
                omitted.
        """
        self._config = config or VaultConfig.from_env()
        self._metadata_store: Optional["MetadataStore"] = None
        self._content_store: Optional["LocalContentStore"] = None
        self._scope_service: Optional["ScopeService"] = None
        self._entry_service: Optional["EntryService"] = None
        self._move_service: Optional["MoveService"] = None
        self._integrity_service: Optional["IntegrityService"] = None
        self._resolution_service: Optional["ResolutionService"] = None

    @property
    def config(self) -> VaultConfig:
        return self._config

    @property
    def metadata_store(self) -> "MetadataStore":
        """Lazy-initialize MetadataStore.

        Returns:
            MetadataStore connected to the vault database.
        """
        if self._metadata_store is None:
            from vaultmd.data.metadata_sqlite import MetadataStore

            os.makedirs(self._config.vault_dir, exist_ok=True)
            self._metadata_store = MetadataStore(self._config.db_path)
        return self._metadata_store

    @property
    def content_store(self) -> "LocalContentStore":
        if self._content_store is None:
            from vaultmd.data.adapters.local_content_store import (
                LocalContentStore,
            )

            self._content_store = LocalContentStore(self._config.objects_dir)
        return self._content_store

    @property
    def scope_service(self) -> "ScopeService":
        if self._scope_service is None:
            from vaultmd.app.services.scope_service import ScopeService

            self._scope_service = ScopeService(self.metadata_store)
        return self._scope_service

    @property
    def entry_service(self) -> "EntryService":
        if self._entry_service is None:
            from vaultmd.app.services.entry_service import EntryService

            self._entry_service = EntryService(self.metadata_store)
        return self._entry_service

    @property
    def move_service(self) -> "MoveService":
        if self._move_service is None:
            from vaultmd.app.services.move_service import MoveService

            self._move_service = MoveService(
                self.metadata_store, self.content_store
            )
        return self._move_service

    @property
    def integrity_service(self) -> "IntegrityService":
        """Lazy-initialize IntegrityService.

        Returns:
            IntegrityService with injected ContentGateway.
        """
        if self._integrity_service is None:
            from vaultmd.domain.services.integrity_service import (
                IntegrityService,
            )

            self._integrity_service = IntegrityService(self.content_store)
        return self._integrity_service

    @property
    def resolution_service(self) -> "ResolutionService":
        if self._resolution_service is None:
            from vaultmd.domain.services.resolution_service import (
                ResolutionService,
            )

            self._resolution_service = ResolutionService(
                self.scope_service,
                self.entry_service,
                self.integrity_service,
            )
        return self._resolution_service

    # ── Writes ────────────────────────────────────────────────

    def set(
        self,
        scope: Scope,
        key: str,
        content: str,
        description: Optional[str] = None,
    ) -> "ScopedEntry":
        """Store ``content`` as the next version of ``key``.

        Args:
            scope: Scope to store into; its row is created on first use.
            key: Entry key.
            content: Text payload.
            description: Optional note for the new version.

        Returns:
            The stored version.
        """
        scope_id = self.scope_service.get_or_create(scope)
        dir_name = scope_dir_name(scope)
        content_store = self.content_store

        def write(version: int) -> tuple[str, str]:
            return content_store.save(dir_name, key, version, content)

        entry = self.entry_service.append_version(
            scope_id,
            key,
            write,
            description=description,
            on_rollback=content_store.delete,
        )
        logger.debug("Stored %s v%d", key, entry.version)
        return entry

    def delete_version(self, scope: Scope, key: str, version: int) -> bool:
        """Delete one version of a key.

        Returns:
            False if the key or the version does not exist.
        """
        scope_id = self.scope_service.find_scope_id(scope)
        if scope_id is None:
            return False
        entry = self.entry_service.get_by_version(scope_id, key, version)
        if entry is None:
            return False
        deleted = self.entry_service.delete_version(scope_id, key, version)
        if deleted:
            self._remove_files([entry.file_path])
        return deleted

    def delete_key(self, scope: Scope, key: str) -> int:
        """Delete every version of a key.

        Returns:
            Number of versions removed.
        """
        scope_id = self.scope_service.find_scope_id(scope)
        if scope_id is None:
            return 0
        versions = self.entry_service.list_versions(scope_id, key)
        if not versions or not self.entry_service.delete_all(scope_id, key):
            return 0
        self._remove_files(v.file_path for v in versions)
        return len(versions)

    def archive(self, scope: Scope, key: str) -> bool:
        scope_id = self.scope_service.find_scope_id(scope)
        if scope_id is None:
            return False
        return self.entry_service.archive(scope_id, key)

    def restore(self, scope: Scope, key: str) -> bool:
        scope_id = self.scope_service.find_scope_id(scope)
        if scope_id is None:
            return False
        return self.entry_service.restore(scope_id, key)

    def move(self, key: str, from_scope: Scope, to_scope: Scope) -> None:
        self.move_service.move_entry(key, from_scope, to_scope)

    def delete_scope(self, scope: Scope) -> int:
        """Delete a scope with all its entries and content.

        Returns:
            Number of versions removed.

        Raises:
            InvalidScopeError: If ``scope`` is the global scope.
        """
        validate(scope)
        if is_global(scope):
            raise InvalidScopeError("the global scope cannot be deleted")
        count = self.scope_service.delete_scope_by_storage_key(scope)
        self._remove_scope_dirs([scope])
        return count

    def delete_branch(self, scope: Scope, branch: str) -> int:
        """Delete one branch scope of the repository ``scope`` belongs to."""
        branch_scope = BranchScope(_primary_path(scope), branch)
        validate(branch_scope)
        count = self.scope_service.delete_scope(
            branch_scope.primary_path, branch
        )
        self._remove_scope_dirs([branch_scope])
        return count

    def delete_all_branches(self, scope: Scope) -> int:
        """Delete the repository scope and every branch and worktree scope."""
        primary_path = _primary_path(scope)
        records = self.scope_service.list_by_primary_path(primary_path)
        count = self.scope_service.delete_all_branches(primary_path)
        self._remove_scope_dirs(r.scope for r in records)
        return count

    # ── Reads ─────────────────────────────────────────────────

    def get(
        self,
        scope: Scope,
        key: str,
        version: Optional[int] = None,
        all_scopes: bool = False,
    ) -> Optional["ScopedEntry"]:
        """Look up a verified entry version.

        Args:
            scope: Scope to look in.
            key: Entry key.
            version: Specific version; latest when omitted.
            all_scopes: Fall back to broader scopes on a miss.

        Returns:
            The entry, or None when not found.

        Raises:
            IntegrityFailureError: If the found payload is bad.
        """
        if all_scopes:
            return self.resolution_service.resolve_with_fallback(
                scope, key, version
            )
        return self.resolution_service.resolve(scope, key, version)

    info = get

    def cat(
        self,
        scope: Scope,
        key: str,
        version: Optional[int] = None,
        all_scopes: bool = False,
    ) -> Optional[str]:
        """Content of a verified entry version, or None when not found."""
        entry = self.get(scope, key, version, all_scopes)
        if entry is None:
            return None
        return self.content_store.read(entry.file_path)

    def list(
        self,
        scope: Optional[Scope] = None,
        include_archived: bool = False,
        all_versions: bool = False,
        all_scopes: bool = False,
    ) -> list[ListedEntry]:
        """List entries of one scope, or of every scope.

        Args:
            scope: Scope to list; required unless ``all_scopes``.
            include_archived: Include archived entries.
            all_versions: One row per version instead of per key.
            all_scopes: List every persisted scope.

        Returns:
            ListedEntry list, grouped by scope and ordered by key.
        """
        if all_scopes:
            targets = [
                (record.id, record.scope)
                for record in self.scope_service.list_all()
            ]
        else:
            if scope is None:
                raise InvalidScopeError("a scope is required")
            scope_id = self.scope_service.find_scope_id(scope)
            targets = [] if scope_id is None else [(scope_id, scope)]

        listed = []
        for scope_id, target in targets:
            for entry in self.entry_service.list(
                scope_id, include_archived, all_versions
            ):
                listed.append(ListedEntry(entry=entry, scope=target))
        return listed

    # ── Lifecycle ─────────────────────────────────────────────

    def _remove_files(self, paths: Iterable[str]) -> None:
        for path in paths:
            try:
                self.content_store.delete(path)
            except OSError as exc:
                logger.warning("Could not remove %s: %s", path, exc)

    def _remove_scope_dirs(self, scopes: Iterable[Scope]) -> None:
        for scope in scopes:
            if is_global(scope):
                continue
            try:
                self.content_store.delete_all(scope_dir_name(scope))
            except OSError as exc:
                logger.warning(
                    "Could not remove content of %s: %s", scope, exc
                )

    def close(self) -> None:
        """Release all held resources."""
        if self._metadata_store is not None:
            self._metadata_store.close()
            self._metadata_store = None
        self._content_store = None
        self._scope_service = None
        self._entry_service = None
        self._move_service = None
        self._integrity_service = None
        self._resolution_service = None

    def __enter__(self) -> "Vault":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
