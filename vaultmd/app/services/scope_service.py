"""Scope lookup, provisioning and cascade deletion."""

from typing import Optional

from funcy import lmap

from vaultmd.app.services.entry_service import delete_entry_rows
from vaultmd.data.mapping import (
    scope_record_from_row,
    scope_to_row,
    scoped_entry_from_row,
)
from vaultmd.data.metadata_sqlite import MetadataStore, UnitOfWork
from vaultmd.domain.entities.scope_record import ScopeRecord
from vaultmd.domain.entities.scoped_entry import ScopedEntry
from vaultmd.domain.scope import Scope, storage_key, validate
from vaultmd.log import logger

logger = logger.getChild(__name__)


def delete_scope_rows(uow: UnitOfWork, scope_id: int) -> int:
    """Delete every entry of a scope, then the scope row itself.

    Returns:
        Number of version rows removed.
    """
    count = 0
    for entry in uow.entries.list_for_scope(scope_id):
        count += delete_entry_rows(uow, entry["id"])
    uow.scopes.delete(scope_id)
    return count


class ScopeService:
    """Operations on persisted scope rows.

    Attributes:
        _store: Injected MetadataStore shared with the other services.
    """

    def __init__(self, store: MetadataStore) -> None:
        self._store = store

    def get_or_create(self, scope: Scope) -> int:
        """Return the id of a scope's row, inserting it on first use.

        Args:
            scope: Scope value to persist.

        Returns:
            Row id; stable across calls for equal scopes.

        Raises:
            InvalidScopeError: If the scope fails validation.
        """
        validate(scope)
        row = scope_to_row(scope)
        return self._store.run(lambda uow: uow.scopes.get_or_create(row))

    def find_scope_id(self, scope: Scope) -> Optional[int]:
        """Id of an existing scope row, without creating one."""
        validate(scope)
        row = self._store.scopes.get_by_storage_key(storage_key(scope))
        return row["id"] if row else None

    def get(self, scope: Scope) -> Optional[ScopeRecord]:
        validate(scope)
        row = self._store.scopes.get_by_storage_key(storage_key(scope))
        return scope_record_from_row(row) if row else None

    def get_by_id(self, scope_id: int) -> Optional[ScopeRecord]:
        row = self._store.scopes.get(scope_id)
        return scope_record_from_row(row) if row else None

    def list_all(self) -> list[ScopeRecord]:
        return lmap(scope_record_from_row, self._store.scopes.list_all())

    def list_by_primary_path(self, primary_path: str) -> list[ScopeRecord]:
        return lmap(
            scope_record_from_row,
            self._store.scopes.list_by_primary_path(primary_path),
        )

    def delete_scope(self, identifier: str, branch: Optional[str] = None) -> int:
        """Cascade-delete a repository scope, or one of its branch scopes.

        Args:
            identifier: Repository path.
            branch: Branch name; None selects the repository scope.

        Returns:
            Number of versions removed; 0 when the scope has no row.
        """
        with self._store.transaction() as uow:
            row = uow.scopes.get_by_primary_path_and_branch(identifier, branch)
            if row is None:
                return 0
            count = delete_scope_rows(uow, row["id"])
        logger.debug(
            "Deleted scope %s (branch=%s), %d versions", identifier, branch, count
        )
        return count

    def delete_scope_by_storage_key(self, scope: Scope) -> int:
        """Cascade-delete the row of any scope value.

        Returns:
            Number of versions removed; 0 when the scope has no row.
        """
        validate(scope)
        key = storage_key(scope)
        with self._store.transaction() as uow:
            row = uow.scopes.get_by_storage_key(key)
            if row is None:
                return 0
            count = delete_scope_rows(uow, row["id"])
        logger.debug("Deleted scope %s, %d versions", key, count)
        return count

    def delete_all_branches(self, identifier: str) -> int:
        """Cascade-delete every scope row sharing a repository path.

        Returns:
            Number of versions removed across all those scopes.
        """
        with self._store.transaction() as uow:
            count = 0
            for row in uow.scopes.list_by_primary_path(identifier):
                for entry in uow.entries.list_for_scope(row["id"]):
                    count += delete_entry_rows(uow, entry["id"])
            removed = uow.scopes.delete_by_primary_path(identifier)
        logger.debug(
            "Deleted %d scopes under %s, %d versions", removed, identifier, count
        )
        return count

    def list_grouped_entries(
        self, include_archived: bool = False
    ) -> list[tuple[ScopeRecord, list[ScopedEntry]]]:
        """Latest version of every entry, grouped by scope.

        Scopes without a listable entry are left out.
        """
        groups = []
        for record in self.list_all():
            rows = self._store.scoped_entries.list_latest(
                record.id, include_archived
            )
            if rows:
                groups.append((record, lmap(scoped_entry_from_row, rows)))
        return groups
