"""Entry-level operations composed from the metadata DALs.

Every mutation that touches more than one row runs inside a single
MetadataStore transaction, so a failure at any step leaves the tables
exactly as they were.
"""

from typing import Callable, Optional

from funcy import lmap

from vaultmd.data.mapping import (
    entry_record_from_row,
    entry_status_from_row,
    scoped_entry_from_row,
    version_record_from_row,
)
from vaultmd.data.metadata_sqlite import MetadataStore, UnitOfWork
from vaultmd.domain.entities.entry import EntryRecord, EntryStatusRecord
from vaultmd.domain.entities.scoped_entry import ScopedEntry
from vaultmd.domain.entities.version import VersionRecord
from vaultmd.log import logger

logger = logger.getChild(__name__)

ContentWriter = Callable[[int], tuple[str, str]]


def next_version(uow: UnitOfWork, scope_id: int, key: str) -> int:
    """Next version number for a key: 1 for a new entry, else max + 1."""
    entry = uow.entries.get_by_key(scope_id, key)
    if entry is None:
        return 1
    return uow.versions.get_max_version(entry["id"]) + 1


def delete_entry_rows(uow: UnitOfWork, entry_id: int) -> int:
    """Delete an entry with its versions and status, in foreign-key order.

    Returns:
        Number of version rows removed.
    """
    count = uow.versions.delete_all_for_entry(entry_id)
    uow.statuses.delete(entry_id)
    uow.entries.delete(entry_id)
    return count


def insert_version(
    uow: UnitOfWork,
    scope_id: int,
    key: str,
    version: int,
    file_path: str,
    hash: str,
    description: Optional[str] = None,
    is_archived: bool = False,
    created_at: Optional[str] = None,
) -> int:
    """Insert a version, provisioning the entry and status rows as needed.

    Returns:
        Id of the new version row.
    """
    entry = uow.entries.get_by_key(scope_id, key)
    if entry is None:
        entry_id = uow.entries.create(scope_id, key, created_at)
        uow.statuses.create(entry_id, version, is_archived)
    else:
        entry_id = entry["id"]
        if uow.statuses.get(entry_id) is None:
            uow.statuses.create(entry_id, version, is_archived)

    version_id = uow.versions.create(
        {
            "entry_id": entry_id,
            "version": version,
            "file_path": file_path,
            "hash": hash,
            "description": description,
            "created_at": created_at,
        }
    )
    uow.statuses.update_current_version(entry_id, version)
    return version_id


class EntryService:
    """Transactional operations on the entries of a scope.

    Attributes:
        _store: Injected MetadataStore shared with the other services.
    """

    def __init__(self, store: MetadataStore) -> None:
        """Initialize with a MetadataStore.

        Args:
            store: Open or lazily-opening metadata store.
        """
        self._store = store

    # ── Writes ────────────────────────────────────────────────

    def create(
        self,
        scope_id: int,
        key: str,
        version: int,
        file_path: str,
        hash: str,
        description: Optional[str] = None,
        is_archived: bool = False,
    ) -> int:
        """Record a new version of a key.

        Creates the entry and its status row on first use, and repairs a
        missing status row for an existing entry. The status pointer is
        moved to ``version`` unconditionally, so callers pass a number
        obtained from get_next_version().

        Args:
            scope_id: Owning scope id.
            key: Entry key.
            version: Version number to insert.
            file_path: Content store location of the payload.
            hash: SHA-256 hex digest of the payload.
            description: Optional note for this version.
            is_archived: Archived flag used when a status row is created.

        Returns:
            Id of the new version row.
        """
        with self._store.transaction() as uow:
            version_id = insert_version(
                uow, scope_id, key, version, file_path, hash,
                description=description, is_archived=is_archived,
            )
        logger.debug("Created %s v%d in scope %d", key, version, scope_id)
        return version_id

    def append_version(
        self,
        scope_id: int,
        key: str,
        writer: ContentWriter,
        description: Optional[str] = None,
        on_rollback: Optional[Callable[[str], object]] = None,
    ) -> ScopedEntry:
        """Reserve the next version number and record it atomically.

        The version number is derived inside the write transaction, so
        concurrent writers to the same key serialize on the database lock
        and never receive the same number.

        Args:
            scope_id: Owning scope id.
            key: Entry key.
            writer: Called with the reserved version number; stores the
                payload and returns (file_path, hash).
            description: Optional note for this version.
            on_rollback: Called with the written file path if the
                transaction fails after ``writer`` ran.

        Returns:
            The stored version as a ScopedEntry.
        """
        written: list[str] = []
        try:
            with self._store.transaction() as uow:
                version = next_version(uow, scope_id, key)
                file_path, digest = writer(version)
                written.append(file_path)
                insert_version(
                    uow, scope_id, key, version, file_path, digest,
                    description=description,
                )
                row = uow.scoped_entries.get_by_version(scope_id, key, version)
        except Exception:
            if on_rollback is not None:
                for path in written:
                    on_rollback(path)
            raise
        logger.debug("Appended %s v%d in scope %d", key, version, scope_id)
        return scoped_entry_from_row(row)

    def delete_version(self, scope_id: int, key: str, version: int) -> bool:
        """Delete one version and move the current pointer to the new max.

        Removing the last surviving version removes the entry and its
        status row as well.

        Returns:
            False if the entry or the version does not exist.
        """
        with self._store.transaction() as uow:
            entry = uow.entries.get_by_key(scope_id, key)
            if entry is None:
                return False
            entry_id = entry["id"]
            if not uow.versions.delete_by_version(entry_id, version):
                return False

            max_version = uow.versions.get_max_version(entry_id)
            if max_version > 0:
                uow.statuses.update_current_version(entry_id, max_version)
            else:
                uow.statuses.delete(entry_id)
                uow.entries.delete(entry_id)
        logger.debug("Deleted %s v%d in scope %d", key, version, scope_id)
        return True

    def delete_all(self, scope_id: int, key: str) -> bool:
        """Delete every version, the status and the entry of a key.

        Returns:
            False if the entry does not exist.
        """
        with self._store.transaction() as uow:
            entry = uow.entries.get_by_key(scope_id, key)
            if entry is None:
                return False
            count = delete_entry_rows(uow, entry["id"])
        logger.debug(
            "Deleted %s (%d versions) in scope %d", key, count, scope_id
        )
        return True

    def archive(self, scope_id: int, key: str) -> bool:
        """Hide an entry from default listings.

        Returns:
            False if the entry is absent or already archived.
        """
        return self._set_archived(scope_id, key, True)

    def restore(self, scope_id: int, key: str) -> bool:
        """Undo archive().

        Returns:
            False if the entry is absent or not archived.
        """
        return self._set_archived(scope_id, key, False)

    def _set_archived(self, scope_id: int, key: str, archived: bool) -> bool:
        with self._store.transaction() as uow:
            entry = uow.entries.get_by_key(scope_id, key)
            if entry is None:
                return False
            return uow.statuses.set_archived(entry["id"], archived)

    # ── Reads ─────────────────────────────────────────────────

    def get_next_version(self, scope_id: int, key: str) -> int:
        return next_version(self._store.dal, scope_id, key)

    def get_latest(self, scope_id: int, key: str) -> Optional[ScopedEntry]:
        row = self._store.scoped_entries.get_latest(scope_id, key)
        return scoped_entry_from_row(row) if row else None

    def get_by_version(
        self, scope_id: int, key: str, version: int
    ) -> Optional[ScopedEntry]:
        row = self._store.scoped_entries.get_by_version(scope_id, key, version)
        return scoped_entry_from_row(row) if row else None

    def get(
        self, scope_id: int, key: str, version: Optional[int] = None
    ) -> Optional[ScopedEntry]:
        """Latest version of a key, or a specific one when given."""
        if version is None:
            return self.get_latest(scope_id, key)
        return self.get_by_version(scope_id, key, version)

    def get_entry(self, scope_id: int, key: str) -> Optional[EntryRecord]:
        row = self._store.entries.get_by_key(scope_id, key)
        return entry_record_from_row(row) if row else None

    def get_status(self, entry_id: int) -> Optional[EntryStatusRecord]:
        row = self._store.statuses.get(entry_id)
        return entry_status_from_row(row) if row else None

    def list_versions(self, scope_id: int, key: str) -> list[VersionRecord]:
        """All surviving versions of a key, newest first."""
        entry = self._store.entries.get_by_key(scope_id, key)
        if entry is None:
            return []
        return lmap(
            version_record_from_row,
            self._store.versions.list_for_entry(entry["id"]),
        )

    def list(
        self,
        scope_id: int,
        include_archived: bool = False,
        all_versions: bool = False,
    ) -> list[ScopedEntry]:
        """List the entries of a scope.

        Args:
            scope_id: Scope to list.
            include_archived: If False, archived entries are left out
                entirely, whatever ``all_versions`` says.
            all_versions: If True, one row per surviving version; otherwise
                one row per key at its current version.

        Returns:
            ScopedEntry list ordered by key, then version descending.
        """
        dal = self._store.scoped_entries
        if all_versions:
            rows = dal.list_all_versions(scope_id, include_archived)
        else:
            rows = dal.list_latest(scope_id, include_archived)
        return lmap(scoped_entry_from_row, rows)
