"""Read-only queries joining entries, entry_status and versions.

Each row carries the entry identity, the archived flag and one version,
which is the shape consumed by the read APIs.
"""

import sqlite3
from typing import Any, Optional

_SELECT = """
SELECT
    e.id AS id,
    e.scope_id AS scope_id,
    e.key AS key,
    es.is_archived AS is_archived,
    v.version AS version,
    v.file_path AS file_path,
    v.hash AS hash,
    v.description AS description,
    v.created_at AS created_at
FROM entries e
JOIN entry_status es ON e.id = es.entry_id
"""


class ScopedEntryDAL:
    """Executes joined read queries for scoped entries.

    Attributes:
        _conn: Shared SQLite connection (managed by MetadataStore).
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def get_latest(self, scope_id: int, key: str) -> Optional[dict[str, Any]]:
        """Retrieve the current version of an entry.

        Args:
            scope_id: Owning scope id.
            key: Entry key.

        Returns:
            Joined row dictionary, or None if the entry does not exist.
        """
        cur = self._conn.execute(
            _SELECT
            + "JOIN versions v ON e.id = v.entry_id "
            "AND v.version = es.current_version "
            "WHERE e.scope_id = ? AND e.key = ? LIMIT 1",
            (scope_id, key),
        )
        row = cur.fetchone()
        return dict(row) if row else None

    def get_by_version(
        self, scope_id: int, key: str, version: int
    ) -> Optional[dict[str, Any]]:
        cur = self._conn.execute(
            _SELECT
            + "JOIN versions v ON e.id = v.entry_id "
            "WHERE e.scope_id = ? AND e.key = ? AND v.version = ? LIMIT 1",
            (scope_id, key, version),
        )
        row = cur.fetchone()
        return dict(row) if row else None

    def list_latest(
        self, scope_id: int, include_archived: bool = False
    ) -> list[dict[str, Any]]:
        """List the current version of every entry in a scope.

        Args:
            scope_id: Owning scope id.
            include_archived: If True, include archived entries.

        Returns:
            Joined row dictionaries ordered by key.
        """
        cur = self._conn.execute(
            _SELECT
            + "JOIN versions v ON e.id = v.entry_id "
            "AND v.version = es.current_version "
            "WHERE e.scope_id = ? AND (? OR es.is_archived = 0) "
            "ORDER BY e.key",
            (scope_id, int(include_archived)),
        )
        return [dict(row) for row in cur.fetchall()]

    def list_all_versions(
        self, scope_id: int, include_archived: bool = False
    ) -> list[dict[str, Any]]:
        """List every surviving version of every entry in a scope.

        Args:
            scope_id: Owning scope id.
            include_archived: If True, include archived entries.

        Returns:
            Joined row dictionaries ordered by key, then version descending.
        """
        cur = self._conn.execute(
            _SELECT
            + "JOIN versions v ON e.id = v.entry_id "
            "WHERE e.scope_id = ? AND (? OR es.is_archived = 0) "
            "ORDER BY e.key, v.version DESC",
            (scope_id, int(include_archived)),
        )
        return [dict(row) for row in cur.fetchall()]

    def count_versions_for_scope(self, scope_id: int) -> int:
        cur = self._conn.execute(
            "SELECT COUNT(v.id) FROM entries e "
            "JOIN versions v ON e.id = v.entry_id WHERE e.scope_id = ?",
            (scope_id,),
        )
        return cur.fetchone()[0]
