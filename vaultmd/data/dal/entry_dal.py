"""Data Access Layer for entry persistence operations."""

import sqlite3
from typing import Any, Optional

from vaultmd.data.dal._util import now_iso


class EntryDAL:
    """Executes SQL for entry CRUD operations.

    Attributes:
        _conn: Shared SQLite connection (managed by MetadataStore).
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def get(self, entry_id: int) -> Optional[dict[str, Any]]:
        cur = self._conn.execute(
            "SELECT * FROM entries WHERE id = ?", (entry_id,)
        )
        row = cur.fetchone()
        return dict(row) if row else None

    def get_by_key(self, scope_id: int, key: str) -> Optional[dict[str, Any]]:
        """Retrieve an entry by key within a scope.

        Args:
            scope_id: Owning scope id.
            key: Entry key.

        Returns:
            Dictionary of entry fields, or None if not found.
        """
        cur = self._conn.execute(
            "SELECT * FROM entries WHERE scope_id = ? AND key = ?",
            (scope_id, key),
        )
        row = cur.fetchone()
        return dict(row) if row else None

    def list_for_scope(self, scope_id: int) -> list[dict[str, Any]]:
        cur = self._conn.execute(
            "SELECT * FROM entries WHERE scope_id = ? ORDER BY key",
            (scope_id,),
        )
        return [dict(row) for row in cur.fetchall()]

    def create(
        self, scope_id: int, key: str, created_at: Optional[str] = None
    ) -> int:
        """Insert an entry row.

        Args:
            scope_id: Owning scope id.
            key: Entry key, unique within the scope.
            created_at: ISO timestamp; defaults to now.

        Returns:
            Id of the new row.
        """
        cur = self._conn.execute(
            "INSERT INTO entries (scope_id, key, created_at) VALUES (?, ?, ?)",
            (scope_id, key, created_at or now_iso()),
        )
        return cur.lastrowid

    def delete(self, entry_id: int) -> bool:
        cur = self._conn.execute(
            "DELETE FROM entries WHERE id = ?", (entry_id,)
        )
        return cur.rowcount > 0

    def delete_all_for_scope(self, scope_id: int) -> int:
        """Delete every entry row of a scope.

        Versions and status rows must already be gone.

        Returns:
            Number of rows removed.
        """
        cur = self._conn.execute(
            "DELETE FROM entries WHERE scope_id = ?", (scope_id,)
        )
        return cur.rowcount
