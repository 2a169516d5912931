"""Data Access Layer for entry status persistence operations."""

import sqlite3
from typing import Any, Optional

from vaultmd.data.dal._util import now_iso


class EntryStatusDAL:
    """Executes SQL against the entry_status table.

    Attributes:
        _conn: Shared SQLite connection (managed by MetadataStore).
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def get(self, entry_id: int) -> Optional[dict[str, Any]]:
        cur = self._conn.execute(
            "SELECT * FROM entry_status WHERE entry_id = ?", (entry_id,)
        )
        row = cur.fetchone()
        return dict(row) if row else None

    def create(
        self, entry_id: int, current_version: int, is_archived: bool = False
    ) -> None:
        """Insert the status row of an entry.

        Args:
            entry_id: Entry the status belongs to.
            current_version: Initial current-version pointer.
            is_archived: Initial archived flag.
        """
        self._conn.execute(
            "INSERT INTO entry_status "
            "(entry_id, is_archived, current_version, updated_at) "
            "VALUES (?, ?, ?, ?)",
            (entry_id, int(is_archived), current_version, now_iso()),
        )

    def update_current_version(self, entry_id: int, version: int) -> bool:
        """Point the status row at a version number.

        Returns:
            True if a status row exists and was updated.
        """
        cur = self._conn.execute(
            "UPDATE entry_status SET current_version = ?, updated_at = ? "
            "WHERE entry_id = ?",
            (version, now_iso(), entry_id),
        )
        return cur.rowcount > 0

    def set_archived(self, entry_id: int, archived: bool) -> bool:
        """Set the archived flag.

        Returns:
            True only if the flag actually changed.
        """
        cur = self._conn.execute(
            "UPDATE entry_status SET is_archived = ?, updated_at = ? "
            "WHERE entry_id = ? AND is_archived != ?",
            (int(archived), now_iso(), entry_id, int(archived)),
        )
        return cur.rowcount > 0

    def delete(self, entry_id: int) -> bool:
        cur = self._conn.execute(
            "DELETE FROM entry_status WHERE entry_id = ?", (entry_id,)
        )
        return cur.rowcount > 0
