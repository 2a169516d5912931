"""Data Access Layer for version persistence operations.

Versions are immutable: rows are inserted and deleted, never updated.
"""

import sqlite3
from typing import Any, Optional

from vaultmd.data.dal._util import now_iso


class VersionDAL:
    """Executes SQL for version CRUD operations.

    Attributes:
        _conn: Shared SQLite connection (managed by MetadataStore).
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def get(self, version_id: int) -> Optional[dict[str, Any]]:
        """Retrieve a version by id.

        Args:
            version_id: Surrogate key.

        Returns:
            Dictionary of version fields, or None if not found.
        """
        cur = self._conn.execute(
            "SELECT * FROM versions WHERE id = ?", (version_id,)
        )
        row = cur.fetchone()
        return dict(row) if row else None

    def get_by_version(
        self, entry_id: int, version: int
    ) -> Optional[dict[str, Any]]:
        """Retrieve one numbered version of an entry.

        Args:
            entry_id: Owning entry id.
            version: Version number.

        Returns:
            Dictionary of version fields, or None if not found.
        """
        cur = self._conn.execute(
            "SELECT * FROM versions WHERE entry_id = ? AND version = ?",
            (entry_id, version),
        )
        row = cur.fetchone()
        return dict(row) if row else None

    def list_for_entry(self, entry_id: int) -> list[dict[str, Any]]:
        """List all versions of an entry, newest first.

        Args:
            entry_id: Owning entry id.

        Returns:
            List of version dictionaries ordered by version descending.
        """
        cur = self._conn.execute(
            "SELECT * FROM versions WHERE entry_id = ? "
            "ORDER BY version DESC",
            (entry_id,),
        )
        return [dict(row) for row in cur.fetchall()]

    def get_max_version(self, entry_id: int) -> int:
        """Get the highest surviving version number (0 if none).

        Args:
            entry_id: Owning entry id.

        Returns:
            Maximum version number, or 0 for an entry with no versions.
        """
        cur = self._conn.execute(
            "SELECT COALESCE(MAX(version), 0) FROM versions "
            "WHERE entry_id = ?",
            (entry_id,),
        )
        return cur.fetchone()[0]

    def count_for_entry(self, entry_id: int) -> int:
        cur = self._conn.execute(
            "SELECT COUNT(*) FROM versions WHERE entry_id = ?", (entry_id,)
        )
        return cur.fetchone()[0]

    def create(self, data: dict[str, Any]) -> int:
        """Insert a version row.

        Args:
            data: Dictionary with keys entry_id, version, file_path, hash,
                description and optionally created_at.

        Returns:
            Id of the new row.
        """
        params = {"description": None, "created_at": None}
        params.update(data)
        if not params["created_at"]:
            params["created_at"] = now_iso()
        cur = self._conn.execute(
            """
            INSERT INTO versions (
                entry_id, version, file_path, hash, description, created_at
            ) VALUES (
                :entry_id, :version, :file_path, :hash, :description,
                :created_at
            )
            """,
            params,
        )
        return cur.lastrowid

    def delete(self, version_id: int) -> bool:
        cur = self._conn.execute(
            "DELETE FROM versions WHERE id = ?", (version_id,)
        )
        return cur.rowcount > 0

    def delete_by_version(self, entry_id: int, version: int) -> bool:
        cur = self._conn.execute(
            "DELETE FROM versions WHERE entry_id = ? AND version = ?",
            (entry_id, version),
        )
        return cur.rowcount > 0

    def delete_all_for_entry(self, entry_id: int) -> int:
        """Delete every version of an entry.

        Returns:
            Number of rows removed.
        """
        cur = self._conn.execute(
            "DELETE FROM versions WHERE entry_id = ?", (entry_id,)
        )
        return cur.rowcount
