"""Data Access Layer for scope persistence operations.

Executes SQL against a SQLite connection to persist and retrieve scope
records. All methods operate on plain dictionaries to keep the DAL
decoupled from the scope dataclasses.
"""

import sqlite3
from typing import Any, Optional

from vaultmd.data.dal._util import now_iso


class ScopeDAL:
    """Executes SQL for scope CRUD operations.

    Attributes:
        _conn: Shared SQLite connection (managed by MetadataStore).
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def get(self, scope_id: int) -> Optional[dict[str, Any]]:
        """Retrieve a scope by id.

        Args:
            scope_id: Surrogate key.

        Returns:
            Dictionary of scope fields, or None if not found.
        """
        cur = self._conn.execute(
            "SELECT * FROM scopes WHERE id = ?", (scope_id,)
        )
        row = cur.fetchone()
        return dict(row) if row else None

    def get_by_storage_key(self, storage_key: str) -> Optional[dict[str, Any]]:
        """Retrieve a scope by its canonical storage key.

        Args:
            storage_key: Key produced by ``vaultmd.domain.scope.storage_key``.

        Returns:
            Dictionary of scope fields, or None if not found.
        """
        cur = self._conn.execute(
            "SELECT * FROM scopes WHERE storage_key = ?", (storage_key,)
        )
        row = cur.fetchone()
        return dict(row) if row else None

    def get_by_primary_path_and_branch(
        self, primary_path: str, branch_name: Optional[str] = None
    ) -> Optional[dict[str, Any]]:
        """Retrieve the repository scope, or one of its branch scopes.

        Args:
            primary_path: Repository path.
            branch_name: Branch name; None selects the repository scope.

        Returns:
            Dictionary of scope fields, or None if not found.
        """
        if branch_name is None:
            cur = self._conn.execute(
                "SELECT * FROM scopes "
                "WHERE type = 'repository' AND primary_path = ?",
                (primary_path,),
            )
        else:
            cur = self._conn.execute(
                "SELECT * FROM scopes "
                "WHERE type = 'branch' AND primary_path = ? "
                "AND branch_name = ?",
                (primary_path, branch_name),
            )
        row = cur.fetchone()
        return dict(row) if row else None

    def get_or_create(self, data: dict[str, Any]) -> int:
        """Insert a scope, or refresh the row sharing its storage key.

        Args:
            data: Dictionary with keys type, primary_path, branch_name,
                worktree_id, worktree_path and storage_key.

        Returns:
            Id of the inserted or refreshed row.
        """
        now = now_iso()
        params = dict(data, created_at=now, updated_at=now)
        self._conn.execute(
            """
            INSERT INTO scopes (
                type, primary_path, branch_name, worktree_id,
                worktree_path, storage_key, created_at, updated_at
            ) VALUES (
                :type, :primary_path, :branch_name, :worktree_id,
                :worktree_path, :storage_key, :created_at, :updated_at
            )
            ON CONFLICT(storage_key) DO UPDATE SET
                type = excluded.type,
                primary_path = excluded.primary_path,
                branch_name = excluded.branch_name,
                worktree_id = excluded.worktree_id,
                worktree_path = excluded.worktree_path,
                updated_at = excluded.updated_at
            """,
            params,
        )
        cur = self._conn.execute(
            "SELECT id FROM scopes WHERE storage_key = ?",
            (data["storage_key"],),
        )
        return cur.fetchone()[0]

    def list_all(self) -> list[dict[str, Any]]:
        """List every scope ordered by type, path and branch."""
        cur = self._conn.execute(
            "SELECT * FROM scopes "
            "ORDER BY type, primary_path, branch_name, worktree_id"
        )
        return [dict(row) for row in cur.fetchall()]

    def list_by_primary_path(self, primary_path: str) -> list[dict[str, Any]]:
        """List the repository, branch and worktree scopes of a path."""
        cur = self._conn.execute(
            "SELECT * FROM scopes WHERE primary_path = ? ORDER BY id",
            (primary_path,),
        )
        return [dict(row) for row in cur.fetchall()]

    def delete(self, scope_id: int) -> bool:
        """Delete a scope row by id.

        Returns:
            True if a row was removed.
        """
        cur = self._conn.execute(
            "DELETE FROM scopes WHERE id = ?", (scope_id,)
        )
        return cur.rowcount > 0

    def delete_by_primary_path(self, primary_path: str) -> int:
        """Delete every non-global scope row of a repository path.

        Returns:
            Number of rows removed.
        """
        cur = self._conn.execute(
            "DELETE FROM scopes WHERE primary_path = ? "
            "AND type IN ('repository', 'branch', 'worktree')",
            (primary_path,),
        )
        return cur.rowcount

    def delete_by_primary_path_and_branch(
        self, primary_path: str, branch_name: str
    ) -> bool:
        """Delete a single branch scope row.

        Returns:
            True if a row was removed.
        """
        cur = self._conn.execute(
            "DELETE FROM scopes WHERE type = 'branch' "
            "AND primary_path = ? AND branch_name = ?",
            (primary_path, branch_name),
        )
        return cur.rowcount > 0
