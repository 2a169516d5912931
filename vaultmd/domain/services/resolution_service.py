"""Scope fallback resolution.

A lookup that misses in a narrow scope continues in the broader scopes
it belongs to: worktree and branch fall back to their repository, and
every scope ends at global.
"""

from typing import TYPE_CHECKING, Optional

from vaultmd.domain.scope import (
    BranchScope,
    GlobalScope,
    RepositoryScope,
    Scope,
    WorktreeScope,
    validate,
)
from vaultmd.log import logger

if TYPE_CHECKING:
    from vaultmd.app.services.entry_service import EntryService
    from vaultmd.app.services.scope_service import ScopeService
    from vaultmd.domain.entities.scoped_entry import ScopedEntry
    from vaultmd.domain.services.integrity_service import IntegrityService

logger = logger.getChild(__name__)


def search_order(scope: Scope) -> list[Scope]:
    """Scopes searched by a fallback lookup, narrowest first."""
    validate(scope)
    if isinstance(scope, (WorktreeScope, BranchScope)):
        return [scope, RepositoryScope(scope.primary_path), GlobalScope()]
    if isinstance(scope, RepositoryScope):
        return [scope, GlobalScope()]
    return [scope]


class ResolutionService:
    """Looks up entries across a scope's fallback chain.

    Attributes:
        _scopes: Scope lookups (never creates rows while probing).
        _entries: Entry reads.
        _integrity: Verifies the payload of every hit.
    """

    def __init__(
        self,
        scope_service: "ScopeService",
        entry_service: "EntryService",
        integrity_service: "IntegrityService",
    ) -> None:
        self._scopes = scope_service
        self._entries = entry_service
        self._integrity = integrity_service

    def search_order(self, scope: Scope) -> list[Scope]:
        return search_order(scope)

    def resolve(
        self, scope: Scope, key: str, version: Optional[int] = None
    ) -> Optional["ScopedEntry"]:
        """Look up a key in one scope only.

        Returns:
            The verified entry, or None if the scope or key is absent.

        Raises:
            IntegrityFailureError: If the entry's payload is bad.
        """
        scope_id = self._scopes.find_scope_id(scope)
        if scope_id is None:
            return None
        entry = self._entries.get(scope_id, key, version)
        if entry is None:
            return None
        return self._integrity.ensure_intact(entry)

    def resolve_with_fallback(
        self, scope: Scope, key: str, version: Optional[int] = None
    ) -> Optional["ScopedEntry"]:
        """Look up a key along the scope's search order.

        The first scope holding the key wins. Its payload is verified and
        a failure is raised at once rather than falling through to a
        broader scope.

        Returns:
            The verified entry, or None when no scope holds the key.

        Raises:
            IntegrityFailureError: If the first hit's payload is bad.
        """
        for candidate in search_order(scope):
            entry = self.resolve(candidate, key, version)
            if entry is not None:
                logger.debug("Resolved %s in %s", key, candidate)
                return entry
        return None

    def resolve_path_with_fallback(
        self, scope: Scope, key: str, version: Optional[int] = None
    ) -> Optional[str]:
        entry = self.resolve_with_fallback(scope, key, version)
        return entry.file_path if entry else None
