"""Scope values and their canonical encodings.

A scope is one of four frozen dataclasses (global, repository, branch,
worktree). Every function here dispatches over all four variants and
raises InvalidScopeError for anything else.
"""

import hashlib
import os
import re
from dataclasses import dataclass, field
from typing import Any, Optional, Union
from urllib.parse import quote

from vaultmd.domain.enums import ScopeType
from vaultmd.domain.exceptions import InvalidScopeError

_RESERVED_GLOBAL = ScopeType.GLOBAL.value
_RESERVED_REPOSITORY = ScopeType.REPOSITORY.value

_DIR_SANITIZE_PATTERN = re.compile(r'[@/\\:?*"<>|.\s]')
_DIR_DIGEST_LENGTH = 12


@dataclass(frozen=True)
class GlobalScope:
    """Machine-wide scope with no attributes."""

    @property
    def type(self) -> ScopeType:
        return ScopeType.GLOBAL


@dataclass(frozen=True)
class RepositoryScope:
    """Scope bound to a repository root.

    Attributes:
        primary_path: Absolute path of the primary worktree.
    """

    primary_path: str

    @property
    def type(self) -> ScopeType:
        return ScopeType.REPOSITORY


@dataclass(frozen=True)
class BranchScope:
    """Scope bound to one branch of a repository.

    Attributes:
        primary_path: Absolute path of the primary worktree.
        branch_name: Branch the entries belong to.
    """

    primary_path: str
    branch_name: str

    @property
    def type(self) -> ScopeType:
        return ScopeType.BRANCH


@dataclass(frozen=True)
class WorktreeScope:
    """Scope bound to one worktree of a repository.

    Attributes:
        primary_path: Absolute path of the primary worktree.
        worktree_id: Git's identifier for the worktree.
        worktree_path: Checkout location. Descriptive only; it takes no
            part in equality, storage keys or formatting.
    """

    primary_path: str
    worktree_id: str
    worktree_path: Optional[str] = field(default=None, compare=False)

    @property
    def type(self) -> ScopeType:
        return ScopeType.WORKTREE


Scope = Union[GlobalScope, RepositoryScope, BranchScope, WorktreeScope]


def is_global(scope: Scope) -> bool:
    return isinstance(scope, GlobalScope)


def is_repository(scope: Scope) -> bool:
    return isinstance(scope, RepositoryScope)


def is_branch(scope: Scope) -> bool:
    return isinstance(scope, BranchScope)


def is_worktree(scope: Scope) -> bool:
    return isinstance(scope, WorktreeScope)


def _unknown_variant(scope: Any) -> InvalidScopeError:
    return InvalidScopeError(f"invalid scope type: {scope!r}")


def _ensure_non_empty(message: str, value: Optional[str]) -> None:
    if not value or not value.strip():
        raise InvalidScopeError(message)


def validate(scope: Scope) -> None:
    """Check that a scope carries the attributes its variant requires.

    Args:
        scope: Scope value to check.

    Raises:
        InvalidScopeError: If a required attribute is empty or uses a
            reserved word, or the value is not a scope variant.
    """
    if isinstance(scope, GlobalScope):
        return
    if isinstance(scope, RepositoryScope):
        _ensure_non_empty(
            "repository scope requires a valid repository path",
            scope.primary_path,
        )
        if scope.primary_path == _RESERVED_GLOBAL:
            raise InvalidScopeError(
                'repository path cannot be "global" '
                "(reserved for global scope)"
            )
        return
    if isinstance(scope, BranchScope):
        _ensure_non_empty(
            "branch scope requires a valid repository path",
            scope.primary_path,
        )
        _ensure_non_empty(
            "branch scope requires a valid branch name", scope.branch_name
        )
        if scope.primary_path == _RESERVED_GLOBAL:
            raise InvalidScopeError(
                'branch scope cannot use "global" as repository path'
            )
        if scope.branch_name == _RESERVED_REPOSITORY:
            raise InvalidScopeError(
                'branch name "repository" is reserved for repository scope'
            )
        if scope.branch_name == _RESERVED_GLOBAL:
            raise InvalidScopeError(
                'branch name "global" is reserved for global scope'
            )
        return
    if isinstance(scope, WorktreeScope):
        _ensure_non_empty(
            "worktree scope requires a valid repository path",
            scope.primary_path,
        )
        _ensure_non_empty(
            "worktree scope requires a worktree id", scope.worktree_id
        )
        if scope.primary_path == _RESERVED_GLOBAL:
            raise InvalidScopeError(
                'worktree scope cannot use "global" as repository path'
            )
        if scope.worktree_id in (_RESERVED_GLOBAL, _RESERVED_REPOSITORY):
            raise InvalidScopeError(
                f'worktree id "{scope.worktree_id}" is reserved'
            )
        return
    raise _unknown_variant(scope)


def _encode(component: str) -> str:
    return quote(component, safe="/")


def storage_key(scope: Scope) -> str:
    """Return the canonical, collision-free key of a scope.

    Components are percent-encoded so the ``:`` and ``@`` separators
    never occur inside them.
    """
    if isinstance(scope, GlobalScope):
        return _RESERVED_GLOBAL
    if isinstance(scope, RepositoryScope):
        return f"repository:{_encode(scope.primary_path)}"
    if isinstance(scope, BranchScope):
        return (
            f"branch:{_encode(scope.primary_path)}"
            f":{_encode(scope.branch_name)}"
        )
    if isinstance(scope, WorktreeScope):
        return (
            f"worktree:{_encode(scope.primary_path)}"
            f"@{_encode(scope.worktree_id)}"
        )
    raise _unknown_variant(scope)


def format_scope(scope: Scope) -> str:
    if isinstance(scope, GlobalScope):
        return _RESERVED_GLOBAL
    if isinstance(scope, RepositoryScope):
        return scope.primary_path
    if isinstance(scope, BranchScope):
        return f"{scope.primary_path}:{scope.branch_name}"
    if isinstance(scope, WorktreeScope):
        return f"{scope.primary_path}@{scope.worktree_id}"
    raise _unknown_variant(scope)


def _display_name(path: str) -> str:
    if not path:
        return ""
    if path == "/":
        return "/"
    trimmed = path.rstrip("/") or "/"
    return os.path.basename(trimmed) or trimmed


def format_scope_short(scope: Scope) -> str:
    """Like format_scope, keeping only the last segment of the path."""
    if isinstance(scope, GlobalScope):
        return _RESERVED_GLOBAL
    if isinstance(scope, RepositoryScope):
        return _display_name(scope.primary_path)
    if isinstance(scope, BranchScope):
        return f"{_display_name(scope.primary_path)}:{scope.branch_name}"
    if isinstance(scope, WorktreeScope):
        return f"{_display_name(scope.primary_path)}@{scope.worktree_id}"
    raise _unknown_variant(scope)


def scope_dir_name(scope: Scope) -> str:
    """Return a filesystem-safe directory name for a scope's content.

    The readable prefix is lossy, so a digest of the storage key is
    appended to keep distinct scopes in distinct directories.
    """
    if isinstance(scope, GlobalScope):
        return _RESERVED_GLOBAL
    readable = _DIR_SANITIZE_PATTERN.sub("-", format_scope(scope)).strip("-")
    digest = hashlib.sha256(storage_key(scope).encode("utf-8")).hexdigest()
    return f"{readable}-{digest[:_DIR_DIGEST_LENGTH]}"


def scopes_equal(first: Scope, second: Scope) -> bool:
    return storage_key(first) == storage_key(second)


def scope_to_dict(scope: Scope) -> dict[str, Any]:
    """Flatten a scope into the column layout of the scopes table."""
    data: dict[str, Any] = {
        "type": scope.type.value,
        "primary_path": None,
        "branch_name": None,
        "worktree_id": None,
        "worktree_path": None,
    }
    if isinstance(scope, GlobalScope):
        return data
    if isinstance(scope, RepositoryScope):
        data["primary_path"] = scope.primary_path
    elif isinstance(scope, BranchScope):
        data["primary_path"] = scope.primary_path
        data["branch_name"] = scope.branch_name
    elif isinstance(scope, WorktreeScope):
        data["primary_path"] = scope.primary_path
        data["worktree_id"] = scope.worktree_id
        data["worktree_path"] = scope.worktree_path
    else:
        raise _unknown_variant(scope)
    return data


def scope_from_dict(data: dict[str, Any]) -> Scope:
    """Rebuild a scope from a scopes-table row or scope_to_dict output."""
    scope_type = ScopeType(data["type"])
    if scope_type == ScopeType.GLOBAL:
        return GlobalScope()
    if scope_type == ScopeType.REPOSITORY:
        return RepositoryScope(primary_path=data["primary_path"])
    if scope_type == ScopeType.BRANCH:
        return BranchScope(
            primary_path=data["primary_path"],
            branch_name=data["branch_name"],
        )
    return WorktreeScope(
        primary_path=data["primary_path"],
        worktree_id=data["worktree_id"],
        worktree_path=data.get("worktree_path"),
    )
