"""Turn command-line scope options into a validated scope."""

from dataclasses import dataclass
from typing import Optional

from vaultmd.domain.enums import ScopeType
from vaultmd.domain.exceptions import InvalidScopeError
from vaultmd.domain.scope import (
    BranchScope,
    GlobalScope,
    RepositoryScope,
    Scope,
    WorktreeScope,
    validate,
)
from vaultmd.infrastructure.git import GitInfo, get_git_info


@dataclass
class ScopeOptions:
    """Raw scope selection from the command line.

    Attributes:
        type: Scope type name; repository when omitted.
        repo: Explicit repository path.
        branch: Explicit branch name.
        worktree: Explicit worktree id.
        working_dir: Directory git information is read from.
    """

    type: Optional[str] = None
    repo: Optional[str] = None
    branch: Optional[str] = None
    worktree: Optional[str] = None
    working_dir: Optional[str] = None


def _parse_type(value: Optional[str]) -> ScopeType:
    if not value:
        return ScopeType.REPOSITORY
    try:
        return ScopeType(value)
    except ValueError:
        valid = ", ".join(t.value for t in ScopeType)
        raise InvalidScopeError(
            f"invalid scope: {value} (valid values: {valid})"
        ) from None


def resolve_scope(opts: ScopeOptions) -> Scope:
    """Resolve options into a scope, filling gaps from git.

    Repository scope falls back to global outside a git repository when no
    ``repo`` is given. Branch and worktree scopes need their values either
    from the options or from git.

    Raises:
        InvalidScopeError: If the options are inconsistent or incomplete.
    """
    scope_type = _parse_type(opts.type)

    if scope_type == ScopeType.GLOBAL:
        if opts.repo or opts.branch or opts.worktree:
            raise InvalidScopeError(
                "--repo, --branch, and --worktree require an explicit --scope"
            )
        return GlobalScope()

    info: Optional[GitInfo] = None

    def git() -> GitInfo:
        nonlocal info
        if info is None:
            info = get_git_info(opts.working_dir)
        return info

    repo = opts.repo
    if scope_type == ScopeType.REPOSITORY:
        if not repo:
            if not git().is_git_repo:
                return GlobalScope()
            repo = git().primary_worktree_path
        scope: Scope = RepositoryScope(repo)

    elif scope_type == ScopeType.BRANCH:
        branch = opts.branch
        if (not repo or not branch) and git().is_git_repo:
            repo = repo or git().primary_worktree_path
            branch = branch or git().current_branch
        if not repo or not branch:
            raise InvalidScopeError(
                "--scope branch requires both --repo and --branch, "
                "or must be run from a git repository"
            )
        scope = BranchScope(repo, branch)

    else:
        worktree = opts.worktree
        worktree_path = None
        if (not repo or not worktree) and git().is_git_repo:
            repo = repo or git().primary_worktree_path
            if not worktree:
                worktree = git().worktree_id
                worktree_path = git().current_worktree_path
        if not repo or not worktree:
            raise InvalidScopeError(
                "--scope worktree requires both --repo and --worktree, "
                "or must be run from a git worktree"
            )
        scope = WorktreeScope(repo, worktree, worktree_path)

    validate(scope)
    return scope
