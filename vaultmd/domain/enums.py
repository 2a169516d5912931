from enum import Enum


class ScopeType(str, Enum):
    """Variants of the scope hierarchy, most general first."""

    GLOBAL = "global"
    REPOSITORY = "repository"
    BRANCH = "branch"
    WORKTREE = "worktree"
