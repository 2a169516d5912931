"""Git metadata discovery.

Queries ``git rev-parse`` in a directory to find the repository a scope
belongs to. A directory outside any repository is a normal result
(``is_git_repo=False``), never an error.
"""

import os
import subprocess
from dataclasses import dataclass
from typing import Optional

from vaultmd.log import logger

logger = logger.getChild(__name__)

PRIMARY_WORKTREE_ID = "primary"


@dataclass(frozen=True)
class GitInfo:
    """Repository facts for one working directory.

    Attributes:
        is_git_repo: False when the directory is not inside a repository.
        primary_worktree_path: Root of the main checkout.
        current_worktree_path: Root of the checkout containing the dir.
        current_branch: Abbreviated HEAD ref ("HEAD" when detached).
        is_worktree: True inside a linked (non-primary) worktree.
        worktree_id: Git's worktree name, or "primary".
        remote_url: URL of ``origin``, when configured.
    """

    is_git_repo: bool = False
    primary_worktree_path: Optional[str] = None
    current_worktree_path: Optional[str] = None
    current_branch: Optional[str] = None
    is_worktree: bool = False
    worktree_id: Optional[str] = None
    remote_url: Optional[str] = None


class GitCommandError(Exception):
    pass


def _git(cwd: str, *args: str) -> str:
    try:
        proc = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as exc:
        raise GitCommandError(str(exc)) from exc
    if proc.returncode != 0:
        raise GitCommandError(proc.stderr.strip())
    return proc.stdout.strip()


def get_git_info(dir: Optional[str] = None) -> GitInfo:  # noqa: A002
    """Describe the repository containing ``dir``.

    Args:
        dir: Directory to inspect, defaults to the current directory.

    Returns:
        GitInfo; ``is_git_repo`` is False outside a repository or when
        git is not installed.
    """
    cwd = dir or os.getcwd()
    try:
        toplevel = _git(cwd, "rev-parse", "--show-toplevel")
        branch = _git(cwd, "rev-parse", "--abbrev-ref", "HEAD")
        git_dir = _git(cwd, "rev-parse", "--git-dir")
    except GitCommandError as exc:
        logger.debug("%s is not a git repository: %s", cwd, exc)
        return GitInfo()
    if not toplevel:
        return GitInfo()

    if not os.path.isabs(git_dir):
        git_dir = os.path.join(cwd, git_dir)
    git_dir = os.path.normpath(git_dir)
    # Linked worktrees keep their objects in the common dir.
    is_worktree = not os.path.exists(os.path.join(git_dir, "objects"))

    primary = toplevel
    try:
        common_dir = _git(cwd, "rev-parse", "--git-common-dir")
    except GitCommandError:
        common_dir = ""
    if common_dir:
        if not os.path.isabs(common_dir):
            common_dir = os.path.join(cwd, common_dir)
        primary = os.path.dirname(os.path.normpath(common_dir))

    basename = os.path.basename(git_dir)
    worktree_id = PRIMARY_WORKTREE_ID if basename == ".git" else basename

    try:
        remote_url = _git(cwd, "config", "--get", "remote.origin.url") or None
    except GitCommandError:
        remote_url = None

    return GitInfo(
        is_git_repo=True,
        primary_worktree_path=primary,
        current_worktree_path=toplevel,
        current_branch=branch,
        is_worktree=is_worktree,
        worktree_id=worktree_id,
        remote_url=remote_url,
    )
