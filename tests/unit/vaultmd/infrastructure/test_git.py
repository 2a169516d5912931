"""Tests for git metadata discovery with a mocked subprocess."""

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from vaultmd.infrastructure.git import GitInfo, get_git_info


def _completed(stdout="", returncode=0):
    proc = MagicMock(spec=subprocess.CompletedProcess)
    proc.stdout = stdout
    proc.stderr = "" if returncode == 0 else "fatal: not a git repository"
    proc.returncode = returncode
    return proc


def _fake_git(responses):
    """Build a subprocess.run replacement keyed by git arguments."""

    def run(cmd, **kwargs):
        key = " ".join(cmd[1:])
        if key not in responses:
            return _completed(returncode=1)
        return _completed(responses[key] + "\n")

    return run


class TestNotARepo:
    def test_returns_empty_info(self, tmp_path):
        with patch(
            "vaultmd.infrastructure.git.subprocess.run",
            side_effect=_fake_git({}),
        ):
            assert get_git_info(str(tmp_path)) == GitInfo()

    def test_git_missing(self, tmp_path):
        with patch(
            "vaultmd.infrastructure.git.subprocess.run",
            side_effect=FileNotFoundError("git"),
        ):
            assert get_git_info(str(tmp_path)).is_git_repo is False


class TestPrimaryCheckout:
    """Verify detection inside the main worktree."""

    @pytest.fixture
    def repo(self, tmp_path):
        (tmp_path / ".git" / "objects").mkdir(parents=True)
        return tmp_path

    def test_info(self, repo):
        responses = {
            "rev-parse --show-toplevel": str(repo),
            "rev-parse --abbrev-ref HEAD": "main",
            "rev-parse --git-dir": ".git",
            "rev-parse --git-common-dir": ".git",
            "config --get remote.origin.url": "git@example.com:me/proj.git",
        }
        with patch(
            "vaultmd.infrastructure.git.subprocess.run",
            side_effect=_fake_git(responses),
        ):
            info = get_git_info(str(repo))

        assert info.is_git_repo is True
        assert info.primary_worktree_path == str(repo)
        assert info.current_worktree_path == str(repo)
        assert info.current_branch == "main"
        assert info.is_worktree is False
        assert info.worktree_id == "primary"
        assert info.remote_url == "git@example.com:me/proj.git"

    def test_no_remote(self, repo):
        responses = {
            "rev-parse --show-toplevel": str(repo),
            "rev-parse --abbrev-ref HEAD": "main",
            "rev-parse --git-dir": ".git",
            "rev-parse --git-common-dir": ".git",
        }
        with patch(
            "vaultmd.infrastructure.git.subprocess.run",
            side_effect=_fake_git(responses),
        ):
            assert get_git_info(str(repo)).remote_url is None


class TestLinkedWorktree:
    def test_info(self, tmp_path):
        primary = tmp_path / "proj"
        wt_git_dir = primary / ".git" / "worktrees" / "feature"
        wt_git_dir.mkdir(parents=True)
        (primary / ".git" / "objects").mkdir()
        checkout = tmp_path / "feature"
        checkout.mkdir()

        responses = {
            "rev-parse --show-toplevel": str(checkout),
            "rev-parse --abbrev-ref HEAD": "feature",
            "rev-parse --git-dir": str(wt_git_dir),
            "rev-parse --git-common-dir": str(primary / ".git"),
        }
        with patch(
            "vaultmd.infrastructure.git.subprocess.run",
            side_effect=_fake_git(responses),
        ):
            info = get_git_info(str(checkout))

        assert info.is_worktree is True
        assert info.worktree_id == "feature"
        assert info.primary_worktree_path == str(primary)
        assert info.current_worktree_path == str(checkout)
