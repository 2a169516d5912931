"""Tests for ScopeService lookups and cascade deletion."""

import pytest

from vaultmd.domain.exceptions import InvalidScopeError
from vaultmd.domain.scope import (
    BranchScope,
    GlobalScope,
    RepositoryScope,
    WorktreeScope,
)


class TestGetOrCreate:
    """Verify scope provisioning."""

    def test_idempotent(self, scope_service, branch_scope):
        first = scope_service.get_or_create(branch_scope)
        second = scope_service.get_or_create(
            BranchScope(branch_scope.primary_path, branch_scope.branch_name)
        )
        assert first == second

    def test_distinct_scopes_distinct_ids(self, scope_service):
        ids = {
            scope_service.get_or_create(scope)
            for scope in (
                GlobalScope(),
                RepositoryScope("/r"),
                BranchScope("/r", "main"),
                WorktreeScope("/r", "main"),
            )
        }
        assert len(ids) == 4

    def test_validates_first(self, scope_service):
        with pytest.raises(InvalidScopeError):
            scope_service.get_or_create(BranchScope("/r", "global"))
        assert scope_service.list_all() == []

    def test_record_round_trip(self, scope_service, worktree_scope):
        scope_id = scope_service.get_or_create(worktree_scope)
        record = scope_service.get_by_id(scope_id)
        assert record.scope == worktree_scope
        assert record.scope.worktree_path == "/home/user/wt-1"
        assert record.storage_key == "worktree:/home/user/project@wt-1"


class TestLookup:
    def test_find_does_not_create(self, scope_service, repo_scope):
        assert scope_service.find_scope_id(repo_scope) is None
        assert scope_service.list_all() == []

    def test_find_existing(self, scope_service, repo_scope):
        scope_id = scope_service.get_or_create(repo_scope)
        assert scope_service.find_scope_id(repo_scope) == scope_id
        assert scope_service.get(repo_scope).id == scope_id

    def test_list_by_primary_path(
        self, scope_service, repo_scope, branch_scope, worktree_scope
    ):
        for scope in (GlobalScope(), repo_scope, branch_scope, worktree_scope):
            scope_service.get_or_create(scope)
        records = scope_service.list_by_primary_path(repo_scope.primary_path)
        assert {r.scope for r in records} == {
            repo_scope, branch_scope, worktree_scope
        }


class TestDelete:
    """Verify cascade deletion of scopes."""

    def test_delete_branch_scope(
        self, scope_service, entry_service, put, repo_scope, branch_scope
    ):
        put(branch_scope, "a", "1")
        put(branch_scope, "a", "2")
        put(branch_scope, "b", "1")
        put(repo_scope, "a", "repo")

        count = scope_service.delete_scope(
            branch_scope.primary_path, branch_scope.branch_name
        )
        assert count == 3
        assert scope_service.find_scope_id(branch_scope) is None
        repo_id = scope_service.find_scope_id(repo_scope)
        assert entry_service.get_latest(repo_id, "a") is not None

    def test_delete_repository_scope_only(
        self, scope_service, put, repo_scope, branch_scope
    ):
        put(repo_scope, "a", "1")
        put(branch_scope, "a", "1")
        assert scope_service.delete_scope(repo_scope.primary_path) == 1
        assert scope_service.find_scope_id(branch_scope) is not None

    def test_delete_missing_returns_zero(self, scope_service):
        assert scope_service.delete_scope("/nope") == 0
        assert scope_service.delete_scope("/nope", "main") == 0

    def test_delete_by_storage_key(self, scope_service, put, worktree_scope):
        put(worktree_scope, "a", "1")
        put(worktree_scope, "a", "2")
        assert scope_service.delete_scope_by_storage_key(worktree_scope) == 2
        assert scope_service.find_scope_id(worktree_scope) is None
        assert scope_service.delete_scope_by_storage_key(worktree_scope) == 0

    def test_delete_all_branches(
        self, scope_service, put, repo_scope, branch_scope, worktree_scope
    ):
        put(repo_scope, "a", "1")
        put(branch_scope, "a", "1")
        put(worktree_scope, "a", "1")
        put(GlobalScope(), "a", "1")

        assert scope_service.delete_all_branches(repo_scope.primary_path) == 3
        assert scope_service.list_by_primary_path(repo_scope.primary_path) == []
        assert scope_service.find_scope_id(GlobalScope()) is not None


class TestListGroupedEntries:
    def test_groups_by_scope(
        self, scope_service, entry_service, put, repo_scope, branch_scope
    ):
        put(repo_scope, "a", "1")
        put(repo_scope, "b", "1")
        put(branch_scope, "c", "1")
        put(branch_scope, "c", "2")
        scope_service.get_or_create(GlobalScope())

        groups = {
            record.scope: [(e.key, e.version) for e in entries]
            for record, entries in scope_service.list_grouped_entries()
        }
        assert groups == {
            repo_scope: [("a", 1), ("b", 1)],
            branch_scope: [("c", 2)],
        }

    def test_archived_hidden(self, scope_service, entry_service, put, repo_scope):
        put(repo_scope, "a", "1")
        entry_service.archive(scope_service.find_scope_id(repo_scope), "a")
        assert scope_service.list_grouped_entries() == []
        assert len(scope_service.list_grouped_entries(include_archived=True)) == 1
