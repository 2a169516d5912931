"""Shared fixtures for vaultmd unit tests."""

import logging

import pytest

from vaultmd.app.services.entry_service import EntryService
from vaultmd.app.services.move_service import MoveService
from vaultmd.app.services.scope_service import ScopeService
from vaultmd.app.vault import Vault
from vaultmd.config import VaultConfig
from vaultmd.data.adapters.local_content_store import LocalContentStore
from vaultmd.data.metadata_sqlite import MetadataStore
from vaultmd.domain.scope import (
    BranchScope,
    GlobalScope,
    RepositoryScope,
    WorktreeScope,
)
from vaultmd.domain.services.integrity_service import IntegrityService
from vaultmd.domain.services.resolution_service import ResolutionService

REPO_PATH = "/home/user/project"


# ── Scope Fixtures ────────────────────────────────────────────


@pytest.fixture
def global_scope():
    return GlobalScope()


@pytest.fixture
def repo_scope():
    return RepositoryScope(REPO_PATH)


@pytest.fixture
def branch_scope():
    return BranchScope(REPO_PATH, "feature/login")


@pytest.fixture
def worktree_scope():
    return WorktreeScope(REPO_PATH, "wt-1", "/home/user/wt-1")


# ── Store Fixtures ────────────────────────────────────────────


@pytest.fixture
def store():
    """In-memory MetadataStore for isolated tests.

    Yields:
        MetadataStore connected to ':memory:' database.
        Automatically closed after test.
    """
    s = MetadataStore(":memory:")
    yield s
    s.close()


@pytest.fixture
def content_store(tmp_path):
    """LocalContentStore rooted in a temporary directory."""
    return LocalContentStore(str(tmp_path / "objects"))


# ── Service Fixtures ──────────────────────────────────────────


@pytest.fixture
def scope_service(store):
    return ScopeService(store)


@pytest.fixture
def entry_service(store):
    return EntryService(store)


@pytest.fixture
def move_service(store, content_store):
    return MoveService(store, content_store)


@pytest.fixture
def integrity_service(content_store):
    return IntegrityService(content_store)


@pytest.fixture
def resolution_service(scope_service, entry_service, integrity_service):
    return ResolutionService(scope_service, entry_service, integrity_service)


# ── Facade Fixtures ───────────────────────────────────────────


@pytest.fixture
def vault_config(tmp_path):
    return VaultConfig(vault_dir=str(tmp_path / "vault"))


@pytest.fixture
def vault(vault_config):
    """Vault on a temporary directory.

    Yields:
        Vault backed by a file database under tmp_path.
        Automatically closed after test.
    """
    v = Vault(vault_config)
    yield v
    v.close()


@pytest.fixture
def put(scope_service, entry_service, content_store):
    """Store content through the services, as Vault.set does.

    Returns:
        Callable (scope, key, content, description=None) -> ScopedEntry.
    """
    from vaultmd.domain.scope import scope_dir_name

    def _put(scope, key, content, description=None):
        scope_id = scope_service.get_or_create(scope)
        dir_name = scope_dir_name(scope)
        return entry_service.append_version(
            scope_id,
            key,
            lambda version: content_store.save(dir_name, key, version, content),
            description=description,
        )

    return _put


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo handlers installed by vaultmd.log.setup() between tests."""
    from vaultmd.log import logger

    yield
    for handler in list(logger.handlers):
        if getattr(handler, "_vaultmd_handler", False):
            logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
