"""Metadata store backed by SQLite.

Owns the single SQLite connection of a vault and exposes one DAL per
table. Multi-row mutations go through ``transaction()``, which hands out a
UnitOfWork whose DALs share the open transaction and commits or rolls
back as a whole.
"""

import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, Optional, TypeVar

from vaultmd.data.dal.entry_dal import EntryDAL
from vaultmd.data.dal.entry_status_dal import EntryStatusDAL
from vaultmd.data.dal.scope_dal import ScopeDAL
from vaultmd.data.dal.scoped_entry_dal import ScopedEntryDAL
from vaultmd.data.dal.version_dal import VersionDAL
from vaultmd.data.schema import SCHEMA_DDL
from vaultmd.domain.exceptions import StorageError
from vaultmd.log import logger

logger = logger.getChild(__name__)

T = TypeVar("T")

DEFAULT_BUSY_TIMEOUT = 30.0


@dataclass(frozen=True)
class UnitOfWork:
    """DAL set bound to one open transaction.

    Attributes:
        scopes: Scope table accessor.
        entries: Entry table accessor.
        statuses: Entry status table accessor.
        versions: Version table accessor.
        scoped_entries: Joined read queries.
    """

    scopes: ScopeDAL
    entries: EntryDAL
    statuses: EntryStatusDAL
    versions: VersionDAL
    scoped_entries: ScopedEntryDAL


class MetadataStore:
    """SQLite-backed store for scopes, entries, statuses and versions.

    The connection runs in autocommit mode: single statements outside a
    transaction commit immediately, and ``transaction()`` opens an
    explicit ``BEGIN IMMEDIATE`` so the write lock is held from the first
    read of a unit of work to its commit.

    Attributes:
        _db_path: Path to SQLite database file (or ':memory:').
        _timeout: Seconds to wait for a competing writer's lock.
        _conn: Lazy-initialized SQLite connection.
        _uow: DAL set bound to ``_conn``.
    """

    def __init__(
        self, db_path: str = ":memory:", timeout: float = DEFAULT_BUSY_TIMEOUT
    ) -> None:
        """Initialize with database path.

        Args:
            db_path: Path to SQLite database file.
                     Use ':memory:' for in-memory testing.
            timeout: Busy timeout in seconds.
        """
        self._db_path = db_path
        self._timeout = timeout
        self._conn: Optional[sqlite3.Connection] = None
        self._uow: Optional[UnitOfWork] = None

    @property
    def db_path(self) -> str:
        return self._db_path

    @property
    def conn(self) -> sqlite3.Connection:
        """Lazy-initialize and return the database connection.

        Returns:
            Active SQLite connection with WAL mode and foreign keys.
        """
        if self._conn is None:
            conn = sqlite3.connect(
                self._db_path, timeout=self._timeout, isolation_level=None
            )
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA foreign_keys=ON")
            conn.executescript(SCHEMA_DDL)
            self._conn = conn
            self._uow = UnitOfWork(
                scopes=ScopeDAL(conn),
                entries=EntryDAL(conn),
                statuses=EntryStatusDAL(conn),
                versions=VersionDAL(conn),
                scoped_entries=ScopedEntryDAL(conn),
            )
            logger.debug("Opened metadata store at %s", self._db_path)
        return self._conn

    @property
    def dal(self) -> UnitOfWork:
        """Accessors for reads outside a transaction."""
        self.conn  # ensure initialized
        return self._uow

    @property
    def scopes(self) -> ScopeDAL:
        return self.dal.scopes

    @property
    def entries(self) -> EntryDAL:
        return self.dal.entries

    @property
    def statuses(self) -> EntryStatusDAL:
        return self.dal.statuses

    @property
    def versions(self) -> VersionDAL:
        return self.dal.versions

    @property
    def scoped_entries(self) -> ScopedEntryDAL:
        return self.dal.scoped_entries

    @property
    def in_transaction(self) -> bool:
        return self._conn is not None and self._conn.in_transaction

    @contextmanager
    def transaction(self) -> Iterator[UnitOfWork]:
        """Run a block as one atomic unit of work.

        Yields:
            UnitOfWork whose DALs write inside the open transaction.

        Raises:
            StorageError: If a transaction is already open on this store.
        """
        conn = self.conn
        if conn.in_transaction:
            raise StorageError("A transaction is already open on this store")
        conn.execute("BEGIN IMMEDIATE")
        try:
            yield self._uow
            conn.execute("COMMIT")
        except BaseException:
            # SQLite may already have rolled back on some errors.
            if conn.in_transaction:
                conn.execute("ROLLBACK")
            logger.debug("Rolled back transaction on %s", self._db_path)
            raise

    def run(self, fn: Callable[[UnitOfWork], T]) -> T:
        """Execute ``fn`` inside one transaction and return its result."""
        with self.transaction() as uow:
            return fn(uow)

    # ── Lifecycle ─────────────────────────────────────────────

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            self._uow = None

    def __enter__(self) -> "MetadataStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
