"""SQLite DDL for vault metadata persistence.

Defines the scopes, entries, entry_status and versions tables.
Used by MetadataStore to ensure tables exist on first access.
"""

SCHEMA_DDL = """
CREATE TABLE IF NOT EXISTS scopes (
    id            INTEGER PRIMARY KEY AUTOINCREMENT,
    type          TEXT NOT NULL
                  CHECK(type IN ('global', 'repository', 'branch', 'worktree')),
    primary_path  TEXT,
    branch_name   TEXT,
    worktree_id   TEXT,
    worktree_path TEXT,
    storage_key   TEXT NOT NULL UNIQUE,
    created_at    TEXT NOT NULL,
    updated_at    TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS entries (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    scope_id    INTEGER NOT NULL REFERENCES scopes(id),
    key         TEXT NOT NULL,
    created_at  TEXT NOT NULL,
    UNIQUE(scope_id, key)
);

CREATE TABLE IF NOT EXISTS entry_status (
    entry_id        INTEGER PRIMARY KEY REFERENCES entries(id),
    is_archived     INTEGER NOT NULL DEFAULT 0,
    current_version INTEGER NOT NULL DEFAULT 0,
    updated_at      TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS versions (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    entry_id    INTEGER NOT NULL REFERENCES entries(id),
    version     INTEGER NOT NULL CHECK(version >= 1),
    file_path   TEXT NOT NULL,
    hash        TEXT NOT NULL,
    description TEXT,
    created_at  TEXT NOT NULL,
    UNIQUE(entry_id, version)
);

CREATE INDEX IF NOT EXISTS idx_scopes_lookup
    ON scopes(type, primary_path, branch_name);
CREATE INDEX IF NOT EXISTS idx_scopes_primary_path
    ON scopes(primary_path);
CREATE INDEX IF NOT EXISTS idx_versions_lookup
    ON versions(entry_id, version DESC);
"""
