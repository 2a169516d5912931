"""Conversions between DAL row dictionaries and domain records."""

from datetime import datetime
from typing import Any

from vaultmd.domain.entities.entry import EntryRecord, EntryStatusRecord
from vaultmd.domain.entities.scope_record import ScopeRecord
from vaultmd.domain.entities.scoped_entry import ScopedEntry
from vaultmd.domain.entities.version import VersionRecord
from vaultmd.domain.scope import Scope, scope_from_dict, scope_to_dict, storage_key


def scope_to_row(scope: Scope) -> dict[str, Any]:
    """Convert a scope value to the parameters of ScopeDAL.get_or_create."""
    data = scope_to_dict(scope)
    data["storage_key"] = storage_key(scope)
    return data


def scope_record_from_row(data: dict[str, Any]) -> ScopeRecord:
    return ScopeRecord(
        id=data["id"],
        scope=scope_from_dict(data),
        storage_key=data["storage_key"],
        created_at=datetime.fromisoformat(data["created_at"]),
        updated_at=datetime.fromisoformat(data["updated_at"]),
    )


def entry_record_from_row(data: dict[str, Any]) -> EntryRecord:
    return EntryRecord(
        id=data["id"],
        scope_id=data["scope_id"],
        key=data["key"],
        created_at=datetime.fromisoformat(data["created_at"]),
    )


def entry_status_from_row(data: dict[str, Any]) -> EntryStatusRecord:
    return EntryStatusRecord(
        entry_id=data["entry_id"],
        is_archived=bool(data["is_archived"]),
        current_version=data["current_version"],
        updated_at=datetime.fromisoformat(data["updated_at"]),
    )


def version_record_from_row(data: dict[str, Any]) -> VersionRecord:
    return VersionRecord(
        id=data["id"],
        entry_id=data["entry_id"],
        version=data["version"],
        file_path=data["file_path"],
        hash=data["hash"],
        description=data["description"],
        created_at=datetime.fromisoformat(data["created_at"]),
    )


def scoped_entry_from_row(data: dict[str, Any]) -> ScopedEntry:
    return ScopedEntry(
        id=data["id"],
        scope_id=data["scope_id"],
        key=data["key"],
        version=data["version"],
        file_path=data["file_path"],
        hash=data["hash"],
        description=data["description"],
        created_at=datetime.fromisoformat(data["created_at"]),
        is_archived=bool(data["is_archived"]),
    )
