from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass
class EntryRecord:
    """A key within a scope, grouping one or more versions.

    Attributes:
        id: Surrogate key.
        scope_id: Owning scope row.
        key: Entry name, unique within the scope.
        created_at: When the first version of the key was stored.
    """

    id: int
    scope_id: int
    key: str
    created_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )


@dataclass
class EntryStatusRecord:
    """Mutable lifecycle state of an entry (one row per entry).

    Attributes:
        entry_id: Entry the status belongs to.
        is_archived: Whether the entry is hidden from default listings.
        current_version: Highest surviving version number.
        updated_at: Last time the row changed.
    """

    entry_id: int
    is_archived: bool = False
    current_version: int = 0
    updated_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
