from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional


@dataclass(frozen=True)
class ScopedEntry:
    """Read view joining an entry, one of its versions and its status.

    Attributes:
        id: Entry id.
        scope_id: Scope the entry lives in.
        key: Entry key.
        version: Version number this view describes.
        file_path: Content store location of that version.
        hash: SHA-256 hex digest of that version.
        description: Optional note attached to the version.
        created_at: When that version was stored.
        is_archived: The entry's archived flag (shared by all versions).
    """

    id: int
    scope_id: int
    key: str
    version: int
    file_path: str
    hash: str
    description: Optional[str] = None
    created_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    is_archived: bool = False

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["created_at"] = self.created_at.isoformat()
        return data
