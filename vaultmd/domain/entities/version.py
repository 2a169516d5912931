from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


@dataclass(frozen=True)
class VersionRecord:
    """Immutable snapshot of an entry's content.

    Attributes:
        id: Surrogate key.
        entry_id: Owning entry.
        version: Positive version number, unique within the entry.
        file_path: Content store location of the payload.
        hash: SHA-256 hex digest of the payload.
        description: Optional free-form note supplied on set.
        created_at: When the version was stored.
    """

    id: int
    entry_id: int
    version: int
    file_path: str
    hash: str
    description: Optional[str] = None
    created_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    def __post_init__(self) -> None:
        """Validate that version number is >= 1."""
        if self.version < 1:
            raise ValueError(f"Version number must be >= 1, got {self.version}")
