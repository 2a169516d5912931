from dataclasses import dataclass, field
from datetime import datetime, timezone

from vaultmd.domain.scope import Scope


@dataclass
class ScopeRecord:
    """Persisted scope row.

    Attributes:
        id: Surrogate key assigned on first persistence.
        scope: The scope value the row stores.
        storage_key: Canonical key of ``scope`` (unique per row).
        created_at: When the row was first inserted.
        updated_at: When the row's attributes were last refreshed.
    """

    id: int
    scope: Scope
    storage_key: str
    created_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    updated_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
