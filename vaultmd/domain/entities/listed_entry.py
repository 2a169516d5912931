from dataclasses import dataclass

from vaultmd.domain.entities.scoped_entry import ScopedEntry
from vaultmd.domain.scope import Scope, format_scope_short


@dataclass(frozen=True)
class ListedEntry:
    """A listed entry together with the scope it was found in.

    Attributes:
        entry: The listed version.
        scope: Scope holding the entry.
    """

    entry: ScopedEntry
    scope: Scope

    @property
    def scope_short(self) -> str:
        return format_scope_short(self.scope)
