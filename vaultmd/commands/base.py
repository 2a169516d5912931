"""Base class for command-line subcommands."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

from vaultmd.log import logger

if TYPE_CHECKING:
    from argparse import Namespace

    from vaultmd.app.vault import Vault
    from vaultmd.domain.scope import Scope

logger = logger.getChild(__name__)


class CmdBase(ABC):
    """A subcommand bound to its parsed arguments.

    The Vault is opened on first use and closed by ``do_run``.

    Attributes:
        args: Parsed command-line arguments.
    """

    def __init__(self, args: "Namespace") -> None:
        self.args = args
        self._vault: Optional["Vault"] = None

    @property
    def vault(self) -> "Vault":
        if self._vault is None:
            from vaultmd.app.vault import Vault
            from vaultmd.config import VaultConfig

            self._vault = Vault(VaultConfig.from_env())
        return self._vault

    @property
    def scope(self) -> "Scope":
        """Scope selected by --scope/--repo/--branch/--worktree."""
        from vaultmd.app.scope_resolver import ScopeOptions, resolve_scope

        return resolve_scope(
            ScopeOptions(
                type=self.args.scope,
                repo=self.args.repo,
                branch=self.args.branch,
                worktree=self.args.worktree,
            )
        )

    def do_run(self) -> int:
        try:
            return self.run()
        finally:
            if self._vault is not None:
                self._vault.close()
                self._vault = None

    @abstractmethod
    def run(self) -> int:
        pass
