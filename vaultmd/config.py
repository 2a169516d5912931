"""Storage location resolution.

The vault lives under one directory holding the metadata database and the
content object tree. ``VAULT_DIR`` overrides the location; otherwise the
XDG data directory is used.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

VAULT_DIR_ENV = "VAULT_DIR"
XDG_DATA_HOME_ENV = "XDG_DATA_HOME"
APP_DIR_NAME = "vault.md"
DB_FILENAME = "index.db"
OBJECTS_DIRNAME = "objects"


def get_vault_dir(environ: Optional[Mapping[str, str]] = None) -> str:
    """Resolve the base directory for all vault storage.

    Args:
        environ: Environment mapping, defaults to ``os.environ``.

    Returns:
        ``$VAULT_DIR`` if set, else ``$XDG_DATA_HOME/vault.md``, else
        ``~/.local/share/vault.md``.
    """
    env = os.environ if environ is None else environ
    explicit = env.get(VAULT_DIR_ENV)
    if explicit:
        return explicit

    data_home = env.get(XDG_DATA_HOME_ENV) or os.path.join(
        os.path.expanduser("~"), ".local", "share"
    )
    return os.path.join(data_home, APP_DIR_NAME)


@dataclass(frozen=True)
class VaultConfig:
    """Resolved storage locations.

    Attributes:
        vault_dir: Root directory of the vault.
    """

    vault_dir: str

    @property
    def db_path(self) -> str:
        return os.path.join(self.vault_dir, DB_FILENAME)

    @property
    def objects_dir(self) -> str:
        return os.path.join(self.vault_dir, OBJECTS_DIRNAME)

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> "VaultConfig":
        return cls(vault_dir=get_vault_dir(environ))
