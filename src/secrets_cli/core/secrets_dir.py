"""Explicit handle for one secrets root directory.

Bundles path resolution, the config stores and the vault index behind a
single value so several roots can be used side by side.

Example:
    >>> root = SecretsDir(Path(".secrets"))
    >>> root.list_vaults()
    ['production', 'staging']
    >>> root.load_vault_config("production").members
    ['alice', 'bob']
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from . import config_store, paths, vault_index
from .models import GlobalConfig, VaultConfig

__all__ = [
    "SecretsDir",
    "find_secrets_dir",
]


@dataclass(frozen=True)
class SecretsDir:
    """Secrets root directory.

    Attributes
    ----------
    root : Path
        Directory holding ``config.yaml``, ``keys/`` and ``vaults/``
    atomic_writes : bool
        Passed through to the store ``save_*`` functions
    """

    root: Path
    atomic_writes: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.root, Path):
            object.__setattr__(self, "root", Path(self.root))

    @property
    def config_path(self) -> Path:
        return paths.global_config_path(self.root)

    @property
    def vaults_dir(self) -> Path:
        return paths.vaults_dir(self.root)

    @property
    def keys_dir(self) -> Path:
        return paths.keys_dir(self.root)

    def vault_dir(self, vault_name: str) -> Path:
        return paths.vault_dir(self.root, vault_name)

    def vault_config_path(self, vault_name: str) -> Path:
        return paths.vault_config_path(self.vault_dir(vault_name))

    def is_initialized(self) -> bool:
        """Check whether the global config file exists."""
        try:
            return self.config_path.is_file()
        except OSError:
            return False

    def load_config(self) -> GlobalConfig:
        return config_store.load_config(self.root)

    def save_config(self, cfg: GlobalConfig) -> None:
        config_store.save_config(self.root, cfg, atomic=self.atomic_writes)

    def load_vault_config(self, vault_name: str) -> VaultConfig:
        return config_store.load_vault_config(self.vault_dir(vault_name))

    def save_vault_config(self, cfg: VaultConfig, *, vault_name: str | None = None) -> None:
        """Save ``cfg`` into the directory of ``vault_name`` (default: ``cfg.name``)."""
        target = self.vault_dir(vault_name if vault_name is not None else cfg.name)
        config_store.save_vault_config(target, cfg, atomic=self.atomic_writes)

    def vault_exists(self, vault_name: str) -> bool:
        return vault_index.vault_exists(self.root, vault_name)

    def list_vaults(self) -> list[str]:
        return vault_index.list_vaults(self.root)


def find_secrets_dir(start: Path | str | None = None) -> SecretsDir | None:
    """Find the nearest initialized ``.secrets`` directory.

    Walks from ``start`` (default: current directory) up to the filesystem
    root, like git looks for ``.git``.

    Parameters
    ----------
    start
        Directory to start searching from

    Returns
    -------
    SecretsDir | None
        Handle for the first ``<dir>/.secrets`` holding ``config.yaml``
    """
    current = Path(start) if start is not None else Path.cwd()
    current = current.resolve()

    for directory in (current, *current.parents):
        candidate = SecretsDir(directory / paths.SECRETS_DIR_NAME)
        if candidate.is_initialized():
            return candidate

    return None
