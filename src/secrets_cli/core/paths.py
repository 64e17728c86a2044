"""Canonical on-disk locations for the secrets directory layout.

Layout::

    <root>/
      config.yaml
      keys/
      vaults/
        <vault_name>/
          vault.yaml

The resolver functions are pure: they never touch the filesystem and accept
any string as a vault name. Callers taking names from user input must run
``validate_vault_name`` first.
"""

from __future__ import annotations

import re
from pathlib import Path

from .errors import InvalidVaultNameError

__all__ = [
    "CONFIG_FILENAME",
    "KEYS_DIRNAME",
    "SECRETS_DIR_NAME",
    "VAULTS_DIRNAME",
    "VAULT_CONFIG_FILENAME",
    "global_config_path",
    "is_valid_vault_name",
    "keys_dir",
    "validate_vault_name",
    "vault_config_path",
    "vault_dir",
    "vaults_dir",
]

SECRETS_DIR_NAME = ".secrets"
CONFIG_FILENAME = "config.yaml"
VAULT_CONFIG_FILENAME = "vault.yaml"
VAULTS_DIRNAME = "vaults"
KEYS_DIRNAME = "keys"

# Letters, digits, dot, underscore, hyphen; no leading dot or hyphen
VAULT_NAME_PATTERN = re.compile(r"[A-Za-z0-9_][A-Za-z0-9._-]{0,63}")


def global_config_path(root: Path | str) -> Path:
    """Return ``<root>/config.yaml``."""
    return Path(root) / CONFIG_FILENAME


def vaults_dir(root: Path | str) -> Path:
    """Return ``<root>/vaults``."""
    return Path(root) / VAULTS_DIRNAME


def vault_dir(root: Path | str, vault_name: str) -> Path:
    """Return ``<root>/vaults/<vault_name>``.

    Parameters
    ----------
    root
        Secrets root directory
    vault_name
        Vault name, used verbatim

    Returns
    -------
    Path
        Vault directory path
    """
    return vaults_dir(root) / vault_name


def vault_config_path(vault_path: Path | str) -> Path:
    """Return ``<vault_path>/vault.yaml``."""
    return Path(vault_path) / VAULT_CONFIG_FILENAME


def keys_dir(root: Path | str) -> Path:
    """Return ``<root>/keys``."""
    return Path(root) / KEYS_DIRNAME


def is_valid_vault_name(name: str) -> bool:
    """Check whether ``name`` is safe to use as a vault directory name.

    Parameters
    ----------
    name
        Candidate vault name

    Returns
    -------
    bool
        True if the name matches ``VAULT_NAME_PATTERN``
    """
    if not isinstance(name, str):
        return False
    return VAULT_NAME_PATTERN.fullmatch(name) is not None


def validate_vault_name(name: str) -> str:
    """Validate vault name and return it unchanged.

    Raises
    ------
    InvalidVaultNameError
        If the name could escape the vaults directory or is otherwise unsafe
    """
    if not is_valid_vault_name(name):
        raise InvalidVaultNameError(
            f"Invalid vault name: {name!r}. Use 1-64 letters, digits, '.', '_' or '-', "
            "not starting with '.' or '-'."
        )
    return name
