"""Vault discovery by inspecting ``<root>/vaults``.

A vault is any directory-type entry under the vaults directory. Regular
files and symlinks are not listed, though ``vault_exists`` follows a
symlink to its target.
"""

from __future__ import annotations

import os
from pathlib import Path

from .errors import ReadError
from .paths import vault_dir, vaults_dir

__all__ = [
    "list_vaults",
    "vault_exists",
]


def vault_exists(root: Path | str, vault_name: str) -> bool:
    """Check if a vault directory exists.

    Best effort: any filesystem error, including a missing root or denied
    permission, is reported as ``False``.

    Parameters
    ----------
    root
        Secrets root directory
    vault_name
        Vault name

    Returns
    -------
    bool
        True iff ``<root>/vaults/<vault_name>`` is a directory
    """
    try:
        return vault_dir(root, vault_name).is_dir()
    except (OSError, ValueError):
        return False


def list_vaults(root: Path | str) -> list[str]:
    """List vault names under ``<root>/vaults``.

    Order follows the filesystem and is not stable across platforms.

    Parameters
    ----------
    root
        Secrets root directory

    Returns
    -------
    list[str]
        Vault names; empty when the vaults directory does not exist

    Raises
    ------
    ReadError
        If the vaults directory exists but cannot be read
    """
    path = vaults_dir(root)

    try:
        with os.scandir(path) as entries:
            return [entry.name for entry in entries if _is_dir(entry)]
    except FileNotFoundError:
        return []
    except OSError as exc:
        raise ReadError(str(exc), path=path, operation="list vaults") from exc


def _is_dir(entry: os.DirEntry[str]) -> bool:
    # Entry type only: a symlink to a directory is not a directory entry
    try:
        return entry.is_dir(follow_symlinks=False)
    except OSError:
        return False
