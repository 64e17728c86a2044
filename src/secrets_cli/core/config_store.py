"""Load and save global and per-vault configuration records.

Global config lives at ``<root>/config.yaml``, vault config at
``<vault_dir>/vault.yaml``. Errors from the serializer are re-raised with
the operation and path attached; nothing is retried.
"""

from __future__ import annotations

from pathlib import Path

from .config_io import read_bytes, write_bytes
from .errors import DeserializationError, SerializationError
from .models import GlobalConfig, VaultConfig
from .paths import global_config_path, vault_config_path
from .yaml_serializer import (
    decode_global_config,
    decode_vault_config,
    encode_global_config,
    encode_vault_config,
)

__all__ = [
    "load_config",
    "load_vault_config",
    "save_config",
    "save_vault_config",
]


def load_config(root: Path | str) -> GlobalConfig:
    """Load the global config from ``<root>/config.yaml``.

    Parameters
    ----------
    root
        Secrets root directory

    Returns
    -------
    GlobalConfig
        Decoded record

    Raises
    ------
    NotFoundError
        If the config file does not exist
    ReadError
        On other I/O failure
    DeserializationError
        If the content is malformed
    """
    path = global_config_path(root)
    operation = "load config"
    data = read_bytes(path, operation=operation)

    try:
        return decode_global_config(data)
    except DeserializationError as exc:
        raise DeserializationError(exc.reason, path=path, operation=operation) from exc


def save_config(root: Path | str, cfg: GlobalConfig, *, atomic: bool = True) -> None:
    """Save the global config to ``<root>/config.yaml``.

    The root directory must already exist.

    Raises
    ------
    SerializationError
        If the record cannot be encoded
    WriteError
        If the file cannot be written
    """
    path = global_config_path(root)
    operation = "save config"

    try:
        data = encode_global_config(cfg)
    except SerializationError as exc:
        raise SerializationError(exc.reason, path=path, operation=operation) from exc

    write_bytes(path, data, operation=operation, atomic=atomic)


def load_vault_config(vault_dir: Path | str) -> VaultConfig:
    """Load a vault's config from ``<vault_dir>/vault.yaml``.

    Parameters
    ----------
    vault_dir
        Vault directory (see ``paths.vault_dir``)

    Returns
    -------
    VaultConfig
        Decoded record

    Raises
    ------
    NotFoundError
        If the vault config file does not exist
    ReadError
        On other I/O failure
    DeserializationError
        If the content is malformed
    """
    path = vault_config_path(vault_dir)
    operation = "load vault config"
    data = read_bytes(path, operation=operation)

    try:
        return decode_vault_config(data)
    except DeserializationError as exc:
        raise DeserializationError(exc.reason, path=path, operation=operation) from exc


def save_vault_config(vault_dir: Path | str, cfg: VaultConfig, *, atomic: bool = True) -> None:
    """Save a vault's config to ``<vault_dir>/vault.yaml``.

    The vault directory must already exist. ``cfg.name`` is written as-is and
    not compared with the directory name.

    Raises
    ------
    SerializationError
        If the record cannot be encoded
    WriteError
        If the file cannot be written
    """
    path = vault_config_path(vault_dir)
    operation = "save vault config"

    try:
        data = encode_vault_config(cfg)
    except SerializationError as exc:
        raise SerializationError(exc.reason, path=path, operation=operation) from exc

    write_bytes(path, data, operation=operation, atomic=atomic)
