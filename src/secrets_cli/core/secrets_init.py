"""Secrets directory initialization and vault provisioning.

Provides utilities to create the directory layout, provision vaults with
their initial record, and verify that an existing layout is consistent.
"""

from __future__ import annotations

import os
from dataclasses import replace
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING

from ..observability.loguru_config import get_logger, timing_context
from .config_store import load_config, load_vault_config, save_config, save_vault_config
from .errors import SecretsConfigError, SecretsInitError
from .models import GlobalConfig, VaultConfig
from .paths import global_config_path, keys_dir, validate_vault_name, vault_dir, vaults_dir
from .vault_index import list_vaults, vault_exists

if TYPE_CHECKING:
    from collections.abc import Iterable

__all__ = [
    "CONFIG_VERSION",
    "DIRECTORY_MODE",
    "create_vault",
    "init_secrets_dir",
    "touch_vault",
    "utc_now_iso",
    "verify_layout",
]

CONFIG_VERSION = "1"
DIRECTORY_MODE = 0o700

log = get_logger("init")


def utc_now_iso() -> str:
    """Current time as ISO-8601 UTC with a ``Z`` suffix, second precision."""
    return datetime.now(UTC).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def _make_dir(path: Path) -> None:
    path.mkdir(mode=DIRECTORY_MODE, parents=True, exist_ok=True)
    # mkdir mode is masked by umask
    os.chmod(path, DIRECTORY_MODE)


def init_secrets_dir(
    root: Path | str,
    *,
    owner: str,
    version: str = CONFIG_VERSION,
    force: bool = False,
) -> GlobalConfig:
    """Initialize secrets directory layout and global config.

    Parameters
    ----------
    root
        Secrets root directory (created if missing)
    owner
        Administrative owner recorded in the global config
    version
        Format version tag
    force
        Overwrite an existing global config

    Returns
    -------
    GlobalConfig
        Written global config

    Raises
    ------
    SecretsInitError
        If already initialized (without ``force``) or creation fails
    """
    root = Path(root)

    if global_config_path(root).exists() and not force:
        raise SecretsInitError(
            "secrets directory is already initialized. Use force=True to overwrite.",
            path=root,
            operation="init",
        )

    try:
        for directory in (root, keys_dir(root), vaults_dir(root)):
            _make_dir(directory)
    except OSError as exc:
        raise SecretsInitError(str(exc), path=root, operation="init") from exc

    cfg = GlobalConfig(version=version, owner=owner)
    save_config(root, cfg)

    log.info("Initialized secrets directory", root=str(root), owner=owner)
    return cfg


def create_vault(
    root: Path | str,
    name: str,
    *,
    members: Iterable[str] = (),
    description: str = "",
    created_at: str | None = None,
) -> VaultConfig:
    """Provision new vault directory and its initial record.

    Parameters
    ----------
    root
        Initialized secrets root directory
    name
        Vault name (validated)
    members
        Initial members, in order
    description
        Optional description
    created_at
        Creation timestamp (default: now, UTC)

    Returns
    -------
    VaultConfig
        Written vault config

    Raises
    ------
    InvalidVaultNameError
        If ``name`` is unsafe
    SecretsInitError
        If the root is not initialized or the vault already exists
    """
    root = Path(root)
    validate_vault_name(name)

    if not global_config_path(root).is_file():
        raise SecretsInitError(
            "secrets directory is not initialized", path=root, operation="create vault"
        )

    if vault_exists(root, name):
        raise SecretsInitError(
            f"vault '{name}' already exists", path=vault_dir(root, name), operation="create vault"
        )

    path = vault_dir(root, name)
    try:
        _make_dir(path)
    except OSError as exc:
        raise SecretsInitError(str(exc), path=path, operation="create vault") from exc

    cfg = VaultConfig(
        name=name,
        description=description,
        members=list(members),
        created_at=created_at or utc_now_iso(),
    )
    save_vault_config(path, cfg)

    log.info("Created vault", vault=name, members=len(cfg.members))
    return cfg


def touch_vault(cfg: VaultConfig) -> VaultConfig:
    """Return copy of ``cfg`` with ``updated_at`` set to now."""
    return replace(cfg, members=list(cfg.members), updated_at=utc_now_iso())


def verify_layout(root: Path | str) -> list[str]:
    """Verify secrets directory layout and records.

    Parameters
    ----------
    root
        Secrets root directory

    Returns
    -------
    list[str]
        List of issues found (empty if consistent)
    """
    root = Path(root)
    issues = []

    if not root.is_dir():
        return [f"Secrets directory does not exist: {root}"]

    try:
        config = load_config(root)
    except SecretsConfigError as exc:
        issues.append(str(exc))
    else:
        for field_name in ("version", "owner"):
            if not getattr(config, field_name):
                issues.append(f"config.yaml is missing required field: {field_name}")

    for directory in (keys_dir(root), vaults_dir(root)):
        if not directory.is_dir():
            issues.append(f"Missing required directory: {directory.name}")

    try:
        names = list_vaults(root)
    except SecretsConfigError as exc:
        issues.append(str(exc))
        return issues

    with timing_context("verify vault records", component="init", root=str(root)) as ctx:
        for name in sorted(names):
            try:
                cfg = load_vault_config(vault_dir(root, name))
            except SecretsConfigError as exc:
                issues.append(str(exc))
                continue

            if cfg.name != name:
                issues.append(f"Vault '{name}' has record name '{cfg.name}'")
            if not cfg.created_at:
                issues.append(f"Vault '{name}' is missing required field: created_at")

        ctx["vaults"] = len(names)

    return issues
