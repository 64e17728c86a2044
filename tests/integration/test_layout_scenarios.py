"""End-to-end scenarios over a real directory layout."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from secrets_cli.core import (
    GlobalConfig,
    NotFoundError,
    ReadError,
    SecretsDir,
    VaultConfig,
    list_vaults,
    load_config,
    load_vault_config,
    save_config,
    save_vault_config,
    vault_dir,
    vault_exists,
)


@pytest.fixture
def populated_root(tmp_path: Path) -> Path:
    """vaults/alpha/, vaults/beta/ and a stray vaults/readme.txt."""
    (tmp_path / "vaults" / "alpha").mkdir(parents=True)
    (tmp_path / "vaults" / "beta").mkdir()
    (tmp_path / "vaults" / "readme.txt").write_text("stray file")
    return tmp_path


def test_directory_index_scenario(populated_root: Path):
    assert set(list_vaults(populated_root)) == {"alpha", "beta"}
    assert vault_exists(populated_root, "alpha") is True
    assert vault_exists(populated_root, "gamma") is False


def test_empty_optional_fields_scenario(populated_root: Path):
    path = vault_dir(populated_root, "alpha")
    cfg = VaultConfig(name="alpha", members=["alice", "bob"], created_at="2024-05-01T12:00:00Z")

    save_vault_config(path, cfg)
    raw = yaml.safe_load((path / "vault.yaml").read_text())
    loaded = load_vault_config(path)

    assert "description" not in raw
    assert "updated_at" not in raw
    assert loaded.description == ""
    assert loaded.updated_at == ""
    assert loaded == cfg


def test_missing_global_config_is_not_found(tmp_path: Path):
    with pytest.raises(NotFoundError) as exc_info:
        load_config(tmp_path)

    assert not isinstance(exc_info.value, ReadError)


def test_list_without_vaults_container(tmp_path: Path):
    assert list_vaults(tmp_path) == []


def test_exists_with_missing_root(tmp_path: Path):
    assert vault_exists(tmp_path / "absent", "alpha") is False


def test_global_and_vault_round_trip_through_filesystem(populated_root: Path):
    global_cfg = GlobalConfig(version="1", owner="alice")
    vault_cfg = VaultConfig(
        name="beta",
        description="Beta vault",
        members=["carol"],
        created_at="2024-05-01T12:00:00Z",
        updated_at="2024-06-01T08:00:00Z",
    )

    save_config(populated_root, global_cfg)
    save_vault_config(vault_dir(populated_root, "beta"), vault_cfg)

    assert load_config(populated_root) == global_cfg
    assert load_vault_config(vault_dir(populated_root, "beta")) == vault_cfg


def test_hand_edited_record_with_unknown_keys(populated_root: Path):
    """Records written by newer versions still load."""
    (populated_root / "vaults" / "alpha" / "vault.yaml").write_text(
        "name: alpha\n"
        "members:\n"
        "  - alice\n"
        "created_at: 2024-01-01T00:00:00Z\n"
        "rotation_policy:\n"
        "  days: 90\n"
    )

    cfg = SecretsDir(populated_root).load_vault_config("alpha")

    assert cfg == VaultConfig(name="alpha", members=["alice"], created_at="2024-01-01T00:00:00Z")
