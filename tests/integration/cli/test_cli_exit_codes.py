"""Integration tests for CLI commands and stable exit codes.

Tests verify that:
- Stable exit codes (0, 2, 3, 4, 5, 6) are returned
- --json output is machine-readable
- Commands read and write the on-disk layout through the stores
"""

import json
import os
from pathlib import Path

import pytest
from click.testing import CliRunner
from loguru import logger

from secrets_cli.cli.cli_common import ExitCode
from secrets_cli.cli.secrets_config import cli
from secrets_cli.cli.secrets_config import main as cli_main
from secrets_cli.core.config_store import load_vault_config
from secrets_cli.core.secrets_init import create_vault, init_secrets_dir
from secrets_cli.observability.loguru_config import PACKAGE_NAME


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep settings discovery inside tmp_path."""
    for var in [k for k in os.environ if k.startswith("SECRETS_")]:
        monkeypatch.delenv(var)
    monkeypatch.chdir(tmp_path)
    yield
    logger.remove()
    logger.disable(PACKAGE_NAME)


@pytest.fixture
def root(tmp_path):
    path = tmp_path / ".secrets"
    init_secrets_dir(path, owner="alice")
    return path


def run_json(capsys, *args: str) -> tuple[int, dict]:
    exit_code = cli_main(["--json", *args])
    return exit_code, json.loads(capsys.readouterr().out)


class TestExitCodes:
    """Test stable exit codes."""

    def test_init_success(self, tmp_path: Path, capsys):
        exit_code, result = run_json(capsys, "--secrets-dir", str(tmp_path / ".secrets"), "init", "--owner", "alice")

        assert exit_code == ExitCode.SUCCESS
        assert result["status"] == "success"
        assert result["data"]["owner"] == "alice"
        assert (tmp_path / ".secrets" / "config.yaml").exists()

    def test_init_twice_is_conflict(self, root: Path, capsys):
        exit_code, result = run_json(capsys, "--secrets-dir", str(root), "init", "--owner", "bob")

        assert exit_code == ExitCode.CONFLICT
        assert "already initialized" in result["error"]
        assert result["meta"]["exit_code"] == 4

    def test_init_without_owner_is_config_error(self, tmp_path: Path, monkeypatch):
        monkeypatch.delenv("USER", raising=False)

        exit_code = cli_main(["--secrets-dir", str(tmp_path / ".secrets"), "init"])

        assert exit_code == ExitCode.CONFIG_ERROR

    def test_config_show_missing_is_not_found(self, tmp_path: Path, capsys):
        exit_code, result = run_json(capsys, "--secrets-dir", str(tmp_path / ".secrets"), "config", "show")

        assert exit_code == ExitCode.NOT_FOUND
        assert "config.yaml" in result["error"]

    def test_malformed_config_is_validation_error(self, root: Path):
        (root / "config.yaml").write_text("owner: [\n")

        assert cli_main(["--secrets-dir", str(root), "config", "show"]) == ExitCode.VALIDATION_ERROR

    def test_invalid_vault_name_is_validation_error(self, root: Path):
        assert cli_main(["--secrets-dir", str(root), "vault", "create", "../escape"]) == ExitCode.VALIDATION_ERROR

    def test_vaults_file_is_io_error(self, tmp_path: Path):
        path = tmp_path / ".secrets"
        path.mkdir()
        (path / "vaults").write_text("not a directory")

        assert cli_main(["--secrets-dir", str(path), "vault", "list"]) == ExitCode.IO_ERROR

    def test_invalid_settings_is_config_error(self, root: Path, monkeypatch):
        monkeypatch.setenv("SECRETS_LOG_LEVEL", "chatty")

        assert cli_main(["--secrets-dir", str(root), "vault", "list"]) == ExitCode.CONFIG_ERROR

    def test_unknown_command_is_usage_error(self):
        assert cli_main(["frobnicate"]) == 2

    def test_help(self, capsys):
        assert cli_main(["--help"]) == 0
        assert "vault" in capsys.readouterr().out


class TestVaultCommands:
    def test_list_empty(self, root: Path, capsys):
        exit_code, result = run_json(capsys, "--secrets-dir", str(root), "vault", "list")

        assert exit_code == ExitCode.SUCCESS
        assert result["data"] == []
        assert result["meta"]["count"] == 0

    def test_list_sorted_directories_only(self, root: Path, capsys):
        create_vault(root, "beta")
        create_vault(root, "alpha")
        (root / "vaults" / "readme.txt").write_text("stray")

        _, result = run_json(capsys, "--secrets-dir", str(root), "vault", "list")

        assert result["data"] == ["alpha", "beta"]

    def test_create_and_show(self, root: Path, capsys):
        exit_code, created = run_json(
            capsys, "--secrets-dir", str(root), "vault", "create", "prod", "-m", "alice", "-m", "bob", "-m", "alice"
        )
        assert exit_code == ExitCode.SUCCESS
        assert created["data"]["members"] == ["alice", "bob"]

        exit_code, shown = run_json(capsys, "--secrets-dir", str(root), "vault", "show", "prod")
        assert exit_code == ExitCode.SUCCESS
        assert shown["data"] == created["data"]
        assert "description" not in shown["data"]

    def test_show_missing_vault(self, root: Path):
        assert cli_main(["--secrets-dir", str(root), "vault", "show", "ghost"]) == ExitCode.NOT_FOUND

    def test_add_member_sets_updated_at(self, root: Path, capsys):
        create_vault(root, "prod", members=["alice"], created_at="2024-01-01T00:00:00Z")

        exit_code, result = run_json(capsys, "--secrets-dir", str(root), "vault", "add-member", "prod", "bob")

        assert exit_code == ExitCode.SUCCESS
        cfg = load_vault_config(root / "vaults" / "prod")
        assert cfg.members == ["alice", "bob"]
        assert cfg.created_at == "2024-01-01T00:00:00Z"
        assert cfg.updated_at
        assert result["data"]["updated_at"] == cfg.updated_at

    def test_add_existing_member_is_noop(self, root: Path, capsys):
        create_vault(root, "prod", members=["alice"])

        exit_code, result = run_json(capsys, "--secrets-dir", str(root), "vault", "add-member", "prod", "alice")

        assert exit_code == ExitCode.SUCCESS
        assert result["status"] == "warning"
        cfg = load_vault_config(root / "vaults" / "prod")
        assert cfg.members == ["alice"]
        assert cfg.updated_at == ""

    def test_remove_member(self, root: Path):
        create_vault(root, "prod", members=["alice", "bob"])

        assert cli_main(["--secrets-dir", str(root), "vault", "remove-member", "prod", "alice"]) == ExitCode.SUCCESS
        assert load_vault_config(root / "vaults" / "prod").members == ["bob"]

    def test_remove_unknown_member(self, root: Path):
        create_vault(root, "prod", members=["alice"])

        assert cli_main(["--secrets-dir", str(root), "vault", "remove-member", "prod", "zed"]) == ExitCode.NOT_FOUND


class TestVerifyCommand:
    def test_verify_clean(self, root: Path, capsys):
        create_vault(root, "prod")

        exit_code, result = run_json(capsys, "--secrets-dir", str(root), "verify")

        assert exit_code == ExitCode.SUCCESS
        assert result["status"] == "success"

    def test_verify_reports_issues(self, root: Path):
        (root / "vaults" / "orphan").mkdir()
        runner = CliRunner()

        result = runner.invoke(cli, ["--secrets-dir", str(root), "verify"])

        assert "Problems found" in result.output
        assert "orphan" in result.output


class TestSettingsDiscovery:
    def test_uses_secrets_dir_env(self, root: Path, monkeypatch, capsys):
        monkeypatch.setenv("SECRETS_DIR", str(root))

        exit_code, result = run_json(capsys, "config", "show")

        assert exit_code == ExitCode.SUCCESS
        assert result["data"] == {"version": "1", "owner": "alice"}

    def test_discovers_nearest_secrets_dir(self, root: Path, tmp_path: Path, monkeypatch, capsys):
        nested = tmp_path / "project" / "src"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)

        exit_code, result = run_json(capsys, "config", "show")

        assert exit_code == ExitCode.SUCCESS
        assert result["data"]["owner"] == "alice"

    def test_non_atomic_writes_setting(self, root: Path, monkeypatch):
        monkeypatch.setenv("SECRETS_ATOMIC_WRITES", "false")
        create_vault(root, "prod")

        assert cli_main(["--secrets-dir", str(root), "vault", "add-member", "prod", "bob"]) == ExitCode.SUCCESS
        assert load_vault_config(root / "vaults" / "prod").members == ["bob"]
