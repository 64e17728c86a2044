"""CLI commands for inspecting and maintaining the secrets directory layout."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import cast

import click

from ..config.settings import ConfigError
from ..core.errors import NotFoundError
from ..core.paths import validate_vault_name
from ..core.secrets_init import create_vault, init_secrets_dir, touch_vault, verify_layout
from .cli_common import CLIContext, ExitCode, handle_cli_error, handle_cli_success

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
EPILOG = """
Examples:
  secrets-config init --owner alice          # Create .secrets/ layout
  secrets-config vault create prod -m alice  # Provision a vault
  secrets-config vault list                  # List vaults
  secrets-config vault add-member prod bob   # Grant access
  secrets-config verify                      # Check layout consistency
""".strip()

pass_cli_context = click.make_pass_decorator(CLIContext)


@click.group(
    context_settings=CONTEXT_SETTINGS,
    help="Manage secrets configuration and vault metadata",
    epilog=EPILOG,
)
@click.option(
    "--secrets-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Secrets root directory (default: SECRETS_DIR or nearest .secrets/)",
)
@click.option("--json", "json_output", is_flag=True, help="Output as JSON (machine-readable)")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
def cli(ctx: click.Context, secrets_dir: Path | None, json_output: bool, verbose: bool) -> None:
    """Root command."""
    ctx.obj = CLIContext(secrets_dir=secrets_dir, json_output=json_output, verbose=verbose)


@cli.command("init")
@click.option("--owner", type=str, help="Owner recorded in config.yaml (default: SECRETS_OWNER or $USER)")
@click.option("--force", is_flag=True, help="Overwrite existing config.yaml")
@pass_cli_context
def init_cmd(ctx: CLIContext, owner: str | None, force: bool) -> int:
    """Initialize the secrets directory."""
    try:
        root = ctx.secrets().root
        owner = owner or ctx.settings.default_owner
        if not owner:
            raise ConfigError("owner is required. Use --owner or set SECRETS_OWNER")

        cfg = init_secrets_dir(root, owner=owner, force=force)
        return handle_cli_success(ctx, {"path": str(root), **cfg.to_dict()}, "init")
    except Exception as exc:
        return handle_cli_error(ctx, exc, "init")


@cli.command("verify")
@pass_cli_context
def verify_cmd(ctx: CLIContext) -> int:
    """Check layout and records for consistency."""
    try:
        root = ctx.secrets().root
        issues = verify_layout(root)
    except Exception as exc:
        return handle_cli_error(ctx, exc, "verify")

    if issues:
        ctx.output(
            issues,
            status="error",
            error="Problems found",
            meta={"exit_code": int(ExitCode.VALIDATION_ERROR), "issues": issues},
        )
        return int(ExitCode.VALIDATION_ERROR)

    return handle_cli_success(ctx, "Layout is consistent", "verify")


@cli.group("config")
def config_group() -> None:
    """Global configuration."""


@config_group.command("show")
@pass_cli_context
def config_show_cmd(ctx: CLIContext) -> int:
    """Show config.yaml."""
    try:
        cfg = ctx.secrets().load_config()
        return handle_cli_success(ctx, cfg.to_dict(), "config.show")
    except Exception as exc:
        return handle_cli_error(ctx, exc, "config.show")


@cli.group("vault")
def vault_group() -> None:
    """Vault metadata."""


@vault_group.command("list")
@pass_cli_context
def vault_list_cmd(ctx: CLIContext) -> int:
    """List vaults."""
    try:
        names = sorted(ctx.secrets().list_vaults())
        return handle_cli_success(ctx, names, "vault.list", meta={"count": len(names)})
    except Exception as exc:
        return handle_cli_error(ctx, exc, "vault.list")


def _require_vault(ctx: CLIContext, name: str) -> None:
    validate_vault_name(name)
    secrets = ctx.secrets()
    if not secrets.vault_exists(name):
        raise NotFoundError(f"vault '{name}' does not exist", path=secrets.vault_dir(name), operation="find vault")


@vault_group.command("show")
@click.argument("name")
@pass_cli_context
def vault_show_cmd(ctx: CLIContext, name: str) -> int:
    """Show vault.yaml for NAME."""
    try:
        _require_vault(ctx, name)
        cfg = ctx.secrets().load_vault_config(name)
        return handle_cli_success(ctx, cfg.to_dict(), "vault.show")
    except Exception as exc:
        return handle_cli_error(ctx, exc, "vault.show")


@vault_group.command("create")
@click.argument("name")
@click.option("--member", "-m", "members", multiple=True, help="Initial member (repeatable)")
@click.option("--description", "-d", default="", help="Vault description")
@pass_cli_context
def vault_create_cmd(ctx: CLIContext, name: str, members: tuple[str, ...], description: str) -> int:
    """Create vault NAME."""
    try:
        # Preserve order, drop repeats
        unique_members = list(dict.fromkeys(members))
        cfg = create_vault(ctx.secrets().root, name, members=unique_members, description=description)
        return handle_cli_success(ctx, cfg.to_dict(), "vault.create")
    except Exception as exc:
        return handle_cli_error(ctx, exc, "vault.create")


@vault_group.command("add-member")
@click.argument("name")
@click.argument("member")
@pass_cli_context
def vault_add_member_cmd(ctx: CLIContext, name: str, member: str) -> int:
    """Grant MEMBER access to vault NAME."""
    try:
        _require_vault(ctx, name)
        secrets = ctx.secrets()
        cfg = secrets.load_vault_config(name)

        if cfg.has_member(member):
            ctx.output(f"{member} is already a member of {name}", status="warning")
            return int(ExitCode.SUCCESS)

        cfg = touch_vault(cfg.with_member(member))
        secrets.save_vault_config(cfg, vault_name=name)
        return handle_cli_success(ctx, cfg.to_dict(), "vault.add-member")
    except Exception as exc:
        return handle_cli_error(ctx, exc, "vault.add-member")


@vault_group.command("remove-member")
@click.argument("name")
@click.argument("member")
@pass_cli_context
def vault_remove_member_cmd(ctx: CLIContext, name: str, member: str) -> int:
    """Revoke MEMBER access to vault NAME."""
    try:
        _require_vault(ctx, name)
        secrets = ctx.secrets()
        cfg = secrets.load_vault_config(name)

        if not cfg.has_member(member):
            raise NotFoundError(
                f"{member} is not a member of {name}",
                path=secrets.vault_config_path(name),
                operation="remove member",
            )

        cfg = touch_vault(cfg.without_member(member))
        secrets.save_vault_config(cfg, vault_name=name)
        return handle_cli_success(ctx, cfg.to_dict(), "vault.remove-member")
    except Exception as exc:
        return handle_cli_error(ctx, exc, "vault.remove-member")


def main(args: list[str] | None = None) -> int:
    """Main function."""
    if args is None:
        args = sys.argv[1:]

    try:
        result = cli.main(args=list(args), prog_name="secrets-config", standalone_mode=False)
        return cast("int", result) if result is not None else 0
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.exceptions.Abort:
        click.echo("Aborted!", err=True)
        return 1
    except SystemExit as exc:
        return int(exc.code) if exc.code is not None else 0


if __name__ == "__main__":
    sys.exit(main())
