"""Common CLI utilities: JSON output, stable exit codes, error mapping."""

from __future__ import annotations

import json
import sys
import traceback
from enum import IntEnum
from pathlib import Path
from typing import Any

import click

from ..config.settings import ConfigError, Settings
from ..core.errors import (
    DeserializationError,
    InvalidVaultNameError,
    NotFoundError,
    ReadError,
    SecretsInitError,
    SerializationError,
    WriteError,
)
from ..core.secrets_dir import SecretsDir
from ..observability.loguru_config import configure_logging, get_logger

log = get_logger("cli")


class ExitCode(IntEnum):
    """Stable exit codes for CLI commands."""

    SUCCESS = 0
    VALIDATION_ERROR = 2  # Bad input or malformed record
    NOT_FOUND = 3  # Missing config file, vault or member
    CONFLICT = 4  # Already initialized / already exists
    IO_ERROR = 5  # Read or write failure
    CONFIG_ERROR = 6  # Invalid settings
    UNKNOWN_ERROR = 7


def exit_code_for(exc: Exception) -> ExitCode:
    """Map an exception to its stable exit code."""
    if isinstance(exc, (InvalidVaultNameError, DeserializationError, SerializationError)):
        return ExitCode.VALIDATION_ERROR
    if isinstance(exc, NotFoundError):
        return ExitCode.NOT_FOUND
    if isinstance(exc, SecretsInitError):
        return ExitCode.CONFLICT
    if isinstance(exc, (ReadError, WriteError, OSError)):
        return ExitCode.IO_ERROR
    if isinstance(exc, ConfigError):
        return ExitCode.CONFIG_ERROR
    return ExitCode.UNKNOWN_ERROR


class CLIContext:
    """Per-invocation state shared by all commands."""

    def __init__(
        self,
        *,
        secrets_dir: Path | None = None,
        json_output: bool = False,
        verbose: bool = False,
    ) -> None:
        """Initialize CLI context.

        Args:
            secrets_dir: Explicit secrets root (overrides settings)
            json_output: Enable JSON output mode
            verbose: Verbose output and DEBUG logging
        """
        self.secrets_dir_override = secrets_dir
        self.json_output = json_output
        self.verbose = verbose
        self._settings: Settings | None = None

    @property
    def settings(self) -> Settings:
        """Settings, loaded on first use so ConfigError surfaces inside commands."""
        if self._settings is None:
            settings = Settings.from_env()
            if self.secrets_dir_override is not None:
                settings.secrets_dir = self.secrets_dir_override
            configure_logging(
                level="DEBUG" if self.verbose else settings.log_level,
                log_file=settings.log_file,
            )
            self._settings = settings
        return self._settings

    def secrets(self) -> SecretsDir:
        settings = self.settings
        return SecretsDir(settings.secrets_dir, atomic_writes=settings.atomic_writes)

    def output(
        self, data: Any, status: str = "success", error: str | None = None, meta: dict[str, Any] | None = None
    ) -> None:
        """Output result in appropriate format.

        Args:
            data: Result data
            status: Status ("success", "error", "warning")
            error: Error message if status is error
            meta: Additional metadata
        """
        if self.json_output:
            result: dict[str, Any] = {"status": status}

            if error:
                result["error"] = error
            else:
                result["data"] = data

            if meta:
                result["meta"] = meta

            click.echo(json.dumps(result, ensure_ascii=False, indent=2))
            return

        if status == "error":
            click.echo(f"❌ {error}", err=True)
            if isinstance(data, list):
                for item in data:
                    click.echo(f"  - {item}", err=True)
        elif status == "warning":
            click.echo(f"⚠️  {data}")
        elif isinstance(data, dict):
            for key, value in data.items():
                if isinstance(value, list):
                    click.echo(f"{key}:")
                    for item in value:
                        click.echo(f"  - {item}")
                else:
                    click.echo(f"{key}: {value}")
        elif isinstance(data, list):
            for item in data:
                click.echo(f"  - {item}")
        elif data is not None:
            click.echo(data)


def handle_cli_error(ctx: CLIContext, exc: Exception, cmd: str, data: Any = None) -> int:
    """Report error and return its exit code.

    Args:
        ctx: CLI context
        exc: Exception to handle
        cmd: Command name (e.g. "vault.create")
        data: Optional extra detail (list of issues)

    Returns:
        Exit code
    """
    exit_code = exit_code_for(exc)
    log.debug("Command failed", command=cmd, error_type=type(exc).__name__, exit_code=int(exit_code))

    ctx.output(data, status="error", error=str(exc), meta={"exit_code": int(exit_code)})

    if ctx.verbose and not ctx.json_output:
        click.echo("\nTraceback:", err=True)
        traceback.print_exception(exc, file=sys.stderr)

    return int(exit_code)


def handle_cli_success(ctx: CLIContext, data: Any, cmd: str, meta: dict[str, Any] | None = None) -> int:
    """Output result and return success code."""
    log.debug("Command succeeded", command=cmd)
    ctx.output(data, status="success", meta=meta)
    return int(ExitCode.SUCCESS)
