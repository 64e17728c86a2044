"""Runtime settings for secrets-config.

Loads settings from environment (optionally a .env file) and provides typed
access. Missing or invalid values produce clear ``ConfigError`` messages.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from ..core.paths import SECRETS_DIR_NAME
from ..core.secrets_dir import find_secrets_dir

__all__ = [
    "LOG_LEVELS",
    "ConfigError",
    "Settings",
    "get_settings",
    "load_env_file",
    "load_settings",
    "parse_bool",
]

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


class ConfigError(Exception):
    """Raised when configuration is missing or invalid."""

    pass


@dataclass
class Settings:
    """Settings for secrets-config.

    Attributes
    ----------
    secrets_dir : Path
        Secrets root directory
    log_level : str
        Logging level
    log_file : Path | None
        Optional JSONL log file
    atomic_writes : bool
        Write config files via temp file + rename
    default_owner : str
        Owner recorded by ``init`` when none is given
    """

    secrets_dir: Path
    log_level: str = "WARNING"
    log_file: Path | None = None
    atomic_writes: bool = True
    default_owner: str = ""

    def __post_init__(self):
        """Validate settings after initialization."""
        if not self.secrets_dir:
            raise ConfigError("secrets_dir is required. Set SECRETS_DIR or run inside a project with .secrets/")

        if isinstance(self.secrets_dir, str):
            self.secrets_dir = Path(self.secrets_dir)

        if self.log_file and isinstance(self.log_file, str):
            self.log_file = Path(self.log_file)

        self.log_level = self.log_level.upper()
        if self.log_level not in LOG_LEVELS:
            raise ConfigError(
                f"Invalid SECRETS_LOG_LEVEL: {self.log_level}. Expected one of: {', '.join(LOG_LEVELS)}"
            )

    @classmethod
    def from_env(cls, env_file: Path | str | None = None, *, cwd: Path | None = None) -> Settings:
        """Load settings from environment.

        ``SECRETS_DIR`` wins; otherwise the nearest initialized ``.secrets``
        above ``cwd`` is used, falling back to ``<cwd>/.secrets``.

        Parameters
        ----------
        env_file
            Path to .env file (default: .env in current directory)
        cwd
            Directory used for discovery (default: current directory)

        Returns
        -------
        Settings
            Loaded settings

        Raises
        ------
        ConfigError
            If a value is invalid
        """
        if env_file is None:
            env_file = Path(".env")

        if isinstance(env_file, str):
            env_file = Path(env_file)

        if env_file.exists():
            load_env_file(env_file)

        cwd = cwd or Path.cwd()

        secrets_dir_env = os.environ.get("SECRETS_DIR")
        if secrets_dir_env:
            secrets_dir = Path(secrets_dir_env).expanduser()
        else:
            found = find_secrets_dir(cwd)
            secrets_dir = found.root if found else cwd / SECRETS_DIR_NAME

        return cls(
            secrets_dir=secrets_dir,
            log_level=os.environ.get("SECRETS_LOG_LEVEL", "WARNING"),
            log_file=Path(os.environ["SECRETS_LOG_FILE"]) if os.environ.get("SECRETS_LOG_FILE") else None,
            atomic_writes=parse_bool(os.environ.get("SECRETS_ATOMIC_WRITES", "true"), "SECRETS_ATOMIC_WRITES"),
            default_owner=os.environ.get("SECRETS_OWNER") or os.environ.get("USER", ""),
        )


def load_env_file(env_file: Path) -> None:
    """Load environment variables from .env file.

    Variables already set in the environment are not overridden.

    Parameters
    ----------
    env_file
        Path to .env file
    """
    with open(env_file, encoding="utf-8") as f:
        for line in f:
            line = line.strip()

            # Skip comments and empty lines
            if not line or line.startswith("#"):
                continue

            if "=" in line:
                key, value = line.split("=", 1)
                key = key.strip()
                value = value.strip()

                if (value.startswith('"') and value.endswith('"')) or (value.startswith("'") and value.endswith("'")):
                    value = value[1:-1]

                os.environ.setdefault(key, value)


def parse_bool(value: str, name: str) -> bool:
    """Parse a boolean environment value.

    Raises
    ------
    ConfigError
        If the value is not a recognized boolean
    """
    normalized = value.strip().lower()
    if normalized in ("1", "true", "yes", "on"):
        return True
    if normalized in ("0", "false", "no", "off"):
        return False
    raise ConfigError(f"Invalid {name}: {value!r}. Expected true or false")


# Global settings instance
_settings: Settings | None = None


def load_settings(env_file: Path | str | None = None) -> Settings:
    """Load settings from environment and keep them process-wide."""
    global _settings
    _settings = Settings.from_env(env_file)
    return _settings


def get_settings() -> Settings:
    """Get current settings.

    Raises
    ------
    ConfigError
        If settings not loaded
    """
    if _settings is None:
        raise ConfigError("Settings not loaded. Call load_settings() first.")
    return _settings
