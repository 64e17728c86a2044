"""Error taxonomy for configuration persistence.

Every store failure carries the operation and the path that produced it so
the CLI layer can report it without re-deriving context.
"""

from __future__ import annotations

from pathlib import Path

__all__ = [
    "DeserializationError",
    "InvalidVaultNameError",
    "NotFoundError",
    "ReadError",
    "SecretsConfigError",
    "SecretsInitError",
    "SerializationError",
    "WriteError",
]


class SecretsConfigError(Exception):
    """Base class for configuration persistence failures.

    Attributes
    ----------
    path : Path | None
        File or directory the operation targeted
    operation : str | None
        Short operation label (e.g. ``"load vault config"``)
    """

    def __init__(
        self,
        message: str,
        *,
        path: Path | str | None = None,
        operation: str | None = None,
    ) -> None:
        self.path = Path(path) if path is not None else None
        self.operation = operation
        self.reason = message

        if operation and self.path is not None:
            message = f"{operation} failed for {self.path}: {message}"
        elif operation:
            message = f"{operation} failed: {message}"

        super().__init__(message)


class NotFoundError(SecretsConfigError):
    """Raised when an expected configuration file is absent."""


class ReadError(SecretsConfigError):
    """Raised on I/O failure while reading."""


class WriteError(SecretsConfigError):
    """Raised on I/O failure while writing."""


class SerializationError(SecretsConfigError):
    """Raised when a record cannot be encoded."""


class DeserializationError(SecretsConfigError):
    """Raised when stored content does not match the record shape."""


class SecretsInitError(SecretsConfigError):
    """Raised when initializing the layout or provisioning a vault fails."""


class InvalidVaultNameError(ValueError):
    """Raised when a vault name is unsafe to use as a directory name."""
