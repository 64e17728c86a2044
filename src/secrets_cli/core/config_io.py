"""Byte-level file I/O for configuration records.

Writes are atomic by default: temp file in the same directory, optional
fsync, then rename over the target. The legacy in-place write is kept behind
``atomic=False``. Files are always left with mode 0600.

Neither function creates directories; callers own the layout.
"""

from __future__ import annotations

import contextlib
import os
import tempfile
from pathlib import Path

from .errors import NotFoundError, ReadError, WriteError

__all__ = [
    "CONFIG_FILE_MODE",
    "read_bytes",
    "write_bytes",
]

CONFIG_FILE_MODE = 0o600


def read_bytes(file_path: Path | str, *, operation: str) -> bytes:
    """Read whole file.

    Parameters
    ----------
    file_path
        File to read
    operation
        Operation label used in error messages

    Returns
    -------
    bytes
        File content

    Raises
    ------
    NotFoundError
        If the file does not exist
    ReadError
        On any other I/O failure
    """
    path = Path(file_path)

    try:
        return path.read_bytes()
    except FileNotFoundError as exc:
        raise NotFoundError("file does not exist", path=path, operation=operation) from exc
    except OSError as exc:
        raise ReadError(str(exc), path=path, operation=operation) from exc


def write_bytes(
    file_path: Path | str,
    data: bytes,
    *,
    operation: str,
    atomic: bool = True,
    fsync: bool = False,
) -> None:
    """Write ``data`` to ``file_path``, replacing existing content.

    Parameters
    ----------
    file_path
        Target file path
    data
        Encoded record
    operation
        Operation label used in error messages
    atomic
        Use temp file + rename instead of truncating in place
    fsync
        Flush file (and directory, on POSIX) to disk before returning

    Raises
    ------
    WriteError
        If the parent directory is missing or any write step fails
    """
    path = Path(file_path)

    try:
        if atomic:
            _write_atomic(path, data, fsync=fsync)
        else:
            _write_in_place(path, data, fsync=fsync)
    except OSError as exc:
        raise WriteError(str(exc), path=path, operation=operation) from exc


def _write_atomic(path: Path, data: bytes, *, fsync: bool) -> None:
    # mkstemp creates the temp file with mode 0600
    with tempfile.NamedTemporaryFile(
        mode="wb",
        dir=path.parent,
        prefix=f".{path.name}.tmp",
        delete=False,
    ) as tmp_file:
        tmp_path = Path(tmp_file.name)
        try:
            tmp_file.write(data)
            tmp_file.flush()
            if fsync:
                os.fsync(tmp_file.fileno())
        except OSError:
            tmp_file.close()
            tmp_path.unlink(missing_ok=True)
            raise

    try:
        os.chmod(tmp_path, CONFIG_FILE_MODE)
        tmp_path.replace(path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise

    if fsync:
        _fsync_dir(path.parent)


def _write_in_place(path: Path, data: bytes, *, fsync: bool) -> None:
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, CONFIG_FILE_MODE)
    with os.fdopen(fd, "wb") as f:
        f.write(data)
        f.flush()
        if fsync:
            os.fsync(f.fileno())
    # O_CREAT mode only applies to new files
    os.chmod(path, CONFIG_FILE_MODE)


def _fsync_dir(directory: Path) -> None:
    if os.name != "posix":
        return
    fd = os.open(directory, os.O_RDONLY)
    try:
        with contextlib.suppress(OSError):
            os.fsync(fd)
    finally:
        os.close(fd)
