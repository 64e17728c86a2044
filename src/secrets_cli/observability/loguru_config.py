"""Loguru configuration for secrets-config.

The library logs through component-bound loguru loggers but stays silent
by default: ``secrets_cli/__init__.py`` disables the package, and only
``configure_logging`` (called by the CLI or an embedding application)
turns it back on.
"""

from __future__ import annotations

import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any

from loguru import logger

if TYPE_CHECKING:
    from collections.abc import Generator

__all__ = [
    "PACKAGE_NAME",
    "configure_logging",
    "get_logger",
    "timing_context",
]

PACKAGE_NAME = "secrets_cli"

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[component]}</cyan> | "
    "<level>{message}</level>"
)


def _stderr_sink(message: Any) -> None:
    # Resolve sys.stderr per record so redirected streams (click, pytest) are honored
    sys.stderr.write(str(message))


def configure_logging(
    *,
    level: str = "WARNING",
    log_file: Path | None = None,
    enable_console: bool = True,
) -> None:
    """Enable package logging and install sinks.

    Parameters
    ----------
    level
        Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_file
        Optional JSONL log file
    enable_console
        Log to stderr

    Example
    -------
    >>> from secrets_cli.observability import configure_logging
    >>> configure_logging(level="DEBUG")
    """
    logger.remove()
    logger.configure(extra={"component": PACKAGE_NAME})

    if enable_console:
        logger.add(
            _stderr_sink,
            format=CONSOLE_FORMAT,
            level=level.upper(),
            colorize=False,
            backtrace=False,
            diagnose=False,
        )

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            format="{message}",
            level=level.upper(),
            serialize=True,
            backtrace=False,
            diagnose=False,
        )

    logger.enable(PACKAGE_NAME)
    logger.debug("Logging configured", level=level.upper(), log_file=str(log_file) if log_file else None)


def get_logger(component: str = PACKAGE_NAME) -> Any:
    """Get logger bound to a component (store, index, init, cli).

    Parameters
    ----------
    component
        Component name

    Returns
    -------
    Logger
        Loguru logger bound to component
    """
    return logger.bind(component=component)


@contextmanager
def timing_context(operation: str, *, component: str = PACKAGE_NAME, **metadata: Any) -> Generator[dict[str, Any], None, None]:
    """Log duration of an operation at DEBUG level.

    Yields
    ------
    dict
        Context dictionary that can be updated with additional data

    Example
    -------
    >>> with timing_context("list vaults", component="index") as ctx:
    ...     ctx["count"] = len(names)
    """
    log = get_logger(component)
    context: dict[str, Any] = {"operation": operation, **metadata}
    start = time.perf_counter()

    try:
        yield context
    except Exception as exc:
        context["duration_ms"] = round((time.perf_counter() - start) * 1000, 3)
        log.debug("{} failed: {}", operation, exc, **context)
        raise
    else:
        context["duration_ms"] = round((time.perf_counter() - start) * 1000, 3)
        log.debug("{} completed", operation, **context)
