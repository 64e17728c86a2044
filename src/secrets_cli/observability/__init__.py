"""Observability module for secrets-config.

Provides loguru setup and timing instrumentation.
"""

from .loguru_config import configure_logging, get_logger, timing_context

__all__ = [
    "configure_logging",
    "get_logger",
    "timing_context",
]
