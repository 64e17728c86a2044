"""secrets-config: configuration persistence for a secrets-management tool."""

from loguru import logger

__version__ = "0.1.0"

# Library stays quiet until an application calls configure_logging()
logger.disable(__name__)
