"""
Logging setup for the sync tool.

Usage:
    from utils.logging import setup_logging, ContextLogger

    setup_logging(level="INFO", json_format=True)

    logger = ContextLogger(__name__, collection="locations")
    logger.info("Batch executed", upserted=12)
"""

from .config import configure_from_env, setup_logging, shutdown_logging
from .formatters import ConsoleFormatter, JSONFormatter
from .handlers import ContextLogger

__all__ = [
    "setup_logging",
    "shutdown_logging",
    "configure_from_env",
    "JSONFormatter",
    "ConsoleFormatter",
    "ContextLogger",
]
