"""
==================================================
Core infrastructure package for query assembly.
==================================================

Modules:
    config: Configuration management from environment variables
    logger: Logging configuration and utilities

Example:
    >>> from core.config import config
    >>> from core.logger import get_logger
    >>>
    >>> logger = get_logger(__name__)
    >>> logger.info(f"Table prefix is {config.table_prefix!r}")
"""

__version__ = "0.1.0"
__all__ = ['get_logger', 'setup_logging', 'config', 'Config', 'DatabaseConfig']

from core.config import Config, DatabaseConfig, config
from core.logger import get_logger, setup_logging
