"""
=============================================
Configuration management for query assembly.
=============================================

Loads configuration from environment variables (.env file) and exposes it
through a Config object that callers hand to the query builder explicitly.

The configuration system provides:
- Database connection settings for the execution helpers
- The default table-name prefix used when a Query gets no explicit prefix
- Lookup by the legacy configuration keys (dbprefix, dbhost, ...)

Example:
    >>> from core.config import config
    >>> from sql.query import Query
    >>>
    >>> q = Query.from_config(config)
    >>> print(f"Prefix: {config.table_prefix!r}, host: {config.db_host}")
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from sqlalchemy.engine import URL

# Load environment variables from .env file
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(dotenv_path=env_path)


@dataclass
class DatabaseConfig:
    """Database configuration settings.

    Attributes:
        driver: SQLAlchemy driver name (e.g. 'mysql+pymysql', 'sqlite')
        host: Database server hostname or IP address
        port: Database server port number
        user: Database username
        password: Database password
        database: Database name (file path for sqlite)
    """

    driver: str
    host: str
    port: int
    user: str
    password: str
    database: str

    def get_url(self) -> URL:
        """Get a SQLAlchemy URL for this database.

        Returns:
            sqlalchemy.engine.URL built with URL.create()
        """
        if self.driver.startswith('sqlite'):
            return URL.create(drivername=self.driver, database=self.database or None)
        return URL.create(
            drivername=self.driver,
            username=self.user or None,
            password=self.password or None,
            host=self.host or None,
            port=self.port or None,
            database=self.database or None
        )

    def get_connection_params(self) -> dict:
        """Get connection parameters as dictionary.

        Returns:
            Dictionary with keys: host, port, user, password, database
        """
        return {
            'host': self.host,
            'port': self.port,
            'user': self.user,
            'password': self.password,
            'database': self.database
        }


class Config:
    """Centralized configuration manager.

    Attributes:
        db: DatabaseConfig instance with database connection settings
        table_prefix: Default prefix prepended to table names
        log_level: Default logging level name

    Example:
        >>> config = Config()
        >>> config.get('dbprefix', '')
        ''
    """

    # Legacy configuration keys mapped to their current attribute paths
    LEGACY_KEYS = {
        'dbprefix': 'table_prefix',
        'dbtype': 'db.driver',
        'dbhost': 'db.host',
        'dbport': 'db.port',
        'dbuser': 'db.user',
        'dbpass': 'db.password',
        'dbname': 'db.database',
    }

    def __init__(self, table_prefix: Optional[str] = None):
        """Initialize configuration from environment variables.

        Args:
            table_prefix: Explicit prefix; when None, read from DB_PREFIX
        """
        self.db = DatabaseConfig(
            driver=os.getenv('DB_DRIVER', 'mysql+pymysql'),
            host=os.getenv('DB_HOST', 'localhost'),
            port=int(os.getenv('DB_PORT', '3306')),
            user=os.getenv('DB_USER', 'root'),
            password=os.getenv('DB_PASSWORD', ''),
            database=os.getenv('DB_NAME', '')
        )
        self.table_prefix = (
            table_prefix if table_prefix is not None else os.getenv('DB_PREFIX', '')
        )
        self.log_level = os.getenv('LOG_LEVEL', 'INFO')

    @property
    def db_host(self) -> str:
        """Get database server hostname."""
        return self.db.host

    @property
    def db_port(self) -> int:
        """Get database server port number."""
        return self.db.port

    @property
    def db_name(self) -> str:
        """Get database name."""
        return self.db.database

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a setting by its legacy configuration key.

        Unknown keys and empty values fall back to ``default``.

        Args:
            key: Legacy key such as 'dbprefix' or 'dbhost'
            default: Value returned when the key is unknown or unset

        Returns:
            The configured value or ``default``

        Example:
            >>> Config(table_prefix='w2p_').get('dbprefix', '')
            'w2p_'
        """
        path = self.LEGACY_KEYS.get(key)
        if path is None:
            return default

        value: Any = self
        for part in path.split('.'):
            value = getattr(value, part)

        if value in ('', None):
            return default
        return value

    def get_url(self) -> URL:
        """Get the SQLAlchemy URL of the configured database."""
        return self.db.get_url()


# Global configuration instance
config = Config()
