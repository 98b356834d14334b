"""
==========================================
Execution helpers for rendered queries.
==========================================

Runs the SQL a Query renders through a SQLAlchemy connection. The builder
itself never touches the database; these helpers are the only place that
does.

Key Features:
    - Engine creation from DatabaseConfig
    - Execute a Query on an explicit connection or on the query's own ``db``
    - Row loaders: list of dicts, first row, first value, first column

Example:
    >>> from core.config import config
    >>> from sql.query import Query
    >>> from utils.database_utils import create_sqlalchemy_engine, load_list
    >>>
    >>> engine = create_sqlalchemy_engine(config)
    >>> with engine.connect() as conn:
    ...     q = Query(db=conn)
    ...     q.add_table('users')
    ...     rows = load_list(q)
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, CursorResult, Engine
from sqlalchemy.exc import SQLAlchemyError

from core.config import Config

logger = logging.getLogger(__name__)


class DatabaseConnectionError(Exception):
    """Exception raised when no usable database connection is available."""
    pass


class QueryExecutionError(Exception):
    """Exception raised when the database rejects a rendered query.

    Attributes:
        sql: The statement that failed
    """

    def __init__(self, message: str, sql: str):
        super().__init__(message)
        self.sql = sql


def create_sqlalchemy_engine(config: Config, echo: bool = False) -> Engine:
    """
    Create a SQLAlchemy engine for the configured database.

    Args:
        config: Config whose ``db`` settings describe the database
        echo: Enable SQL statement logging

    Returns:
        SQLAlchemy Engine
    """
    return create_engine(config.get_url(), echo=echo, pool_pre_ping=True)


def _resolve_connection(query, connection: Optional[Connection]) -> Connection:
    conn = connection if connection is not None else query.db
    if conn is None:
        raise DatabaseConnectionError(
            "No database connection: pass one explicitly or construct the Query with db="
        )
    return conn


def execute_query(query, connection: Optional[Connection] = None, clear: bool = True) -> CursorResult:
    """
    Render a Query and execute it.

    Args:
        query: sql.query.Query to render
        connection: SQLAlchemy Connection; defaults to ``query.db``
        clear: Clear the query's fragments after rendering

    Returns:
        SQLAlchemy result of the statement

    Raises:
        DatabaseConnectionError: If no connection is available
        QueryExecutionError: If the database rejects the statement
    """
    conn = _resolve_connection(query, connection)
    sql = query.prepare(clear=clear)

    try:
        return conn.execute(text(sql))
    except SQLAlchemyError as e:
        logger.error(f"Query failed: {sql} ({e})")
        raise QueryExecutionError(f"Query execution failed: {e}", sql) from e


def load_list(
    query,
    connection: Optional[Connection] = None,
    max_rows: Optional[int] = None
) -> List[Dict[str, Any]]:
    """
    Execute a Query and return its rows as dictionaries.

    Args:
        query: sql.query.Query to run
        connection: SQLAlchemy Connection; defaults to ``query.db``
        max_rows: Stop after this many rows; None means no limit, 0 returns nothing

    Returns:
        List of column -> value dicts
    """
    mappings = execute_query(query, connection).mappings()
    if max_rows is None:
        rows = mappings.all()
    elif max_rows > 0:
        rows = mappings.fetchmany(max_rows)
    else:
        rows = []
    return [dict(row) for row in rows]


def load_hash(query, connection: Optional[Connection] = None) -> Optional[Dict[str, Any]]:
    """Return the first row as a dict, or None when there are no rows."""
    row = execute_query(query, connection).mappings().first()
    return dict(row) if row is not None else None


def load_result(query, connection: Optional[Connection] = None) -> Any:
    """Return the first column of the first row, or None."""
    return execute_query(query, connection).scalar()


def load_column(query, connection: Optional[Connection] = None) -> List[Any]:
    """Return the first column of every row."""
    return list(execute_query(query, connection).scalars().all())
