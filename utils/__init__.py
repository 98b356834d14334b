"""
==========================
Utility Functions Package.
==========================

Helpers for running rendered queries against a database.

Modules:
    database_utils: Engine creation, query execution and row loaders
"""

__version__ = "1.0.0"
__all__ = [
    'DatabaseConnectionError',
    'QueryExecutionError',
    'create_sqlalchemy_engine',
    'execute_query',
    'load_list',
    'load_hash',
    'load_result',
    'load_column'
]

from .database_utils import (
    DatabaseConnectionError,
    QueryExecutionError,
    create_sqlalchemy_engine,
    execute_query,
    load_column,
    load_hash,
    load_list,
    load_result,
)
