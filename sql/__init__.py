"""
=======================
SQL statement assembly.
=======================

This package accumulates SQL fragments through an imperative builder and
renders them into a single statement string. Nothing is executed here; see
utils.database_utils for running the result.

The package follows a clear organization:
    - state.py: QueryState fragment store and legacy reconciliation
    - query_builder.py: Pure clause/statement builders (_builder suffix)
    - functions.py: Database function tokens (_sql suffix)
    - query.py: The Query builder facade

Example:
    >>> from sql import Query
    >>>
    >>> q = Query()
    >>> q.add_table('users', 'u')
    >>> q.add_query('u.user_id')
    >>> q.add_where('u.user_type = 1')
    >>> sql = q.prepare()
"""

__version__ = "1.0.0"
__all__ = [
    'Query', 'QueryState', 'LegacyFragments', 'StatementType', 'quote',
    'reconcile_legacy_state', 'flatten_fragments',
    'select_builder', 'insert_builder', 'replace_builder',
    'update_builder', 'delete_builder',
    'now_sql', 'now_with_tz', 'date_diff_sql', 'date_add_sql',
]

from .functions import date_add_sql, date_diff_sql, now_sql, now_with_tz
from .query import Query, quote
from .query_builder import (
    StatementType,
    delete_builder,
    insert_builder,
    replace_builder,
    select_builder,
    update_builder,
)
from .state import LegacyFragments, QueryState, flatten_fragments, reconcile_legacy_state
