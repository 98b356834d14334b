"""
=====================
Prefix-aware Query.
=====================

Query accumulates SQL fragments one call at a time and renders them into a
single statement. Fragments are raw SQL: nothing is escaped or validated,
and empty or non-positive inputs are silently ignored.

Classes:
    Query: Builder facade over a QueryState

Example:
    >>> from sql.query import Query
    >>>
    >>> q = Query()
    >>> q.add_table('tasks', 't')
    >>> q.add_query('t.task_id')
    >>> q.add_where('t.task_owner = 3')
    >>> q.add_order('t.task_end_date')
    >>> q.set_limit(10)
    >>> sql = q.prepare()
    >>>
    >>> q.clear()
    >>> q.add_table('tasks')
    >>> q.add_update('task_percent_complete', 100)
    >>> q.add_where('task_id = 42')
    >>> sql = q.prepare()
"""

import logging
import re
from decimal import Decimal
from typing import Any, List, Sequence, Union

from sql.functions import date_add_sql, date_diff_sql, now_sql, now_with_tz
from sql.query_builder import STATEMENT_BUILDERS, StatementType
from sql.state import Fragment, QueryState, reconcile_legacy_state

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r'^\s*([+-]?\d+)')


def _to_int(value: Any) -> int:
    """Coerce to int the forgiving way; anything unparseable becomes 0.

    Strings contribute their leading integer, so '7 rows' gives 7.
    """
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        return int(match.group(1)) if match else 0
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return 0


def quote(value: Any) -> str:
    """
    Render a Python value as a SQL literal.

    None becomes NULL, booleans 1/0, numbers stay bare and everything else
    is single-quoted with embedded quotes doubled.

    Example:
        >>> quote("O'Brien")
        "'O''Brien'"
    """
    if value is None:
        return 'NULL'
    if isinstance(value, bool):
        return '1' if value else '0'
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    text = str(value).replace("'", "''")
    return f"'{text}'"


class Query:
    """Builds one SQL statement from incrementally added fragments.

    Attributes:
        db: Database handle supplied by the caller; rendering never touches it
        table_prefix: Prefix prepended to table names as they are added
        state: The accumulated QueryState
        statement_type: Statement kind rendered by prepare()
        db_funcs: Cached database function tokens

    Example:
        >>> q = Query(prefix='w2p_')
        >>> q.add_table('projects', 'p')
        >>> q.add_where('p.project_status = 1')
        >>> q.prepare_select()
        'SELECT * FROM ((w2p_projects AS p))  WHERE p.project_status = 1   '
    """

    def __init__(self, prefix: str = '', db: Any = None, config: Any = None):
        """
        Args:
            prefix: Table-name prefix; when empty it is looked up in ``config``
            db: Live database handle kept for callers and execution helpers
            config: Object with a ``get(key, default)`` lookup (see core.config.Config)
        """
        self.db = db

        if prefix:
            self.table_prefix = prefix
        elif config is not None:
            self.table_prefix = config.get('dbprefix', '') or ''
        else:
            self.table_prefix = ''

        self.db_funcs: List[str] = [self.db_fn_now()]
        self.state = QueryState()
        self.statement_type = StatementType.SELECT

    @classmethod
    def from_config(cls, config: Any, db: Any = None) -> 'Query':
        """Create a Query whose prefix comes from ``config``."""
        return cls(db=db, config=config)

    def clear(self) -> None:
        """Forget every fragment and go back to a SELECT.

        The table prefix and cached function tokens are kept.
        """
        self.state.clear()
        self.statement_type = StatementType.SELECT

    # ------------------------------------------------------------------
    # Fragment accumulators
    # ------------------------------------------------------------------

    def add_table(self, name: str, alias: str = '') -> None:
        """Add a table to the query, or repoint an existing alias.

        Args:
            name: Table name without prefix
            alias: Alias used in the other clauses; defaults to ``name``
        """
        if not name:
            return
        alias = alias or name
        self.state.tables[alias] = f"{self.table_prefix}{name}"

    def add_query(self, field: Fragment) -> None:
        """Add a field (or a group of fields) to the SELECT list."""
        if not field:
            return
        self.state.fields.append(field)

    def add_where(self, predicate: Fragment = '') -> None:
        """Add a predicate; all predicates are ANDed together."""
        if not predicate:
            return
        self.state.where_clauses.append(predicate)

    def add_order(self, field: str = '') -> None:
        """Order the results by a field, can be used multiple times."""
        if not field:
            return
        self.state.order_by.append(field)

    def add_group(self, field: str = '') -> None:
        """Group the results by a field, can be used multiple times."""
        if not field:
            return
        self.state.group_by.append(field)

    def set_limit(self, limit: Any) -> None:
        """Set the row limit.

        Non-positive or unparseable values are ignored, so they never reset
        a limit that is already set.
        """
        coerced = max(0, _to_int(limit))
        if coerced > 0:
            self.state.limit = coerced
        else:
            logger.debug("Ignoring non-positive limit %r", limit)

    def add_join(self, table: str, alias: str, condition: str, join_type: str = 'left') -> None:
        """Add a join through the legacy join list.

        The legacy list is merged into the current joins when the statement
        is rendered.
        """
        self.state.legacy.join.append({
            'table': f"{self.table_prefix}{table}",
            'alias': alias or table,
            'condition': condition,
            'type': join_type,
        })

    def left_join(self, table: str, alias: str, condition: str) -> None:
        self.add_join(table, alias, condition, 'left')

    def right_join(self, table: str, alias: str, condition: str) -> None:
        self.add_join(table, alias, condition, 'right')

    def inner_join(self, table: str, alias: str, condition: str) -> None:
        self.add_join(table, alias, condition, 'inner')

    # ------------------------------------------------------------------
    # Value assignments
    # ------------------------------------------------------------------

    def _add_values(
        self,
        target: dict,
        fields: Union[str, Sequence[str]],
        values: Any,
        func: bool
    ) -> None:
        if isinstance(fields, str):
            pairs = [(fields, values)]
        elif not isinstance(values, (list, tuple)) or len(values) != len(fields):
            logger.warning("Ignoring value assignment: %r does not match fields %r", values, fields)
            return
        else:
            pairs = list(zip(fields, values))

        for field, value in pairs:
            if not field:
                continue
            target[field] = value if func else quote(value)

    def add_insert(self, field: Union[str, Sequence[str]], value: Any, func: bool = False) -> None:
        """Assign value(s) for an INSERT and switch the statement type.

        Args:
            field: Field name, or a sequence of names parallel to ``value``
            value: Value, or a list/tuple of values the same length as ``field``;
                anything else alongside a field sequence is ignored
            func: When True the value is a raw SQL expression and is not quoted
        """
        self._add_values(self.state.value_list, field, value, func)
        self.statement_type = StatementType.INSERT

    def add_replace(self, field: Union[str, Sequence[str]], value: Any, func: bool = False) -> None:
        """Same as add_insert() but renders a REPLACE."""
        self._add_values(self.state.value_list, field, value, func)
        self.statement_type = StatementType.REPLACE

    def add_update(self, field: Union[str, Sequence[str]], value: Any, func: bool = False) -> None:
        """Assign value(s) for an UPDATE and switch the statement type."""
        self._add_values(self.state.update_list, field, value, func)
        self.statement_type = StatementType.UPDATE

    def set_delete(self, table: str) -> None:
        """Add ``table`` and turn the query into a DELETE."""
        self.add_table(table)
        self.statement_type = StatementType.DELETE

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def prepare(self, clear: bool = False) -> str:
        """Render the current statement type.

        Args:
            clear: Clear all fragments after rendering

        Returns:
            SQL string
        """
        return self._render(StatementType(self.statement_type), clear)

    def prepare_select(self, clear: bool = False) -> str:
        return self._render(StatementType.SELECT, clear)

    def prepare_insert(self, clear: bool = False) -> str:
        return self._render(StatementType.INSERT, clear)

    def prepare_replace(self, clear: bool = False) -> str:
        return self._render(StatementType.REPLACE, clear)

    def prepare_update(self, clear: bool = False) -> str:
        return self._render(StatementType.UPDATE, clear)

    def prepare_delete(self, clear: bool = False) -> str:
        return self._render(StatementType.DELETE, clear)

    def _render(self, statement_type: StatementType, clear: bool) -> str:
        state = reconcile_legacy_state(self.state)
        sql = STATEMENT_BUILDERS[statement_type](state)
        logger.debug("Prepared %s: %s", statement_type.value, sql)

        if clear:
            self.clear()
        return sql

    def __str__(self) -> str:
        return self.prepare()

    # ------------------------------------------------------------------
    # Database function tokens
    # ------------------------------------------------------------------

    def db_fn_now(self) -> str:
        return now_sql()

    def db_fn_now_with_tz(self) -> str:
        return now_with_tz()

    def db_fn_date_diff(self, date1: str = '', date2: str = '') -> str:
        return date_diff_sql(date1, date2)

    def db_fn_date_add(self, date: str, interval: Union[int, str] = 0, unit: str = 'DAY') -> str:
        return date_add_sql(date, interval, unit)
