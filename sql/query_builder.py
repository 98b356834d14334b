"""
============================
SQL Statement Builders.
============================

Pure functions that turn an accumulated QueryState into SQL text. All
builders follow the _builder naming convention and never modify the
state they read.

Clause Builders:
- fields_builder: Comma-joined SELECT list, '*' when empty
- table_builder: '(name AS alias)' entries for the FROM list
- primary_table_builder: Raw name of the first table added
- join_builder: '<TYPE> JOIN table AS alias ON condition ' entries
- where_builder: 'WHERE a AND b', or '' when there are no predicates
- group_builder / order_builder: 'GROUP BY ...' / 'ORDER BY ...'
- limit_builder: 'LIMIT n', or '' when unset

Statement Builders:
- select_builder, insert_builder, replace_builder, update_builder, delete_builder

Fragments are raw SQL and are concatenated without quoting or validation.

Usage:
    from sql.query_builder import select_builder
    from sql.state import QueryState

    state = QueryState(tables={'u': 'users'}, fields=['u.id'])
    sql = select_builder(state)
"""

from enum import Enum
from typing import Callable, Dict

from sql.state import QueryState, flatten_fragments


class StatementType(str, Enum):
    """Statement kinds a Query can render."""

    SELECT = 'select'
    INSERT = 'insert'
    INSERT_SELECT = 'insert_select'
    REPLACE = 'replace'
    UPDATE = 'update'
    DELETE = 'delete'


def fields_builder(state: QueryState) -> str:
    """Build the SELECT list, falling back to '*'."""
    fields = flatten_fragments(state.fields)
    return ','.join(fields) if fields else '*'


def table_builder(state: QueryState) -> str:
    """
    Build the FROM list as comma-joined '(name AS alias)' entries.

    Returns:
        e.g. '(orders AS orders),(customers AS c)'
    """
    return ','.join(f"({table} AS {alias})" for alias, table in state.tables.items())


def primary_table_builder(state: QueryState) -> str:
    """
    Return the raw name of the first table added.

    The alias and every later table are ignored. Returns '' when no table
    was added.
    """
    return next(iter(state.tables.values()), '')


def join_builder(state: QueryState) -> str:
    """
    Build the JOIN clauses.

    Each join renders as '<TYPE> JOIN <table> AS <alias> ON <condition> '
    with a trailing space; a missing alias falls back to the table name and
    an empty condition drops the ON keyword.
    """
    joins = ''
    for join in state.joins:
        table = join['table']
        alias = join.get('alias') or table
        condition = join.get('condition') or ''
        join_type = (join.get('type') or 'left').upper()

        joins += f"{join_type} JOIN {table} AS {alias} "
        if condition:
            joins += f"ON {condition} "
    return joins


def where_builder(state: QueryState) -> str:
    """Build the WHERE clause, or '' when there are no predicates."""
    predicates = flatten_fragments(state.where_clauses)
    return 'WHERE ' + ' AND '.join(predicates) if predicates else ''


def group_builder(state: QueryState) -> str:
    return 'GROUP BY ' + ','.join(state.group_by) if state.group_by else ''


def order_builder(state: QueryState) -> str:
    return 'ORDER BY ' + ','.join(state.order_by) if state.order_by else ''


def limit_builder(state: QueryState) -> str:
    return f"LIMIT {int(state.limit)}" if state.limit > 0 else ''


def select_builder(state: QueryState) -> str:
    """
    Build a SELECT statement.

    Template:
        SELECT <fields> FROM (<tables>) <joins> <where> <group> <order> <limit>
    """
    fields = fields_builder(state)
    tables = table_builder(state)
    joins = join_builder(state)
    where = where_builder(state)
    group_by = group_builder(state)
    order = order_builder(state)
    limit = limit_builder(state)

    return f"SELECT {fields} FROM ({tables}) {joins} {where} {group_by} {order} {limit}"


def _value_statement(verb: str, state: QueryState) -> str:
    table = primary_table_builder(state)
    # Keys and values come from the same dict, so the lists stay aligned
    fields = ','.join(str(name) for name in state.value_list.keys())
    values = ','.join(str(value) for value in state.value_list.values())

    return f"{verb} INTO {table} ({fields}) VALUES ({values})"


def insert_builder(state: QueryState) -> str:
    """
    Build an INSERT statement against the primary table.

    Template:
        INSERT INTO <table> (<f1>,<f2>) VALUES (<v1>,<v2>)
    """
    return _value_statement('INSERT', state)


def replace_builder(state: QueryState) -> str:
    """Build a REPLACE statement; identical to INSERT apart from the verb."""
    return _value_statement('REPLACE', state)


def update_builder(state: QueryState) -> str:
    """
    Build an UPDATE statement against the primary table.

    Template:
        UPDATE <table> SET <f1> = <v1>, <f2> = <v2> <where>
    """
    table = primary_table_builder(state)
    assignments = ', '.join(f"{name} = {value}" for name, value in state.update_list.items())
    where = where_builder(state)

    return f"UPDATE {table} SET {assignments} {where}"


def delete_builder(state: QueryState) -> str:
    """
    Build a DELETE statement against the primary table.

    Template:
        DELETE FROM <table> <where> <limit>
    """
    table = primary_table_builder(state)
    where = where_builder(state)
    limit = limit_builder(state)

    return f"DELETE FROM {table} {where} {limit}"


STATEMENT_BUILDERS: Dict[StatementType, Callable[[QueryState], str]] = {
    StatementType.SELECT: select_builder,
    StatementType.INSERT: insert_builder,
    StatementType.INSERT_SELECT: insert_builder,
    StatementType.REPLACE: replace_builder,
    StatementType.UPDATE: update_builder,
    StatementType.DELETE: delete_builder,
}
