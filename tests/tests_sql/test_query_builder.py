"""
Test suite for sql.query_builder and sql.state.

Tests cover:
- Clause builders on hand-built QueryState objects
- Statement builders and the STATEMENT_BUILDERS dispatch table
- flatten_fragments and reconcile_legacy_state
"""

import pytest

from sql.query_builder import (
    STATEMENT_BUILDERS,
    StatementType,
    fields_builder,
    group_builder,
    join_builder,
    limit_builder,
    order_builder,
    primary_table_builder,
    select_builder,
    table_builder,
    where_builder,
)
from sql.state import LegacyFragments, QueryState, flatten_fragments, reconcile_legacy_state

# ============================================================================
# UNIT TESTS - Clause builders
# ============================================================================


@pytest.mark.unit
def test_fields_builder_star_when_empty():
    assert fields_builder(QueryState()) == '*'


@pytest.mark.unit
def test_fields_builder_flattens_groups():
    state = QueryState(fields=[('a', 'b'), 'c', ['d']])

    assert fields_builder(state) == 'a,b,c,d'


@pytest.mark.unit
def test_table_builder_wraps_each_entry():
    state = QueryState(tables={'o': 'orders', 'customers': 'customers'})

    assert table_builder(state) == '(orders AS o),(customers AS customers)'


@pytest.mark.unit
def test_primary_table_builder():
    assert primary_table_builder(QueryState(tables={'x': 'first', 'y': 'second'})) == 'first'
    assert primary_table_builder(QueryState()) == ''


@pytest.mark.unit
def test_join_builder_formats_each_join():
    state = QueryState(joins=[
        {'table': 'a', 'alias': 'x', 'condition': 'x.id = t.a', 'type': 'left'},
        {'table': 'b', 'alias': '', 'condition': 'b.id = t.b', 'type': 'inner'},
    ])

    assert join_builder(state) == (
        'LEFT JOIN a AS x ON x.id = t.a INNER JOIN b AS b ON b.id = t.b '
    )


@pytest.mark.unit
def test_join_builder_without_condition_omits_on():
    state = QueryState(joins=[{'table': 'a', 'alias': 'a', 'condition': '', 'type': 'cross'}])

    assert join_builder(state) == 'CROSS JOIN a AS a '


@pytest.mark.unit
def test_join_builder_defaults_type_to_left():
    state = QueryState(joins=[{'table': 'a', 'alias': 'a', 'condition': 'c'}])

    assert join_builder(state) == 'LEFT JOIN a AS a ON c '


@pytest.mark.unit
def test_where_builder():
    assert where_builder(QueryState()) == ''
    assert where_builder(QueryState(where_clauses=['a=1', ['b=2', 'c=3']])) == (
        'WHERE a=1 AND b=2 AND c=3'
    )


@pytest.mark.unit
def test_group_order_limit_builders():
    state = QueryState(group_by=['a', 'b'], order_by=['c DESC', 'd'], limit=25)

    assert group_builder(state) == 'GROUP BY a,b'
    assert order_builder(state) == 'ORDER BY c DESC,d'
    assert limit_builder(state) == 'LIMIT 25'


@pytest.mark.edge_case
def test_empty_group_order_limit_render_nothing():
    state = QueryState()

    assert group_builder(state) == ''
    assert order_builder(state) == ''
    assert limit_builder(state) == ''


@pytest.mark.unit
def test_select_builder_reads_without_mutating():
    state = QueryState(tables={'t': 'tasks'}, fields=['t.id'], limit=3)

    sql = select_builder(state)

    assert sql == 'SELECT t.id FROM ((tasks AS t))     LIMIT 3'
    assert state.tables == {'t': 'tasks'}


@pytest.mark.unit
def test_statement_builders_cover_every_type():
    assert set(STATEMENT_BUILDERS) == set(StatementType)


@pytest.mark.unit
def test_insert_field_and_value_lists_stay_aligned():
    state = QueryState(
        tables={'t': 't'},
        value_list={'c': '3', 'a': '1', 'b': '2'},
    )

    sql = STATEMENT_BUILDERS[StatementType.INSERT](state)

    assert sql == 'INSERT INTO t (c,a,b) VALUES (3,1,2)'


# ============================================================================
# UNIT TESTS - State
# ============================================================================


@pytest.mark.unit
def test_flatten_fragments_preserves_relative_order():
    assert flatten_fragments(['a', ['b', 'c'], 'd', ('e', 'f')]) == ['a', 'b', 'c', 'd', 'e', 'f']


@pytest.mark.unit
def test_state_clear_resets_everything():
    state = QueryState(
        tables={'a': 'a'}, fields=['f'], where_clauses=['w'],
        joins=[{'table': 'j'}], group_by=['g'], order_by=['o'], limit=9,
        value_list={'v': '1'}, update_list={'u': '2'},
        legacy=LegacyFragments(where=['old']),
    )

    state.clear()

    assert state == QueryState()


@pytest.mark.unit
def test_reconcile_copies_legacy_into_empty_collections():
    state = QueryState()
    state.legacy.table_list = {'u': 'users'}
    state.legacy.query = ['u.id']
    state.legacy.where = ['u.id = 1']
    state.legacy.join = [{'table': 'c', 'alias': 'c', 'condition': 'x', 'type': 'left'}]
    state.legacy.group_by = ['u.type']
    state.legacy.order_by = ['u.name']

    merged = reconcile_legacy_state(state)

    assert merged.tables == {'u': 'users'}
    assert merged.fields == ['u.id']
    assert merged.where_clauses == ['u.id = 1']
    assert merged.joins == state.legacy.join
    assert merged.group_by == ['u.type']
    assert merged.order_by == ['u.name']


@pytest.mark.unit
def test_reconcile_keeps_non_empty_current_collections():
    state = QueryState(where_clauses=['current = 1'])
    state.legacy.where = ['legacy = 1']

    merged = reconcile_legacy_state(state)

    assert merged.where_clauses == ['current = 1']


@pytest.mark.unit
def test_reconcile_does_not_mutate_input():
    state = QueryState()
    state.legacy.order_by = ['name']

    merged = reconcile_legacy_state(state)
    merged.order_by.append('extra')

    assert state.order_by == []
    assert state.legacy.order_by == ['name']


@pytest.mark.integration
def test_select_from_legacy_only_state():
    """A state filled only through legacy names renders like a current one."""
    state = QueryState()
    state.legacy.table_list = {'p': 'projects'}
    state.legacy.query = [['p.id', 'p.name']]
    state.legacy.where = ['p.active = 1']

    sql = select_builder(reconcile_legacy_state(state))

    assert sql == 'SELECT p.id,p.name FROM ((projects AS p))  WHERE p.active = 1   '
