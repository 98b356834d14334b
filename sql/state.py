"""
=======================
Query fragment storage.
=======================

Holds the fragments a Query accumulates before rendering, and the merge
step that folds the legacy-named collections into the current ones.

Older callers populate ``table_list``, ``query``, ``where``, ``join``,
``group_by`` and ``order_by`` directly. Those live on ``QueryState.legacy``
and are only consulted by reconcile_legacy_state(), which runs right before
a statement is rendered.

Example:
    >>> state = QueryState()
    >>> state.legacy.where.append('id = 1')
    >>> reconcile_legacy_state(state).where_clauses
    ['id = 1']
"""

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Union

Fragment = Union[str, List[str], tuple]

# (current attribute, legacy attribute)
LEGACY_FIELD_MAP = (
    ('tables', 'table_list'),
    ('fields', 'query'),
    ('where_clauses', 'where'),
    ('joins', 'join'),
    ('group_by', 'group_by'),
    ('order_by', 'order_by'),
)


@dataclass
class LegacyFragments:
    """Fragments stored under the old collection names."""

    table_list: Dict[str, str] = field(default_factory=dict)
    query: List[Fragment] = field(default_factory=list)
    where: List[Fragment] = field(default_factory=list)
    join: List[Dict[str, str]] = field(default_factory=list)
    group_by: List[str] = field(default_factory=list)
    order_by: List[str] = field(default_factory=list)

    def clear(self) -> None:
        self.table_list = {}
        self.query = []
        self.where = []
        self.join = []
        self.group_by = []
        self.order_by = []


@dataclass
class QueryState:
    """Mutable store of everything a Query has accumulated.

    Attributes:
        tables: alias -> raw table name, in insertion order
        fields: SELECT expressions; an entry may be a group of expressions
        where_clauses: predicates ANDed together; same grouping rule
        joins: join descriptors with keys table, alias, condition, type
        group_by: GROUP BY expressions
        order_by: ORDER BY expressions
        limit: row limit, 0 when unset
        value_list: field -> value expression for INSERT/REPLACE
        update_list: field -> value expression for UPDATE
        legacy: collections populated through the old interfaces
    """

    tables: Dict[str, str] = field(default_factory=dict)
    fields: List[Fragment] = field(default_factory=list)
    where_clauses: List[Fragment] = field(default_factory=list)
    joins: List[Dict[str, str]] = field(default_factory=list)
    group_by: List[str] = field(default_factory=list)
    order_by: List[str] = field(default_factory=list)
    limit: int = 0
    value_list: Dict[str, Any] = field(default_factory=dict)
    update_list: Dict[str, Any] = field(default_factory=dict)
    legacy: LegacyFragments = field(default_factory=LegacyFragments)

    def clear(self) -> None:
        """Reset every collection to empty and the limit to 0."""
        self.tables = {}
        self.fields = []
        self.where_clauses = []
        self.joins = []
        self.group_by = []
        self.order_by = []
        self.limit = 0
        self.value_list = {}
        self.update_list = {}
        self.legacy.clear()


def flatten_fragments(entries: Iterable[Fragment]) -> List[str]:
    """Flatten one level of grouped fragments, preserving order.

    Example:
        >>> flatten_fragments(['a', ['b', 'c'], 'd'])
        ['a', 'b', 'c', 'd']
    """
    flat = []
    for entry in entries:
        if isinstance(entry, (list, tuple)):
            flat.extend(entry)
        else:
            flat.append(entry)
    return flat


def reconcile_legacy_state(state: QueryState) -> QueryState:
    """Merge legacy-named collections into the current ones.

    Each current collection that is empty takes a copy of its non-empty
    legacy counterpart. The given state is left untouched; a reconciled
    copy is returned.

    Args:
        state: The accumulated query state

    Returns:
        A new QueryState ready for rendering
    """
    merged = deepcopy(state)
    for current_name, legacy_name in LEGACY_FIELD_MAP:
        legacy_value = getattr(merged.legacy, legacy_name)
        if legacy_value and not getattr(merged, current_name):
            setattr(merged, current_name, legacy_value)
    return merged
