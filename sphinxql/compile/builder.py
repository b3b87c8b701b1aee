"""Fluent SphinxQL query builder.

``QueryBuilder`` accumulates clause state through chained calls and compiles
it to statement text on demand.  Rendering is delegated to the statement
compiler registered for the builder's :class:`~sphinxql.schema.kinds.QueryKind`;
the builder itself only records state.

Typical use::

    qb = (
        QueryBuilder()
        .select("id", "title", ("WEIGHT()", "w"))
        .from_("products")
        .match("title", "red shoes")
        .where("price", "BETWEEN", [10, 100])
        .where()
            .where("brand_id", "IN", [1, 2, 3])
            .or_where("featured", "=", 1)
        .end()
        .order_by("w", "DESC")
        .limit(20)
    )
    qb.compile()

Kind switching
--------------
Calling ``insert()`` / ``update()`` / ``delete()`` on a builder already used
for SELECT changes the kind only.  Shared clauses (WHERE, ORDER BY, LIMIT)
carry over; kind-specific state is seeded, not cleared.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable, Mapping
from typing import Any

from sphinxql.compile.base import CompiledSQL, SubQuery
from sphinxql.compile.expression import Expression
from sphinxql.compile.registry import StatementRegistry
from sphinxql.connection.base import Executor, Result
from sphinxql.errors import ExecutorNotBoundError, KindConflictError, MalformedGroupError
from sphinxql.schema.clauses import MatchClause, OrderEntry
from sphinxql.schema.conditions import Clause, CloseGroup, OpenGroup
from sphinxql.schema.kinds import QueryKind
from sphinxql.schema.state import GroupTarget, QueryState


class QueryBuilder(SubQuery):
    """Builds one SphinxQL statement.

    Args:
        kind: Initial query kind; usually set by ``select()``, ``insert()``
            and friends instead.
        executor: Executor used by :meth:`execute`.  Optional when the
            builder is only compiled.
    """

    def __init__(
        self,
        kind: QueryKind | int | None = None,
        executor: Executor | None = None,
    ) -> None:
        self._kind = QueryKind(kind) if kind is not None else None
        self._executor = executor
        self._state = QueryState()

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def kind(self) -> QueryKind | None:
        return self._kind

    @property
    def executor(self) -> Executor | None:
        return self._executor

    @property
    def state(self) -> QueryState:
        """The live clause state.  Mutate it through builder methods only."""
        return self._state

    def __str__(self) -> str:
        return self.compile()

    def __repr__(self) -> str:
        kind = self._kind.name if self._kind is not None else None
        return f"<QueryBuilder kind={kind}>"

    # ------------------------------------------------------------------
    # SELECT
    # ------------------------------------------------------------------

    def select(self, *columns: Any) -> QueryBuilder:
        """Set the kind to SELECT and, if given, the columns to select.

        Columns may be passed individually or as one list; tuples are
        ``(column, alias)`` pairs.  A builder with facets stays MULTI_SELECT.
        """
        self._kind = QueryKind.MULTI_SELECT if self._state.facets else QueryKind.SELECT
        if len(columns) == 1 and isinstance(columns[0], list):
            columns = tuple(columns[0])
        if columns:
            self._state.select = list(columns)
        return self

    def distinct(self, value: bool = True) -> QueryBuilder:
        self._state.distinct = value
        return self

    def from_(self, *indexes: Any) -> QueryBuilder:
        """Add indexes to select from.  Each may be a name or ``(name, alias)``."""
        self._state.from_.extend(indexes)
        return self

    def group_by(self, *columns: Any) -> QueryBuilder:
        self._state.group_by.extend(columns)
        return self

    def having(self, column: Any = None, op: str | None = None, value: Any = None) -> QueryBuilder:
        """Alias of :meth:`and_having`."""
        return self.and_having(column, op, value)

    def and_having(self, column: Any = None, op: str | None = None, value: Any = None) -> QueryBuilder:
        """Add an ``AND`` HAVING condition, or open a group when ``column`` is None."""
        return self._add_condition("HAVING", "AND", column, op, value)

    def or_having(self, column: Any = None, op: str | None = None, value: Any = None) -> QueryBuilder:
        """Add an ``OR`` HAVING condition, or open a group when ``column`` is None."""
        return self._add_condition("HAVING", "OR", column, op, value)

    def offset(self, number: int | None) -> QueryBuilder:
        """Start returning results after ``number`` rows; ``None`` resets."""
        self._state.offset = None if number is None else int(number)
        return self

    def limit(self, number: int | None) -> QueryBuilder:
        """Return at most ``number`` rows; ``None`` resets."""
        self._state.limit = None if number is None else int(number)
        return self

    # ------------------------------------------------------------------
    # WHERE
    # ------------------------------------------------------------------

    def where(self, column: Any = None, op: str | None = None, value: Any = None) -> QueryBuilder:
        """Alias of :meth:`and_where`."""
        return self.and_where(column, op, value)

    def and_where(self, column: Any = None, op: str | None = None, value: Any = None) -> QueryBuilder:
        """Add an ``AND`` WHERE condition.

        Args:
            column: Column reference; ``None`` opens a bracketed group
                (close it with :meth:`end`); a ``list`` of
                ``(column, op, value)`` triples appends them all.
            op: Relational operator.
            value: Compared value.
        """
        return self._add_condition("WHERE", "AND", column, op, value)

    def or_where(self, column: Any = None, op: str | None = None, value: Any = None) -> QueryBuilder:
        """Add an ``OR`` WHERE condition (same arguments as :meth:`and_where`)."""
        return self._add_condition("WHERE", "OR", column, op, value)

    def filter(self, column: Any, op: str, value: Any) -> QueryBuilder:
        """Like :meth:`and_where`, but a no-op for blank values.

        ``None``, ``""``, whitespace-only strings and empty collections are
        treated as "no filter", so values can be wired straight from form
        input.
        """
        if self._is_blank(value):
            return self
        return self.and_where(column, op, value)

    def or_filter(self, column: Any, op: str, value: Any) -> QueryBuilder:
        """Like :meth:`or_where`, but a no-op for blank values."""
        if self._is_blank(value):
            return self
        return self.or_where(column, op, value)

    def end(self, close_if_empty: bool = False) -> QueryBuilder:
        """Close the most recently opened WHERE or HAVING group.

        Args:
            close_if_empty: Drop the group entirely instead of emitting
                ``()`` when nothing was added to it.

        Raises:
            MalformedGroupError: If no group is open.
        """
        if not self._state.open_groups:
            raise MalformedGroupError("end() called with no open condition group.")

        target = self._state.open_groups.pop()
        conditions = self._state.conditions(target)
        if close_if_empty and conditions and isinstance(conditions[-1], OpenGroup):
            conditions.pop()
            return self

        conditions.append(CloseGroup())
        return self

    def order_by(self, column: Any = None, direction: str | None = None) -> QueryBuilder:
        """Add, replace or clear ORDER BY entries.

        * ``order_by("id", "ASC")`` appends one entry.
        * ``order_by([("id", "ASC"), ("w", "DESC")])`` replaces the list.
        * ``order_by()`` clears it.
        """
        if isinstance(column, list) and direction is None:
            self._state.order_by = [OrderEntry.coerce(item) for item in column]
        elif column is not None:
            self._state.order_by.append(OrderEntry(column=column, direction=direction))
        else:
            self._state.order_by = []
        return self

    # ------------------------------------------------------------------
    # Full-text, facets, options
    # ------------------------------------------------------------------

    def match(self, fields: Any, text: Any = None) -> QueryBuilder:
        """Add a full-text term to ``MATCH()``.

        ``match("red shoes")`` and ``match(None, "red shoes")`` add an
        unscoped term; ``match("title", "red")`` and
        ``match(["title", "body"], "red")`` scope it to fields.
        """
        if text is None:
            fields, text = None, fields
        if text is None:
            raise ValueError("match() needs the full-text query text.")
        if isinstance(fields, (list, tuple)):
            fields = tuple(fields)
        self._state.match.append(MatchClause(fields=fields, text=text))
        return self

    def facet(self, query: Any) -> QueryBuilder:
        """Append a ``FACET`` clause; the query becomes a MULTI_SELECT.

        Args:
            query: Raw facet body (``"brand_id ORDER BY COUNT(*) DESC"``),
                an ``Expression``, or a builder compiled in place.
        """
        self._state.facets.append(query)
        self._kind = QueryKind.MULTI_SELECT
        return self

    def option(self, name: str, value: Any = None) -> QueryBuilder:
        """Append an ``OPTION`` item.

        ``option("ranker=sph04")`` adds the text verbatim;
        ``option("max_matches", 5000)`` renders ``max_matches=5000``; a
        mapping value renders as a list, e.g.
        ``option("field_weights", {"title": 10})`` →
        ``field_weights=(title=10)``.
        """
        if value is None:
            self._state.options.append(str(name))
        else:
            self._state.options.append(f"{name}={self._option_value(value)}")
        return self

    # ------------------------------------------------------------------
    # INSERT / REPLACE / UPDATE / DELETE
    # ------------------------------------------------------------------

    def index(self, name: Any) -> QueryBuilder:
        """Set the index to insert into, update or delete from."""
        self._state.index = name
        return self

    def columns(self, columns: Iterable[Any]) -> QueryBuilder:
        """Set the INSERT column list."""
        self._state.columns = list(columns)
        return self

    def values(self, *groups: Any) -> QueryBuilder:
        """Append one or more INSERT value groups.

        Each group is a sequence in column order or a column → value mapping.
        Mappings are read in column-list order when every column is a key,
        otherwise in their own order.

        Raises:
            KindConflictError: If a sub-select is already attached.
        """
        if self._state.subselect is not None:
            raise KindConflictError()
        for group in groups:
            if isinstance(group, Mapping):
                self._state.values.append(self._mapping_values(group))
            else:
                self._state.values.append(list(group))
        return self

    def set(self, pairs: Mapping[Any, Any] | Iterable[tuple[Any, Any]]) -> QueryBuilder:
        """Add UPDATE ``column = value`` assignments."""
        items = pairs.items() if isinstance(pairs, Mapping) else pairs
        for column, value in items:
            self._state.set.append((column, value))
        return self

    def subselect(self, query: SubQuery) -> QueryBuilder:
        """Use a SELECT builder as the INSERT source.

        Raises:
            KindConflictError: If VALUES groups were already added.
        """
        if self._state.values:
            raise KindConflictError()
        self._state.subselect = query
        return self

    def insert(self, index: Any = None, data: Mapping[str, Any] | None = None) -> QueryBuilder:
        """Set the kind to INSERT and optionally seed the index and one row.

        Args:
            index: Target index.
            data: Column → value mapping for one document.  The first
                mapping seeds the column list.
        """
        self._kind = QueryKind.INSERT
        if index is not None:
            self._state.index = index
        if data:
            if not self._state.columns:
                self._state.columns = list(data)
            self.values(data)
        return self

    def replace(self, index: Any = None, data: Mapping[str, Any] | None = None) -> QueryBuilder:
        """Same as :meth:`insert`, but compiles to ``REPLACE INTO``."""
        self.insert(index, data)
        self._kind = QueryKind.REPLACE
        return self

    def update(self, index: Any = None) -> QueryBuilder:
        self._kind = QueryKind.UPDATE
        if index is not None:
            self._state.index = index
        return self

    def delete(self, index: Any = None) -> QueryBuilder:
        self._kind = QueryKind.DELETE
        if index is not None:
            self._state.index = index
        return self

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reset(self) -> QueryBuilder:
        """Drop all clause state.  The kind and executor are kept."""
        self._state = QueryState()
        return self

    def copy(self) -> QueryBuilder:
        """Return an independent builder with a deep copy of the state."""
        return copy.deepcopy(self)

    def __deepcopy__(self, memo: dict[int, Any]) -> QueryBuilder:
        # The executor holds a live connection and is shared, not copied.
        clone = QueryBuilder(self._kind, self._executor)
        memo[id(self)] = clone
        clone._state = copy.deepcopy(self._state, memo)
        return clone

    # ------------------------------------------------------------------
    # Compilation and execution
    # ------------------------------------------------------------------

    def compile(self) -> str:
        """Compile the current state to statement text.

        Raises:
            UnsupportedKindError: If the kind is unset or is RAW.
            MalformedGroupError: If a WHERE / HAVING group is left open.
        """
        return StatementRegistry.get(self._kind).compile(self._state, self._kind)

    def build(self) -> CompiledSQL:
        """Compile and pair the text with the query kind."""
        return CompiledSQL(sql=self.compile(), kind=self._kind)

    def execute(self) -> Result:
        """Compile and run the statement on the bound executor.

        Raises:
            ExecutorNotBoundError: If no executor was given.
            QueryFailedError: Propagated from the executor.
        """
        if self._executor is None:
            raise ExecutorNotBoundError()
        compiled = self.build()
        return self._executor.execute(compiled.kind, compiled.sql)

    def get(self) -> Result:
        """Alias of :meth:`execute`."""
        return self.execute()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _add_condition(
        self,
        target: GroupTarget,
        logic: str,
        column: Any,
        op: str | None,
        value: Any,
    ) -> QueryBuilder:
        conditions = self._state.conditions(target)
        if column is None:
            conditions.append(OpenGroup(logic=logic))
            self._state.open_groups.append(target)
        elif isinstance(column, list):
            conditions.extend(Clause.from_triple(logic, row) for row in column)
        else:
            conditions.append(Clause(logic=logic, column=column, op=op, value=value))
        return self

    def _mapping_values(self, group: Mapping[Any, Any]) -> list[Any]:
        columns = self._state.columns
        if columns and all(isinstance(column, str) and column in group for column in columns):
            return [group[column] for column in columns]
        return list(group.values())

    @staticmethod
    def _is_blank(value: Any) -> bool:
        if value is None:
            return True
        if isinstance(value, str):
            return not value.strip()
        if isinstance(value, (list, tuple, set, dict)):
            return not value
        return False

    @staticmethod
    def _option_value(value: Any) -> str:
        if isinstance(value, Expression):
            return value.compile()
        if isinstance(value, Mapping):
            return "(" + ", ".join(f"{key}={item}" for key, item in value.items()) + ")"
        if isinstance(value, bool):
            return "1" if value else "0"
        return str(value)
