"""Clause-level SQL builders.

Each class renders exactly one clause from builder state and returns an empty
string when that state is empty, so statement compilers can skip it.

Classes
-------
SelectListBuilder   — ``SELECT [DISTINCT] <columns>``
FromClauseBuilder   — ``FROM <indexes>``
WhereClauseBuilder  — ``WHERE [MATCH(...)] [AND] <conditions>``
GroupByBuilder      — ``GROUP BY <columns>``
HavingClauseBuilder — ``HAVING <conditions>``
OrderByBuilder      — ``ORDER BY <column> <direction>, ...``
LimitClauseBuilder  — ``LIMIT [offset, ]limit``
OptionClauseBuilder — ``OPTION <name=value>, ...``
FacetClauseBuilder  — ``FACET <sql>`` per facet
ValuesClauseBuilder — ``VALUES (...), (...)`` or an INSERT sub-select
SetClauseBuilder    — ``SET <column> = <value>, ...``
"""
from __future__ import annotations

from typing import Any

from sphinxql.compile.base import SubQuery
from sphinxql.compile.conditions import ConditionCompiler, MatchCompiler
from sphinxql.compile.expression import Expression
from sphinxql.compile.quoting import quote_column, quote_index, quote_value
from sphinxql.schema.clauses import OrderEntry
from sphinxql.schema.state import QueryState


class SelectListBuilder:
    """Builds ``SELECT [DISTINCT] …``.

    Rendered columns are de-duplicated by their text, keeping first
    occurrence order.  An empty column list selects ``*``.
    """

    def build(self, state: QueryState) -> str:
        prefix = "SELECT DISTINCT" if state.distinct else "SELECT"
        columns = list(dict.fromkeys(quote_column(column) for column in state.select))
        return f"{prefix} {', '.join(columns) or '*'}"


class FromClauseBuilder:
    def build(self, state: QueryState) -> str:
        if not state.from_:
            return ""
        return "FROM " + ", ".join(quote_index(index) for index in state.from_)


class WhereClauseBuilder:
    """Builds the WHERE clause, with MATCH first when present."""

    def __init__(
        self,
        conditions: ConditionCompiler,
        match: MatchCompiler | None = None,
    ) -> None:
        self._conditions = conditions
        self._match = match

    def build(self, state: QueryState) -> str:
        conditions_sql = self._conditions.build(state.where, clause="WHERE")
        match_sql = ""
        if self._match is not None and state.match:
            match_sql = f"MATCH({self._match.build(state.match)})"

        if match_sql and conditions_sql:
            return f"WHERE {match_sql} AND {conditions_sql}"
        if match_sql or conditions_sql:
            return f"WHERE {match_sql or conditions_sql}"
        return ""


class GroupByBuilder:
    def build(self, state: QueryState) -> str:
        if not state.group_by:
            return ""
        return "GROUP BY " + ", ".join(quote_column(column) for column in state.group_by)


class HavingClauseBuilder:
    def __init__(self, conditions: ConditionCompiler) -> None:
        self._conditions = conditions

    def build(self, state: QueryState) -> str:
        conditions_sql = self._conditions.build(state.having, clause="HAVING")
        return f"HAVING {conditions_sql}" if conditions_sql else ""


class OrderByBuilder:
    def build(self, state: QueryState) -> str:
        if not state.order_by:
            return ""
        return "ORDER BY " + ", ".join(self._build_entry(entry) for entry in state.order_by)

    @staticmethod
    def _build_entry(entry: OrderEntry) -> str:
        column_sql = quote_column(entry.column)
        if entry.direction:
            return f"{column_sql} {entry.direction.upper()}"
        return column_sql


class LimitClauseBuilder:
    """Builds ``LIMIT``.

    Args:
        with_offset: Render the offset (SELECT only).  UPDATE and DELETE
            accept a bare row count.
    """

    def __init__(self, with_offset: bool = True) -> None:
        self._with_offset = with_offset

    def build(self, state: QueryState) -> str:
        if state.limit is None:
            return ""
        if self._with_offset and state.offset is not None:
            return f"LIMIT {state.offset}, {state.limit}"
        return f"LIMIT {state.limit}"


class OptionClauseBuilder:
    def build(self, state: QueryState) -> str:
        if not state.options:
            return ""
        return "OPTION " + ", ".join(state.options)


class FacetClauseBuilder:
    """Builds one ``FACET`` clause per facet, in call order."""

    def build(self, state: QueryState) -> str:
        return " ".join(f"FACET {self._build_facet(facet)}" for facet in state.facets)

    @staticmethod
    def _build_facet(facet: Any) -> str:
        if isinstance(facet, (SubQuery, Expression)):
            return facet.compile()
        return str(facet)


class ValuesClauseBuilder:
    """Builds the INSERT source: literal value groups or a sub-select."""

    def build(self, state: QueryState) -> str:
        if state.subselect is not None:
            return state.subselect.compile()
        groups = [
            "(" + ", ".join(quote_value(value) for value in group) + ")"
            for group in state.values
        ]
        return "VALUES " + ", ".join(groups)


class SetClauseBuilder:
    def build(self, state: QueryState) -> str:
        pairs = [f"{quote_column(column)} = {quote_value(value)}" for column, value in state.set]
        return "SET " + ", ".join(pairs)
