"""Per-kind statement compilers.

Clause order is fixed per statement kind; the daemon's grammar rejects any
other order.  Each compiler assembles the non-empty clause fragments with a
single space.
"""
from __future__ import annotations

from sphinxql.compile.base import StatementCompiler
from sphinxql.compile.clause_builders import (
    FacetClauseBuilder,
    FromClauseBuilder,
    GroupByBuilder,
    HavingClauseBuilder,
    LimitClauseBuilder,
    OptionClauseBuilder,
    OrderByBuilder,
    SelectListBuilder,
    SetClauseBuilder,
    ValuesClauseBuilder,
    WhereClauseBuilder,
)
from sphinxql.compile.conditions import ConditionCompiler, MatchCompiler
from sphinxql.compile.quoting import quote_column, quote_index
from sphinxql.schema.kinds import QueryKind
from sphinxql.schema.state import QueryState


def _join(parts: list[str]) -> str:
    return " ".join(part for part in parts if part)


class SelectCompiler(StatementCompiler):
    """``SELECT … FROM … WHERE … GROUP BY … HAVING … ORDER BY … LIMIT …
    OPTION … FACET …``.

    Also serves MULTI_SELECT: facets are trailing clauses of the same
    statement.
    """

    def __init__(self) -> None:
        conditions = ConditionCompiler()
        self._clauses = [
            SelectListBuilder(),
            FromClauseBuilder(),
            WhereClauseBuilder(conditions, MatchCompiler()),
            GroupByBuilder(),
            HavingClauseBuilder(conditions),
            OrderByBuilder(),
            LimitClauseBuilder(with_offset=True),
            OptionClauseBuilder(),
            FacetClauseBuilder(),
        ]

    def compile(self, state: QueryState, kind: QueryKind) -> str:
        return _join([clause.build(state) for clause in self._clauses])


class InsertCompiler(StatementCompiler):
    """``INSERT INTO`` / ``REPLACE INTO <index> (<columns>) VALUES …``."""

    def __init__(self) -> None:
        self._values = ValuesClauseBuilder()

    def compile(self, state: QueryState, kind: QueryKind) -> str:
        keyword = "REPLACE INTO" if kind == QueryKind.REPLACE else "INSERT INTO"
        columns_sql = ", ".join(quote_column(column) for column in state.columns)
        return _join(
            [
                f"{keyword} {quote_index(state.index)}",
                f"({columns_sql})",
                self._values.build(state),
            ]
        )


class UpdateCompiler(StatementCompiler):
    """``UPDATE <index> SET … [WHERE …] [ORDER BY …] [LIMIT n]``."""

    def __init__(self) -> None:
        self._clauses = [
            SetClauseBuilder(),
            WhereClauseBuilder(ConditionCompiler()),
            OrderByBuilder(),
            LimitClauseBuilder(with_offset=False),
        ]

    def compile(self, state: QueryState, kind: QueryKind) -> str:
        head = f"UPDATE {quote_index(state.index)}"
        return _join([head, *(clause.build(state) for clause in self._clauses)])


class DeleteCompiler(StatementCompiler):
    """``DELETE FROM <index> [WHERE …] [ORDER BY …] [LIMIT n]``."""

    def __init__(self) -> None:
        self._clauses = [
            WhereClauseBuilder(ConditionCompiler()),
            OrderByBuilder(),
            LimitClauseBuilder(with_offset=False),
        ]

    def compile(self, state: QueryState, kind: QueryKind) -> str:
        head = f"DELETE FROM {quote_index(state.index)}"
        return _join([head, *(clause.build(state) for clause in self._clauses)])
