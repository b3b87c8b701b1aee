"""Mutable clause state accumulated by a :class:`~sphinxql.QueryBuilder`.

One ``QueryState`` belongs to exactly one builder.  Clearing a builder swaps
in a fresh instance rather than emptying these lists in place, so anything
that kept a reference to the old state keeps seeing the old values.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from sphinxql.schema.clauses import MatchClause, OrderEntry
from sphinxql.schema.conditions import ConditionEntry

GroupTarget = Literal["WHERE", "HAVING"]


@dataclass
class QueryState:
    """Clause state for every query kind.

    Attributes:
        select: SELECT column references.
        distinct: Emit ``SELECT DISTINCT``.
        from_: FROM targets.
        where: WHERE condition group.
        having: HAVING condition group.
        open_groups: Stack of targets with a currently open bracket.
        group_by: GROUP BY column references.
        order_by: ORDER BY entries.
        limit: LIMIT value.
        offset: Offset rendered as ``LIMIT offset, limit``.
        match: MATCH terms, in call order.
        facets: FACET bodies, in call order.
        options: OPTION items, already rendered.
        index: Target index for INSERT / REPLACE / UPDATE / DELETE.
        columns: INSERT column list.
        values: INSERT value groups.
        subselect: INSERT ... SELECT source (exclusive with ``values``).
        set: UPDATE ``(column, value)`` pairs.
    """

    select: list[Any] = field(default_factory=list)
    distinct: bool = False
    from_: list[Any] = field(default_factory=list)
    where: list[ConditionEntry] = field(default_factory=list)
    having: list[ConditionEntry] = field(default_factory=list)
    open_groups: list[GroupTarget] = field(default_factory=list)
    group_by: list[Any] = field(default_factory=list)
    order_by: list[OrderEntry] = field(default_factory=list)
    limit: int | None = None
    offset: int | None = None
    match: list[MatchClause] = field(default_factory=list)
    facets: list[Any] = field(default_factory=list)
    options: list[str] = field(default_factory=list)
    index: Any = None
    columns: list[Any] = field(default_factory=list)
    values: list[list[Any]] = field(default_factory=list)
    subselect: Any = None
    set: list[tuple[Any, Any]] = field(default_factory=list)

    def conditions(self, target: GroupTarget) -> list[ConditionEntry]:
        """Return the WHERE or HAVING group."""
        return self.where if target == "WHERE" else self.having
