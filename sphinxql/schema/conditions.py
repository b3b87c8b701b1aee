"""Condition-group entries for WHERE and HAVING.

A condition group is a flat, ordered ``list[ConditionEntry]``.  Nested groups
are expressed by interleaving :class:`OpenGroup` and :class:`CloseGroup`
markers, so the list order is the bracket structure::

    qb.where("a", "=", 1).or_where().where("b", "=", 2).or_where("c", "=", 3).end()

    [Clause("AND", "a", "=", 1),
     OpenGroup("OR"),
     Clause("AND", "b", "=", 2),
     Clause("OR", "c", "=", 3),
     CloseGroup()]

    -> `a` = 1 OR (`b` = 2 OR `c` = 3)
"""
from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any, Literal, Union

Logic = Literal["AND", "OR"]


@dataclass(frozen=True)
class OpenGroup:
    """An opening bracket, joined to what precedes it with ``logic``."""

    logic: Logic = "AND"


@dataclass(frozen=True)
class CloseGroup:
    """A closing bracket."""


@dataclass(frozen=True)
class Clause:
    """A single ``column operator value`` predicate.

    Attributes:
        logic: Connective joining this clause to what precedes it.
        column: Column name, dotted path, ``(name, alias)`` pair,
            ``Expression``, or sub-query builder.  May be empty when the
            operator and value carry the whole predicate.
        op: Relational operator (``=``, ``!=``, ``IN``, ``BETWEEN`` ...).
        value: Scalar, ``None``, sequence, ``Expression`` or sub-query.
    """

    logic: Logic
    column: Any
    op: str | None
    value: Any = None

    @classmethod
    def from_triple(cls, logic: Logic, triple: Any) -> Clause:
        """Build a clause from a ``(column, op, value)`` sequence.

        Two-element sequences are accepted with ``value`` defaulting to ``None``.
        """
        items = tuple(triple)
        if len(items) == 2:
            items = (*items, None)
        if len(items) != 3:
            raise ValueError(
                f"Condition must be a (column, op, value) triple, got {triple!r}."
            )
        column, op, value = items
        return cls(logic=logic, column=column, op=op, value=value)


ConditionEntry = Union[OpenGroup, CloseGroup, Clause]


def group_depths(entries: Iterable[ConditionEntry]) -> Iterator[int]:
    """Yield the bracket depth after each entry, in order.

    A negative value means a group was closed that was never opened.
    """
    depth = 0
    for entry in entries:
        if isinstance(entry, OpenGroup):
            depth += 1
        elif isinstance(entry, CloseGroup):
            depth -= 1
        yield depth
