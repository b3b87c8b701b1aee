"""Compiler abstractions: CompiledSQL, SubQuery and the StatementCompiler ABC.

The Template Method pattern (GoF) is used:
- ``StatementCompiler`` fixes the interface for rendering one statement kind
  from a :class:`~sphinxql.schema.state.QueryState`.
- ``SelectCompiler``, ``InsertCompiler``, ``UpdateCompiler`` and
  ``DeleteCompiler`` implement the per-kind clause order.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from sphinxql.schema.kinds import QueryKind
from sphinxql.schema.state import QueryState


@dataclass(frozen=True)
class CompiledSQL:
    """The output of a successful compilation.

    Attributes:
        sql: The compiled statement text, values already quoted inline.
        kind: The query kind, which tells the executor what to return.
    """

    sql: str
    kind: QueryKind

    def __str__(self) -> str:
        return self.sql


class SubQuery(ABC):
    """Anything that compiles to a complete statement usable as a sub-query.

    The quoting layer renders instances as ``(<compiled sql>)`` wherever a
    value or column is expected.
    """

    @abstractmethod
    def compile(self) -> str:
        """Return the compiled statement text."""


class StatementCompiler(ABC):
    """Abstract base for per-kind statement compilers."""

    @abstractmethod
    def compile(self, state: QueryState, kind: QueryKind) -> str:
        """Render ``state`` as a statement of ``kind``.

        Args:
            state: Accumulated builder state.
            kind: The builder's query kind (lets one compiler serve
                INSERT and REPLACE, or SELECT and MULTI_SELECT).

        Returns:
            Statement text.
        """
