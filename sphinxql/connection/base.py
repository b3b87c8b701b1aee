"""The executor boundary.

An :class:`Executor` turns compiled statement text into a result.  The shape
of the result depends on the query kind:

=================  ==========================================================
``SELECT``         ``list[dict]`` — rows in daemon order
``MULTI_SELECT``   ``list[list[dict]]`` — one row list per result set, in
                   the order the daemon returned them (main query, then each
                   ``FACET`` in call order)
``INSERT``         inserted document id
``REPLACE``        inserted document id
``UPDATE``         affected-row count
``DELETE``         affected-row count
``RAW``            rows when the statement produced a result set,
                   affected-row count otherwise
=================  ==========================================================

Implementations raise :class:`~sphinxql.errors.QueryFailedError` on any
execution failure and never retry on their own.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Union

from sphinxql.schema.kinds import QueryKind

Row = dict[str, Any]
Result = Union[list[Row], list[list[Row]], int, None]


class Executor(ABC):
    """Abstract base for anything that can run a compiled statement."""

    @abstractmethod
    def execute(self, kind: QueryKind, sql: str) -> Result:
        """Run ``sql`` and return the result shaped for ``kind``.

        Args:
            kind: Query kind of the statement.
            sql: Complete statement text.

        Raises:
            QueryFailedError: If the daemon reports an error.
        """
