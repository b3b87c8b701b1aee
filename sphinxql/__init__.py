"""sphinxql – fluent query builder and compiler for SphinxQL.

Build search statements. Don't concatenate them.

Public API
----------
``QueryBuilder``
    Fluent builder for SELECT (with MATCH and FACET), INSERT, REPLACE,
    UPDATE and DELETE statements.  ``compile()`` returns the statement text;
    ``execute()`` runs it on the bound executor.

``Expression`` / ``expr``
    Raw SQL fragments with late-quoted named parameters.

``SphinxConnection``
    PyMySQL-backed executor for the daemon's MySQL-protocol listener.

Quoting helpers
---------------
``quote_value``, ``quote_identifier``, ``quote_column``, ``quote_index``,
``escape_string`` and ``escape_match`` are re-exported for hand-written
statements.

Example::

    import sphinxql

    sphinx = sphinxql.SphinxConnection(sphinxql.ConnectionConfig.from_env())
    rows = (
        sphinx.query_builder()
        .select("id", "title")
        .from_("products")
        .match("title", user_input)
        .where("price", ">=", 100)
        .order_by("id", "ASC")
        .limit(10)
        .execute()
    )

Extensibility
-------------
New statement kinds can be registered via::

    from sphinxql.compile.registry import StatementRegistry

    @StatementRegistry.register(QueryKind.RAW)
    class ShowCompiler(StatementCompiler):
        ...
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sphinxql.compile.base import CompiledSQL, StatementCompiler, SubQuery
from sphinxql.compile.builder import QueryBuilder
from sphinxql.compile.expression import Expression
from sphinxql.compile.quoting import (
    escape_match,
    escape_string,
    quote_column,
    quote_identifier,
    quote_index,
    quote_value,
)
from sphinxql.compile.registry import StatementRegistry
from sphinxql.connection.base import Executor
from sphinxql.connection.config import ConnectionConfig
from sphinxql.connection.mysql import SphinxConnection
from sphinxql.errors import (
    BuilderError,
    CompilationError,
    ConnectionFailedError,
    ExecutorError,
    ExecutorNotBoundError,
    KindConflictError,
    MalformedGroupError,
    QueryFailedError,
    SphinxQLError,
    UnsupportedKindError,
)
from sphinxql.schema.kinds import QueryKind
from sphinxql.search import SearchQuery

__all__ = [
    # Building
    "QueryBuilder",
    "QueryKind",
    "Expression",
    "expr",
    "CompiledSQL",
    "StatementCompiler",
    "StatementRegistry",
    "SubQuery",
    # Quoting
    "quote_value",
    "quote_identifier",
    "quote_column",
    "quote_index",
    "escape_string",
    "escape_match",
    # Execution
    "Executor",
    "ConnectionConfig",
    "SphinxConnection",
    "SearchQuery",
    # Errors
    "SphinxQLError",
    "BuilderError",
    "KindConflictError",
    "MalformedGroupError",
    "CompilationError",
    "UnsupportedKindError",
    "ExecutorError",
    "QueryFailedError",
    "ConnectionFailedError",
    "ExecutorNotBoundError",
]


def expr(template: str, params: Mapping[str, Any] | None = None) -> Expression:
    """Create an :class:`Expression`.

    Args:
        template: Raw SQL text, inserted unescaped.
        params: Placeholder → value mapping, quoted at compile time.

    Returns:
        A new ``Expression``.
    """
    return Expression(template, params)
