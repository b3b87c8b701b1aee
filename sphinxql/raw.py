"""Hand-written statements with quoted named parameters.

For statements the builder does not model (``SHOW``, ``CALL``, ``ATTACH``
...), or when a literal statement is simply clearer::

    rows = raw.select(
        sphinx,
        "SELECT id FROM products WHERE MATCH(:q) AND brand_id IN :brands",
        {":q": "shoes", ":brands": [1, 2]},
    )

Parameter keys are literal tokens.  Values are quoted with
:func:`~sphinxql.compile.quoting.quote_value` and substituted in one pass.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sphinxql.compile.expression import Expression, substitute
from sphinxql.compile.quoting import quote_value
from sphinxql.connection.base import Executor, Result
from sphinxql.schema.kinds import QueryKind


def render(sql: str, params: Mapping[str, Any] | None = None) -> str:
    """Return ``sql`` with every parameter quoted and substituted."""
    if not params:
        return sql
    return substitute(sql, {name: quote_value(value) for name, value in params.items()})


def query(
    executor: Executor,
    kind: QueryKind,
    sql: str,
    params: Mapping[str, Any] | None = None,
) -> Result:
    """Render and execute ``sql`` as a statement of ``kind``."""
    return executor.execute(QueryKind(kind), render(sql, params))


def select(executor: Executor, sql: str, params: Mapping[str, Any] | None = None) -> Result:
    return query(executor, QueryKind.SELECT, sql, params)


def insert(executor: Executor, sql: str, params: Mapping[str, Any] | None = None) -> Result:
    return query(executor, QueryKind.INSERT, sql, params)


def update(executor: Executor, sql: str, params: Mapping[str, Any] | None = None) -> Result:
    return query(executor, QueryKind.UPDATE, sql, params)


def delete(executor: Executor, sql: str, params: Mapping[str, Any] | None = None) -> Result:
    return query(executor, QueryKind.DELETE, sql, params)


def expr(template: str, params: Mapping[str, Any] | None = None) -> Expression:
    """Shorthand for ``Expression(template, params)``."""
    return Expression(template, params)
