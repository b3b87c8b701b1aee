"""Value, identifier and full-text quoting for SphinxQL.

Every function here is pure: escaping never needs a connection, so compiled
text depends only on the builder state.

``escape_string`` guards against statement injection.  ``escape_match``
guards against full-text operator injection inside ``MATCH()``; its output
still goes through ``escape_string`` before reaching the statement.
"""
from __future__ import annotations

import math
from typing import Any

from sphinxql.compile.base import SubQuery
from sphinxql.compile.expression import Expression
from sphinxql.schema.identifier import Identifier, split_alias

# ---------------------------------------------------------------------------
# Escape tables
# ---------------------------------------------------------------------------

_STRING_ESCAPES = str.maketrans(
    {
        "\\": "\\\\",
        "'": "\\'",
        '"': '\\"',
        "\n": "\\n",
        "\r": "\\r",
        "\x00": "\\0",
        "\x1a": "\\Z",
    }
)

#: Characters with an operator meaning in the full-text query syntax.
MATCH_METACHARACTERS = "\\()|-!@~\"&/^$=<"

_MATCH_ESCAPES = str.maketrans({char: "\\" + char for char in MATCH_METACHARACTERS})

#: Value types rendered as a bracketed list.
SEQUENCE_TYPES = (list, tuple, set, frozenset)


def sequence_items(value: Any) -> list[Any]:
    """Return the items of a list-like value; sets come back sorted."""
    if not isinstance(value, (set, frozenset)):
        return list(value)
    try:
        return sorted(value)
    except TypeError:
        # Mixed element types: order by text instead.
        return sorted(value, key=repr)


# ---------------------------------------------------------------------------
# Values
# ---------------------------------------------------------------------------


def quote_value(value: Any) -> str:
    """Render any value as a SphinxQL literal.

    ``bool`` is checked before ``int`` because ``True`` is an ``int``.
    Sets render sorted.

    Raises:
        ValueError: For ``inf`` and ``nan``, which have no literal form.

    Examples::

        quote_value(None)      # NULL
        quote_value(10)        # 10
        quote_value(1.5)       # 1.500000
        quote_value("fred")    # 'fred'
        quote_value([1, "a"])  # (1, 'a')
    """
    if value is None:
        return "NULL"
    if value is True:
        return "'1'"
    if value is False:
        return "'0'"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"Cannot quote non-finite float {value!r}.")
        # Fixed notation, never exponent or locale separators.
        return format(value, "f")
    if isinstance(value, SEQUENCE_TYPES):
        return "(" + ", ".join(quote_value(item) for item in sequence_items(value)) + ")"
    if isinstance(value, SubQuery):
        return f"({value.compile()})"
    if isinstance(value, Expression):
        return value.compile()
    return escape_string(str(value))


def escape_string(value: str) -> str:
    """Backslash-escape ``value`` and wrap it in single quotes."""
    return "'" + str(value).translate(_STRING_ESCAPES) + "'"


# ---------------------------------------------------------------------------
# Identifiers
# ---------------------------------------------------------------------------


def _backtick(name: str) -> str:
    return "`" + name.replace("`", "``") + "`"


def _with_alias(sql: str, alias: str | None) -> str:
    if alias is None:
        return sql
    return f"{sql} AS {_backtick(alias)}"


def quote_identifier(ref: Any) -> str:
    """Quote an identifier, dotted path, or ``(name, alias)`` pair.

    An ``Expression`` name is compiled in place and a sub-query name is
    wrapped in brackets; neither is back-ticked.

    Examples::

        quote_identifier("*")                          # *
        quote_identifier("id")                         # `id`
        quote_identifier("products.*")                 # `products`.*
        quote_identifier(("weight()", "w"))            # `weight()` AS `w`
        quote_identifier((Expression("WEIGHT()"), "w"))  # WEIGHT() AS `w`
    """
    name, alias = split_alias(ref)
    if isinstance(name, SubQuery):
        return _with_alias(f"({name.compile()})", alias)
    if isinstance(name, Expression):
        return _with_alias(name.compile(), alias)

    ident = Identifier.parse(ref)
    if ident.is_wildcard:
        return "*"
    sql = ".".join(part if part == "*" else _backtick(part) for part in ident.parts)
    return _with_alias(sql, ident.alias)


def quote_column(ref: Any) -> str:
    """Quote a column reference (same forms as :func:`quote_identifier`)."""
    return quote_identifier(ref)


def quote_index(ref: Any) -> str:
    """Quote an index name for FROM / INTO / UPDATE / DELETE FROM.

    Index names are quoted whole; dots are not treated as separators.
    """
    name, alias = split_alias(ref)
    if isinstance(name, Expression):
        sql = name.compile()
    elif isinstance(name, SubQuery):
        sql = f"({name.compile()})"
    else:
        sql = _backtick(str(name))
    return _with_alias(sql, alias)


# ---------------------------------------------------------------------------
# Full-text
# ---------------------------------------------------------------------------


def escape_match(value: Any) -> str:
    """Escape full-text operator characters so ``value`` matches literally.

    An ``Expression`` is returned as its raw template, unescaped: the caller
    is deliberately passing full-text operator syntax.
    """
    if isinstance(value, Expression):
        return value.value
    return str(value).translate(_MATCH_ESCAPES)
