"""Condition-group and MATCH compilers.

``ConditionCompiler`` renders the flat WHERE / HAVING entry list; bracket
structure comes entirely from the :class:`OpenGroup` / :class:`CloseGroup`
markers, in the order they were appended.

``MatchCompiler`` renders the ``MATCH(...)`` argument from the builder's
full-text terms.
"""
from __future__ import annotations

from typing import Any

from sphinxql.compile.quoting import (
    SEQUENCE_TYPES,
    escape_match,
    escape_string,
    quote_column,
    quote_identifier,
    quote_value,
    sequence_items,
)
from sphinxql.errors import CompilationError, MalformedGroupError
from sphinxql.schema.clauses import MatchClause
from sphinxql.schema.conditions import (
    Clause,
    CloseGroup,
    ConditionEntry,
    OpenGroup,
    group_depths,
)

# ---------------------------------------------------------------------------
# Condition groups
# ---------------------------------------------------------------------------


class ConditionCompiler:
    """Compiles a WHERE / HAVING entry list to a SQL fragment."""

    #: Operators rewritten when compared against ``None``.
    _NULL_OPERATORS: dict[str, str] = {
        "=": "IS",
        "!=": "IS NOT",
    }

    #: Operators whose sequence value renders as a bracketed list.
    _LIST_OPERATORS = frozenset({"IN", "NOT IN"})

    def build(self, entries: list[ConditionEntry], clause: str = "WHERE") -> str:
        """Compile ``entries``.

        Args:
            entries: The condition group, in append order.
            clause: Clause name used in error messages.

        Raises:
            MalformedGroupError: If the brackets do not balance.
        """
        self._check_balanced(entries, clause)

        parts: list[str] = []
        previous: ConditionEntry | None = None
        for entry in entries:
            if isinstance(entry, OpenGroup):
                if parts and not isinstance(previous, OpenGroup):
                    parts.append(f" {entry.logic} ")
                parts.append("(")
            elif isinstance(entry, CloseGroup):
                parts.append(")")
            elif isinstance(entry, Clause):
                if parts and not isinstance(previous, OpenGroup):
                    parts.append(f" {entry.logic} ")
                parts.append(self._build_clause(entry))
            else:
                raise CompilationError(
                    f"Unknown condition entry: {entry!r}", clause=clause
                )
            previous = entry
        return "".join(parts)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _check_balanced(entries: list[ConditionEntry], clause: str) -> None:
        depth = 0
        for depth in group_depths(entries):
            if depth < 0:
                raise MalformedGroupError(
                    f"{clause} closes a group that was never opened.",
                    clause=clause,
                    depth=depth,
                )
        if depth:
            raise MalformedGroupError(
                f"{clause} has {depth} unclosed group(s); call end() for each.",
                clause=clause,
                depth=depth,
            )

    def _build_clause(self, clause: Clause) -> str:
        op = (clause.op or "").strip()
        value = clause.value
        column_sql = self._build_column(clause.column)

        if not op and value is None:
            # A bare Expression carrying the whole predicate.
            return column_sql

        if value is None and op in self._NULL_OPERATORS:
            op = self._NULL_OPERATORS[op]

        keyword = op.upper()
        if keyword == "BETWEEN" and isinstance(value, SEQUENCE_TYPES):
            value_sql = self._build_between(sequence_items(value))
        elif keyword in self._LIST_OPERATORS and isinstance(value, SEQUENCE_TYPES):
            value_sql = "(" + ",".join(quote_value(item) for item in sequence_items(value)) + ")"
        elif isinstance(value, int) and not isinstance(value, bool):
            value_sql = str(value)
        else:
            value_sql = quote_value(value)

        return " ".join(part for part in (column_sql, op, value_sql) if part)

    @staticmethod
    def _build_between(bounds: list[Any]) -> str:
        if len(bounds) != 2:
            raise CompilationError(
                f"BETWEEN needs exactly two bounds, got {len(bounds)}.", clause="WHERE"
            )
        low, high = bounds
        # Strings are quoted; numbers stay bare.
        return f"{quote_value(low)} AND {quote_value(high)}"

    @staticmethod
    def _build_column(column: Any) -> str:
        if column is None or column == "":
            return ""
        if isinstance(column, tuple):
            # Aliases have no meaning inside a predicate.
            return quote_identifier(column[0])
        return quote_column(column)


# ---------------------------------------------------------------------------
# MATCH
# ---------------------------------------------------------------------------


class MatchCompiler:
    """Compiles full-text terms to the quoted ``MATCH()`` argument."""

    def build(self, clauses: list[MatchClause]) -> str:
        terms = [self._build_term(clause) for clause in clauses]
        return escape_string(" ".join(terms))

    @staticmethod
    def _build_term(clause: MatchClause) -> str:
        text = escape_match(clause.text)
        if not clause.scoped:
            return text
        fields = clause.fields if isinstance(clause.fields, tuple) else (clause.fields,)
        field_sql = ",".join(escape_match(field) for field in fields)
        return f"@({field_sql}) {text}"
