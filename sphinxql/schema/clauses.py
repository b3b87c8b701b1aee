"""Value objects for the MATCH and ORDER BY clauses."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class MatchClause:
    """One full-text term of the ``MATCH(...)`` argument.

    Attributes:
        fields: ``None`` for an unscoped term, otherwise one field name or a
            tuple of field names rendered as ``@(field, ...)``.
        text: Full-text query text (or an ``Expression`` to bypass escaping).
    """

    fields: str | tuple[str, ...] | None
    text: Any

    @property
    def scoped(self) -> bool:
        return self.fields is not None


@dataclass(frozen=True)
class OrderEntry:
    """A single ``ORDER BY`` item.

    Attributes:
        column: Column reference (same forms as SELECT columns).
        direction: ``ASC`` / ``DESC`` or ``None`` to let the daemon decide.
    """

    column: Any
    direction: str | None = None

    @classmethod
    def coerce(cls, item: Any) -> OrderEntry:
        """Accept an ``OrderEntry``, a ``(column, direction)`` pair or a bare column."""
        if isinstance(item, OrderEntry):
            return item
        if isinstance(item, list) and len(item) == 2:
            return cls(column=item[0], direction=item[1])
        if isinstance(item, tuple) and len(item) == 2 and _is_direction(item[1]):
            return cls(column=item[0], direction=item[1])
        return cls(column=item)


def _is_direction(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.upper() in ("ASC", "DESC"))
