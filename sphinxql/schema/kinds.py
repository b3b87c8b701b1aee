"""Query kinds understood by the builder and the executor boundary."""
from __future__ import annotations

from enum import IntEnum


class QueryKind(IntEnum):
    """Selects the compile routine and the shape of the executor result.

    ``RAW`` is only meaningful at the executor boundary: raw statements are
    sent as-is and have no compile routine.
    """

    RAW = 0
    SELECT = 1
    INSERT = 2
    REPLACE = 3
    UPDATE = 4
    DELETE = 5
    MULTI_SELECT = 7

    @property
    def returns_rows(self) -> bool:
        return self in (QueryKind.SELECT, QueryKind.MULTI_SELECT)

    @property
    def is_insert(self) -> bool:
        return self in (QueryKind.INSERT, QueryKind.REPLACE)
