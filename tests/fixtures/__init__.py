"""Test fixtures: a recording executor and a scripted PyMySQL stand-in."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from sphinxql.connection.base import Executor, Result
from sphinxql.schema.kinds import QueryKind


class RecordingExecutor(Executor):
    """Records every ``(kind, sql)`` pair and returns canned results.

    Args:
        results: Values returned by successive ``execute`` calls; once
            exhausted, ``None`` is returned.
    """

    def __init__(self, *results: Result) -> None:
        self.calls: list[tuple[QueryKind, str]] = []
        self._results = list(results)

    def execute(self, kind: QueryKind, sql: str) -> Result:
        self.calls.append((kind, sql))
        return self._results.pop(0) if self._results else None

    @property
    def last_sql(self) -> str:
        return self.calls[-1][1]


class FakeCursor:
    """Scripted DB-API cursor.

    Args:
        result_sets: Row lists to expose one after another via ``nextset``.
        lastrowid: Value reported after an INSERT.
        rowcount: Value reported after an UPDATE / DELETE.
        error: Exception raised from ``execute`` (or from ``nextset`` when
            ``error_on_nextset`` is set).
    """

    def __init__(
        self,
        result_sets: list[list[dict[str, Any]]] | None = None,
        lastrowid: int = 0,
        rowcount: int = 0,
        error: Exception | None = None,
        error_on_nextset: bool = False,
    ) -> None:
        self._sets = list(result_sets or [])
        self._current: list[dict[str, Any]] | None = None
        self.lastrowid = lastrowid
        self.rowcount = rowcount
        self._error = error
        self._error_on_nextset = error_on_nextset
        self.executed: list[str] = []
        self.closed = False

    def __enter__(self) -> FakeCursor:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.closed = True

    @property
    def description(self) -> tuple | None:
        if self._current is None:
            return None
        return (("id",),)

    def execute(self, sql: str, args: Any = None) -> int:
        assert args is None, "statements must be sent without driver-side formatting"
        self.executed.append(sql)
        if self._error is not None and not self._error_on_nextset:
            raise self._error
        self._current = self._sets.pop(0) if self._sets else None
        return self.rowcount

    def fetchall(self) -> list[dict[str, Any]]:
        rows = self._current or []
        return list(rows)

    def nextset(self) -> bool | None:
        if self._error is not None and self._error_on_nextset:
            raise self._error
        if not self._sets:
            self._current = None
            return None
        self._current = self._sets.pop(0)
        return True


class FakeConnection:
    def __init__(self, cursor: FakeCursor) -> None:
        self._cursor = cursor
        self.closed = False

    def cursor(self) -> FakeCursor:
        return self._cursor

    def close(self) -> None:
        self.closed = True


def fake_connect(
    cursor: FakeCursor | None = None,
) -> tuple[Callable[..., FakeConnection], list[dict[str, Any]]]:
    """Return a ``connect`` factory and the list of kwargs it was called with."""
    calls: list[dict[str, Any]] = []
    cursor = cursor or FakeCursor()

    def connect(**kwargs: Any) -> FakeConnection:
        calls.append(kwargs)
        return FakeConnection(cursor)

    return connect, calls
