"""Custom exception hierarchy for sphinxql.

All public errors inherit from :class:`SphinxQLError` so callers can catch the
base class for any sphinxql-specific failure.

Builder errors are raised at the offending call, before anything has been sent
to the daemon.  Executor errors carry what the server reported.
"""
from __future__ import annotations

from typing import Any


class SphinxQLError(Exception):
    """Base exception for all sphinxql errors."""


# ---------------------------------------------------------------------------
# Builder errors
# ---------------------------------------------------------------------------


class BuilderError(SphinxQLError):
    """Raised when a builder is configured in a way that cannot compile."""


class KindConflictError(BuilderError):
    """Raised when ``INSERT ... VALUES`` and ``INSERT ... SELECT`` are mixed."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            message
            or "INSERT INTO ... SELECT statements cannot be combined with "
            "INSERT INTO ... VALUES"
        )


class MalformedGroupError(BuilderError):
    """Raised when WHERE / HAVING brackets do not balance.

    Args:
        message: Human-readable description.
        clause: ``'WHERE'`` or ``'HAVING'``.
        depth: Number of groups left open (negative when over-closed).
    """

    def __init__(self, message: str, clause: str | None = None, depth: int = 0) -> None:
        super().__init__(message)
        self.clause = clause
        self.depth = depth


# ---------------------------------------------------------------------------
# Compilation errors
# ---------------------------------------------------------------------------


class CompilationError(SphinxQLError):
    """Raised when SQL compilation fails.

    Args:
        message: Human-readable description.
        clause: The clause being compiled when the error occurred.
    """

    def __init__(self, message: str, clause: str | None = None) -> None:
        super().__init__(message)
        self.clause = clause


class UnsupportedKindError(CompilationError):
    """Raised when a builder's query kind has no compile routine."""

    def __init__(self, kind: Any) -> None:
        label = getattr(kind, "name", None) or repr(kind)
        super().__init__(f"Cannot compile a query of kind {label}.")
        self.kind = kind


# ---------------------------------------------------------------------------
# Executor errors
# ---------------------------------------------------------------------------


class ExecutorError(SphinxQLError):
    """Base class for failures raised at the executor boundary."""


class QueryFailedError(ExecutorError):
    """Raised when the daemon rejects or fails a statement.

    Args:
        message: Server error text.
        code: Numeric server error code (``0`` when unknown).
        sql: The statement that failed.
    """

    def __init__(self, message: str, code: int = 0, sql: str | None = None) -> None:
        text = f"{message} [ {sql} ]" if sql else message
        super().__init__(text)
        self.message = message
        self.code = code
        self.sql = sql

    def to_error_response(self) -> dict[str, Any]:
        """Return a structured description of the failure."""
        return {
            "error": self.code,
            "message": self.message,
            "sql": self.sql,
        }


class ConnectionFailedError(ExecutorError):
    """Raised when a connection to the daemon cannot be established.

    Args:
        message: Driver error text.
        code: Numeric driver error code (``0`` when unknown).
    """

    def __init__(self, message: str, code: int = 0) -> None:
        super().__init__(message)
        self.code = code


class ExecutorNotBoundError(ExecutorError):
    """Raised when ``execute()`` is called on a builder with no executor."""

    def __init__(self) -> None:
        super().__init__(
            "This QueryBuilder has no executor; pass one to the constructor "
            "or create it with SphinxConnection.query_builder()."
        )
