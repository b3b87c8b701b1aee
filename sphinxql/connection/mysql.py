"""PyMySQL-backed executor for the search daemon's SphinxQL listener.

The daemon speaks the MySQL wire protocol, so a stock PyMySQL connection is
used with ``DictCursor`` rows and multi-statement support (needed for
``FACET`` batches, which come back as several result sets).

Statements are sent exactly as compiled: ``cursor.execute`` is always called
without arguments, so PyMySQL never applies ``%`` formatting to the text.
"""
from __future__ import annotations

import logging
import re
import time
from collections.abc import Callable, Iterable, Mapping
from typing import Any, NoReturn

import pymysql
import pymysql.cursors
from pymysql.constants import CLIENT

from sphinxql.compile.quoting import escape_string
from sphinxql.connection.base import Executor, Result, Row
from sphinxql.connection.config import ConnectionConfig
from sphinxql.errors import ConnectionFailedError, QueryFailedError
from sphinxql.schema.kinds import QueryKind

logger = logging.getLogger(__name__)

_INDEX_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _error_details(exc: Exception) -> tuple[int, str]:
    """Return ``(code, message)`` from a PyMySQL error."""
    args = getattr(exc, "args", ())
    if len(args) >= 2 and isinstance(args[0], int):
        return args[0], str(args[1])
    return 0, str(exc)


def _checked_name(name: str, what: str = "index") -> str:
    if not _INDEX_NAME.match(name):
        raise ValueError(f"Invalid {what} name: {name!r}")
    return name


class SphinxConnection(Executor):
    """A lazily-opened connection that executes compiled statements.

    Args:
        config: Connection settings; defaults to ``ConnectionConfig()``.
        connect: Factory returning a DB-API connection.  Defaults to
            ``pymysql.connect``; replaced in tests.

    Example::

        with SphinxConnection(ConnectionConfig(port=9306)) as sphinx:
            rows = (
                sphinx.query_builder()
                .select("id")
                .from_("products")
                .match("red shoes")
                .execute()
            )
    """

    #: ``CALL KEYWORDS`` options used when none are given.
    DEFAULT_KEYWORD_OPTIONS: tuple[str, ...] = (
        "fold_wildcards",
        "fold_lemmas",
        "fold_blended",
        "expansion_limit",
        "stats",
    )

    def __init__(
        self,
        config: ConnectionConfig | None = None,
        connect: Callable[..., Any] = pymysql.connect,
    ) -> None:
        self._config = config or ConnectionConfig()
        self._connect = connect
        self._conn: Any = None
        self.last_query: str | None = None

    @property
    def config(self) -> ConnectionConfig:
        return self._config

    @property
    def connected(self) -> bool:
        return self._conn is not None

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------

    def connect(self) -> None:
        """Open the connection if it is not open yet.

        Raises:
            ConnectionFailedError: If the daemon cannot be reached.
        """
        if self._conn is not None:
            return

        cfg = self._config
        try:
            self._conn = self._connect(
                host=cfg.host,
                port=cfg.port,
                user="",
                password="",
                charset=cfg.charset,
                connect_timeout=cfg.connect_timeout,
                read_timeout=cfg.read_timeout,
                autocommit=True,
                cursorclass=pymysql.cursors.DictCursor,
                client_flag=CLIENT.MULTI_STATEMENTS,
            )
        except pymysql.MySQLError as exc:
            code, message = _error_details(exc)
            raise ConnectionFailedError(message, code) from exc

        logger.info("Connected to search daemon at %s:%s", cfg.host, cfg.port)

    def disconnect(self) -> None:
        """Close the connection.  Safe to call when not connected."""
        if self._conn is None:
            return
        try:
            self._conn.close()
        except pymysql.MySQLError:
            logger.warning("Error while closing search daemon connection", exc_info=True)
        finally:
            self._conn = None
        logger.info("Disconnected from search daemon at %s:%s", self._config.host, self._config.port)

    def __enter__(self) -> SphinxConnection:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.disconnect()

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def execute(self, kind: QueryKind, sql: str) -> Result:
        """Run ``sql``; MULTI_SELECT statements return every result set."""
        kind = QueryKind(kind)
        if kind == QueryKind.MULTI_SELECT:
            return self.multi_query(sql)
        return self.query(kind, sql)

    def query(self, kind: QueryKind, sql: str) -> Result:
        """Run a single-result statement.

        Returns:
            Rows for SELECT, the inserted id for INSERT / REPLACE, the
            affected-row count for everything else (RAW statements that
            produce a result set return rows).

        Raises:
            QueryFailedError: If the daemon reports an error.
        """
        kind = QueryKind(kind)
        self.connect()
        started = time.perf_counter()
        try:
            with self._conn.cursor() as cursor:
                cursor.execute(sql)
                if kind.returns_rows or (kind == QueryKind.RAW and cursor.description):
                    result: Result = list(cursor.fetchall())
                elif kind.is_insert:
                    result = cursor.lastrowid
                else:
                    result = cursor.rowcount
        except pymysql.MySQLError as exc:
            self._fail(exc, sql)

        self._done(sql, started)
        return result

    def multi_query(self, sql: str) -> list[list[Row]]:
        """Run a statement that yields several result sets.

        Returns:
            One row list per result set, in the order the daemon sent them.

        Raises:
            QueryFailedError: If any statement in the batch fails.
        """
        self.connect()
        started = time.perf_counter()
        results: list[list[Row]] = []
        try:
            with self._conn.cursor() as cursor:
                cursor.execute(sql)
                while True:
                    if cursor.description is not None:
                        results.append(list(cursor.fetchall()))
                    if not cursor.nextset():
                        break
        except pymysql.MySQLError as exc:
            self._fail(exc, sql)

        self._done(sql, started)
        return results

    # ------------------------------------------------------------------
    # Daemon helpers
    # ------------------------------------------------------------------

    def query_builder(self, kind: QueryKind | None = None) -> Any:
        """Return a :class:`~sphinxql.QueryBuilder` bound to this connection."""
        from sphinxql.compile.builder import QueryBuilder  # avoid circular import

        return QueryBuilder(kind, self)

    def optimize(self, index: str) -> Result:
        """Run ``OPTIMIZE INDEX``."""
        return self.execute(QueryKind.RAW, f"OPTIMIZE INDEX {_checked_name(index)}")

    def flush_rtindex(self, index: str) -> Result:
        """Run ``FLUSH RTINDEX``."""
        return self.execute(QueryKind.RAW, f"FLUSH RTINDEX {_checked_name(index)}")

    def truncate_rtindex(self, index: str) -> Result:
        """Run ``TRUNCATE RTINDEX``."""
        return self.execute(QueryKind.RAW, f"TRUNCATE RTINDEX {_checked_name(index)}")

    def call_keywords(
        self,
        text: str,
        index: str,
        options: Iterable[str] | Mapping[str, int] | None = None,
    ) -> list[Row]:
        """Tokenize ``text`` with ``index`` settings via ``CALL KEYWORDS``.

        Args:
            text: Text to tokenize.
            index: Index whose tokenizer settings apply.
            options: Option names to enable, or a name → value mapping.
                Defaults to :attr:`DEFAULT_KEYWORD_OPTIONS`.
        """
        if options is None:
            options = self.DEFAULT_KEYWORD_OPTIONS
        pairs = options.items() if isinstance(options, Mapping) else ((name, 1) for name in options)
        options_sql = ", ".join(
            f"{int(value)} AS {_checked_name(name, 'option')}" for name, value in pairs
        )
        sql = f"CALL KEYWORDS({escape_string(text)}, {escape_string(index)}"
        sql += f", {options_sql})" if options_sql else ")"
        return self.execute(QueryKind.SELECT, sql)

    def meta(self, like: str | None = None) -> dict[str, Any]:
        """Return ``SHOW META`` for the last query as a name → value dict."""
        sql = "SHOW META"
        if like is not None:
            sql += f" LIKE {escape_string(like)}"
        rows = self.execute(QueryKind.SELECT, sql)
        return {row["Variable_name"]: row["Value"] for row in rows}

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _done(self, sql: str, started: float) -> None:
        self.last_query = sql
        logger.debug("%s (%.2f ms)", sql, (time.perf_counter() - started) * 1000)

    def _fail(self, exc: Exception, sql: str) -> NoReturn:
        code, message = _error_details(exc)
        logger.warning("Query failed [%s] %s: %s", code, message, sql)
        if isinstance(exc, (pymysql.err.OperationalError, pymysql.err.InterfaceError)):
            # The link may be gone; reconnect on the next call.
            self._drop()
        raise QueryFailedError(message, code, sql) from exc

    def _drop(self) -> None:
        conn, self._conn = self._conn, None
        try:
            conn.close()
        except pymysql.MySQLError:
            logger.debug("Ignoring error while dropping connection", exc_info=True)
