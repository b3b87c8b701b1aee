"""Statement compiler registry (Open/Closed Principle).

Maps each :class:`~sphinxql.schema.kinds.QueryKind` to the
:class:`~sphinxql.compile.base.StatementCompiler` that renders it, so
:class:`~sphinxql.compile.builder.QueryBuilder` dispatches without an
if-chain and new statement kinds can be added without editing it.

Usage::

    from sphinxql.compile.registry import StatementRegistry

    @StatementRegistry.register(QueryKind.SELECT, QueryKind.MULTI_SELECT)
    class SelectCompiler(StatementCompiler):
        ...
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, ClassVar

from sphinxql.compile.base import StatementCompiler
from sphinxql.compile.statements import (
    DeleteCompiler,
    InsertCompiler,
    SelectCompiler,
    UpdateCompiler,
)
from sphinxql.errors import UnsupportedKindError
from sphinxql.schema.kinds import QueryKind


class StatementRegistry:
    """Registry mapping query kinds to :class:`StatementCompiler` classes.

    Compilers are stateless, so one instance per class is created lazily
    and shared.
    """

    _compilers: ClassVar[dict[QueryKind, type[StatementCompiler]]] = {}
    _instances: ClassVar[dict[type[StatementCompiler], StatementCompiler]] = {}

    @classmethod
    def register(
        cls, *kinds: QueryKind
    ) -> Callable[[type[StatementCompiler]], type[StatementCompiler]]:
        """Decorator that registers a compiler class for ``kinds``.

        Args:
            kinds: Query kinds the compiler renders.

        Returns:
            A decorator that registers and returns the compiler class.
        """

        def decorator(compiler_cls: type[StatementCompiler]) -> type[StatementCompiler]:
            cls.register_class(compiler_cls, *kinds)
            return compiler_cls

        return decorator

    @classmethod
    def register_class(cls, compiler_cls: type[StatementCompiler], *kinds: QueryKind) -> None:
        """Register a compiler class without using the decorator form."""
        for kind in kinds:
            cls._compilers[QueryKind(kind)] = compiler_cls

    @classmethod
    def get(cls, kind: Any) -> StatementCompiler:
        """Return the compiler for ``kind``.

        Raises:
            UnsupportedKindError: If ``kind`` is unset or has no compiler.
        """
        compiler_cls = cls._compilers.get(kind) if kind is not None else None
        if compiler_cls is None:
            raise UnsupportedKindError(kind)
        instance = cls._instances.get(compiler_cls)
        if instance is None:
            instance = cls._instances[compiler_cls] = compiler_cls()
        return instance

    @classmethod
    def registered_kinds(cls) -> list[QueryKind]:
        """Return the sorted list of kinds that can be compiled."""
        return sorted(cls._compilers)


# ---------------------------------------------------------------------------
# Built-in statement compilers
# ---------------------------------------------------------------------------

StatementRegistry.register_class(SelectCompiler, QueryKind.SELECT, QueryKind.MULTI_SELECT)
StatementRegistry.register_class(InsertCompiler, QueryKind.INSERT, QueryKind.REPLACE)
StatementRegistry.register_class(UpdateCompiler, QueryKind.UPDATE)
StatementRegistry.register_class(DeleteCompiler, QueryKind.DELETE)
