"""Typed identifier reference.

Owns the parsing of the two plain identifier forms the builder accepts:
``"index.attr"`` dotted paths and ``(name, alias)`` pairs.  Quoting lives in
:mod:`sphinxql.compile.quoting`; this class only splits.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Identifier:
    """A parsed identifier.

    Attributes:
        parts: Dot-separated segments (a single element for plain names).
        alias: Optional alias from an ``(name, alias)`` pair.
    """

    parts: tuple[str, ...]
    alias: str | None = None

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def parse(cls, ref: Any) -> Identifier:
        """Parse ``"name"``, ``"a.b.c"`` or ``("name", "alias")``.

        Non-string names are converted with ``str()``.
        """
        name, alias = split_alias(ref)
        name = str(name)
        if name == "*":
            return cls(parts=("*",), alias=alias)
        return cls(parts=tuple(name.split(".")), alias=alias)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @property
    def is_wildcard(self) -> bool:
        return self.parts == ("*",)

    def __str__(self) -> str:
        return ".".join(self.parts)


def split_alias(ref: Any) -> tuple[Any, str | None]:
    """Return ``(name, alias)`` for a pair, ``(ref, None)`` otherwise."""
    if isinstance(ref, tuple):
        if len(ref) != 2:
            raise ValueError(f"Aliased reference must be a (name, alias) pair, got {ref!r}.")
        name, alias = ref
        return name, (None if alias is None else str(alias))
    return ref, None
