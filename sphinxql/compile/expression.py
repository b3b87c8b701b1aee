"""Literal SQL fragments with named, late-quoted parameters.

An :class:`Expression` is inserted into a statement unescaped.  Its
parameters are quoted with :func:`~sphinxql.compile.quoting.quote_value` only
when the expression is compiled::

    expr = Expression("WEIGHT() > :min", {":min": 10})
    expr.compile()   # WEIGHT() > 10

Placeholder keys are literal tokens chosen by the caller (``:min``,
``{min}``, ...).  Substitution follows PHP ``strtr`` rules: one left-to-right
pass, the longest key wins at each position, and substituted text is never
rescanned.  Tokens with no matching key are left as they are.
"""
from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any


def substitute(template: str, replacements: Mapping[str, str]) -> str:
    """Replace every occurrence of each key in ``template`` with its value.

    Args:
        template: Text containing placeholder tokens.
        replacements: Token → replacement text (already quoted).

    Returns:
        The substituted text.
    """
    keys = [key for key in replacements if key]
    if not keys:
        return template
    keys.sort(key=len, reverse=True)
    pattern = re.compile("|".join(re.escape(key) for key in keys))
    return pattern.sub(lambda m: replacements[m.group(0)], template)


def _snapshot(value: Any) -> Any:
    # Parameters are stored by value: later mutation of the caller's
    # container must not change an expression already built.
    if isinstance(value, list):
        return [_snapshot(item) for item in value]
    if isinstance(value, dict):
        return {key: _snapshot(item) for key, item in value.items()}
    if isinstance(value, set):
        return set(value)
    return value


class Expression:
    """A raw SQL fragment with optional named parameters.

    Args:
        template: Raw SQL text.
        parameters: Initial placeholder → value mapping.
    """

    def __init__(self, template: str, parameters: Mapping[str, Any] | None = None) -> None:
        self._template = str(template)
        self._parameters: dict[str, Any] = {}
        if parameters:
            self.parameters(parameters)

    # ------------------------------------------------------------------
    # Parameters
    # ------------------------------------------------------------------

    def bind(self, name: str, value: Any) -> Expression:
        """Bind ``value`` to the placeholder ``name``.

        The value is captured when ``bind`` is called.
        """
        self._parameters[name] = _snapshot(value)
        return self

    def param(self, name: str, value: Any) -> Expression:
        """Set the value of a parameter."""
        return self.bind(name, value)

    def parameters(self, params: Mapping[str, Any]) -> Expression:
        """Merge several parameters; keys in ``params`` replace existing ones."""
        for name, value in params.items():
            self.bind(name, value)
        return self

    @property
    def params(self) -> dict[str, Any]:
        """A copy of the current parameter mapping."""
        return dict(self._parameters)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    @property
    def value(self) -> str:
        """The raw template, parameters not substituted."""
        return self._template

    def compile(self) -> str:
        """Return the template with every parameter quoted and substituted."""
        if not self._parameters:
            return self._template

        from sphinxql.compile.quoting import quote_value  # avoid circular import

        quoted = {name: quote_value(value) for name, value in self._parameters.items()}
        return substitute(self._template, quoted)

    def __str__(self) -> str:
        return self._template

    def __repr__(self) -> str:
        return f"Expression({self._template!r}, {self._parameters!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Expression):
            return NotImplemented
        return self._template == other._template and self._parameters == other._parameters

    __hash__ = None  # type: ignore[assignment]
