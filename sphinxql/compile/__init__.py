"""sphinxql compilation layer: builder state → SphinxQL text."""
from sphinxql.compile.base import CompiledSQL, StatementCompiler, SubQuery
from sphinxql.compile.builder import QueryBuilder
from sphinxql.compile.expression import Expression
from sphinxql.compile.registry import StatementRegistry

__all__ = [
    "CompiledSQL",
    "Expression",
    "QueryBuilder",
    "StatementCompiler",
    "StatementRegistry",
    "SubQuery",
]
