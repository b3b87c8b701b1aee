"""sphinxql schema types: query kinds, clause entries and builder state."""
from sphinxql.schema.clauses import MatchClause, OrderEntry
from sphinxql.schema.conditions import (
    Clause,
    CloseGroup,
    ConditionEntry,
    OpenGroup,
    group_depths,
)
from sphinxql.schema.identifier import Identifier, split_alias
from sphinxql.schema.kinds import QueryKind
from sphinxql.schema.state import QueryState

__all__ = [
    "Clause",
    "CloseGroup",
    "ConditionEntry",
    "Identifier",
    "MatchClause",
    "OpenGroup",
    "OrderEntry",
    "QueryKind",
    "QueryState",
    "group_depths",
    "split_alias",
]
