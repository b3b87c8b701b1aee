"""sphinxql executor boundary: connection settings and executors."""
from sphinxql.connection.base import Executor, Result, Row
from sphinxql.connection.config import ConnectionConfig
from sphinxql.connection.mysql import SphinxConnection

__all__ = [
    "ConnectionConfig",
    "Executor",
    "Result",
    "Row",
    "SphinxConnection",
]
