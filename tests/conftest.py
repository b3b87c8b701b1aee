"""Shared pytest fixtures for sphinxql unit and integration tests."""
from __future__ import annotations

import pytest

from sphinxql.compile.builder import QueryBuilder
from tests.fixtures import RecordingExecutor


@pytest.fixture
def executor() -> RecordingExecutor:
    """Executor that records statements instead of sending them."""
    return RecordingExecutor()


@pytest.fixture
def qb() -> QueryBuilder:
    """A fresh, unbound builder."""
    return QueryBuilder()


@pytest.fixture
def products() -> QueryBuilder:
    """``SELECT `id`, `name` FROM `products```."""
    return QueryBuilder().select("id", "name").from_("products")
