"""Unit tests for QueryBuilder state handling and execution."""

from __future__ import annotations

import pytest

from sphinxql.compile.builder import QueryBuilder
from sphinxql.errors import (
    ExecutorNotBoundError,
    KindConflictError,
    MalformedGroupError,
    QueryFailedError,
)
from sphinxql.schema.clauses import MatchClause, OrderEntry
from sphinxql.schema.conditions import Clause, CloseGroup, OpenGroup
from sphinxql.schema.kinds import QueryKind
from tests.fixtures import RecordingExecutor

# ---------------------------------------------------------------------------
# Kind handling
# ---------------------------------------------------------------------------


def test_new_builder_has_no_kind(qb):
    assert qb.kind is None
    assert qb.executor is None


def test_kind_follows_last_call(qb):
    assert qb.select("id").kind == QueryKind.SELECT
    assert qb.insert("docs").kind == QueryKind.INSERT
    assert qb.replace().kind == QueryKind.REPLACE
    assert qb.update().kind == QueryKind.UPDATE
    assert qb.delete().kind == QueryKind.DELETE


def test_facet_forces_multi_select(products):
    assert products.facet("brand_id").kind == QueryKind.MULTI_SELECT
    assert products.select("id").kind == QueryKind.MULTI_SELECT


def test_switching_kind_keeps_shared_clauses(products):
    products.where("id", "=", 1).order_by("id").limit(5).delete("products")
    assert products.compile() == "DELETE FROM `products` WHERE `id` = 1 ORDER BY `id` LIMIT 5"


def test_int_kind_is_coerced():
    assert QueryBuilder(1).kind is QueryKind.SELECT


# ---------------------------------------------------------------------------
# Conditions
# ---------------------------------------------------------------------------


def test_where_records_tagged_entries(qb):
    qb.where("a", "=", 1).or_where().where("b", "=", 2).end()
    assert qb.state.where == [
        Clause("AND", "a", "=", 1),
        OpenGroup("OR"),
        Clause("AND", "b", "=", 2),
        CloseGroup(),
    ]
    assert qb.state.open_groups == []


def test_where_accepts_list_of_triples(products):
    products.where([("a", "=", 1), ("b", "IN", [1, 2])])
    products.or_where([("c", "<", 3)])
    assert products.compile().endswith("WHERE `a` = 1 AND `b` IN (1,2) OR `c` < 3")


def test_end_closes_the_innermost_open_group(products):
    products.where().having().having("cnt", ">", 1).end().where("a", "=", 1).end()
    assert products.state.where == [OpenGroup("AND"), Clause("AND", "a", "=", 1), CloseGroup()]
    assert products.state.having == [OpenGroup("AND"), Clause("AND", "cnt", ">", 1), CloseGroup()]


def test_end_without_open_group_raises(qb):
    with pytest.raises(MalformedGroupError):
        qb.end()


def test_end_can_drop_empty_group(products):
    products.where("a", "=", 1).where().end(close_if_empty=True)
    assert products.compile().endswith("WHERE `a` = 1")
    assert products.state.open_groups == []


def test_dropped_empty_group_leaves_no_trace():
    untouched = QueryBuilder().select("id").from_("products")
    grouped = QueryBuilder().select("id").from_("products").where(None).end(True)
    assert grouped.compile() == untouched.compile()
    assert grouped.state.where == []


def test_end_keeps_empty_group_by_default(products):
    products.where("a", "=", 1).or_where().end()
    assert products.compile().endswith("WHERE `a` = 1 OR ()")


@pytest.mark.parametrize("blank", [None, "", "   ", [], (), {}, set()])
def test_filter_skips_blank_values(products, blank):
    products.filter("brand_id", "=", blank).or_filter("brand_id", "=", blank)
    assert products.state.where == []


def test_filter_keeps_falsy_scalars(products):
    products.filter("brand_id", "=", 0).or_filter("active", "=", False)
    assert products.compile().endswith("WHERE `brand_id` = 0 OR `active` = '0'")


def test_filter_with_list(products):
    products.filter("brand_id", "IN", [3, 4])
    assert products.compile().endswith("WHERE `brand_id` IN (3,4)")


# ---------------------------------------------------------------------------
# Clause state
# ---------------------------------------------------------------------------


def test_match_records_terms(qb):
    qb.match("red").match("title", "shoes").match(["title", "body"], "cheap")
    assert qb.state.match == [
        MatchClause(None, "red"),
        MatchClause("title", "shoes"),
        MatchClause(("title", "body"), "cheap"),
    ]


def test_order_by_replaces_with_list(products):
    products.order_by("a").order_by([("b", "DESC")])
    assert products.state.order_by == [OrderEntry("b", "DESC")]


def test_limit_and_offset_reset_with_none(products):
    products.limit(10).offset(5).limit(None).offset(None)
    assert products.state.limit is None
    assert products.state.offset is None


def test_limit_coerces_to_int(products):
    assert products.limit("10").state.limit == 10


def test_select_replaces_columns(qb):
    qb.select("a", "b").select(["c"])
    assert qb.state.select == ["c"]
    qb.select()
    assert qb.state.select == ["c"]


def test_insert_seeds_columns_once(qb):
    qb.columns(["id", "title"]).insert("docs", {"title": "x", "id": 1})
    assert qb.state.columns == ["id", "title"]
    assert qb.state.values == [[1, "x"]]


def test_mapping_values_follow_column_order(qb):
    qb.insert("docs", {"id": 1, "title": "a"}).values({"title": "b", "id": 2})
    assert qb.compile() == "INSERT INTO `docs` (`id`, `title`) VALUES (1, 'a'), (2, 'b')"


def test_values_then_subselect_conflict(qb):
    qb.insert("docs").values([1])
    with pytest.raises(KindConflictError):
        qb.subselect(QueryBuilder().select("id").from_("src"))


def test_subselect_then_values_conflict(qb):
    qb.insert("docs").subselect(QueryBuilder().select("id").from_("src"))
    with pytest.raises(KindConflictError):
        qb.values([1])


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


def test_reset_swaps_in_fresh_state(products):
    products.where("a", "=", 1).limit(5)
    old_state = products.state
    products.reset()
    assert products.kind == QueryKind.SELECT
    assert products.compile() == "SELECT *"
    assert old_state.where == [Clause("AND", "a", "=", 1)]


def test_copy_is_independent():
    executor = RecordingExecutor()
    bound = QueryBuilder(executor=executor).select("id").from_("products").where("a", "IN", [1])
    clone = bound.copy()
    clone.where("b", "=", 2).state.where[0].value.append(9)
    assert bound.compile() == "SELECT `id` FROM `products` WHERE `a` IN (1)"
    assert clone.compile() == "SELECT `id` FROM `products` WHERE `a` IN (1,9) AND `b` = 2"
    assert clone.executor is executor


def test_builders_do_not_share_state():
    first = QueryBuilder().select("id").from_("a")
    second = QueryBuilder().select("id").from_("b")
    first.where("x", "=", 1)
    assert second.state.where == []


# ---------------------------------------------------------------------------
# Execution
# ---------------------------------------------------------------------------


def test_execute_sends_compiled_sql():
    executor = RecordingExecutor([{"id": 1}])
    rows = QueryBuilder(executor=executor).select("id").from_("products").execute()
    assert rows == [{"id": 1}]
    assert executor.calls == [(QueryKind.SELECT, "SELECT `id` FROM `products`")]


def test_execute_facets_as_multi_select():
    executor = RecordingExecutor([[{"id": 1}], [{"brand_id": 3, "count(*)": 1}]])
    qb = QueryBuilder(executor=executor).select("id").from_("products").facet("brand_id")
    result = qb.get()
    assert len(result) == 2
    assert executor.calls[0][0] == QueryKind.MULTI_SELECT


def test_execute_insert_returns_executor_value():
    executor = RecordingExecutor(42)
    assert QueryBuilder(executor=executor).insert("docs", {"id": 42}).execute() == 42
    assert executor.last_sql == "INSERT INTO `docs` (`id`) VALUES (42)"


def test_execute_without_executor(products):
    with pytest.raises(ExecutorNotBoundError):
        products.execute()


def test_execute_propagates_query_failure():
    class FailingExecutor(RecordingExecutor):
        def execute(self, kind, sql):
            raise QueryFailedError("unknown column", 1064, sql)

    qb = QueryBuilder(executor=FailingExecutor()).select("nope").from_("products")
    with pytest.raises(QueryFailedError) as excinfo:
        qb.execute()
    assert excinfo.value.code == 1064
    assert excinfo.value.sql == "SELECT `nope` FROM `products`"


def test_compile_errors_happen_before_execution(executor):
    qb = QueryBuilder(executor=executor).select("id").from_("p").where()
    with pytest.raises(MalformedGroupError):
        qb.execute()
    assert executor.calls == []
