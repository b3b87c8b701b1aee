"""Unit tests for value, identifier and full-text quoting."""

from __future__ import annotations

import re

import pytest

from sphinxql.compile.builder import QueryBuilder
from sphinxql.compile.expression import Expression
from sphinxql.compile.quoting import (
    MATCH_METACHARACTERS,
    escape_match,
    escape_string,
    quote_column,
    quote_identifier,
    quote_index,
    quote_value,
)

_UNESCAPES = {"n": "\n", "r": "\r", "0": "\x00", "Z": "\x1a"}


def _parse_string_literal(literal: str) -> str:
    """Read back a single-quoted, backslash-escaped literal."""
    assert literal.startswith("'") and literal.endswith("'")
    body = literal[1:-1]
    # Every quote inside the body must be escaped.
    assert not re.search(r"(?<!\\)(?:\\\\)*'", body.replace("\\\\", "")), body
    return re.sub(r"\\(.)", lambda m: _UNESCAPES.get(m.group(1), m.group(1)), body)


# ---------------------------------------------------------------------------
# quote_value
# ---------------------------------------------------------------------------


class TestQuoteValue:
    def test_none_is_null(self):
        assert quote_value(None) == "NULL"

    def test_booleans_are_quoted_digits(self):
        assert quote_value(True) == "'1'"
        assert quote_value(False) == "'0'"

    def test_integers_are_bare(self):
        assert quote_value(42) == "42"
        assert quote_value(-7) == "-7"

    def test_floats_use_fixed_notation(self):
        assert quote_value(1.5) == "1.500000"
        assert quote_value(1e20) == "100000000000000000000.000000"
        assert "e" not in quote_value(1e-7)

    def test_strings_are_escaped_and_quoted(self):
        assert quote_value("fred") == "'fred'"
        assert quote_value("it's") == "'it\\'s'"

    def test_sequences_are_bracketed(self):
        assert quote_value([1, "a", None]) == "(1, 'a', NULL)"
        assert quote_value((1, [2, 3])) == "(1, (2, 3))"

    @pytest.mark.parametrize("value", [float("inf"), float("-inf"), float("nan")])
    def test_non_finite_floats_raise(self, value):
        with pytest.raises(ValueError):
            quote_value(value)

    def test_sets_are_sorted(self):
        assert quote_value({3, 1, 2}) == "(1, 2, 3)"
        assert quote_value(frozenset({"b", "a"})) == "('a', 'b')"
        assert quote_value({1, "a"}) == "('a', 1)"

    def test_expression_is_compiled(self):
        assert quote_value(Expression("COUNT(*)")) == "COUNT(*)"
        assert quote_value(Expression("id > :min", {":min": 5})) == "id > 5"

    def test_subquery_is_bracketed(self):
        sub = QueryBuilder().select("id").from_("products")
        assert quote_value(sub) == "(SELECT `id` FROM `products`)"

    def test_other_objects_use_str(self):
        class Token:
            def __str__(self) -> str:
                return "tok'en"

        assert quote_value(Token()) == "'tok\\'en'"

    @pytest.mark.parametrize(
        "text",
        ["plain", "it's", 'say "hi"', "back\\slash", "line\nbreak\r", "nul\x00sub\x1a", "'; DROP --"],
    )
    def test_string_literal_round_trips(self, text):
        assert _parse_string_literal(quote_value(text)) == text


class TestEscapeString:
    def test_escape_table(self):
        assert escape_string("\\") == "'\\\\'"
        assert escape_string("'") == "'\\''"
        assert escape_string('"') == "'\\\"'"
        assert escape_string("\n") == "'\\n'"
        assert escape_string("\r") == "'\\r'"
        assert escape_string("\x00") == "'\\0'"
        assert escape_string("\x1a") == "'\\Z'"

    def test_backslash_is_escaped_once(self):
        assert escape_string("a\\'b") == "'a\\\\\\'b'"


# ---------------------------------------------------------------------------
# Identifiers
# ---------------------------------------------------------------------------


class TestQuoteIdentifier:
    def test_wildcard_is_bare(self):
        assert quote_identifier("*") == "*"

    def test_single_segment(self):
        assert quote_identifier("id") == "`id`"

    def test_dotted_path(self):
        assert quote_identifier("products.id") == "`products`.`id`"
        assert quote_identifier("products.*") == "`products`.*"

    def test_backticks_are_doubled(self):
        assert quote_identifier("we`ird") == "`we``ird`"

    def test_alias(self):
        assert quote_identifier(("id", "doc`id")) == "`id` AS `doc``id`"

    def test_expression_name_is_compiled(self):
        assert quote_identifier((Expression("WEIGHT()"), "w")) == "WEIGHT() AS `w`"
        assert quote_identifier(Expression("id > :n", {":n": 1})) == "id > 1"

    def test_subquery_name_is_bracketed(self):
        sub = QueryBuilder().select("id").from_("tags")
        assert quote_identifier((sub, "t")) == "(SELECT `id` FROM `tags`) AS `t`"

    def test_bad_pair_raises(self):
        with pytest.raises(ValueError):
            quote_identifier(("a", "b", "c"))


class TestQuoteColumn:
    def test_plain_names_match_quote_identifier(self):
        assert quote_column("p.title") == quote_identifier("p.title")

    def test_expression_with_alias(self):
        assert quote_column((Expression("WEIGHT()"), "w")) == "WEIGHT() AS `w`"

    def test_subquery_with_alias(self):
        sub = QueryBuilder().select("id").from_("tags")
        assert quote_column((sub, "t")) == "(SELECT `id` FROM `tags`) AS `t`"


class TestQuoteIndex:
    def test_dots_are_not_split(self):
        assert quote_index("rt.main") == "`rt.main`"

    def test_alias(self):
        assert quote_index(("products", "p")) == "`products` AS `p`"

    def test_expression(self):
        assert quote_index(Expression("products, products_delta")) == "products, products_delta"


# ---------------------------------------------------------------------------
# Full-text escaping
# ---------------------------------------------------------------------------


def _assert_only_literals(escaped: str) -> None:
    """Walk ``escaped`` as the full-text tokenizer would."""
    i = 0
    while i < len(escaped):
        char = escaped[i]
        if char == "\\":
            assert i + 1 < len(escaped), "dangling escape"
            i += 2
            continue
        assert char not in MATCH_METACHARACTERS, f"unescaped operator {char!r} in {escaped!r}"
        i += 1


class TestEscapeMatch:
    @pytest.mark.parametrize("char", list(MATCH_METACHARACTERS))
    def test_each_metacharacter(self, char):
        assert escape_match(char) == "\\" + char

    @pytest.mark.parametrize(
        "text",
        ['"exact phrase"', "a | b", "-excluded", "@title hack", "x/3", "^start$", "a<<b", "\\(nested\\)"],
    )
    def test_escaped_text_has_no_operators(self, text):
        _assert_only_literals(escape_match(text))

    def test_plain_words_are_untouched(self):
        assert escape_match("red shoes") == "red shoes"

    def test_expression_bypasses_escaping(self):
        assert escape_match(Expression('"red shoes"~3')) == '"red shoes"~3'
