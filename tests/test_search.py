"""Unit tests for SearchQuery."""

from __future__ import annotations

import pytest

from sphinxql.search import SearchQuery


@pytest.mark.parametrize(
    ("raw", "text"),
    [
        ("Red  Shoes", "red shoes"),
        ("  it's-a\ttest!! ", "itsa test"),
        ("C++ & Java", "c java"),
        ("", ""),
        ("???", ""),
    ],
)
def test_clean(raw, text):
    assert SearchQuery(raw).text == text


def test_words_and_count():
    q = SearchQuery("Red shoes, cheap")
    assert q.raw == "Red shoes, cheap"
    assert q.words == ["red", "shoes", "cheap"]
    assert q.word_count == 3
    assert str(q) == "red shoes cheap"


def test_empty_query_is_falsy():
    assert not SearchQuery("!!!")
    assert SearchQuery("x")


def test_zero_hit_keywords():
    meta = {
        "keyword[0]": "red",
        "docs[0]": "12",
        "keyword[1]": "shoez",
        "docs[1]": "0",
    }
    assert SearchQuery("red shoez").zero_hit_keywords(meta) == ["shoez"]


def test_zero_hit_keywords_skips_expansions():
    meta = {
        "keyword[0]": "=shoez",
        "docs[0]": "0",
        "keyword[1]": "*shoez*",
        "docs[1]": "0",
        "keyword[2]": "shoez",
        "docs[2]": "0",
    }
    q = SearchQuery("shoez shoez shoez")
    assert q.zero_hit_keywords(meta, expanded=True) == ["shoez"]
    assert q.zero_hit_keywords(meta) == ["=shoez", "*shoez*", "shoez"]


def test_zero_hit_keywords_with_missing_entries():
    assert SearchQuery("red shoes").zero_hit_keywords({}) == []
