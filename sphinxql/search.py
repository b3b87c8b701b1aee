"""Normalisation of free-form user search text.

``SearchQuery`` turns what a user typed into a plain word list that is safe
to hand to ``QueryBuilder.match()``, and reads back from ``SHOW META`` which
of those words found nothing (for "no results for ..." hints).
"""
from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

_NON_WORD = re.compile(r"[^\w\s]+")
_WHITESPACE = re.compile(r"\s+")

#: Prefixes the daemon puts on keywords it generated itself (exact-form
#: ``=word`` and wildcard ``*word*`` expansions).
_EXPANSION_PREFIXES = ("=", "*")


class SearchQuery:
    """A cleaned user search string.

    Args:
        text: Raw user input.
    """

    def __init__(self, text: str) -> None:
        self.raw = text
        self.text = self.clean(text)
        self.words: list[str] = self.text.split(" ") if self.text else []

    @staticmethod
    def clean(text: str) -> str:
        """Lower-case, drop punctuation, collapse whitespace."""
        text = _NON_WORD.sub("", text.lower())
        return _WHITESPACE.sub(" ", text).strip()

    @property
    def word_count(self) -> int:
        return len(self.words)

    def __bool__(self) -> bool:
        return bool(self.words)

    def __str__(self) -> str:
        return self.text

    def zero_hit_keywords(self, meta: Mapping[str, Any], expanded: bool = False) -> list[str]:
        """Return the keywords that matched no documents.

        Args:
            meta: ``SHOW META`` output as returned by
                :meth:`~sphinxql.SphinxConnection.meta`.
            expanded: The query used keyword expansion; skip the daemon's
                own ``=`` / ``*`` expansion keywords.
        """
        result: list[str] = []
        for i in range(self.word_count):
            keyword = meta.get(f"keyword[{i}]")
            if keyword is None:
                continue
            if int(meta.get(f"docs[{i}]", 0)) != 0:
                continue
            if expanded and str(keyword).startswith(_EXPANSION_PREFIXES):
                continue
            result.append(str(keyword))
        return result
