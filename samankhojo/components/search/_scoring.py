"""
Search scoring - weighted relevance and suggestion match scores.

Key behaviors:
- relevance(): weighted field scoring normalized to 0..1
- match_score(): ranking for suggestions (exact 10, prefix 8, substring 6,
  word matches capped at 5, fuzzy similarity * 3 above 0.7)
- substring_filter(): plain case-insensitive fallback filter
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any, Literal, TypeVar

RecordKind = Literal["shop", "item", "menu"]

T = TypeVar("T")

FIELD_WEIGHTS: dict[RecordKind, tuple[tuple[str, int], ...]] = {
    "shop": (("shop_name", 3), ("type", 2), ("address", 1)),
    "item": (("name", 3), ("category", 2), ("type", 2), ("variety", 1), ("brand_name", 1)),
    "menu": (("name", 3), ("description", 2), ("category", 2)),
}


def _field_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return " ".join(str(v) for v in value) or None
    return str(value) or None


def relevance(record: Any, keywords: Sequence[str], kind: RecordKind) -> float:
    """
    Weighted relevance of a record for the given keywords.

    Exact field match scores 2 x weight, substring match scores weight,
    otherwise each keyword found scores 0.5 x weight. The total is divided
    by the maximum possible score and capped at 1.
    """
    fields = FIELD_WEIGHTS[kind]
    phrase = " ".join(keywords).lower()
    if not phrase:
        return 0.0

    score = 0.0
    for name, weight in fields:
        text = _field_text(getattr(record, name, None))
        if not text:
            continue
        text = text.lower()
        if text == phrase:
            score += weight * 2
        elif phrase in text:
            score += weight
        else:
            score += sum(weight * 0.5 for kw in keywords if kw.lower() in text)

    max_score = sum(weight * 2 for _, weight in fields)
    return min(score / max_score, 1.0)


def levenshtein(a: str, b: str) -> int:
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]


def match_score(text: str | None, query: str | None) -> float:
    if not text or not query:
        return 0.0

    text_l = text.lower().strip()
    query_l = query.lower().strip()

    if text_l == query_l:
        return 10.0
    if text_l.startswith(query_l):
        return 8.0
    if query_l in text_l:
        return 6.0

    word_matches = 0
    text_words = text_l.split()
    for q_word in query_l.split():
        for t_word in text_words:
            if t_word == q_word:
                word_matches += 3
            elif t_word.startswith(q_word):
                word_matches += 2
            elif q_word in t_word:
                word_matches += 1
    if word_matches > 0:
        return float(min(word_matches, 5))

    longest = max(len(text_l), len(query_l))
    similarity = 1 - levenshtein(text_l, query_l) / longest
    if similarity > 0.7:
        return similarity * 3
    return 0.0


def substring_filter(records: Iterable[T], query: str, fields: Sequence[str]) -> list[T]:
    """Keep records where any of `fields` contains `query`, ignoring case."""
    q = query.lower().strip()
    if not q:
        return []
    kept = []
    for record in records:
        for name in fields:
            text = _field_text(getattr(record, name, None))
            if text and q in text.lower():
                kept.append(record)
                break
    return kept
