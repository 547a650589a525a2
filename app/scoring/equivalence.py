"""Layered fuzzy equivalence between two skill strings.

Each rung is a separate predicate so it can be tested on its own;
``are_equivalent_skills`` accepts a pair as soon as one rung does.
"""

from __future__ import annotations

import re

SIGNIFICANT_WORD_MIN_LEN = 4
SIGNIFICANT_STOPWORDS = {"and", "the", "of", "for", "with", "both"}
MIN_SHARED_SIGNIFICANT_WORDS = 2

WHITESPACE_RE = re.compile(r"\s+")
NON_ALNUM_RE = re.compile(r"[\W_]+")

# Each entry lists terms that must all appear on one side, paired with terms that
# must all appear on the other side. Checked in both directions.
SYNONYM_PAIRS: tuple[tuple[tuple[str, ...], tuple[str, ...]], ...] = (
    (("client facing",), ("client relationship",)),
    (("communication skills",), ("communication",)),
    (("planning", "organisational"), ("planning", "organizational")),
)


def _norm(value: str) -> str:
    return (value or "").strip().lower()


def is_direct_match(a: str, b: str) -> bool:
    a, b = _norm(a), _norm(b)
    if not a or not b:
        return False
    return a == b or a in b or b in a


def is_normalized_match(a: str, b: str) -> bool:
    a, b = _norm(a), _norm(b)
    if not a or not b:
        return False
    if WHITESPACE_RE.sub("", a) == WHITESPACE_RE.sub("", b):
        return True
    stripped_a = NON_ALNUM_RE.sub("", a)
    return bool(stripped_a) and stripped_a == NON_ALNUM_RE.sub("", b)


def significant_words(value: str) -> list[str]:
    return [
        word
        for word in _norm(value).split()
        if len(word) >= SIGNIFICANT_WORD_MIN_LEN and word not in SIGNIFICANT_STOPWORDS
    ]


def has_token_overlap(a: str, b: str) -> bool:
    words_a = significant_words(a)
    words_b = significant_words(b)
    if len(words_a) < MIN_SHARED_SIGNIFICANT_WORDS or len(words_b) < MIN_SHARED_SIGNIFICANT_WORDS:
        return False
    shared = [word for word in words_a if any(word in other or other in word for other in words_b)]
    return len(shared) >= MIN_SHARED_SIGNIFICANT_WORDS


def is_known_synonym(a: str, b: str) -> bool:
    a, b = _norm(a), _norm(b)
    if not a or not b:
        return False
    for left, right in SYNONYM_PAIRS:
        if all(term in a for term in left) and all(term in b for term in right):
            return True
        if all(term in b for term in left) and all(term in a for term in right):
            return True
    return False


def are_equivalent_skills(a: str, b: str) -> bool:
    return (
        is_direct_match(a, b)
        or is_normalized_match(a, b)
        or has_token_overlap(a, b)
        or is_known_synonym(a, b)
    )
