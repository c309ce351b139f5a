"""
Expense-category normalisation.

Raw labels are mapped onto a small set of canonical categories: first by an
exact (case-insensitive) variant lookup, then by normalised Levenshtein
similarity against the canonical names. Labels that match neither pass
through unchanged.
"""

from __future__ import annotations

from types import MappingProxyType

from rapidfuzz.distance import Levenshtein

# Tolerates one typo in names of 6+ characters; a transposition (2 edits) in
# a 10-character name sits exactly on the threshold and is rejected.
FUZZY_MATCH_THRESHOLD = 0.8

EXPENSE_VARIATIONS = MappingProxyType({
    "restaurant":    ("resturant", "restraunt", "resturants", "restaurants"),
    "utilities":     ("utility", "utilities"),
    "groceries":     ("grocery", "groceries", "grocery store"),
    "medical":       ("medical", "health", "healthcare", "medical/health"),
    "gas":           ("gas", "fuel", "gas/auto", "auto", "car"),
    "entertainment": ("entertainment", "fun", "night out", "fun / night out"),
    "miscellaneous": ("misc", "miscellaneous", "misc.", "other", "others"),
})

CANONICAL_CATEGORIES = tuple(EXPENSE_VARIATIONS)

_VARIANT_LOOKUP = MappingProxyType({
    variant: canonical
    for canonical, variants in EXPENSE_VARIATIONS.items()
    for variant in variants
})


def category_similarity(first: str, second: str) -> float:
    """(maxLen - distance) / maxLen; two empty strings are identical."""
    longest = max(len(first), len(second))
    if longest == 0:
        return 1.0
    return (longest - Levenshtein.distance(first, second)) / longest


def find_fuzzy_category(text: str) -> str | None:
    """First canonical name, in table order, scoring above the threshold."""
    for canonical in CANONICAL_CATEGORIES:
        if category_similarity(text, canonical) > FUZZY_MATCH_THRESHOLD:
            return canonical
    return None


def normalize_category(raw_category: str) -> str:
    original = raw_category.strip()
    lowered = original.lower()

    canonical = _VARIANT_LOOKUP.get(lowered)
    if canonical is not None:
        return canonical

    fuzzy = find_fuzzy_category(lowered)
    if fuzzy is not None:
        return fuzzy

    return original
