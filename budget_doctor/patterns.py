"""
Cell classification tables and predicates.

Each predicate tests one cell's text against an ordered tuple of
case-insensitive patterns. A cell may satisfy several predicates; callers
ask for the role they need, or use ``classify_cell`` to list every role in
``CELL_CLASSIFIERS`` order.
"""

from __future__ import annotations

import re
from collections.abc import Callable

CURRENCY_SYMBOLS = "$€£¥₹"

INCOME_PATTERNS = tuple(re.compile(p, re.IGNORECASE) for p in (
    r"income",
    r"salary",
    r"wage",
    r"earnings",
    r"revenue",
    r"net income",
    r"monthly income",
    r"annual income",
    r"gross income",
    r"take home",
))

EXPENSE_PATTERNS = tuple(re.compile(p, re.IGNORECASE) for p in (
    r"expense",
    r"cost",
    r"spending",
    r"payment",
    r"bill",
    r"rent",
    r"utilities",
    r"groceries",
    r"food",
    r"restaurant",
    r"resturant",
    r"gas",
    r"auto",
    r"car",
    r"medical",
    r"health",
    r"gym",
    r"travel",
    r"shopping",
    r"entertainment",
    r"fun",
    r"misc",
    r"miscellaneous",
))

AMOUNT_PATTERNS = (
    re.compile(rf"^\s*[{CURRENCY_SYMBOLS}]?\s*\d[\d,]*(?:\.\d*)?\s*%?\s*$"),
)

DATE_PATTERNS = (
    re.compile(r"^\d{1,2}/\d{1,2}/\d{2,4}$"),
    re.compile(r"^\d{4}-\d{1,2}-\d{1,2}$"),
    re.compile(r"^\d{1,2}-\d{1,2}-\d{2,4}$"),
)

ANNUAL_RETURN_RE = re.compile(r"annual.*return|return.*annual", re.IGNORECASE)
HEADER_HINT_RE = re.compile(r"date|category|amount|description|type", re.IGNORECASE)
EMBEDDED_AMOUNT_RE = re.compile(rf"[{CURRENCY_SYMBOLS}]\s*[\d,]+\.?\d*")
DIGITS_ONLY_RE = re.compile(r"\d+")


def _matches_any(patterns: tuple[re.Pattern[str], ...], text: str) -> bool:
    return any(pattern.search(text) for pattern in patterns)


def is_income_label(text: str) -> bool:
    return bool(text) and _matches_any(INCOME_PATTERNS, text)


def is_expense_label(text: str) -> bool:
    return bool(text) and _matches_any(EXPENSE_PATTERNS, text)


def is_amount(text: str) -> bool:
    return bool(text) and _matches_any(AMOUNT_PATTERNS, text)


def is_date(text: str) -> bool:
    return bool(text) and _matches_any(DATE_PATTERNS, text.strip())


def is_annual_return_label(text: str) -> bool:
    return bool(text) and ANNUAL_RETURN_RE.search(text) is not None


def has_header_hint(text: str) -> bool:
    return bool(text) and HEADER_HINT_RE.search(text) is not None


def is_digits_only(text: str) -> bool:
    return DIGITS_ONLY_RE.fullmatch(text) is not None


# Fixed evaluation order for classify_cell.
CELL_CLASSIFIERS: tuple[tuple[str, Callable[[str], bool]], ...] = (
    ("income", is_income_label),
    ("expense", is_expense_label),
    ("annual_return", is_annual_return_label),
    ("amount", is_amount),
    ("date", is_date),
)


def classify_cell(text: str) -> tuple[str, ...]:
    return tuple(role for role, predicate in CELL_CLASSIFIERS if predicate(text))
