from __future__ import annotations

import re
from collections.abc import Callable
from types import MappingProxyType

from budget_doctor.models import Grid
from budget_doctor.patterns import (
    has_header_hint,
    is_amount,
    is_digits_only,
    is_expense_label,
    is_income_label,
)

HEADER_SCAN_ROWS = 3

# Ordered (predicate, weight) pairs summed over every non-empty cell.
HEADER_SCORE_RULES: tuple[tuple[Callable[[str], bool], int], ...] = (
    (is_income_label, 3),
    (is_expense_label, 2),
    (lambda cell: not is_amount(cell), 1),
    (lambda cell: len(cell) > 3 and not is_digits_only(cell), 1),
    (has_header_hint, 2),
)

HEADER_ALIASES = MappingProxyType({
    # Garbled column names seen in real budget exports.
    "booba_money": "category",
    "booboo_moeny": "amount",
    "baobooboo_money": "running_total",
    "date": "date",
    "transaction_date": "date",
    "description": "description",
    "memo": "description",
    "notes": "description",
    "category": "category",
    "amount": "amount",
    "value": "amount",
    "cost": "amount",
    "price": "amount",
    "running_total": "running_total",
    "balance": "running_total",
})

_NON_WORD_RE = re.compile(r"[^\w\s]")
_WHITESPACE_RE = re.compile(r"\s+")


def score_header_row(row: list[str]) -> int:
    score = 0
    for cell in row:
        if not cell:
            continue
        score += sum(weight for predicate, weight in HEADER_SCORE_RULES if predicate(cell))
    return score


def locate_header(grid: Grid, explicit_header_row: int | None = None) -> int:
    """
    Return the 0-based index of the most header-like row.

    Only the first HEADER_SCAN_ROWS rows compete; the strictly highest score
    wins so ties keep the earliest row. ``explicit_header_row`` is 1-based
    and bypasses scoring.
    """
    if explicit_header_row is not None:
        return max(0, min(len(grid) - 1, explicit_header_row - 1))

    best_row = 0
    best_score = 0
    for idx, row in enumerate(grid[:HEADER_SCAN_ROWS]):
        score = score_header_row(row)
        if score > best_score:
            best_score = score
            best_row = idx
    return best_row


def normalize_header_text(cell: str) -> str:
    cleaned = _NON_WORD_RE.sub("", cell.lower()).strip()
    return _WHITESPACE_RE.sub("_", cleaned)


def normalize_headers(raw_header: list[str]) -> tuple[str, ...]:
    """
    Map raw header cells to unique canonical field names.

    Blank cells (after cleaning) and names already taken by an earlier column
    fall back to ``column_<n>``; unknown names keep their cleaned text.
    """
    headers: list[str] = []
    seen: set[str] = set()
    for i, cell in enumerate(raw_header, start=1):
        base = normalize_header_text(cell or "")
        name = HEADER_ALIASES.get(base, base)
        if not name or name in seen:
            name = f"column_{i}"
            repeat = 2
            while name in seen:
                name = f"column_{i}_{repeat}"
                repeat += 1
        seen.add(name)
        headers.append(name)
    return tuple(headers)
