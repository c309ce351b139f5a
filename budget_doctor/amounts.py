from __future__ import annotations

import re
from collections.abc import Mapping

from budget_doctor.patterns import CURRENCY_SYMBOLS, EMBEDDED_AMOUNT_RE, is_amount

_DECORATION_RE = re.compile(rf"[{CURRENCY_SYMBOLS}%,\s]")
_PLAIN_NUMBER_RE = re.compile(r"\d+(?:\.\d*)?|\.\d+")


def parse_amount(value: str) -> float | None:
    """
    Parse a decorated amount such as "$13,216.67" or "7%".

    Currency symbols, percent signs, comma group separators and whitespace
    are removed; whatever remains must be a plain decimal number. Returns
    None instead of raising when it is not.
    """
    if not value:
        return None
    cleaned = _DECORATION_RE.sub("", value)
    if not _PLAIN_NUMBER_RE.fullmatch(cleaned):
        return None
    return float(cleaned)


def find_amount_in_row(row: Mapping[str, str]) -> float | None:
    """
    Return the first parseable amount in a standardized row.

    Whole-cell amounts are tried first in column order; only when none
    parses are currency-prefixed figures embedded in free text considered.
    """
    for value in row.values():
        if value and is_amount(value):
            parsed = parse_amount(value)
            if parsed is not None:
                return parsed

    for value in row.values():
        if not value:
            continue
        match = EMBEDDED_AMOUNT_RE.search(value)
        if match:
            parsed = parse_amount(match.group(0))
            if parsed is not None:
                return parsed

    return None
