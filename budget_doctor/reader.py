"""
reader.py: delimited text to grid, plus the pre-flight validator.

Public API:
    grid   = read_grid(text)                 # list[list[str]], trimmed cells
    result = validate_and_clean(text)        # ValidationResult
    text   = serialize_grid(grid)            # canonical comma-delimited text

Cells are never coerced; ragged rows are kept ragged. Rows whose cells are
all blank are dropped.
"""

from __future__ import annotations

import csv
import io
import re

from budget_doctor.issues import format_issue
from budget_doctor.logging_setup import get_logger
from budget_doctor.models import Grid, ValidationResult

log = get_logger("budget_doctor.reader")

DELIMITER_CANDIDATES = (",", ";", "\t", "|")
DELIMITER_SAMPLE_LINES = 120
MIN_AVERAGE_WIDTH = 2.0

_QUOTED_FIELD_RE = re.compile(r'"(?:[^"]|"")*"')
# Cells holding any of these are quoted on output so the text re-reads
# as comma-delimited.
_QUOTE_TRIGGERS = frozenset(DELIMITER_CANDIDATES) | {'"', "\r", "\n"}


def _clean_text(text: str) -> str:
    return text.lstrip("\ufeff").replace("\x00", "")


def _row_is_blank(row: list[str]) -> bool:
    return not any(cell for cell in row)


def _mask_quoted_fields(text: str) -> str:
    return _QUOTED_FIELD_RE.sub("_", text)


def _width_spread(widths: list[int]) -> int:
    return sum(abs(current - previous) for previous, current in zip(widths, widths[1:]))


def detect_delimiter(text: str) -> str:
    """
    Infer the delimiter from a sample of non-empty lines.

    Quoted fields are masked first so delimiters inside notes never count.
    Candidates averaging fewer than two columns are ignored; of the rest,
    the one whose column count changes least from row to row wins. Comma is
    tried first, kept on ties, and used when no candidate qualifies.
    """
    masked = _mask_quoted_fields(text)
    sample_lines = [line for line in masked.splitlines() if line.strip()][:DELIMITER_SAMPLE_LINES]
    if not sample_lines:
        return ","
    sample_text = "\n".join(sample_lines)

    best_delim = ","
    best_spread: int | None = None

    for delim in DELIMITER_CANDIDATES:
        widths = [
            len(row)
            for row in csv.reader(io.StringIO(sample_text), delimiter=delim)
            if any(cell.strip() for cell in row)
        ]
        if not widths or sum(widths) / len(widths) < MIN_AVERAGE_WIDTH:
            continue

        spread = _width_spread(widths)
        if best_spread is None or spread < best_spread:
            best_spread = spread
            best_delim = delim

    return best_delim


def _iter_rows(text: str, delimiter: str, *, strict: bool):
    reader = csv.reader(
        io.StringIO(text, newline=""),
        delimiter=delimiter,
        quotechar='"',
        doublequote=True,
        strict=strict,
    )
    for raw_row in reader:
        row = [cell.strip() for cell in raw_row]
        if _row_is_blank(row):
            continue
        yield row


def read_grid(text: str, delimiter: str | None = None) -> Grid:
    """
    Parse delimited text into a grid of trimmed string cells.

    Quoted fields may hold delimiters, line breaks and doubled quotes.
    Raises csv.Error only for failures the lenient reader cannot get past
    (for example a field over the csv field size limit).
    """
    text = _clean_text(text)
    if delimiter is None:
        delimiter = detect_delimiter(text)
    return list(_iter_rows(text, delimiter, strict=False))


def find_structural_errors(text: str, delimiter: str) -> list[str]:
    """Run a strict parse and report the first quoting error, if any."""
    reader = csv.reader(io.StringIO(text, newline=""), delimiter=delimiter, strict=True)
    try:
        for _ in reader:
            pass
    except csv.Error as exc:
        return [format_issue("MalformedQuotes", f"line {reader.line_num}: {exc}")]
    return []


def _format_cell(cell: str) -> str:
    if any(char in _QUOTE_TRIGGERS for char in cell):
        return '"' + cell.replace('"', '""') + '"'
    return cell


def serialize_grid(grid: Grid) -> str:
    """
    Write ``grid`` as comma-delimited text with CRLF line endings.

    Quoting is minimal, except that a cell holding any candidate delimiter
    is quoted as well. ``detect_delimiter`` ignores quoted text, so the
    output always reads back as comma-delimited.
    """
    return "".join(",".join(_format_cell(cell) for cell in row) + "\r\n" for row in grid)


def validate_and_clean(text: str) -> ValidationResult:
    """
    Pre-flight check before semantic extraction.

    Empty input fails immediately. Otherwise the text is parsed strictly to
    collect quoting errors, parsed leniently for a best-effort grid, and that
    grid is re-serialized as canonical comma-delimited text.
    """
    if not text or not text.strip():
        return ValidationResult(ok=False, cleaned_text="", errors=[format_issue("EmptyInput")])

    text = _clean_text(text)
    try:
        delimiter = detect_delimiter(text)
        errors = find_structural_errors(text, delimiter)
        grid = read_grid(text, delimiter)
    except csv.Error as exc:
        return ValidationResult(
            ok=False,
            cleaned_text="",
            errors=[format_issue("ParseFailure", str(exc))],
        )
    cleaned_text = serialize_grid(grid)

    log.debug(
        "validated %d row(s) with delimiter %r, %d structural error(s)",
        len(grid), delimiter, len(errors),
    )
    return ValidationResult(ok=not errors, cleaned_text=cleaned_text, errors=errors)
