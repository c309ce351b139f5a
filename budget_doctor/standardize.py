from __future__ import annotations

from budget_doctor.headers import locate_header, normalize_headers
from budget_doctor.logging_setup import get_logger
from budget_doctor.models import Grid, StandardizedRow, StandardizedTable
from budget_doctor.reader import read_grid

log = get_logger("budget_doctor.standardize")


def project_rows(grid: Grid, header_row_index: int, headers: tuple[str, ...]) -> list[StandardizedRow]:
    """
    Zip every row after the header row against ``headers``.

    Short rows are padded with "" and extra trailing cells are dropped. Row
    order is kept because label rows may carry their value on the next row.
    """
    width = len(headers)
    rows: list[StandardizedRow] = []
    for raw_row in grid[header_row_index + 1:]:
        padded = (list(raw_row) + [""] * width)[:width]
        rows.append(dict(zip(headers, padded)))
    return rows


def standardize_grid(grid: Grid, explicit_header_row: int | None = None) -> StandardizedTable:
    if not grid:
        return StandardizedTable(headers=(), rows=[], grid=[], header_row_index=0)

    header_row_index = locate_header(grid, explicit_header_row)
    headers = normalize_headers(grid[header_row_index])
    rows = project_rows(grid, header_row_index, headers)
    log.debug(
        "header row %d -> %s; %d data row(s)",
        header_row_index, list(headers), len(rows),
    )
    return StandardizedTable(
        headers=headers,
        rows=rows,
        grid=grid,
        header_row_index=header_row_index,
    )


def standardize_text(
    text: str,
    explicit_header_row: int | None = None,
    *,
    delimiter: str | None = None,
) -> StandardizedTable:
    return standardize_grid(read_grid(text, delimiter), explicit_header_row)
