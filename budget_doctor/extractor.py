"""
extractor.py: standardized rows to a monthly financial summary.

Public API:
    result = parse_financial_text(text)      # ParseResult(data, errors, warnings)

Three queries run over the standardized rows:

  income         first income-labelled row with an amount on the same row,
                 or failing that on the row immediately after it
  expenses       every expense-labelled cell paired with the first amount on
                 its row; one row may yield several expenses
  annual return  first "annual ... return" row with an amount

Nothing here raises for missing or unparseable values. Absence comes back as
0.0, [] or None and the pipeline turns it into a warning.
"""

from __future__ import annotations

import csv

from budget_doctor.amounts import find_amount_in_row
from budget_doctor.categories import normalize_category
from budget_doctor.issues import DEFAULT_ANNUAL_RETURN_PERCENT, format_issue
from budget_doctor.logging_setup import get_logger
from budget_doctor.models import (
    Expense,
    FinancialSummary,
    ParseResult,
    StandardizedRow,
    StandardizedTable,
)
from budget_doctor.patterns import is_annual_return_label, is_expense_label, is_income_label
from budget_doctor.reader import validate_and_clean
from budget_doctor.standardize import standardize_text

log = get_logger("budget_doctor.extractor")


def _positive_amount(row: StandardizedRow) -> float | None:
    amount = find_amount_in_row(row)
    if amount is not None and amount > 0:
        return amount
    return None


def extract_income(rows: list[StandardizedRow]) -> float:
    for i, row in enumerate(rows):
        if not any(is_income_label(value) for value in row.values()):
            continue

        amount = _positive_amount(row)
        if amount is None and i + 1 < len(rows):
            amount = _positive_amount(rows[i + 1])
        if amount is not None:
            log.debug("monthly income %.2f found near row %d", amount, i)
            return amount
    return 0.0


def extract_expenses(rows: list[StandardizedRow]) -> list[Expense]:
    expenses: list[Expense] = []
    for row in rows:
        for value in row.values():
            if not is_expense_label(value):
                continue
            amount = _positive_amount(row)
            if amount is None:
                continue
            label = value.strip()
            category = normalize_category(label)
            expenses.append(Expense(
                category=category,
                amount=amount,
                description=label if category != label else None,
            ))
    return expenses


def extract_annual_return(rows: list[StandardizedRow]) -> float | None:
    for row in rows:
        if any(is_annual_return_label(value) for value in row.values()):
            amount = _positive_amount(row)
            if amount is not None:
                return amount
    return None


def extract_financial_data(table: StandardizedTable) -> tuple[FinancialSummary, list[str]]:
    """Run the three queries over ``table.rows``; returns (summary, warnings)."""
    warnings: list[str] = []

    monthly_income = extract_income(table.rows)
    expenses = extract_expenses(table.rows)
    annual_return = extract_annual_return(table.rows)

    if monthly_income == 0:
        warnings.append(format_issue("IncomeNotFound"))
    if not expenses:
        warnings.append(format_issue("NoExpensesFound"))
    if annual_return is None:
        warnings.append(format_issue("DefaultAnnualReturn"))
        annual_return = DEFAULT_ANNUAL_RETURN_PERCENT

    summary = FinancialSummary.from_parts(monthly_income, expenses, annual_return)
    log.debug(
        "income=%.2f expenses=%d total=%.2f return=%.2f",
        summary.monthly_income, len(summary.expenses), summary.total_expenses,
        summary.annual_return_percent,
    )
    return summary, warnings


def _failed(errors: list[str]) -> ParseResult:
    return ParseResult(data=FinancialSummary.empty(), errors=errors, warnings=[])


def parse_financial_text(text: str, *, explicit_header_row: int | None = None) -> ParseResult:
    """
    Validate, standardize and extract in one pass.

    Fatal problems (empty input, broken quoting, no data rows) return the
    default summary with ``errors`` filled in; callers must check ``errors``
    (or ``result.ok``) before trusting ``result.data``.
    """
    validation = validate_and_clean(text)
    if not validation.ok:
        return _failed(list(validation.errors))

    try:
        table = standardize_text(validation.cleaned_text, explicit_header_row, delimiter=",")
    except csv.Error as exc:
        return _failed([format_issue("ParseFailure", str(exc))])

    if not table.rows:
        return _failed([format_issue("NoDataRows")])

    summary, warnings = extract_financial_data(table)
    return ParseResult(data=summary, errors=[], warnings=warnings)
