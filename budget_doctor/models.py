"""Typed records shared by the budget-doctor pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from budget_doctor.issues import DEFAULT_ANNUAL_RETURN_PERCENT

Grid = list[list[str]]
StandardizedRow = dict[str, str]


@dataclass(frozen=True)
class Expense:
    category: str
    amount: float
    description: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"category": self.category, "amount": self.amount}
        if self.description is not None:
            payload["description"] = self.description
        return payload


@dataclass(frozen=True)
class FinancialSummary:
    """
    Flat monthly summary consumed by dashboards and reports.

    Build instances with ``from_parts`` so the derived totals always agree
    with the expense list.
    """

    monthly_income: float
    expenses: tuple[Expense, ...]
    total_expenses: float
    savings: float
    savings_percentage: float
    annual_return_percent: float

    @classmethod
    def from_parts(
        cls,
        monthly_income: float,
        expenses: list[Expense] | tuple[Expense, ...],
        annual_return_percent: float = DEFAULT_ANNUAL_RETURN_PERCENT,
    ) -> "FinancialSummary":
        expenses = tuple(expenses)
        total_expenses = sum(expense.amount for expense in expenses)
        savings = monthly_income - total_expenses
        savings_percentage = (savings / monthly_income) * 100 if monthly_income > 0 else 0.0
        return cls(
            monthly_income=monthly_income,
            expenses=expenses,
            total_expenses=total_expenses,
            savings=savings,
            savings_percentage=savings_percentage,
            annual_return_percent=annual_return_percent,
        )

    @classmethod
    def empty(cls) -> "FinancialSummary":
        return cls.from_parts(0.0, ())

    def to_dict(self) -> dict[str, Any]:
        return {
            "monthly_income": self.monthly_income,
            "expenses": [expense.to_dict() for expense in self.expenses],
            "total_expenses": self.total_expenses,
            "savings": self.savings,
            "savings_percentage": self.savings_percentage,
            "annual_return_percent": self.annual_return_percent,
        }


@dataclass
class ParseResult:
    data: FinancialSummary
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "data": self.data.to_dict(),
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }


@dataclass
class ValidationResult:
    ok: bool
    cleaned_text: str
    errors: list[str]


@dataclass
class StandardizedTable:
    headers: tuple[str, ...]
    rows: list[StandardizedRow]
    grid: Grid
    header_row_index: int

    def to_frame(self):
        """Return the standardized rows as a string-typed pandas DataFrame."""
        import pandas as pd

        return pd.DataFrame(self.rows, columns=list(self.headers), dtype=str)
