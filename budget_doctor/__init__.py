"""Turn messy budget spreadsheet exports into a flat monthly financial summary."""

from budget_doctor.extractor import extract_financial_data, parse_financial_text
from budget_doctor.models import Expense, FinancialSummary, ParseResult, StandardizedTable
from budget_doctor.reader import validate_and_clean
from budget_doctor.standardize import standardize_text

__version__ = "0.1.0"

__all__ = [
    "Expense",
    "FinancialSummary",
    "ParseResult",
    "StandardizedTable",
    "extract_financial_data",
    "parse_financial_text",
    "standardize_text",
    "validate_and_clean",
]
