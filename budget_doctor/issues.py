"""
Shared budget-doctor diagnostic taxonomy.

Every error or warning string handed back to callers is built here so the
extractor and the CLI agree on codes, severities, and wording.
"""

from __future__ import annotations

from types import MappingProxyType

DEFAULT_ANNUAL_RETURN_PERCENT = 7.0

ISSUE_DEFINITIONS = MappingProxyType({
    "EmptyInput":          {"severity": "error",   "message": "input text is empty"},
    "MalformedQuotes":     {"severity": "error",   "message": "malformed quoted field"},
    "NoDataRows":          {"severity": "error",   "message": "no data rows found after the header row"},
    "ParseFailure":        {"severity": "error",   "message": "could not read tabular data"},
    "IncomeNotFound":      {"severity": "warning", "message": "no monthly income found"},
    "NoExpensesFound":     {"severity": "warning", "message": "no expenses found"},
    "DefaultAnnualReturn": {
        "severity": "warning",
        "message": (
            f"using default annual return of {DEFAULT_ANNUAL_RETURN_PERCENT:g}% "
            "(no return rate found)"
        ),
    },
})


def format_issue(code: str, detail: str | None = None) -> str:
    message = ISSUE_DEFINITIONS[code]["message"]
    if detail:
        message = f"{message} ({detail})"
    return f"{code}: {message}"


def issue_code(issue: str) -> str:
    """Return the code prefix of a diagnostic string, or "" when it has none."""
    code, sep, _ = issue.partition(":")
    if not sep or code not in ISSUE_DEFINITIONS:
        return ""
    return code


def severity_of(issue: str) -> str:
    code = issue_code(issue)
    if not code:
        return "error"
    return ISSUE_DEFINITIONS[code]["severity"]
