import logging
import os
import unittest
from unittest import mock

from budget_doctor.issues import format_issue, issue_code, severity_of
from budget_doctor.logging_setup import LOG_LEVEL_ENV, _parse_level, get_logger
from budget_doctor.models import Expense, FinancialSummary, ParseResult


class FinancialSummaryTests(unittest.TestCase):
    def test_from_parts_derives_totals(self):
        summary = FinancialSummary.from_parts(
            1000.0,
            [Expense("Rent", 400.0), Expense("gas", 100.0, "Gas")],
            annual_return_percent=5.0,
        )
        self.assertEqual(summary.total_expenses, 500.0)
        self.assertEqual(summary.savings, 500.0)
        self.assertEqual(summary.savings_percentage, 50.0)
        self.assertEqual(summary.annual_return_percent, 5.0)

    def test_overspending_gives_negative_savings(self):
        summary = FinancialSummary.from_parts(100.0, [Expense("Rent", 150.0)])
        self.assertEqual(summary.savings, -50.0)
        self.assertEqual(summary.savings_percentage, -50.0)

    def test_empty_summary(self):
        summary = FinancialSummary.empty()
        self.assertEqual(summary.monthly_income, 0.0)
        self.assertEqual(summary.expenses, ())
        self.assertEqual(summary.savings_percentage, 0.0)
        self.assertEqual(summary.annual_return_percent, 7.0)

    def test_to_dict_omits_missing_description(self):
        result = ParseResult(
            data=FinancialSummary.from_parts(10.0, [Expense("Rent", 1.0), Expense("gas", 2.0, "Gas")]),
        )
        payload = result.to_dict()
        self.assertEqual(set(payload), {"data", "errors", "warnings"})
        self.assertEqual(payload["data"]["expenses"], [
            {"category": "Rent", "amount": 1.0},
            {"category": "gas", "amount": 2.0, "description": "Gas"},
        ])
        self.assertTrue(result.ok)


class IssueTests(unittest.TestCase):
    def test_format_and_classify(self):
        issue = format_issue("MalformedQuotes", "line 3: unexpected end of data")
        self.assertEqual(issue, "MalformedQuotes: malformed quoted field (line 3: unexpected end of data)")
        self.assertEqual(issue_code(issue), "MalformedQuotes")
        self.assertEqual(severity_of(issue), "error")
        self.assertEqual(severity_of(format_issue("NoExpensesFound")), "warning")

    def test_default_return_warning_mentions_the_rate(self):
        self.assertIn("7%", format_issue("DefaultAnnualReturn"))

    def test_unknown_prefix(self):
        self.assertEqual(issue_code("Whatever: text"), "")
        self.assertEqual(issue_code("no prefix"), "")

    def test_unknown_code_raises(self):
        with self.assertRaises(KeyError):
            format_issue("NotACode")


class LoggingSetupTests(unittest.TestCase):
    def test_parse_level_accepts_names_and_numbers(self):
        self.assertEqual(_parse_level("debug"), logging.DEBUG)
        self.assertEqual(_parse_level("15"), 15)
        self.assertEqual(_parse_level(logging.ERROR), logging.ERROR)
        self.assertEqual(_parse_level("not-a-level"), logging.WARNING)

    def test_parse_level_falls_back_to_environment(self):
        with mock.patch.dict(os.environ, {LOG_LEVEL_ENV: "INFO"}):
            self.assertEqual(_parse_level(None), logging.INFO)
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertEqual(_parse_level(None), logging.WARNING)

    def test_get_logger_lives_under_package_root(self):
        logger = get_logger("budget_doctor.tests")
        self.assertEqual(logger.name, "budget_doctor.tests")
        self.assertTrue(logging.getLogger("budget_doctor").handlers)


if __name__ == "__main__":
    unittest.main()
