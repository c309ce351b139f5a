from __future__ import annotations

import os
import unittest
from pathlib import Path
from unittest import mock

from budget_doctor.contracts import (
    CONTRACT_VERSIONS,
    FIXED_TIME_ENV,
    build_contract,
    build_run_summary,
    utc_now_iso,
)


class ContractTests(unittest.TestCase):
    def test_every_command_has_a_versioned_contract(self):
        for name in ("budget_doctor.extract", "budget_doctor.validate", "budget_doctor.inspect"):
            with self.subTest(name=name):
                contract = build_contract(name)
                self.assertEqual(contract["name"], name)
                self.assertEqual(contract["version"], CONTRACT_VERSIONS[name])

    def test_unknown_contract_raises(self):
        with self.assertRaises(KeyError):
            build_contract("budget_doctor.heal")

    def test_run_summary_uses_fixed_stamp(self):
        with mock.patch.dict(os.environ, {FIXED_TIME_ENV: "2026-03-01T01:02:03Z"}):
            summary = build_run_summary(
                tool="budget-doctor",
                command="extract",
                input_path=Path("budget.csv"),
                output_path=Path("out.json"),
                metrics={"expenses_found": 2},
                warnings=["NoExpensesFound: no expenses found"],
            )
        self.assertEqual(summary["generated_at"], "2026-03-01T01:02:03Z")
        self.assertEqual(summary["input_file"], "budget.csv")
        self.assertEqual(summary["output_file"], "out.json")
        self.assertEqual(summary["warnings_count"], 1)
        self.assertEqual(summary["metrics"], {"expenses_found": 2})
        self.assertEqual(summary["status"], "ok")

    def test_run_summary_defaults(self):
        summary = build_run_summary(tool="budget-doctor", command="validate", input_path="-")
        self.assertIsNone(summary["output_file"])
        self.assertEqual(summary["warnings"], [])
        self.assertEqual(summary["metrics"], {})

    def test_utc_stamp_format(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            stamp = utc_now_iso()
        self.assertTrue(stamp.endswith("Z"))
        self.assertNotIn(".", stamp)


if __name__ == "__main__":
    unittest.main()
