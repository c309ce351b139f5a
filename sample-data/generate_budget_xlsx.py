#!/usr/bin/env python3
"""
Generates sample-data/monthly_budget.xlsx, a workbook twin of monthly_budget.csv
for exercising the workbook loader.

Run from the repo root:
    python sample-data/generate_budget_xlsx.py

Problems baked in:
  Sheet "Budget"
    - Garbled export headers ("Booba Money", "Booboo Moeny", ...)
    - Income label on one row, its value on the next
    - Numeric cells stored as floats, a percentage stored as text
    - Empty spacer rows
    - A misspelled category ("Resturants")
  Sheet "Notes"
    - Free text that should be ignored unless selected with --sheet
"""

from pathlib import Path
import openpyxl

OUTPUT = Path(__file__).parent / "monthly_budget.xlsx"

wb = openpyxl.Workbook()

# ── Sheet 1: Budget ──────────────────────────────────────────────────────────
ws = wb.active
ws.title = "Budget"

ws.append(["Date", "Booba Money", "Booboo Moeny", "Baobooboo Money"])

rows = [
    ["2025-01-01", "Monthly Net Income", None,    None],
    [None,         13216.67,             None,    None],
    [None,         None,                 None,    None],     # spacer
    [None,         "Rent",               3215.00, 3215.00],
    [None,         "Utilities",          180.00,  3395.00],
    [None,         "Groceries",          650.00,  4045.00],
    [None,         "Resturants",         420.00,  4465.00],
    [None,         "Gas/Auto",           210.00,  4675.00],
    [None,         None,                 None,    None],     # spacer
    [None,         "Annual Return",      "7%",    None],
]

for row in rows:
    ws.append(row)

# ── Sheet 2: Notes ───────────────────────────────────────────────────────────
ws_notes = wb.create_sheet("Notes")
ws_notes.append(["Reminder: budget reviewed quarterly"])

wb.save(OUTPUT)
print(f"Created: {OUTPUT}")
