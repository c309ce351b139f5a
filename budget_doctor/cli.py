from __future__ import annotations

import argparse
import csv
import json
import sys
from pathlib import Path
from typing import Any

from budget_doctor import __version__ as TOOL_VERSION
from budget_doctor.contracts import build_contract, build_run_summary
from budget_doctor.extractor import parse_financial_text
from budget_doctor.loader import load_text
from budget_doctor.logging_setup import configure_logging
from budget_doctor.models import ParseResult, StandardizedTable
from budget_doctor.patterns import classify_cell
from budget_doctor.reader import validate_and_clean
from budget_doctor.standardize import standardize_text

TOOL_NAME = "budget-doctor"
STDIN_MARKER = "-"
DEFAULT_PREVIEW_ROWS = 10

EXIT_SUCCESS = 0
EXIT_COMMAND_ERROR = 1
EXIT_PARSE_FAILED = 2
EXIT_EXTRACT_WARNINGS = 3
EXIT_VALIDATE_FAILED = 5


class CliError(Exception):
    def __init__(self, message: str, code: int = EXIT_COMMAND_ERROR) -> None:
        super().__init__(message)
        self.code = code


class BudgetDoctorArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:
        raise CliError(message, EXIT_COMMAND_ERROR)


def eprint(message: str) -> None:
    print(message, file=sys.stderr)


def emit_human(message: str, *, quiet: bool = False) -> None:
    if not quiet:
        eprint(message)


def json_dumps(payload: Any) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False, sort_keys=True)


def write_text(path: Path, payload: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(payload, encoding="utf-8")


def safe_output_path(raw: str) -> Path:
    path = Path(raw)
    if path.exists():
        raise CliError(f"Refusing to overwrite existing output: {path}", EXIT_COMMAND_ERROR)
    return path


def classify_exception(exc: Exception) -> int:
    if isinstance(exc, CliError):
        return exc.code
    if isinstance(exc, (ImportError, UnicodeDecodeError, csv.Error)):
        return EXIT_PARSE_FAILED
    if isinstance(exc, FileNotFoundError):
        return EXIT_COMMAND_ERROR
    if isinstance(exc, ValueError):
        return EXIT_PARSE_FAILED
    return EXIT_COMMAND_ERROR


def read_input(raw_path: str, sheet_name: str | None) -> tuple[str, list[str]]:
    """Return (text, loader warnings) for a file path or ``-`` for stdin."""
    if raw_path == STDIN_MARKER:
        if sheet_name:
            raise CliError("--sheet cannot be used when reading from stdin.", EXIT_COMMAND_ERROR)
        return sys.stdin.read(), []
    loaded = load_text(raw_path, sheet_name=sheet_name)
    return loaded["text"], list(loaded["warnings"])


def log_level_for(args: argparse.Namespace) -> str | None:
    if getattr(args, "verbose", False):
        return "DEBUG"
    if getattr(args, "quiet", False):
        return "ERROR"
    return None


# ══════════════════════════════════════════════════════════════════════════════
# RENDERING
# ══════════════════════════════════════════════════════════════════════════════

def _money(value: float) -> str:
    return f"{value:,.2f}"


def render_extract_text(source: str, result: ParseResult, load_warnings: list[str]) -> str:
    data = result.data
    lines = [
        f"{TOOL_NAME} extract",
        f"Input: {source}",
    ]
    if result.errors:
        lines.append("Errors:")
        lines.extend(f"- {error}" for error in result.errors)
        return "\n".join(lines) + "\n"

    lines.append(f"Monthly income: {_money(data.monthly_income)}")
    if data.expenses:
        lines.append("Expenses:")
        lines.extend(f"- {expense.category}: {_money(expense.amount)}" for expense in data.expenses)
    lines.extend(
        [
            f"Total expenses: {_money(data.total_expenses)}",
            f"Savings: {_money(data.savings)} ({data.savings_percentage:.2f}%)",
            f"Annual return: {data.annual_return_percent:g}%",
        ]
    )
    warnings = load_warnings + result.warnings
    if warnings:
        lines.append("Warnings:")
        lines.extend(f"- {warning}" for warning in warnings)
    return "\n".join(lines) + "\n"


def render_validate_text(payload: dict[str, Any]) -> str:
    lines = [
        f"{TOOL_NAME} validate",
        f"Input: {payload['input']}",
        f"Valid: {payload['valid']}",
        f"Errors: {payload['error_count']}",
    ]
    lines.extend(f"- {error}" for error in payload["errors"])
    return "\n".join(lines) + "\n"


def render_inspect_text(source: str, table: StandardizedTable, preview_rows: int) -> str:
    lines = [
        f"{TOOL_NAME} inspect",
        f"Input: {source}",
        f"Header row: {table.header_row_index + 1}",
        f"Headers: {', '.join(table.headers)}",
        f"Data rows: {len(table.rows)}",
    ]
    if table.rows:
        lines.append(table.to_frame().head(preview_rows).to_string(index=False))
    return "\n".join(lines) + "\n"


def cell_roles(table: StandardizedTable, preview_rows: int) -> list[dict[str, list[str]]]:
    return [
        {header: list(classify_cell(value)) for header, value in row.items() if value}
        for row in table.rows[:preview_rows]
    ]


# ══════════════════════════════════════════════════════════════════════════════
# COMMANDS
# ══════════════════════════════════════════════════════════════════════════════

def build_parser() -> argparse.ArgumentParser:
    parser = BudgetDoctorArgumentParser(
        prog=TOOL_NAME,
        description="Extract a monthly financial summary from messy budget spreadsheets.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    extract = subparsers.add_parser("extract", help="Extract income, expenses and annual return.")
    extract.add_argument("input", help="Input file path, or - for stdin")
    extract.add_argument("--output", help="Write the JSON payload to this path")
    extract.add_argument("--json", action="store_true", help="Write machine JSON to stdout")
    extract.add_argument("--header-row", dest="header_row", type=int, help="1-based header row; skips detection")
    extract.add_argument("--sheet", dest="sheet_name", help="Workbook sheet name")
    extract.add_argument("--fail-on-warnings", action="store_true", help="Return exit code 3 when warnings were emitted")
    extract.add_argument("-q", "--quiet", action="store_true", help="Minimal human logs")
    extract.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    validate = subparsers.add_parser("validate", help="Check that the input is parseable tabular text.")
    validate.add_argument("input", help="Input file path, or - for stdin")
    validate.add_argument("--write-clean", dest="write_clean", help="Write the re-serialized CSV to this path")
    validate.add_argument("--sheet", dest="sheet_name", help="Workbook sheet name")
    validate.add_argument("--json", action="store_true", help="Write machine JSON to stdout")
    validate.add_argument("-q", "--quiet", action="store_true", help="Minimal human logs")
    validate.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    inspect = subparsers.add_parser("inspect", help="Show the detected header row and standardized rows.")
    inspect.add_argument("input", help="Input file path, or - for stdin")
    inspect.add_argument("--rows", type=int, default=DEFAULT_PREVIEW_ROWS, help="Number of rows to preview")
    inspect.add_argument("--header-row", dest="header_row", type=int, help="1-based header row; skips detection")
    inspect.add_argument("--sheet", dest="sheet_name", help="Workbook sheet name")
    inspect.add_argument("--json", action="store_true", help="Write machine JSON to stdout")
    inspect.add_argument("-q", "--quiet", action="store_true", help="Minimal human logs")
    inspect.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers.add_parser("version", help="Print version")
    return parser


def run_extract(args: argparse.Namespace) -> int:
    try:
        output_path = safe_output_path(args.output) if args.output else None
        text, load_warnings = read_input(args.input, args.sheet_name)
        result = parse_financial_text(text, explicit_header_row=args.header_row)
        payload = {
            "tool": TOOL_NAME,
            "tool_version": TOOL_VERSION,
            "contract": build_contract("budget_doctor.extract"),
            "schema_version": build_contract("budget_doctor.extract")["version"],
            "input": args.input,
            "result": result.to_dict(),
            "run_summary": build_run_summary(
                tool=TOOL_NAME,
                command="extract",
                input_path=args.input,
                status="ok" if result.ok else "failed",
                output_path=output_path,
                metrics={
                    "expenses_found": len(result.data.expenses),
                    "errors": len(result.errors),
                },
                warnings=load_warnings + result.warnings,
            ),
        }
        if output_path is not None:
            write_text(output_path, json_dumps(payload))
            emit_human(f"Summary written: {output_path}", quiet=args.quiet)
        if args.json:
            print(json_dumps(payload))
        else:
            emit_human(render_extract_text(args.input, result, load_warnings).rstrip(), quiet=args.quiet)

        if not result.ok:
            return EXIT_PARSE_FAILED
        if args.fail_on_warnings and result.warnings:
            return EXIT_EXTRACT_WARNINGS
        return EXIT_SUCCESS
    except Exception as exc:
        eprint(str(exc))
        return classify_exception(exc)


def run_validate(args: argparse.Namespace) -> int:
    try:
        clean_path = safe_output_path(args.write_clean) if args.write_clean else None
        text, _ = read_input(args.input, args.sheet_name)
        validation = validate_and_clean(text)
        payload = {
            "tool": TOOL_NAME,
            "command": "validate",
            "version": TOOL_VERSION,
            "contract": build_contract("budget_doctor.validate"),
            "input": args.input,
            "valid": validation.ok,
            "errors": list(validation.errors),
            "error_count": len(validation.errors),
        }
        if clean_path is not None and validation.ok:
            write_text(clean_path, validation.cleaned_text)
            emit_human(f"Cleaned CSV written: {clean_path}", quiet=args.quiet)
        if args.json:
            print(json_dumps(payload))
        else:
            emit_human(render_validate_text(payload).rstrip(), quiet=args.quiet)
        return EXIT_SUCCESS if validation.ok else EXIT_VALIDATE_FAILED
    except Exception as exc:
        eprint(str(exc))
        return classify_exception(exc)


def run_inspect(args: argparse.Namespace) -> int:
    try:
        text, _ = read_input(args.input, args.sheet_name)
        validation = validate_and_clean(text)
        if not validation.ok:
            for error in validation.errors:
                eprint(error)
            return EXIT_PARSE_FAILED
        table = standardize_text(validation.cleaned_text, args.header_row, delimiter=",")
        preview_rows = max(0, args.rows)
        if args.json:
            payload = {
                "tool": TOOL_NAME,
                "contract": build_contract("budget_doctor.inspect"),
                "input": args.input,
                "header_row": table.header_row_index + 1,
                "headers": list(table.headers),
                "data_rows": len(table.rows),
                "rows": table.rows[:preview_rows],
                "cell_roles": cell_roles(table, preview_rows),
            }
            print(json_dumps(payload))
        else:
            emit_human(render_inspect_text(args.input, table, preview_rows).rstrip(), quiet=args.quiet)
        return EXIT_SUCCESS
    except Exception as exc:
        eprint(str(exc))
        return classify_exception(exc)


def run_version() -> int:
    print(TOOL_VERSION)
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    try:
        parser = build_parser()
        args = parser.parse_args(argv)
        configure_logging(log_level_for(args))
        if args.command == "extract":
            return run_extract(args)
        if args.command == "validate":
            return run_validate(args)
        if args.command == "inspect":
            return run_inspect(args)
        if args.command == "version":
            return run_version()
        raise CliError(f"Unknown command: {args.command}", EXIT_COMMAND_ERROR)
    except CliError as exc:
        eprint(str(exc))
        return exc.code


if __name__ == "__main__":
    raise SystemExit(main())
