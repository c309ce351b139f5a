"""
loader.py: file to text for the extraction engine

Supports: .csv .tsv .txt .xlsx .xlsm .xls .ods

Public API:
    result = load_text("path/to/budget.csv")
    text   = result["text"]

Result dict keys:
    text                delimited text (workbooks are serialized to CSV)
    detected_format     "csv", "xlsx", "ods", etc.
    detected_encoding   encoding name for text files; None for workbooks
    encoding_info       full dict: detected, confidence, is_utf8, suspicious_chars
    sheet_name          sheet used for workbooks; None otherwise
    sheet_names         all sheet names for workbooks; None otherwise
    warnings            list of warning strings
"""

from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from typing import Any, Optional

from budget_doctor.logging_setup import get_logger
from budget_doctor.reader import serialize_grid

log = get_logger("budget_doctor.loader")

# ── Format groups ──────────────────────────────────────────────────────────────
TEXT_FORMATS   = {".csv", ".tsv", ".txt"}
OPENPYXL_FORMATS = {".xlsx", ".xlsm"}
PANDAS_FORMATS = {".xls", ".ods"}
ALL_FORMATS    = TEXT_FORMATS | OPENPYXL_FORMATS | PANDAS_FORMATS

LARGE_FILE_HARD_LIMIT_BYTES = 50 * 1024 * 1024

UTF8_COMPATIBLE = {"utf8", "utf8sig", "ascii"}
ENCODING_SCAN_LINES = 100
MAX_REPORTED_BAD_LINES = 10


# ══════════════════════════════════════════════════════════════════════════════
# ENCODING DETECTION
# ══════════════════════════════════════════════════════════════════════════════

def _detect_encoding_info(raw: bytes) -> dict:
    """chardet's guess, plus up to ten lines that fail to decode as UTF-8."""
    import chardet

    guess = chardet.detect(raw)
    detected = guess.get("encoding") or "unknown"
    is_utf8 = detected.lower().replace("-", "").replace("_", "") in UTF8_COMPATIBLE

    bad_lines: list[str] = []
    if not is_utf8:
        for line_no, line in enumerate(raw.split(b"\n")[:ENCODING_SCAN_LINES], start=1):
            try:
                line.decode("utf-8")
            except UnicodeDecodeError as exc:
                bad_lines.append(f"line {line_no}: byte {line[exc.start:exc.end]!r} at offset {exc.start}")
                if len(bad_lines) == MAX_REPORTED_BAD_LINES:
                    break

    return {
        "detected": detected,
        "confidence": round(guess.get("confidence") or 0.0, 2),
        "is_utf8": is_utf8,
        "suspicious_chars": bad_lines,
    }


def decode_text_safely(raw: bytes, preferred_encoding: str) -> str:
    """
    Decode line by line so one stray Windows byte does not garble the file.

    Each line tries UTF-8, then the detected encoding, and finally latin-1,
    which accepts any byte. NUL bytes and a leading BOM are dropped.
    """
    encodings = [enc for enc in ("utf-8", preferred_encoding) if enc and enc != "unknown"]
    lines: list[str] = []
    for raw_line in raw.split(b"\n"):
        for enc in encodings:
            try:
                line = raw_line.decode(enc)
                break
            except (LookupError, UnicodeDecodeError):
                continue
        else:
            line = raw_line.decode("latin-1")
        lines.append(line.replace("\x00", ""))
    return "\n".join(lines).lstrip("\ufeff")


def _stringify_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        if value.time() == datetime.min.time():
            return value.date().isoformat()
        return value.isoformat(sep=" ")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _choose_sheet(all_sheets: list[str], sheet_name: Optional[str], warnings: list[str]) -> str:
    if sheet_name is not None:
        if sheet_name not in all_sheets:
            raise ValueError(f"Sheet '{sheet_name}' not found. Available: {all_sheets}")
        return sheet_name
    if not all_sheets:
        raise ValueError("Workbook has no sheets.")
    chosen = all_sheets[0]
    if len(all_sheets) > 1:
        warnings.append(
            f"Multiple sheets found ({len(all_sheets)} total); "
            f"used '{chosen}'. Ignored: {all_sheets[1:]}"
        )
    return chosen


# ══════════════════════════════════════════════════════════════════════════════
# FORMAT LOADERS
# ══════════════════════════════════════════════════════════════════════════════

def _load_delimited(path: Path, suffix: str) -> dict:
    raw      = path.read_bytes()
    enc_info = _detect_encoding_info(raw)
    enc      = enc_info["detected"] if enc_info["detected"] != "unknown" else "utf-8"
    text     = decode_text_safely(raw, enc)

    warnings: list[str] = []
    if enc_info["suspicious_chars"]:
        warnings.append(
            f"File decoded as {enc}; {len(enc_info['suspicious_chars'])} line(s) were not valid UTF-8"
        )

    return {
        "text":              text,
        "detected_format":   suffix.lstrip("."),
        "detected_encoding": enc,
        "encoding_info":     enc_info,
        "sheet_name":        None,
        "sheet_names":       None,
        "warnings":          warnings,
    }


def _load_openpyxl(path: Path, suffix: str, sheet_name: Optional[str]) -> dict:
    import openpyxl

    try:
        workbook = openpyxl.load_workbook(path, data_only=True, read_only=True)
    except Exception as exc:
        raise ValueError(f"Could not read workbook: {exc}") from exc

    warnings: list[str] = []
    try:
        all_sheets = list(workbook.sheetnames)
        chosen = _choose_sheet(all_sheets, sheet_name, warnings)
        grid = [
            [_stringify_cell(value) for value in values]
            for values in workbook[chosen].iter_rows(values_only=True)
        ]
    finally:
        workbook.close()

    return {
        "text":              serialize_grid(grid),
        "detected_format":   suffix.lstrip("."),
        "detected_encoding": None,
        "encoding_info":     None,
        "sheet_name":        chosen,
        "sheet_names":       all_sheets,
        "warnings":          warnings,
    }


def _load_pandas_workbook(path: Path, suffix: str, sheet_name: Optional[str]) -> dict:
    """Load .xls (xlrd) or .ods (odfpy) through pandas without a header row."""
    import pandas as pd

    if suffix == ".xls":
        engine, module, package = "xlrd", "xlrd", "xlrd"
    else:
        engine, module, package = "odf", "odf", "odfpy"
    try:
        __import__(module)
    except ImportError:
        raise ImportError(f"{suffix} files require {package}; run: pip install {package}")

    try:
        with pd.ExcelFile(path, engine=engine) as xf:
            all_sheets = [str(name) for name in xf.sheet_names]
    except Exception as exc:
        raise ValueError(f"Could not open {suffix} file: {exc}") from exc

    warnings: list[str] = []
    chosen = _choose_sheet(all_sheets, sheet_name, warnings)
    try:
        df = pd.read_excel(path, sheet_name=chosen, header=None, dtype=str, engine=engine)
    except Exception as exc:
        raise ValueError(f"Could not load sheet '{chosen}': {exc}") from exc

    grid = [
        ["" if pd.isna(value) else str(value).strip() for value in row]
        for row in df.itertuples(index=False, name=None)
    ]

    return {
        "text":              serialize_grid(grid),
        "detected_format":   suffix.lstrip("."),
        "detected_encoding": None,
        "encoding_info":     None,
        "sheet_name":        chosen,
        "sheet_names":       all_sheets,
        "warnings":          warnings,
    }


# ══════════════════════════════════════════════════════════════════════════════
# PUBLIC API
# ══════════════════════════════════════════════════════════════════════════════

def load_text(path: "str | Path", sheet_name: Optional[str] = None) -> dict:
    """
    Read any supported file into delimited text for ``parse_financial_text``.

    Raises:
        FileNotFoundError  if the file does not exist.
        ValueError         if the format is unsupported, too large or unreadable.
        ImportError        if a required optional dependency is missing.
    """
    path   = Path(path)
    suffix = path.suffix.lower()

    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    if suffix not in ALL_FORMATS:
        supported = ", ".join(sorted(ALL_FORMATS))
        raise ValueError(f"Unsupported format '{suffix}'. Supported: {supported}")

    size = path.stat().st_size
    if size > LARGE_FILE_HARD_LIMIT_BYTES:
        raise ValueError(
            f"File is {size} bytes; too large for safe in-memory processing "
            f"(limit {LARGE_FILE_HARD_LIMIT_BYTES} bytes)"
        )

    log.debug("loading %s as %s", path, suffix)
    if suffix in TEXT_FORMATS:
        return _load_delimited(path, suffix)
    if suffix in OPENPYXL_FORMATS:
        return _load_openpyxl(path, suffix, sheet_name)
    return _load_pandas_workbook(path, suffix, sheet_name)
