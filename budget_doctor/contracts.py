"""Shared versioned contracts for budget-doctor JSON outputs."""

from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

CONTRACT_VERSIONS = {
    "budget_doctor.extract": "1.0.0",
    "budget_doctor.validate": "1.0.0",
    "budget_doctor.inspect": "1.0.0",
}

FIXED_TIME_ENV = "BUDGET_DOCTOR_OUTPUT_STAMP"


def utc_now_iso() -> str:
    override = os.environ.get(FIXED_TIME_ENV)
    if override:
        return override
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def build_contract(name: str) -> dict[str, str]:
    version = CONTRACT_VERSIONS[name]
    return {"name": name, "version": version}


def build_run_summary(
    *,
    tool: str,
    command: str,
    input_path: Path | str,
    status: str = "ok",
    output_path: Path | None = None,
    metrics: dict[str, Any] | None = None,
    warnings: list[str] | None = None,
) -> dict[str, Any]:
    return {
        "tool": tool,
        "command": command,
        "status": status,
        "generated_at": utc_now_iso(),
        "input_file": str(input_path),
        "output_file": str(output_path) if output_path else None,
        "warnings_count": len(warnings or []),
        "warnings": list(warnings or []),
        "metrics": metrics or {},
    }
