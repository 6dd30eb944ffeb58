from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from .check import CheckResult, Severity
from .laws import LawResult


def format_check(result: CheckResult) -> str:
    """Human-readable report for terminal output."""
    lines = []
    if result.is_well_formed:
        lines.append(f"{result.subject}: ✓ well-formed")
    else:
        lines.append(f"{result.subject}: × ill-formed ({len(result.errors)} errors)")

    for diag in result.diagnostics:
        where = f" at {diag.path}" if diag.path else ""
        tag = "ERROR" if diag.severity == Severity.ERROR else "WARNING"
        lines.append(f"    - [{diag.check}]{where}: {diag.message} ({tag})")

    if result.warnings:
        n = len(result.warnings)
        lines.append(f"  ⚠ {n} warning{'s' if n > 1 else ''}")
    return "\n".join(lines)


def check_json(result: CheckResult) -> dict[str, Any]:
    """Machine-readable report for pipeline integration."""
    return {
        "subject": result.subject,
        "well_formed": result.is_well_formed,
        "error_count": len(result.errors),
        "warning_count": len(result.warnings),
        "diagnostics": [
            {
                "check": d.check,
                "severity": d.severity.value,
                "message": d.message,
                "path": d.path,
            }
            for d in result.diagnostics
        ],
    }


def format_laws(results: Sequence[LawResult]) -> str:
    lines = [f"  {'Type':<10} {'Law':<26} Result"]
    lines.append(f"  {'─' * 10} {'─' * 26} {'─' * 6}")
    for r in results:
        mark = "ok" if r.holds else "FAIL"
        lines.append(f"  {r.type_name:<10} {r.law:<26} {mark}")
        if not r.holds:
            lines.append(f"      {r.detail}")
    failed = sum(1 for r in results if not r.holds)
    lines.append("")
    lines.append(f"  {len(results) - failed}/{len(results)} laws hold")
    return "\n".join(lines)
