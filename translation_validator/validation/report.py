"""
Rendering of validation results for curators.

Provides a plain text rendition of each result and JSON-compatible
dictionaries for machine consumption.
"""

from typing import Any, Dict, List

from ..models.validation import ValidationResult, Violation
from .validator import ValidationReport


def violation_to_dict(violation: Violation) -> Dict[str, Any]:
    return {
        "kind": violation.kind.value,
        "message": violation.message,
        "line": violation.line,
        "column": violation.column,
        "value": violation.value,
        "context": violation.context,
    }


def result_to_dict(result: ValidationResult) -> Dict[str, Any]:
    """Convert a ValidationResult into a JSON-compatible dictionary."""
    metadata = None
    if result.metadata is not None:
        metadata = result.metadata.model_dump(mode="json")
        metadata["chromosome_name"] = result.metadata.chromosome_name

    return {
        "table_id": result.table_id,
        "passed": result.passed,
        "violations": [violation_to_dict(v) for v in result.violations],
        "warnings": list(result.warnings),
        "metadata": metadata,
        "populations": [p.name for p in result.populations],
    }


def report_to_dict(report: ValidationReport) -> Dict[str, Any]:
    """Convert a ValidationReport into a JSON-compatible dictionary."""
    return {
        "total": report.total,
        "passed": report.passed_count,
        "failed": report.failed_count,
        "success_rate": report.success_rate,
        "duration_seconds": report.duration_seconds,
        "results": [result_to_dict(r) for r in report.results],
    }


def format_result_text(result: ValidationResult) -> List[str]:
    """
    Render one result as report lines.

    The first line carries the table and its status; each violation follows
    on its own indented line, in the order the checks found them.
    """
    status = "PASS" if result.passed else "FAIL"
    lines = [f"{status} {result.table_id}"]

    for violation in result.violations:
        location = violation.location
        prefix = f"[{violation.kind.value}]"
        if location:
            prefix += f" {location}:"
        lines.append(f"  {prefix} {violation.message}")

    for warning in result.warnings:
        lines.append(f"  warning: {warning}")

    return lines


def format_report_summary(report: ValidationReport) -> List[str]:
    return [
        f"Tables checked: {report.total}",
        f"Passed: {report.passed_count}",
        f"Failed: {report.failed_count}",
        f"Success rate: {report.success_rate:.1f}%",
    ]
