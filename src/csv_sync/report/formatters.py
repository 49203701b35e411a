"""
Report formatting and export utilities.

Console output keeps the classic four count lines so existing wrappers that
scrape them keep working.
"""

import json
from typing import Any


def format_failures(report: dict[str, Any]) -> list[str]:
    """One line per failed write operation."""
    return [failure.get("message", "") for failure in report.get("failures", [])]


def format_report_console(report: dict[str, Any]) -> str:
    """
    Format report for console output

    Args:
        report: Report dictionary

    Returns:
        Formatted string for console display
    """
    lines = format_failures(report)

    if report.get("status") == "DRY_RUN":
        lines.append(
            f"Dry run: {report.get('upserts_planned', 0)} upsert(s), "
            f"{report.get('deletes_planned', 0)} delete(s) planned"
        )

    lines.append(f"Upserted {report['upserted']} document(s)")
    lines.append(f"Updated  {report['modified']} document(s)")
    lines.append(f"Matched {report['matched']} document(s)")
    lines.append(f"Deleted {report['deleted']} document(s)")
    lines.append("")

    return "\n".join(lines)


def export_report_json(report: dict[str, Any], output_path: str) -> None:
    """
    Export report to JSON file

    Args:
        report: Report dictionary
        output_path: Path to output file
    """
    with open(output_path, 'w') as f:
        json.dump(report, f, indent=2)


def load_report(input_path: str) -> dict[str, Any]:
    """Load a report previously written by export_report_json."""
    with open(input_path) as f:
        return json.load(f)
