"""
Sync report generation and formatting.

Builds a report from a sync result and renders it for the console or as
JSON.
"""

from .formatters import export_report_json, format_report_console, load_report
from .generator import generate_report

__all__ = [
    'generate_report',
    'export_report_json',
    'format_report_console',
    'load_report',
]
