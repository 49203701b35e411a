"""
CSV source reading.

Loads the whole source into memory as an ordered list of rows. The source
is either a local file path or an http(s) URL, such as a spreadsheet
published as CSV.
"""

import csv
import io
import logging
from urllib.parse import urlparse

import requests
from opentelemetry import trace

from utils.tracing import add_span_attributes, trace_operation

logger = logging.getLogger(__name__)

DEFAULT_HTTP_TIMEOUT = 30


def is_url(location: str) -> bool:
    return urlparse(location).scheme in ("http", "https")


def _fetch_text(location: str, encoding: str, timeout: float) -> str:
    with trace_operation(
        "fetch_source",
        kind=trace.SpanKind.CLIENT,
        **{"http.method": "GET", "http.url": location, "component": "http"},
    ):
        response = requests.get(location, timeout=timeout)
        response.raise_for_status()
        return response.content.decode(encoding)


def _read_file(location: str, encoding: str) -> str:
    with open(location, encoding=encoding, newline="") as f:
        return f.read()


def parse_csv(text: str, delimiter: str = ",") -> tuple[list[str], list[list[str]]]:
    """
    Split CSV text into its header and data rows.

    Raises:
        ValueError: If the text holds no header row
    """
    rows = list(csv.reader(io.StringIO(text, newline=""), delimiter=delimiter))
    if not rows:
        raise ValueError("Source is empty: no header row found")
    header = [name.strip() for name in rows[0]]
    return header, rows[1:]


def read_source(
    location: str,
    delimiter: str = ",",
    encoding: str = "utf-8-sig",
    timeout: float = DEFAULT_HTTP_TIMEOUT,
) -> tuple[list[str], list[list[str]]]:
    """
    Read a CSV source from a path or URL.

    Args:
        location: File path or http(s) URL
        delimiter: Field delimiter
        encoding: Text encoding (utf-8-sig drops a leading BOM)
        timeout: HTTP timeout in seconds for URL sources

    Returns:
        Tuple of (header, rows)
    """
    with trace_operation("read_source", source=location):
        if is_url(location):
            text = _fetch_text(location, encoding, timeout)
        else:
            text = _read_file(location, encoding)

        header, rows = parse_csv(text, delimiter)
        add_span_attributes(rows=len(rows), fields=len(header))

    logger.info(f"Read {len(rows)} row(s) with {len(header)} field(s) from {location}")
    return header, rows
