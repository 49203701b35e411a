"""
Unit tests for CSV source reading.

Tests parsing, local files and URL sources with requests mocked.
"""

from pathlib import Path
from unittest.mock import Mock, patch

import pytest
import requests

from csv_sync.source import is_url, parse_csv, read_source


class TestIsUrl:
    """Test URL detection."""

    @pytest.mark.parametrize("location", [
        "http://example.com/sheet.csv",
        "https://docs.google.com/spreadsheets/d/e/x/pub?output=csv",
    ])
    def test_urls(self, location):
        assert is_url(location) is True

    @pytest.mark.parametrize("location", [
        "library_locations.csv",
        "/data/locations.csv",
        "C:\\data\\locations.csv",
        "ftp://example.com/sheet.csv",
    ])
    def test_paths(self, location):
        assert is_url(location) is False


class TestParseCsv:
    """Test CSV text parsing."""

    def test_header_and_rows(self):
        header, rows = parse_csv("name,address,city\nA,Markt 1,Delft\n")

        assert header == ["name", "address", "city"]
        assert rows == [["A", "Markt 1", "Delft"]]

    def test_header_names_are_stripped(self):
        header, _ = parse_csv(" name , address,city \n")
        assert header == ["name", "address", "city"]

    def test_header_only(self):
        header, rows = parse_csv("name,address,city\n")

        assert header == ["name", "address", "city"]
        assert rows == []

    def test_empty_source_rejected(self):
        with pytest.raises(ValueError, match="no header row"):
            parse_csv("")

    def test_quoted_fields(self):
        _, rows = parse_csv('name,address,city\n"Library, Main","Markt ""1""",Delft\n')
        assert rows == [["Library, Main", 'Markt "1"', "Delft"]]

    def test_embedded_newline(self):
        _, rows = parse_csv('name,address,city\n"Two\nLines",Markt 1,Delft\n')
        assert rows == [["Two\nLines", "Markt 1", "Delft"]]

    def test_custom_delimiter(self):
        header, rows = parse_csv("name;address;city\nA;Markt 1;Delft\n", delimiter=";")

        assert header == ["name", "address", "city"]
        assert rows == [["A", "Markt 1", "Delft"]]

    def test_ragged_rows_preserved(self):
        _, rows = parse_csv("name,address,city\nA,Markt 1\n")
        assert rows == [["A", "Markt 1"]]


class TestReadSource:
    """Test reading from files and URLs."""

    def test_local_file(self, csv_file: Path, header, sample_rows):
        read_header, rows = read_source(str(csv_file))

        assert read_header == header
        assert rows == sample_rows

    def test_byte_order_mark_dropped(self, tmp_path: Path):
        path = tmp_path / "bom.csv"
        path.write_text("name,address,city\nA,Markt 1,Delft\n", encoding="utf-8-sig")

        header, _ = read_source(str(path))

        assert header[0] == "name"

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            read_source(str(tmp_path / "missing.csv"))

    @patch("csv_sync.source.requests.get")
    def test_url(self, mock_get):
        mock_response = Mock()
        mock_response.content = "name,address,city\nA,Markt 1,Delft\n".encode("utf-8")
        mock_get.return_value = mock_response

        header, rows = read_source("https://example.com/sheet.csv", timeout=5)

        mock_get.assert_called_once_with("https://example.com/sheet.csv", timeout=5)
        mock_response.raise_for_status.assert_called_once()
        assert header == ["name", "address", "city"]
        assert rows == [["A", "Markt 1", "Delft"]]

    @patch("csv_sync.source.requests.get")
    def test_url_http_error(self, mock_get):
        mock_response = Mock()
        mock_response.raise_for_status.side_effect = requests.HTTPError("404 Client Error")
        mock_get.return_value = mock_response

        with pytest.raises(requests.HTTPError):
            read_source("https://example.com/missing.csv")

    @patch("csv_sync.source.requests.get")
    def test_url_connection_error(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("unreachable")

        with pytest.raises(requests.ConnectionError):
            read_source("https://example.com/sheet.csv")
