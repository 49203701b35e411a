"""
Pytest configuration and fixtures for sync tests.
Provides mock MongoDB collections and sample CSV data.
"""

import os
from pathlib import Path
from unittest.mock import MagicMock

import pytest


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "integration: mark test as integration test (needs MongoDB)")
    config.addinivalue_line("markers", "property: mark test as property-based test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Get project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture(autouse=True)
def set_test_env_vars(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep sync settings from the developer environment out of unit tests."""
    for key in (
        "MONGODB_DATABASE",
        "MONGODB_COLLECTION",
        "SYNC_SOURCE",
        "SYNC_DELETE_MODE",
        "SYNC_TIMEOUT_MS",
        "OTLP_ENDPOINT",
        "TRACE_CONSOLE",
        "LOG_LEVEL",
        "LOG_FILE",
        "LOG_JSON",
        "LOG_CONSOLE",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def header() -> list[str]:
    """Header of the sample location sheet."""
    return ["name", "address", "city", "phone", "opening_hours"]


@pytest.fixture
def sample_rows() -> list[list[str]]:
    """Sample location rows, including two that must be skipped."""
    return [
        ["Central Library", "Oude   Markt 1", "Enschede", "053-123", "9-17"],
        ["West Branch", "Parkweg 12", "  Hengelo ", "", "10-16"],
        ["", "Stationsplein 3", "Almelo", "0546-1", ""],
        ["No City", "Markt 2", "", "", ""],
    ]


@pytest.fixture
def mock_collection() -> MagicMock:
    """Mock pymongo collection with an empty store."""
    collection = MagicMock()
    collection.name = "locations"
    collection.aggregate.return_value = iter([])
    return collection


@pytest.fixture
def csv_file(tmp_path: Path, header: list[str], sample_rows: list[list[str]]) -> Path:
    """Write the sample sheet to a CSV file."""
    lines = [",".join(header)] + [",".join(row) for row in sample_rows]
    path = tmp_path / "locations.csv"
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path
