"""
Sync job configuration.

All settings of a run live in one SyncConfig object that is handed to the
job explicitly. The CLI builds it from flags, environment variables and
(optionally) Vault; library users construct it directly.
"""

from dataclasses import asdict, dataclass
from typing import Any

DEFAULT_CONNECTION_STRING = "mongodb://localhost:27017/?readPreference=primary&ssl=false"
DEFAULT_SOURCE_LOCATION = "library_locations.csv"
DEFAULT_DATABASE = "mydatabase"
DEFAULT_COLLECTION = "mycollection"

_TRUE_VALUES = ("true", "1", "yes", "on")
_FALSE_VALUES = ("false", "0", "no", "off")


def parse_bool(value: str | bool) -> bool:
    """
    Parse a boolean flag from a string.

    Raises:
        ValueError: If the value is not a recognized boolean
    """
    if isinstance(value, bool):
        return value
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean value: {value!r}")


@dataclass(frozen=True)
class SyncConfig:
    """Settings for one sync run."""

    store_connection_string: str = DEFAULT_CONNECTION_STRING
    source_location: str = DEFAULT_SOURCE_LOCATION
    database_name: str = DEFAULT_DATABASE
    collection_name: str = DEFAULT_COLLECTION
    # When off the collection only grows or updates, it never shrinks
    delete_mode: bool = True
    timeout_ms: int | None = None
    delimiter: str = ","
    encoding: str = "utf-8-sig"

    def __post_init__(self):
        for name in ("store_connection_string", "source_location", "database_name", "collection_name"):
            if not getattr(self, name):
                raise ValueError(f"{name} must be a non-empty string")
        if len(self.delimiter) != 1:
            raise ValueError("delimiter must be a single character")
        if self.timeout_ms is not None and self.timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")

    def to_dict(self) -> dict[str, Any]:
        """Serializable view of the config, without the connection string."""
        data = asdict(self)
        data.pop("store_connection_string")
        return data
