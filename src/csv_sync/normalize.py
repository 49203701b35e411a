"""
Row normalization for CSV to MongoDB sync.

Turns one raw CSV record into either a normalized row, ready to be written to
the collection, or a skipped row carrying the reason it was discarded.

The matching key of a row is the (city, address) pair. Both parts are
lowercased and whitespace-collapsed so rows that only differ in case or
spacing address the same document.

The serialized ``city#address`` form is split on the first ``#``. Addresses
may contain ``#``, but a row whose city contains it is skipped because its
key could not be told apart from a different (city, address) pair.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

KEY_SEPARATOR = "#"
KEY_FIELDS = ("city", "address")
REQUIRED_FIELDS = ("address", "city", "name")

# Value used for every field in a $unset document
UNSET_MARKER = ""


class SkipReason:
    """Constants for skipped row reasons."""

    LENGTH_MISMATCH = "LENGTH_MISMATCH"
    MISSING_ADDRESS = "MISSING_ADDRESS"
    MISSING_CITY = "MISSING_CITY"
    MISSING_NAME = "MISSING_NAME"
    SEPARATOR_IN_CITY = "SEPARATOR_IN_CITY"


_MISSING_FIELD_REASONS = {
    "address": SkipReason.MISSING_ADDRESS,
    "city": SkipReason.MISSING_CITY,
    "name": SkipReason.MISSING_NAME,
}


@dataclass(frozen=True)
class MatchingKey:
    """Normalized (city, address) pair identifying one document."""

    city: str
    address: str

    def serialize(self) -> str:
        """Return the ``city#address`` form used for set comparison."""
        return f"{self.city}{KEY_SEPARATOR}{self.address}"

    def to_filter(self) -> dict[str, str]:
        """Return the equality filter addressing the document."""
        return {"city": self.city, "address": self.address}

    @classmethod
    def parse(cls, serialized: str) -> "MatchingKey":
        """
        Split a serialized key back into its parts.

        The split happens on the first separator only, addresses may
        contain '#' themselves (e.g. "main street #4").

        Raises:
            ValueError: If the separator is missing
        """
        if KEY_SEPARATOR not in serialized:
            raise ValueError(f"Invalid matching key: {serialized!r}")
        city, address = serialized.split(KEY_SEPARATOR, 1)
        return cls(city=city, address=address)


@dataclass
class NormalizedRow:
    """A source row accepted for syncing."""

    key: MatchingKey
    set_fields: dict[str, str]
    unset_fields: dict[str, str] = field(default_factory=dict)


@dataclass
class SkippedRow:
    """A source row that was discarded, with the reason why."""

    reason: str
    values: list[str]
    detail: str | None = None


def normalize_text(value: str) -> str:
    """
    Lowercase a key component and collapse its whitespace.

    Leading and trailing whitespace is removed and every inner run of
    whitespace becomes one ASCII space. Applying it twice gives the same
    result as applying it once.
    """
    return " ".join(value.split()).lower()


def _is_empty(value: Any) -> bool:
    return value is None or value == ""


def combine_row(header: list[str], values: list[str]) -> dict[str, str] | None:
    """
    Combine header and values positionally into a field mapping.

    Returns:
        The mapping, or None when the row and header lengths differ
    """
    if len(header) != len(values):
        return None
    return dict(zip(header, values))


def normalize_row(header: list[str], values: list[str]) -> NormalizedRow | SkippedRow:
    """
    Normalize one CSV record.

    Args:
        header: Ordered field names from the first CSV row
        values: Ordered cell values of this record

    Returns:
        NormalizedRow when the record is usable, otherwise SkippedRow
    """
    row = combine_row(header, values)
    if row is None:
        return SkippedRow(
            reason=SkipReason.LENGTH_MISMATCH,
            values=list(values),
            detail=f"expected {len(header)} fields, got {len(values)}",
        )

    for key_field in KEY_FIELDS:
        if not _is_empty(row.get(key_field)):
            row[key_field] = normalize_text(row[key_field])

    # Each required field gates the row on its own
    for field_name in REQUIRED_FIELDS:
        if _is_empty(row.get(field_name)):
            return SkippedRow(reason=_MISSING_FIELD_REASONS[field_name], values=list(values))

    # Serialized keys split on the first separator, so it may only appear in the address
    if KEY_SEPARATOR in row["city"]:
        return SkippedRow(
            reason=SkipReason.SEPARATOR_IN_CITY,
            values=list(values),
            detail=f"city contains {KEY_SEPARATOR!r}",
        )

    set_fields: dict[str, str] = {}
    unset_fields: dict[str, str] = {}
    for name, value in row.items():
        if _is_empty(value):
            unset_fields[name] = UNSET_MARKER
        else:
            set_fields[name] = value

    return NormalizedRow(
        key=MatchingKey(city=row["city"], address=row["address"]),
        set_fields=set_fields,
        unset_fields=unset_fields,
    )
