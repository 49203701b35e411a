"""
Change set accumulation.

Collects one upsert per valid source row plus the set of matching keys seen
in the source. Delete operations for orphaned documents are appended later by
the sync job, the change set itself never talks to MongoDB.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Iterable

from pymongo import DeleteOne, UpdateOne

from .normalize import MatchingKey, NormalizedRow, SkippedRow, normalize_row

logger = logging.getLogger(__name__)


@dataclass
class UpsertOperation:
    """Update-or-insert of one document keyed by its matching key."""

    filter: dict[str, str]
    set_fields: dict[str, str]
    unset_fields: dict[str, str] = field(default_factory=dict)

    def to_update(self) -> dict[str, Any]:
        """Build the MongoDB update document."""
        update: dict[str, Any] = {"$set": self.set_fields}
        if self.unset_fields:
            update["$unset"] = self.unset_fields
        return update

    def to_write_model(self) -> UpdateOne:
        return UpdateOne(self.filter, self.to_update(), upsert=True)


@dataclass
class DeleteOperation:
    """Removal of one orphaned document."""

    filter: dict[str, str]

    def to_write_model(self) -> DeleteOne:
        return DeleteOne(self.filter)


class ChangeSet:
    """Unordered collection of pending write operations for one run."""

    def __init__(self) -> None:
        self.upserts: list[UpsertOperation] = []
        self.deletes: list[DeleteOperation] = []
        self.skipped: list[SkippedRow] = []
        self.source_keys: set[str] = set()

    def add_row(self, row: NormalizedRow) -> UpsertOperation:
        """
        Record the upsert for a normalized row.

        Repeated keys are not deduplicated: each row becomes its own
        operation and the last one applied wins.
        """
        operation = UpsertOperation(
            filter=row.key.to_filter(),
            set_fields=dict(row.set_fields),
            unset_fields=dict(row.unset_fields),
        )
        self.upserts.append(operation)
        self.source_keys.add(row.key.serialize())
        return operation

    def add_skipped(self, skipped: SkippedRow) -> None:
        self.skipped.append(skipped)

    def add_delete(self, key: MatchingKey) -> DeleteOperation:
        operation = DeleteOperation(filter=key.to_filter())
        self.deletes.append(operation)
        return operation

    @property
    def operations(self) -> list[UpsertOperation | DeleteOperation]:
        return [*self.upserts, *self.deletes]

    def to_write_models(self) -> list[UpdateOne | DeleteOne]:
        """Convert all pending operations into pymongo bulk write models."""
        return [operation.to_write_model() for operation in self.operations]

    def skip_summary(self) -> dict[str, int]:
        """Count skipped rows per reason."""
        return dict(Counter(skipped.reason for skipped in self.skipped))

    def __len__(self) -> int:
        return len(self.upserts) + len(self.deletes)


def build_change_set(header: list[str], rows: Iterable[list[str]]) -> ChangeSet:
    """
    Normalize every source row and accumulate the resulting upserts.

    Args:
        header: Field names from the first CSV row
        rows: Remaining CSV records

    Returns:
        ChangeSet holding the upserts, skipped rows and the source key set
    """
    change_set = ChangeSet()

    for line_number, values in enumerate(rows, start=2):
        result = normalize_row(header, values)
        if isinstance(result, SkippedRow):
            logger.debug(f"Skipping source line {line_number}: {result.reason}")
            change_set.add_skipped(result)
            continue
        change_set.add_row(result)

    logger.info(
        f"Built change set: {len(change_set.upserts)} upserts, "
        f"{len(change_set.source_keys)} distinct keys, "
        f"{len(change_set.skipped)} rows skipped"
    )
    return change_set
