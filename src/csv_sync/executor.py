"""
Unordered batch execution against MongoDB.

All upserts and deletes of a run go to the server as one unordered bulk
write. The server keeps applying the remaining operations when one of them
fails (typically a duplicate key under the collection collation), and the
failures are returned next to the counts instead of aborting the run.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from opentelemetry import trace
from pymongo.errors import BulkWriteError

from utils.tracing import add_span_attributes, trace_operation

logger = logging.getLogger(__name__)


@dataclass
class WriteFailure:
    """A single operation rejected by the server."""

    index: int | None
    code: int | None
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"index": self.index, "code": self.code, "message": self.message}


@dataclass
class BatchResult:
    """Aggregate outcome of one bulk write."""

    upserted: int = 0
    matched: int = 0
    modified: int = 0
    deleted: int = 0
    failures: list[WriteFailure] = field(default_factory=list)

    @property
    def has_failures(self) -> bool:
        return bool(self.failures)

    def to_dict(self) -> dict[str, Any]:
        return {
            "upserted": self.upserted,
            "matched": self.matched,
            "modified": self.modified,
            "deleted": self.deleted,
            "failures": [failure.to_dict() for failure in self.failures],
        }

    @classmethod
    def from_bulk_result(cls, result: Any) -> "BatchResult":
        """Build from a pymongo BulkWriteResult."""
        return cls(
            upserted=result.upserted_count,
            matched=result.matched_count,
            modified=result.modified_count,
            deleted=result.deleted_count,
        )

    @classmethod
    def from_error_details(cls, details: dict[str, Any]) -> "BatchResult":
        """Build from the ``details`` document of a BulkWriteError."""
        failures = [
            WriteFailure(
                index=error.get("index"),
                code=error.get("code"),
                message=error.get("errmsg", ""),
            )
            for error in details.get("writeErrors", [])
        ]
        failures.extend(
            WriteFailure(index=None, code=error.get("code"), message=error.get("errmsg", ""))
            for error in details.get("writeConcernErrors", [])
        )
        return cls(
            upserted=details.get("nUpserted", 0),
            matched=details.get("nMatched", 0),
            modified=details.get("nModified", 0),
            deleted=details.get("nRemoved", 0),
            failures=failures,
        )


class BatchExecutor:
    """Applies write models to a collection as a single unordered batch."""

    def __init__(self, collection: Any):
        self.collection = collection

    def execute(self, operations: list[Any]) -> BatchResult:
        """
        Run the bulk write.

        Only BulkWriteError is recovered. Connectivity and other server
        errors propagate to the caller.

        Args:
            operations: pymongo write models (UpdateOne, DeleteOne)

        Returns:
            BatchResult with counts and any per-operation failures
        """
        if not operations:
            logger.info("No operations to execute")
            return BatchResult()

        with trace_operation(
            "execute_batch",
            kind=trace.SpanKind.CLIENT,
            collection=self.collection.name,
            operations=len(operations),
        ):
            try:
                bulk_result = self.collection.bulk_write(operations, ordered=False)
                result = BatchResult.from_bulk_result(bulk_result)
            except BulkWriteError as e:
                result = BatchResult.from_error_details(e.details)
                for failure in result.failures:
                    logger.warning(
                        f"Write failed for operation {failure.index} "
                        f"(code {failure.code}): {failure.message}"
                    )

            add_span_attributes(
                upserted=result.upserted,
                matched=result.matched,
                modified=result.modified,
                deleted=result.deleted,
                failures=len(result.failures),
            )

        logger.info(
            f"Batch executed: {len(operations)} operations, "
            f"{result.upserted} upserted, {result.matched} matched, "
            f"{result.modified} modified, {result.deleted} deleted, "
            f"{len(result.failures)} failed"
        )
        return result
